"""Tests for runtime settings and logging configuration."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from pytest_atf.logs import ROOT_LOGGER, configure_logging
from pytest_atf.progress import NOTICE
from pytest_atf.settings import ATFSettings

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove settings inherited from the environment."""
    for name in ('STRICT', 'REPORT_FORMATS', 'REPORT_DIR', 'LOG_LEVEL', 'LOG_FILE', 'INTERPRETERS'):
        monkeypatch.delenv(f'ATF_{name}', raising=False)


@pytest.fixture
def package_logger() -> 'Iterator[logging.Logger]':
    """Provide the package logger and restore it afterwards."""
    logger = logging.getLogger(ROOT_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level

    yield logger

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


def test_defaults() -> None:
    """Use defaults without environment variables."""
    settings = ATFSettings()

    assert settings.strict is False
    assert settings.report_formats == ['html']
    assert settings.report_dir == Path('.')
    assert settings.log_level == 'NOTICE'
    assert settings.log_file is None
    assert settings.interpreters == {}


def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read settings from prefixed environment variables."""
    monkeypatch.setenv('ATF_STRICT', '1')
    monkeypatch.setenv('ATF_REPORT_FORMATS', 'HTML, xml,,json')
    monkeypatch.setenv('ATF_REPORT_DIR', 'reports')
    monkeypatch.setenv('ATF_LOG_LEVEL', 'debug')
    monkeypatch.setenv('ATF_INTERPRETERS', '{".py": ["python3", "-u"]}')

    settings = ATFSettings()

    assert settings.strict is True
    assert settings.report_formats == ['html', 'xml', 'json']
    assert settings.report_dir == Path('reports')
    assert settings.log_level == 'DEBUG'
    assert settings.interpreters == {'.py': ['python3', '-u']}


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reject unknown log levels."""
    monkeypatch.setenv('ATF_LOG_LEVEL', 'verbose')

    with pytest.raises(ValidationError, match=r'log level must be one of'):
        ATFSettings()


def test_settings_are_frozen() -> None:
    """Refuse modifications of resolved settings."""
    settings = ATFSettings()

    with pytest.raises(ValidationError):
        settings.strict = True  # type: ignore[misc]


def test_configure_logging(package_logger: logging.Logger, tmp_path: Path) -> None:
    """Install console and file handlers once."""
    log_file = tmp_path / 'logs' / 'run.log'

    configure_logging('notice', log_file)
    configure_logging('info', log_file)

    names = sorted(handler.get_name() for handler in package_logger.handlers)
    assert names == ['atf-console', 'atf-file']
    assert package_logger.level == logging.INFO

    logging.getLogger(f'{ROOT_LOGGER}.progress').log(NOTICE, 'Recorded')
    for handler in package_logger.handlers:
        handler.flush()

    assert '[NOTICE ] Recorded' in log_file.read_text(encoding='utf-8')
