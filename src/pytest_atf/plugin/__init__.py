"""Pytest plugin for collecting and executing test set configuration files.

This module integrates pytest-atf with pytest by:
- registering custom command-line options;
- configuring a shared `DocumentLoader` instance and runtime settings;
- collecting test set files as executable test items.

Files matching the pattern `testset_*.json`, `testset_*.xml`,
`testset_*.yaml` or `testset_*.yml` are automatically collected.
"""

from re import match
from typing import TYPE_CHECKING

from .spec import TestSetFile

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser
    from _pytest.nodes import Node


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-atf.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('atf', 'test set execution')
    group.addoption(
        '--atf-strict',
        action='store_true',
        dest='atf_strict',
        default=False,
        help=(
            'Reject expectations other than Pass and XFail '
            'when collecting test set files.'
        ),
    )
    group.addoption(
        '--atf-report',
        action='store',
        dest='atf_report',
        default=None,
        metavar='DIR',
        help=(
            'Write reports of every executed test set into DIR, '
            'one subdirectory per test set file.'
        ),
    )


def pytest_configure(config: 'Config') -> None:
    """Configure pytest-atf integration.

    This hook initializes a shared `DocumentLoader` instance and the
    runtime settings and attaches them to the pytest configuration
    object as `config.atf_loader` and `config.atf_settings`.

    Args:
        config: Pytest configuration object.
    """
    from pytest_atf.core import DocumentLoader  # noqa: PLC0415
    from pytest_atf.settings import ATFSettings  # noqa: PLC0415

    settings = ATFSettings()

    config.atf_settings = settings  # type: ignore[attr-defined]
    config.atf_loader = DocumentLoader(  # type: ignore[attr-defined]
        strict=config.getoption('atf_strict', default=False) or settings.strict,
    )


def pytest_collect_file(parent: 'Node', file_path: 'Path') -> TestSetFile | None:
    """Collect test set configuration files.

    Args:
        parent: Parent pytest collection node.
        file_path: Path to the file being considered.

    Returns:
        A `TestSetFile` collector if the file matches the test set
        pattern, otherwise `None`.
    """
    if match(r'^testset_.+\.(json|xml|ya?ml)$', file_path.name):
        return TestSetFile.from_parent(
            parent,
            path=file_path,
        )

    return None
