"""Runtime settings.

Settings are resolved from `ATF_*` environment variables. List and
mapping values are given as JSON; report types also accept a comma
separated list:

    ATF_STRICT=true
    ATF_REPORT_FORMATS=html,xml
    ATF_INTERPRETERS='{".py": ["python3"]}'

Command-line options take precedence over settings.
"""

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import NoDecode, SettingsConfigDict

from pytest_atf.models import SettingsModel

#: Log levels accepted by the runner, from the most verbose.
LOG_LEVELS = ('DEBUG', 'INFO', 'NOTICE', 'WARNING', 'ERROR')


class ATFSettings(SettingsModel):
    """Settings of the test set runner."""

    model_config = SettingsConfigDict(
        env_prefix='ATF_',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description='Reject expectations other than Pass and XFail.',
    )

    report_formats: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ['html'],
        title='Report types',
        description='Types of the report files to write.',
    )

    report_dir: Path = Field(
        default=Path('.'),
        title='Report directory',
        description='Directory where report files are written.',
    )

    log_level: str = Field(
        default='NOTICE',
        title='Log level',
        description='Minimal level of displayed progress messages.',
    )

    log_file: Path | None = Field(
        default=None,
        title='Log file',
        description='File receiving a copy of the progress messages.',
    )

    interpreters: dict[str, list[str]] = Field(
        default_factory=dict,
        title='Interpreters',
        description='Command prefixes of script interpreters by file extension.',
    )

    @field_validator('report_formats', mode='before')
    @classmethod
    def split_formats(cls, value: Any) -> Any:  # noqa: ANN401
        """Split a comma separated list of report types."""
        if isinstance(value, str):
            return [
                item.strip().lower()
                for item in value.split(',')
                if item.strip()
            ]

        return value

    @field_validator('log_level', mode='after')
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Check that the log level is known."""
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f'log level must be one of {", ".join(LOG_LEVELS)}')

        return value
