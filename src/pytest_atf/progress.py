"""Progress reporting sinks.

The execution engine never logs directly. Instead, every milestone
(entering and leaving a set, case or step, running setup and cleanup
actions, evaluated statuses) is pushed to a progress sink: a plain
callable receiving a severity level and a message.

Two sinks are provided: `LoggingProgress` forwards messages to the
standard `logging` machinery, and `ProgressRecorder` keeps them in
memory for later inspection or attachment to reports.
"""

import logging
from collections.abc import Callable
from enum import StrEnum
from os import linesep

#: Severity between INFO and WARNING used for execution milestones.
NOTICE = 25

logging.addLevelName(NOTICE, 'NOTICE')

OUTPUT_HEADER = f'Displaying output:{linesep}################### OUTPUT ##################{linesep}'
OUTPUT_FOOTER = f'################ OUTPUT END #################{linesep}'


class Level(StrEnum):
    """Severity tags understood by progress sinks."""

    DEBUG = 'debug'
    INFO = 'info'
    NOTICE = 'notice'
    WARNING = 'warning'
    ERROR = 'error'


#: Sink receiving a severity tag and a message. Sinks are invoked
#: synchronously and should return quickly.
type ProgressSink = Callable[[Level, str], None]

LOGGING_LEVELS = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.NOTICE: NOTICE,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.ERROR,
}


def format_output(output: str) -> str:
    """Wrap command output into a banner for display.

    Args:
        output: Raw text produced by an action.

    Returns:
        The output framed by header and footer lines.
    """
    if output and not output.endswith(('\n', linesep)):
        output += linesep

    return f'{OUTPUT_HEADER}{output}{OUTPUT_FOOTER}'


class LoggingProgress:
    """Progress sink forwarding messages to a standard logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the sink.

        Args:
            logger: Target logger. Defaults to `pytest_atf.progress`.
        """
        self.logger = logger or logging.getLogger('pytest_atf.progress')

    def __call__(self, level: Level, message: str) -> None:
        """Log a progress message with the matching severity."""
        self.logger.log(LOGGING_LEVELS.get(level, logging.INFO), message.rstrip())


class ProgressRecorder:
    """Progress sink keeping every message in memory.

    Optionally forwards each message to another sink, so a run can be
    both displayed and recorded.
    """

    def __init__(self, forward: ProgressSink | None = None) -> None:
        """Initialize the recorder.

        Args:
            forward: Optional sink receiving every recorded message.
        """
        self.records: list[tuple[Level, str]] = []
        self.forward = forward

    def __call__(self, level: Level, message: str) -> None:
        """Record a progress message."""
        self.records.append((Level(level), message))
        if self.forward is not None:
            self.forward(level, message)

    def messages(self, level: Level | None = None) -> list[str]:
        """Return recorded messages, optionally filtered by level."""
        return [
            message
            for record_level, message in self.records
            if level is None or record_level == level
        ]

    def text(self) -> str:
        """Render the recorded messages as a plain text log."""
        return ''.join(
            f'[{level.upper():<7}] {message.rstrip()}{linesep}'
            for level, message in self.records
        )
