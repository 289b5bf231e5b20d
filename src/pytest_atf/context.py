"""Execution context shared by the engine entities.

The context is an explicit dependency passed down the execution chain
(set, case, step). It carries the progress sink and the process runner,
so that no global state is involved and several engines may run side by
side in the same interpreter (for example, inside a test harness).
"""

from pydantic import Field

from pytest_atf.models import RuntimeModel
from pytest_atf.progress import Level, LoggingProgress, ProgressSink
from pytest_atf.runners import ProcessRunner, ScriptRunner


class ExecutionContext(RuntimeModel):
    """Collaborators used while executing a test tree."""

    progress: ProgressSink = Field(
        default_factory=LoggingProgress,
        title='Progress sink',
        description='Callable notified at every execution milestone.',
    )

    runner: ProcessRunner = Field(
        default_factory=ScriptRunner,
        title='Process runner',
        description='Callable executing commands of executable actions.',
    )

    def notify(self, level: Level, message: str) -> None:
        """Push a progress message to the sink.

        Args:
            level: Message severity.
            message: Message text.
        """
        self.progress(level, message)
