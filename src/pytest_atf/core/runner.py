"""Test set execution entry point."""

import logging
from datetime import datetime

from pytest_atf.context import ExecutionContext
from pytest_atf.reporting import TIMESTAMP_FORMAT, TestReport
from pytest_atf.schema import TestSet

logger = logging.getLogger(__name__)


def run_test_set(test_set: TestSet,
                 context: ExecutionContext | None = None) -> TestReport:
    """Normalize and execute a test set.

    Args:
        test_set: Test set to execute. It is modified in place.
        context: Execution context. A context logging progress and
            running scripts as child processes is used if omitted.

    Returns:
        Report wrapping the executed test set with the start and end
        timestamps of the execution.

    Raises:
        ATFConfigError: If the test set is malformed.
    """
    if context is None:
        context = ExecutionContext()

    test_set.normalize()

    started = datetime.now().strftime(TIMESTAMP_FORMAT)  # noqa: DTZ005
    logger.debug('Test set %r started at %s', test_set.name, started)

    test_set.execute(context)

    finished = datetime.now().strftime(TIMESTAMP_FORMAT)  # noqa: DTZ005
    logger.debug('Test set %r finished at %s', test_set.name, finished)

    return TestReport(
        test_set=test_set,
        started=started,
        finished=finished,
    )
