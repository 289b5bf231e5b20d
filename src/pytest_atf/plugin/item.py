"""Pytest item executing a test set.

The item runs the whole test set and fails when any test case is
evaluated to `Fail`. Progress messages are recorded and attached to
the pytest report.
"""

from os import linesep
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pytest_atf.context import ExecutionContext
from pytest_atf.core import run_test_set
from pytest_atf.errors import ErrorFormatter
from pytest_atf.progress import LoggingProgress, ProgressRecorder
from pytest_atf.reporting import Reporter
from pytest_atf.results import TestResult
from pytest_atf.runners import ScriptRunner

if TYPE_CHECKING:
    from typing import Any

if TYPE_CHECKING:
    from _pytest._code.code import ExceptionInfo, TerminalRepr

if TYPE_CHECKING:
    from pytest_atf.reporting import TestReport
    from pytest_atf.schema import TestSet


class TestSetItem(pytest.Item):
    """Pytest item executing a single test set."""

    __test__ = False

    def __init__(self, *, test_set: 'TestSet', **kwargs: 'Any') -> None:
        """Initialize a pytest item backed by a test set.

        Args:
            test_set: Normalized test set to execute.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.test_set = test_set
        self.progress = ProgressRecorder(forward=LoggingProgress())
        self.report: TestReport | None = None

    def runtest(self) -> None:
        """Execute the test set.

        Raises:
            AssertionError: If any test case failed.
        """
        settings = self.config.atf_settings  # type: ignore[attr-defined]

        context = ExecutionContext(
            progress=self.progress,
            runner=ScriptRunner(settings.interpreters),
        )

        try:
            self.report = run_test_set(self.test_set, context)
        finally:
            self.add_report_section('call', 'atf progress', self.progress.text())

        if directory := self.config.getoption('atf_report', default=None):
            Reporter(settings.report_formats).write(
                self.report,
                Path(directory) / self.path.stem,
            )

        if self.test_set.failed_cases():
            raise AssertionError(self.describe_failures())

    def describe_failures(self) -> str:
        """Format the list of failed test cases.

        Returns:
            Message listing failed cases with the status of their steps.
        """
        failed = self.test_set.failed_cases()

        message = f'{len(failed)} of {len(self.test_set.cases)} test cases failed'
        for position, case in enumerate(self.test_set.cases):
            if case.status != TestResult.FAIL:
                continue
            message += linesep
            message += ErrorFormatter.get_location_string({
                'filename': f'{self.path}',
                'case_num': position,
            }, indent=4)
            message += f'{" " * 8}{case.name!r}: {case.status}{linesep}'
            for step in case.steps:
                message += f'{" " * 12}{step.name!r}: {step.status}{linesep}'

        return message

    def repr_failure(self, excinfo: 'ExceptionInfo[BaseException]',
                     style: 'Any' = None) -> 'str | TerminalRepr':
        """Represent failed test sets without a traceback."""
        if isinstance(excinfo.value, AssertionError):
            return f'{excinfo.value}'

        return super().repr_failure(excinfo, style=style)

    def reportinfo(self) -> tuple[Path, int | None, str]:
        """Location of the item in reports."""
        return self.path, None, f'test set: {self.name}'
