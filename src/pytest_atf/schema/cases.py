"""Test case definition.

A test case is an ordered list of steps surrounded by optional setup
and cleanup actions. The case status aggregates step statuses and the
setup and cleanup results according to the case expectation.
"""

from typing import TYPE_CHECKING

from pydantic import Field

from pytest_atf.errors import ATFConfigError
from pytest_atf.models import DescribedMixin
from pytest_atf.progress import Level, format_output
from pytest_atf.results import Expectation, Result, TestResult

from .actions import Action, create_empty_action, is_executable
from .steps import TestStep

if TYPE_CHECKING:
    from pytest_atf.context import ExecutionContext


class TestCase(DescribedMixin):
    """Ordered list of test steps with setup and cleanup actions.

    Steps are executed unconditionally, one after another: a failing
    step never prevents the next one from running. Only a failing setup
    action stops the case.
    """

    __test__ = False

    expected: Expectation = TestResult.PASS

    status: Result = TestResult.NOT_TESTED

    setup: Action | None = Field(
        default=None,
        title='Setup',
        description='Action executed before the steps.',
    )

    cleanup: Action | None = Field(
        default=None,
        title='Cleanup',
        description='Action executed after the steps.',
    )

    steps: list[TestStep] = Field(
        default_factory=list,
        title='Steps',
        description='Ordered list of test steps.',
    )

    def append(self, *steps: TestStep) -> None:
        """Add steps at the end of the case."""
        self.steps = [*self.steps, *steps]

    def normalize(self) -> None:
        """Prepare the case and its steps for execution.

        Raises:
            ATFConfigError: If any step is malformed. The error carries
                the position of the step.
        """
        if self.setup is None:
            self.setup = create_empty_action()
        if self.cleanup is None:
            self.cleanup = create_empty_action()

        self.setup.init()
        self.cleanup.init()
        self.status = TestResult.NOT_TESTED

        for step_num, step in enumerate(self.steps):
            try:
                step.normalize()
            except ATFConfigError as error:
                raise error.locate(step_num=step_num) from error

    def skip_steps(self) -> str:
        """Mark the case as failed and every step as not tested.

        Used when the case setup fails.

        Returns:
            Message describing the abort.
        """
        self.status = TestResult.FAIL
        for step in self.steps:
            step.status = TestResult.NOT_TESTED

        return (
            f'Setup of test case {self.name!r} has FAILED\n'
            'Stopping the test case execution: test steps are not tested'
        )

    def evaluate(self) -> TestResult:
        """Aggregate the case status.

        For a `Pass` expectation, any failing setup, cleanup or step fails
        the case. For an `XFail` expectation the roles are swapped: any
        passing setup, cleanup or step fails the case. In both cases a
        case whose steps are all not tested (or which has no steps) is
        not tested. Any other expectation yields `NotTested`.

        Returns:
            The case status.
        """
        match self.expected:
            case TestResult.PASS:
                self.status = self._aggregate(TestResult.FAIL)
            case TestResult.XFAIL:
                self.status = self._aggregate(TestResult.PASS)
            case _:
                self.status = TestResult.NOT_TESTED

        return self.status

    def _aggregate(self, failing: TestResult) -> TestResult:
        """Aggregate results given the value that fails the case."""
        for action in (self.setup, self.cleanup):
            if action is not None and action.result == failing:
                return TestResult.FAIL

        if any(step.status == failing for step in self.steps):
            return TestResult.FAIL

        if all(step.status == TestResult.NOT_TESTED for step in self.steps):
            return TestResult.NOT_TESTED

        return TestResult.PASS

    def execute(self, context: 'ExecutionContext') -> None:
        """Run the case setup, steps and cleanup, then evaluate the case.

        Args:
            context: Execution context providing the runner and the
                progress sink.
        """
        context.notify(Level.NOTICE, f'>>> Entering test case {self.name!r}')

        if is_executable(self.setup):
            context.notify(Level.NOTICE, f'Executing case setup action: {self.setup}')
            output, result = self.setup.execute(context.runner)  # type: ignore[union-attr]
            context.notify(Level.INFO, format_output(output))

            if result == TestResult.FAIL:
                context.notify(Level.ERROR, self.skip_steps())
                context.notify(Level.NOTICE, f'Test case evaluated to {self.status}')
                context.notify(Level.NOTICE, f'<<< Leaving test case {self.name!r}')
                return
        else:
            context.notify(Level.INFO, 'Case setup action is not defined')

        for step in self.steps:
            step.execute(context)

        if is_executable(self.cleanup):
            context.notify(Level.NOTICE, f'Executing case cleanup action: {self.cleanup}')
            output, _ = self.cleanup.execute(context.runner)  # type: ignore[union-attr]
            context.notify(Level.INFO, format_output(output))
        else:
            context.notify(Level.INFO, 'Case cleanup action is not defined')

        self.evaluate()

        context.notify(Level.NOTICE, f'Test case evaluated to {self.status}')
        context.notify(Level.NOTICE, f'<<< Leaving test case {self.name!r}')
