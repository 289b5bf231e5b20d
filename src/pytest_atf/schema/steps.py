"""Test step definition.

A step wraps exactly one action together with the expected outcome of
that action and evaluates to `Pass`, `Fail` or `NotTested`.
"""

from typing import TYPE_CHECKING

from pydantic import Field

from pytest_atf.errors import ATFConfigError, ErrorContext
from pytest_atf.models import SchemaModel
from pytest_atf.progress import Level, format_output
from pytest_atf.results import Expectation, Result, TestResult

from .actions import Action, ActionKind

if TYPE_CHECKING:
    from pytest_atf.context import ExecutionContext


def evaluate_step(expected: TestResult | None, result: TestResult) -> TestResult:
    """Derive a step status from its expectation and action result.

    Args:
        expected: Expected outcome of the step.
        result: Result of the step action.

    Returns:
        `Pass` or `Fail` for the `Pass` and `XFail` expectations,
        `NotTested` for any other expectation.
    """
    if expected == TestResult.PASS:
        return TestResult.PASS if result == TestResult.PASS else TestResult.FAIL

    if expected == TestResult.XFAIL:
        return TestResult.PASS if result != TestResult.PASS else TestResult.FAIL

    return TestResult.NOT_TESTED


class TestStep(SchemaModel):
    """Single step of a test case."""

    __test__ = False

    name: str = Field(
        default='',
        title='Name',
        description='Short human-readable name of the step.',
    )

    expected: Expectation = None

    status: Result = TestResult.NOT_TESTED

    action: Action | None = Field(
        default=None,
        title='Action',
        description='Action performed by the step. Mandatory.',
    )

    def normalize(self) -> None:
        """Prepare the step for execution.

        Raises:
            ATFConfigError: If the step has no action.
        """
        if self.action is None:
            raise ATFConfigError('Test step action is empty', context=ErrorContext(
                element=self.model_dump(by_alias=True, exclude_defaults=True),
            ))

        self.action.init()
        self.status = TestResult.NOT_TESTED

        if self.action.kind is ActionKind.EXECUTABLE and self.expected is None:
            self.expected = TestResult.PASS

    def evaluate(self) -> TestResult:
        """Evaluate the step status from the action result."""
        result = self.action.result if self.action else TestResult.NOT_TESTED
        self.status = evaluate_step(self.expected, result)

        return self.status

    def execute(self, context: 'ExecutionContext') -> None:
        """Run the step action and evaluate the step.

        Args:
            context: Execution context providing the runner and the
                progress sink.

        Raises:
            ATFConfigError: If the step has no action.
        """
        if self.action is None:
            raise ATFConfigError('Test step action is empty')

        context.notify(Level.INFO, f'>>> Entering test step {self.name!r}')

        match self.action.kind:
            case ActionKind.EXECUTABLE:
                context.notify(Level.NOTICE, f'Executing test step action: {self.action}')
                output, _ = self.action.execute(context.runner)
                context.notify(Level.INFO, format_output(output))
            case ActionKind.MANUAL:
                output, _ = self.action.execute(context.runner)
                context.notify(Level.NOTICE, f'Manual test step action:\n{output}')
            case _:
                self.action.execute(context.runner)
                context.notify(Level.WARNING, 'Test step action is empty')

        self.evaluate()

        context.notify(Level.NOTICE, f'Test step evaluated to {self.status}')
        context.notify(Level.INFO, f'<<< Leaving test step {self.name!r}')
