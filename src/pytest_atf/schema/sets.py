"""Test set definition.

A test set is the root of an executable test tree: an ordered list of
test cases run against one system under test, surrounded by optional
setup and cleanup actions.
"""

from typing import TYPE_CHECKING

from pydantic import AliasChoices, Field

from pytest_atf.errors import ATFConfigError
from pytest_atf.models import DescribedMixin
from pytest_atf.progress import Level, format_output
from pytest_atf.results import TestResult

from .actions import Action, create_empty_action, is_executable
from .cases import TestCase
from .targets import SystemUnderTest

if TYPE_CHECKING:
    from pytest_atf.context import ExecutionContext

if TYPE_CHECKING:
    from .plans import TestPlan


class TestSet(DescribedMixin):
    """Executable collection of test cases.

    A failing set setup aborts the set: no case is executed and every
    step is marked as not tested, but the set cleanup still runs. The
    set has no aggregated status of its own.
    """

    __test__ = False

    test_plan: str = Field(
        default='',
        title='Test plan',
        description='Name of the test plan the set was created from.',
    )

    sut: SystemUnderTest | None = Field(
        default=None,
        alias='Sut',
        validation_alias=AliasChoices('Sut', 'sut', 'SystemUnderTest'),
        title='System under test',
        description='Descriptor of the system the set runs against.',
    )

    setup: Action | None = Field(
        default=None,
        title='Setup',
        description='Action executed before the cases.',
    )

    cleanup: Action | None = Field(
        default=None,
        title='Cleanup',
        description='Action executed after the cases.',
    )

    cases: list[TestCase] = Field(
        default_factory=list,
        title='Cases',
        description='Ordered list of test cases.',
    )

    def append(self, *cases: TestCase) -> None:
        """Add cases at the end of the set."""
        self.cases = [*self.cases, *cases]

    def normalize(self) -> None:
        """Prepare the set and its cases for execution.

        Normalization is idempotent: normalizing an already normalized
        set changes nothing.

        Raises:
            ATFConfigError: If any step is malformed. The error carries
                the position of the case and of the step.
        """
        if self.setup is None:
            self.setup = create_empty_action()
        if self.cleanup is None:
            self.cleanup = create_empty_action()

        self.setup.init()
        self.cleanup.init()

        for case_num, case in enumerate(self.cases):
            try:
                case.normalize()
            except ATFConfigError as error:
                raise error.locate(case_num=case_num) from error

    def skip_cases(self) -> str:
        """Mark every step of every case as not tested.

        Used when the set setup fails.

        Returns:
            Message describing the abort.
        """
        for case in self.cases:
            for step in case.steps:
                step.status = TestResult.NOT_TESTED

        return (
            f'Setup of test set {self.name!r} has FAILED\n'
            'Stopping the complete test set execution: test cases are not tested'
        )

    def execute(self, context: 'ExecutionContext') -> None:
        """Run the set setup, cases and cleanup.

        Args:
            context: Execution context providing the runner and the
                progress sink.
        """
        context.notify(Level.NOTICE, f'>>> Entering test set {self.name!r}')

        aborted = False
        if is_executable(self.setup):
            context.notify(Level.NOTICE, f'Executing set setup action: {self.setup}')
            output, result = self.setup.execute(context.runner)  # type: ignore[union-attr]
            context.notify(Level.INFO, format_output(output))

            if result == TestResult.FAIL:
                context.notify(Level.ERROR, self.skip_cases())
                aborted = True
        else:
            context.notify(Level.INFO, 'Set setup action is not defined')

        if not aborted:
            for case in self.cases:
                case.execute(context)

        if is_executable(self.cleanup):
            context.notify(Level.NOTICE, f'Executing set cleanup action: {self.cleanup}')
            output, _ = self.cleanup.execute(context.runner)  # type: ignore[union-attr]
            context.notify(Level.INFO, format_output(output))
        else:
            context.notify(Level.INFO, 'Set cleanup action is not defined')

        context.notify(Level.NOTICE, f'<<< Leaving test set {self.name!r}')

    def failed_cases(self) -> list[TestCase]:
        """Return the cases evaluated to `Fail`."""
        return [case for case in self.cases if case.status == TestResult.FAIL]

    def to_test_plan(self) -> 'TestPlan':
        """Create a test plan holding deep copies of the set content."""
        from .plans import TestPlan  # noqa: PLC0415

        return TestPlan(
            name=self.name,
            description=self.description,
            setup=self.setup.model_copy(deep=True) if self.setup else None,
            cleanup=self.cleanup.model_copy(deep=True) if self.cleanup else None,
            cases=[case.model_copy(deep=True) for case in self.cases],
        )
