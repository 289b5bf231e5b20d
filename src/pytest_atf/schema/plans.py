"""Test plan definition.

A test plan has the same content as a test set but is never executed:
it is a template from which test sets are created.
"""

from pydantic import Field

from pytest_atf.models import DescribedMixin

from .actions import Action
from .cases import TestCase
from .sets import TestSet
from .targets import SystemUnderTest


class TestPlan(DescribedMixin):
    """Non-executable collection of test cases."""

    __test__ = False

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
        """Add cases at the end of the plan."""
        self.cases = [*self.cases, *cases]

    def to_test_set(self) -> TestSet:
        """Create a test set holding deep copies of the plan content.

        The set records the plan name and gets an empty system under
        test descriptor.
        """
        return TestSet(
            name=self.name,
            description=self.description,
            test_plan=self.name,
            sut=SystemUnderTest(),
            setup=self.setup.model_copy(deep=True) if self.setup else None,
            cleanup=self.cleanup.model_copy(deep=True) if self.cleanup else None,
            cases=[case.model_copy(deep=True) for case in self.cases],
        )
