"""Test report model.

A test report is an executed test set together with the timestamps of
the start and the end of its execution.
"""

from pydantic import Field

from pytest_atf.models import SchemaModel
from pytest_atf.results import TestResult
from pytest_atf.schema import TestSet

#: Format of the report timestamps.
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class TestReport(SchemaModel):
    """Report of a single test set run."""

    __test__ = False

    test_set: TestSet = Field(
        title='Test set',
        description='Executed test set.',
    )

    started: str = Field(
        default='',
        title='Started',
        description='Timestamp of the start of the execution.',
        examples=[
            '2024-05-14 09:30:00',
        ],
    )

    finished: str = Field(
        default='',
        title='Finished',
        description='Timestamp of the end of the execution.',
    )

    @property
    def name(self) -> str:
        """Name of the report, which is the name of the test set."""
        return self.test_set.name

    def summary(self) -> dict[TestResult, int]:
        """Count test cases per status."""
        counts = dict.fromkeys(TestResult, 0)
        for case in self.test_set.cases:
            counts[case.status] += 1

        return counts

    @property
    def failed(self) -> bool:
        """Whether any test case failed."""
        return self.summary()[TestResult.FAIL] > 0
