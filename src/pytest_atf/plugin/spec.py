"""Pytest file collector for test set configuration files.

Each collected file is loaded using the preconfigured `DocumentLoader`
and produces one `TestSetItem` executing the whole test set.
"""

from typing import TYPE_CHECKING

import pytest

from .item import TestSetItem

if TYPE_CHECKING:
    from collections.abc import Iterable


class TestSetFile(pytest.File):
    """Pytest file collector for test set configuration files."""

    __test__ = False

    def collect(self) -> 'Iterable[TestSetItem]':
        """Collect the test set item of the file.

        Returns:
            Iterable with a single `TestSetItem`.

        Raises:
            ATFSchemaError: If the file cannot be loaded.
            ATFConfigError: If a test step has no action.
        """
        test_set = self.config.atf_loader.load_file(self.path)  # type: ignore[attr-defined]

        yield TestSetItem.from_parent(
            self,
            name=test_set.name or self.path.stem,
            test_set=test_set,
        )
