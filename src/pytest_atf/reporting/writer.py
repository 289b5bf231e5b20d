"""Test report writer."""

import logging
from collections.abc import Iterable
from pathlib import Path

from pytest_atf.errors import ATFReportError, ErrorContext

from .renderers import RENDERERS
from .report import TestReport

logger = logging.getLogger(__name__)


class Reporter:
    """Writer of report files of the requested types.

    Every report type is written as `report.<type>` into the target
    directory, for example `report.html`.
    """

    def __init__(self, formats: Iterable[str] = ('html',)) -> None:
        """Initialize the writer.

        Args:
            formats: Report types to produce. Duplicates are ignored.

        Raises:
            ATFReportError: If a report type is unknown.
        """
        self.formats = tuple(dict.fromkeys(fmt.lower() for fmt in formats))

        for fmt in self.formats:
            if fmt not in RENDERERS:
                raise ATFReportError(f'Unknown report type {fmt!r}')

    def render(self, report: TestReport, fmt: str) -> str:
        """Render a single report.

        Args:
            report: Report to render.
            fmt: Report type.

        Returns:
            Report file text.

        Raises:
            ATFReportError: If the type is unknown or rendering fails.
        """
        renderer = RENDERERS.get(fmt)
        if renderer is None:
            raise ATFReportError(f'Unknown report type {fmt!r}')

        try:
            return renderer(report)

        except Exception as base:
            raise ATFReportError(f'Cannot render {fmt} report: {base!r}') from base

    def write(self, report: TestReport, directory: Path | str = '.') -> list[Path]:
        """Render and write all requested reports.

        Args:
            report: Report to write.
            directory: Target directory, created if missing.

        Returns:
            Paths of the written files.

        Raises:
            ATFReportError: If a report cannot be rendered or written.
        """
        directory = Path(directory)
        written = []

        for fmt in self.formats:
            content = self.render(report, fmt)
            path = directory / f'report.{fmt}'

            try:
                directory.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding='utf-8')
            except OSError as base:
                raise ATFReportError(
                    f'Cannot write {fmt} report: {base.strerror}',
                    context=ErrorContext(filename=f'{path}'),
                ) from base

            logger.info('Report written to %s', path)
            written.append(path)

        return written
