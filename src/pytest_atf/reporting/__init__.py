"""Test reports.

A test report wraps an executed test set with its execution timestamps
and can be rendered as HTML, XML or JSON.
"""

from .renderers import RENDERERS, render_html, render_json, render_xml
from .report import TIMESTAMP_FORMAT, TestReport
from .writer import Reporter

__all__ = (
    'RENDERERS',
    'TIMESTAMP_FORMAT',
    'Reporter',
    'TestReport',
    'render_html',
    'render_json',
    'render_xml',
)
