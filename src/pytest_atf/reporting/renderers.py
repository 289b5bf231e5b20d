"""Test report renderers.

Each renderer converts a test report into the text of a report file:

- `html`: a standalone HTML5 page rendered with Jinja2;
- `xml`: an XML document with the layout of the XML configuration
  files, extended with statuses, results and outputs;
- `json`: the report model serialized with PascalCase field names.
"""

import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from jinja2 import BaseLoader, Environment, StrictUndefined
from lxml import etree

from pytest_atf.results import TestResult
from pytest_atf.schema import ActionKind

from .report import TestReport

if TYPE_CHECKING:
    from pytest_atf.schema import BaseAction, TestCase, TestSet, TestStep

#: Renderer converts a report into the report file text.
type Renderer = Callable[[TestReport], str]

#: Characters outside the XML 1.0 character range.
XML_INVALID_CHARS = re.compile('[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]')
XML_REPLACEMENT = '\ufffd'

#: CSS classes of the statuses highlighted in HTML reports.
STATUS_CLASSES = {
    TestResult.PASS: 'passed',
    TestResult.FAIL: 'failed',
    TestResult.NOT_TESTED: 'nottested',
}

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Test Report: {{ report.name }}</title>
<style>
body { font-family: sans-serif; }
table { border-collapse: collapse; margin-bottom: 1em; }
th, td { border: 1px solid #999; padding: 0.2em 0.6em; text-align: left; vertical-align: top; }
td.passed { background-color: #8fd18f; }
td.failed { background-color: #f08080; }
td.nottested { background-color: #d3d3d3; }
pre { margin: 0; }
</style>
</head>
<body>
<header>
<h1>Test Report: {{ report.name }}</h1>
<table>
<tr><td><b>Execution Started</b></td><td>{{ report.started }}</td></tr>
<tr><td><b>Execution Finished</b></td><td>{{ report.finished }}</td></tr>
{% if test_set.test_plan %}
<tr><td><b>Test Plan</b></td><td>{{ test_set.test_plan }}</td></tr>
{% endif %}
</table>
{% if test_set.description %}
<p>{{ test_set.description }}</p>
{% endif %}
{% if test_set.sut %}
<table>
<tr><th>System Under Test</th><th>{{ test_set.sut.name }}</th></tr>
<tr><td>Type</td><td>{{ test_set.sut.systype }}</td></tr>
<tr><td>Version</td><td>{{ test_set.sut.version }}</td></tr>
<tr><td>IP Address</td><td>{{ test_set.sut.ipaddr }}</td></tr>
<tr><td>Description</td><td>{{ test_set.sut.description }}</td></tr>
</table>
{% endif %}
<table>
{% if test_set.setup %}
<tr><td>Setup</td><td><pre>{{ test_set.setup }}</pre></td><td class="{{ test_set.setup.result | status_class }}">{{ test_set.setup.result }}</td></tr>
{% endif %}
{% if test_set.cleanup %}
<tr><td>Cleanup</td><td><pre>{{ test_set.cleanup }}</pre></td><td class="{{ test_set.cleanup.result | status_class }}">{{ test_set.cleanup.result }}</td></tr>
{% endif %}
</table>
<table>
<tr><th>Cases</th>{% for status, count in summary.items() %}<th>{{ status }}</th>{% endfor %}</tr>
<tr><td>{{ test_set.cases | length }}</td>{% for status, count in summary.items() %}<td>{{ count }}</td>{% endfor %}</tr>
</table>
</header>
{% for case in test_set.cases %}
<article>
<h3>Test Case: {{ case.name }}</h3>
<table>
<tr><th class="name">Name</th><th>Action</th><th class="status">Expected Status</th><th class="status">Status</th></tr>
{% if case.setup %}
<tr><td>Setup</td><td><pre>{{ case.setup }}</pre></td><td>Pass</td><td class="{{ case.setup.result | status_class }}">{{ case.setup.result }}</td></tr>
{% endif %}
{% for step in case.steps %}
<tr><td>{{ step.name }}</td><td><pre>{{ step.action if step.action else '' }}</pre></td><td>{{ step.expected or '' }}</td><td class="{{ step.status | status_class }}">{{ step.status }}</td></tr>
{% endfor %}
{% if case.cleanup %}
<tr><td>Cleanup</td><td><pre>{{ case.cleanup }}</pre></td><td>Pass</td><td class="{{ case.cleanup.result | status_class }}">{{ case.cleanup.result }}</td></tr>
{% endif %}
<tr><td><b>Test Case</b></td><td>{{ case.description }}</td><td>{{ case.expected or '' }}</td><td class="{{ case.status | status_class }}">{{ case.status }}</td></tr>
</table>
</article>
{% endfor %}
</body>
</html>
"""


def status_class(status: TestResult | str | None) -> str:
    """Return the CSS class highlighting a status.

    Args:
        status: Status or result to highlight.

    Returns:
        CSS class name, or an empty string for statuses that are not
        highlighted.
    """
    if status is None:
        return ''

    return STATUS_CLASSES.get(status, '')  # type: ignore[call-overload]


def get_environment() -> Environment:
    """Create a Jinja2 environment for rendering HTML reports.

    Returns:
        Environment with HTML autoescaping, strict undefined handling,
        whitespace trimming and the `status_class` filter.
    """
    environment = Environment(
        loader=BaseLoader(),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    environment.filters['status_class'] = status_class

    return environment


def render_html(report: TestReport) -> str:
    """Render a report as an HTML page."""
    template = get_environment().from_string(HTML_TEMPLATE)

    return template.render(
        report=report,
        test_set=report.test_set,
        summary=report.summary(),
    )


def xml_text(value: str) -> str:
    """Replace characters that XML 1.0 documents cannot contain.

    Command output often carries terminal escape sequences and other
    control characters; they are replaced with U+FFFD.

    Args:
        value: Arbitrary text.

    Returns:
        Text safe for XML element content and attribute values.
    """
    return XML_INVALID_CHARS.sub(XML_REPLACEMENT, value)


def _text_element(parent: etree._Element, tag: str, text: str) -> etree._Element:
    """Append a child element holding sanitized text."""
    element = etree.SubElement(parent, tag)
    element.text = xml_text(text)

    return element


def _action_element(tag: str, action: 'BaseAction') -> etree._Element:
    """Build the XML element of an action."""
    element = etree.Element(tag, {
        'result': f'{action.result}',
        'executable': f'{action.kind is ActionKind.EXECUTABLE}'.lower(),
        'manual': f'{action.kind is ActionKind.MANUAL}'.lower(),
    })

    if action.kind is ActionKind.EXECUTABLE:
        _text_element(element, 'Script', action.script)  # type: ignore[attr-defined]
        _text_element(element, 'Args', ' '.join(action.args))  # type: ignore[attr-defined]

    _text_element(element, 'Output', action.output)
    _text_element(element, 'Description', action.description)

    return element


def _step_element(step: 'TestStep') -> etree._Element:
    """Build the XML element of a test step."""
    element = etree.Element('TestStep', {
        'name': xml_text(step.name),
        'expected': f'{step.expected or ""}',
        'status': f'{step.status}',
    })

    if step.action is not None:
        element.append(_action_element('Action', step.action))

    return element


def _case_element(case: 'TestCase') -> etree._Element:
    """Build the XML element of a test case."""
    element = etree.Element('TestCase', {
        'name': xml_text(case.name),
        'expected': f'{case.expected or ""}',
        'status': f'{case.status}',
    })

    _text_element(element, 'Description', case.description)

    if case.setup is not None:
        element.append(_action_element('Setup', case.setup))
    if case.cleanup is not None:
        element.append(_action_element('Cleanup', case.cleanup))

    steps = etree.SubElement(element, 'Steps')
    steps.extend([_step_element(step) for step in case.steps])

    return element


def _set_element(test_set: 'TestSet') -> etree._Element:
    """Build the XML element of a test set."""
    element = etree.Element('TestSet', {'name': xml_text(test_set.name)})

    _text_element(element, 'Description', test_set.description)
    _text_element(element, 'TestPlan', test_set.test_plan)

    if test_set.sut is not None:
        sut = etree.SubElement(element, 'SystemUnderTest', {'name': xml_text(test_set.sut.name)})
        _text_element(sut, 'Type', test_set.sut.systype)
        _text_element(sut, 'Version', test_set.sut.version)
        _text_element(sut, 'Description', test_set.sut.description)
        _text_element(sut, 'IPAddress', test_set.sut.ipaddr)

    if test_set.setup is not None:
        element.append(_action_element('Setup', test_set.setup))
    if test_set.cleanup is not None:
        element.append(_action_element('Cleanup', test_set.cleanup))

    cases = etree.SubElement(element, 'Cases')
    cases.extend([_case_element(case) for case in test_set.cases])

    return element


def render_xml(report: TestReport) -> str:
    """Render a report as an XML document."""
    root = etree.Element('TestReport')
    root.append(_set_element(report.test_set))
    _text_element(root, 'Started', report.started)
    _text_element(root, 'Finished', report.finished)

    etree.indent(root, space='  ')

    return etree.tostring(root, encoding='UTF-8', xml_declaration=True).decode('utf-8')


def render_json(report: TestReport) -> str:
    """Render a report as a JSON document."""
    return report.model_dump_json(by_alias=True, indent=2)


#: Registered renderers by report type.
RENDERERS: dict[str, Renderer] = {
    'html': render_html,
    'xml': render_xml,
    'json': render_json,
}
