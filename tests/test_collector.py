"""Tests for test set configuration loading."""

from typing import TYPE_CHECKING

import pytest

from pytest_atf.core import DocumentLoader, collect
from pytest_atf.errors import ATFConfigError, ATFSchemaError
from pytest_atf.results import TestResult
from pytest_atf.schema import EmptyAction, ExecutableAction, ManualAction

if TYPE_CHECKING:
    from re import Pattern

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem
    from yaml import SafeLoader


TEST_SET_JSON = '''
{
    "Name": "Link checks",
    "Description": "Checks of the uplink",
    "TestPlan": "Acceptance",
    "Sut": {
        "Name": "router-1",
        "Systype": "router",
        "Version": "1.2",
        "Description": "Edge router",
        "IPaddr": "192.0.2.10"
    },
    "Setup": {"Script": "connect.sh", "Args": "", "Executable": true, "Manual": false},
    "Cleanup": {"Script": "", "Args": "", "Description": "", "Executable": false, "Manual": false},
    "Cases": [
        {
            "Name": "Ping",
            "Description": "Uplink answers",
            "Expected": "Pass",
            "Steps": [
                {
                    "Name": "Ping the router",
                    "Expected": "Pass",
                    "Action": {"Script": "ping", "Args": "-c 1 192.0.2.10"}
                },
                {
                    "Name": "Check the LEDs",
                    "Action": {"Description": "All port LEDs are green", "Manual": true}
                }
            ]
        },
        {
            "Name": "Unreachable",
            "Expected": "XFail",
            "Steps": [
                {
                    "Name": "Ping a missing host",
                    "Action": {"Script": "ping", "Args": "-c 1 192.0.2.99"}
                }
            ]
        }
    ]
}
'''

TEST_SET_XML = '''<?xml version="1.0" encoding="UTF-8"?>
<TestSet name="Link checks">
  <Description>Checks of the uplink</Description>
  <TestPlan>Acceptance</TestPlan>
  <SystemUnderTest name="router-1">
    <Type>router</Type>
    <Version>1.2</Version>
    <Description>Edge router</Description>
    <IPAddress>192.0.2.10</IPAddress>
  </SystemUnderTest>
  <Setup executable="true" manual="false">
    <Script>connect.sh</Script>
    <Args></Args>
  </Setup>
  <Cleanup />
  <Cases>
    <TestCase name="Ping" expected="Pass">
      <Description>Uplink answers</Description>
      <Steps>
        <TestStep name="Ping the router" expected="Pass">
          <Action>
            <Script>ping</Script>
            <Args>-c 1 192.0.2.10</Args>
          </Action>
        </TestStep>
        <TestStep name="Check the LEDs">
          <Action manual="true">
            <Description>All port LEDs are green</Description>
          </Action>
        </TestStep>
      </Steps>
    </TestCase>
    <TestCase name="Unreachable" expected="XFail">
      <Steps>
        <TestStep name="Ping a missing host">
          <Action>
            <Script>ping</Script>
            <Args>-c 1 192.0.2.99</Args>
          </Action>
        </TestStep>
      </Steps>
    </TestCase>
  </Cases>
</TestSet>
'''

TEST_SET_YAML = '''
name: Link checks
description: Checks of the uplink
test_plan: Acceptance
sut:
  name: router-1
  systype: router
  version: '1.2'
  description: Edge router
  ipaddr: 192.0.2.10
setup:
  script: connect.sh
cases:
  - name: Ping
    description: Uplink answers
    steps:
      - name: Ping the router
        action:
          script: ping
          args: [-c, '1', 192.0.2.10]
      - name: Check the LEDs
        action:
          description: All port LEDs are green
  - name: Unreachable
    expected: XFail
    steps:
      - name: Ping a missing host
        action:
          script: ping
          args: -c 1 192.0.2.99
'''

TEST_SET_INVALID_EXPECTATION = '''
Name: Broken
Cases:
  - Name: Case
    Expected: Maybe
    Steps:
      - Action:
          Script: 'true'
'''

TEST_SET_WITHOUT_ACTION = '''
Name: Broken
Cases:
  - Name: Case
    Steps:
      - Name: Nothing to do
'''


@pytest.mark.parametrize('content, fmt', (
    pytest.param(TEST_SET_JSON, 'json', id='json'),
    pytest.param(TEST_SET_XML, 'xml', id='xml'),
    pytest.param(TEST_SET_YAML, 'yaml', id='yaml'),
))
def test_load(content: str, fmt: str, loader: 'type[SafeLoader]') -> None:
    """Load a normalized test set."""
    test_set = DocumentLoader(loader).load(content, fmt=fmt)

    assert test_set.name == 'Link checks'
    assert test_set.test_plan == 'Acceptance'
    assert test_set.sut is not None
    assert test_set.sut.ipaddr == '192.0.2.10'
    assert test_set.sut.systype == 'router'

    assert isinstance(test_set.setup, ExecutableAction)
    assert isinstance(test_set.cleanup, EmptyAction)

    ping, unreachable = test_set.cases
    assert ping.expected == TestResult.PASS
    assert unreachable.expected == TestResult.XFAIL

    ping_step, look_step = ping.steps
    assert isinstance(ping_step.action, ExecutableAction)
    assert ping_step.action.args == ['-c', '1', '192.0.2.10']
    assert ping_step.expected == TestResult.PASS
    assert isinstance(look_step.action, ManualAction)
    assert look_step.expected is None


def test_formats_load_identical_trees(loader: 'type[SafeLoader]') -> None:
    """Load the same tree from every format."""
    document_loader = DocumentLoader(loader)

    trees = [
        document_loader.load(content, fmt=fmt).model_dump()
        for content, fmt in (
            (TEST_SET_JSON, 'json'),
            (TEST_SET_XML, 'xml'),
            (TEST_SET_YAML, 'yaml'),
        )
    ]

    assert trees[0] == trees[1] == trees[2]


def test_load_xml_markup(loader: 'type[SafeLoader]') -> None:
    """Skip XML comments and leave entities unexpanded."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE TestSet [<!ENTITY plan "secret">]>
<TestSet name="Markup">
  <!-- planned for later -->
  <TestPlan>&plan;</TestPlan>
  <Cases>
    <!-- no cases yet -->
    <?atf ignored?>
  </Cases>
</TestSet>
'''

    test_set = DocumentLoader(loader).load(content, fmt='xml')

    assert test_set.name == 'Markup'
    assert test_set.test_plan != 'secret'
    assert test_set.cases == []


@pytest.mark.parametrize('content, fmt, expect_message', (
    pytest.param('{"Name": ', 'json', r'^Invalid JSON', id='invalid json'),
    pytest.param('<TestSet name="x">', 'xml', r'^Invalid XML', id='invalid xml'),
    pytest.param('<TestPlan name="x"/>', 'xml', r'^Unexpected root element <TestPlan>', id='xml root'),
    pytest.param('Name: [', 'yaml', r'^Invalid YAML', id='invalid yaml'),
    pytest.param('- 1\n- 2\n', 'yaml', r'^Test set document must be a mapping', id='not a mapping'),
    pytest.param('Name: x\nColor: red\n', 'yaml', r'^Extra inputs are not permitted', id='extra fields'),
    pytest.param('Name: x\n', 'toml', r'^Unsupported configuration format', id='unknown format'),
))
def test_load_invalid(content: str, fmt: str, expect_message: 'Pattern',
                      loader: 'type[SafeLoader]') -> None:
    """Reject malformed documents."""
    with pytest.raises(ATFSchemaError, match=expect_message):
        DocumentLoader(loader).load(content, fmt=fmt)


def test_load_without_action(loader: 'type[SafeLoader]') -> None:
    """Reject steps without action at load time."""
    with pytest.raises(ATFConfigError, match=r'^Test step action is empty') as error:
        DocumentLoader(loader).load(TEST_SET_WITHOUT_ACTION, filename='broken.yaml')

    assert 'in "broken.yaml"' in f'{error.value}'
    assert 'on case 1, step 1' in f'{error.value}'


def test_relaxed_expectation(loader: 'type[SafeLoader]') -> None:
    """Keep invalid expectations in relaxed mode."""
    test_set = DocumentLoader(loader).load(TEST_SET_INVALID_EXPECTATION)

    assert test_set.cases[0].expected == TestResult.UNKNOWN


def test_strict_expectation(loader: 'type[SafeLoader]') -> None:
    """Reject invalid expectations in strict mode."""
    with pytest.raises(ATFSchemaError, match=r'expected result must be one of Pass, XFail'):
        DocumentLoader(loader, strict=True).load(TEST_SET_INVALID_EXPECTATION)


@pytest.mark.parametrize('filename, content', (
    pytest.param('testset.json', TEST_SET_JSON, id='json'),
    pytest.param('testset.xml', TEST_SET_XML, id='xml'),
    pytest.param('testset.yaml', TEST_SET_YAML, id='yaml'),
    pytest.param('testset.YML', TEST_SET_YAML, id='yml'),
))
def test_collect(filename: str, content: str, fs: 'FakeFilesystem') -> None:
    """Select the format from the file extension."""
    fs.create_file(filename, contents=content)

    test_set = collect(filename)

    assert test_set.name == 'Link checks'
    assert len(test_set.cases) == 2


def test_collect_unsupported(fs: 'FakeFilesystem') -> None:
    """Reject unsupported configuration file types."""
    fs.create_file('testset.cfg', contents='Name = x')

    with pytest.raises(ATFSchemaError, match=r"^Unsupported configuration file type '.cfg'"):
        collect('testset.cfg')


def test_collect_missing(fs: 'FakeFilesystem') -> None:  # noqa: ARG001
    """Report unreadable configuration files."""
    with pytest.raises(ATFSchemaError, match=r'^Cannot read configuration file'):
        collect('missing.json')
