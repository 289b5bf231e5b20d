"""Hierarchical test execution engine with a pytest plugin.

The `pytest_atf` package runs trees of test artifacts (a test set of
test cases, each made of test steps wrapping actions) against a system
under test and computes `Pass`, `Fail`, `XFail` and `NotTested` results
at every level.

Key features:
- test sets described in JSON, XML or YAML configuration files;
- setup and cleanup actions with abort-on-setup-failure semantics;
- executable actions dispatched to interpreters by file extension;
- HTML, XML and JSON reports;
- test set files collected and executed as pytest test items.
"""
