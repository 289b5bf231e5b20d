"""Test suite for the pytest-atf package.

This package contains unit and integration tests validating
configuration loading, the execution and evaluation engine,
reporting, and the command-line and pytest integrations.
"""
