"""Test artifact models and the execution engine.

Defines the hierarchy of test artifacts (sets, cases, steps, actions)
together with their lifecycle: normalization, cascading execution and
result evaluation. Test plans are non-executable siblings of test sets.
"""

from .actions import (
    Action,
    ActionKind,
    BaseAction,
    EmptyAction,
    ExecutableAction,
    ManualAction,
    classify,
    create_action,
    create_empty_action,
    create_manual_action,
    is_executable,
)
from .cases import TestCase
from .plans import TestPlan
from .sets import TestSet
from .steps import TestStep, evaluate_step
from .targets import SystemUnderTest

__all__ = (
    'Action',
    'ActionKind',
    'BaseAction',
    'EmptyAction',
    'ExecutableAction',
    'ManualAction',
    'SystemUnderTest',
    'TestCase',
    'TestPlan',
    'TestSet',
    'TestStep',
    'classify',
    'create_action',
    'create_empty_action',
    'create_manual_action',
    'evaluate_step',
    'is_executable',
)
