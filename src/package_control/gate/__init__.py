"""
Pool Gate module for Package Control.

This module implements the approval policy: Winter CMS plugins, themes and
modules may not be installed from Packagist unless the project opts in.

Key concepts:
    - GateDecision: The result of evaluating a package or pool (ALLOW/DENY + reason)
    - PoolGate: Evaluator holding the override resolved at activation
    - All or nothing: The pool is accepted untouched or the pass is aborted
"""

from package_control.gate.engine import (
    ALLOWED_PACKAGES,
    PACKAGIST_HOST,
    PROTECTED_TYPES,
    PoolGate,
)

__all__ = [
    "ALLOWED_PACKAGES",
    "PACKAGIST_HOST",
    "PROTECTED_TYPES",
    "PoolGate",
]
