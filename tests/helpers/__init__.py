"""Test helpers for routergen.

This package provides utilities for testing router generation:
- Assertions: dispatch tree invariants
- Builders: ABI entries and compiler artifacts on disk
"""

from .assertions import assert_thresholds, assert_tree_invariants, collect_selectors
from .builders import (
    DEFAULT_BYTECODE,
    abi_function,
    abi_special,
    module_bytecode,
    write_artifact,
)

__all__ = [
    # Assertions
    "assert_tree_invariants",
    "assert_thresholds",
    "collect_selectors",
    # Builders
    "DEFAULT_BYTECODE",
    "abi_function",
    "abi_special",
    "module_bytecode",
    "write_artifact",
]
