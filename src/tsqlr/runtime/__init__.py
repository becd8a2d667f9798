#
# src/tsqlr/runtime/__init__.py
#
"""
Runtime components: the single-flight test runner and its TUI bridge.
"""
from .runner import TestRunner
from .tui_interface import TUIInterface

__all__ = [
    "TUIInterface",
    "TestRunner",
]

# 🔼⚙️
