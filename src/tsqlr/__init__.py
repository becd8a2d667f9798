#
# src/tsqlr/__init__.py
#
"""
tsqlr: run tSQLt tests against SQL Server and browse the results in a TUI.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tsqlr")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["__version__"]

# 🔼⚙️
