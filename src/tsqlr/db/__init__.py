#
# src/tsqlr/db/__init__.py
#
"""
Database access for tsqlr: the executor that runs a tSQLt test.
"""
from .mssql import MssqlExecutor
from .protocols import TestExecutor

__all__ = [
    "MssqlExecutor",
    "TestExecutor",
]

# 🔼⚙️
