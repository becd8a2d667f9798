#
# src/tsqlr/telemetry/__init__.py
#
"""
Logging setup for tsqlr.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
