#
# config/__init__.py
#
"""
Configuration handling sub-package for tsqlr.

Exports the loading function and core configuration models.
"""

from .loader import load_config
from .models import (
    DatabaseConfig,
    GlobalConfig,
    RunnerConfig,
    TsqlrConfig,
)

__all__ = [
    "DatabaseConfig",
    "GlobalConfig",
    "RunnerConfig",
    "TsqlrConfig",
    "load_config",
]

# 🔼⚙️
