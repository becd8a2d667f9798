#
# src/tsqlr/tui/__init__.py
#
"""
Textual user interface for tsqlr.
"""

# 🔼⚙️
