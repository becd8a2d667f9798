# src/tsqlr/cli/__init__.py
