"""Unit tests for the pricing API.

Modules are imported as ``app``, ``configs`` and ``src.*``; the app directory
is put on the path by the pytest settings in pyproject.toml.
"""
