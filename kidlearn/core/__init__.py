"""
Core Module - shared infrastructure for the CLI and the API server.

Components:
- logging_config: loguru sink setup from Settings
"""

from kidlearn.core.logging_config import configure_logging

__all__ = ["configure_logging"]
