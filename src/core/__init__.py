"""
Core Module - Shared infrastructure.

Components:
- logging_setup: Loguru sinks shared by the API server and the CLI
"""

from src.core.logging_setup import configure_logging

__all__ = ["configure_logging"]
