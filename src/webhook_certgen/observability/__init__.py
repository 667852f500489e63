"""
Observability utilities for the certificate job.

This module provides structured logging with per-run correlation IDs.
"""

from .logging import CertgenLogger, setup_structured_logging

__all__ = [
    "CertgenLogger",
    "setup_structured_logging",
]
