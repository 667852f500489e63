"""
Models package - Pydantic models for type-safe data handling.

Defines data models for:
- Certificate material produced by the key pair generator
- The decoded TLS secret record
- The typed reconciliation outcome
"""

from .certificate import CertificateMaterial, SecretRecord
from .outcome import ReconcileOutcome, SecretState

__all__ = [
    "CertificateMaterial",
    "SecretRecord",
    "ReconcileOutcome",
    "SecretState",
]
