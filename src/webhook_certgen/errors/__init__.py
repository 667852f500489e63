"""
Error handling module for the certificate job.

This module provides the error hierarchy used to classify failures of a
reconciliation run.
"""

from .certgen_errors import (
    CertgenError,
    CertificateValidationError,
    ClientConstructionError,
    ConflictError,
    ExpiryError,
    GenerationError,
    KeyInvalidError,
    KubernetesAPIError,
    NotFoundError,
    ParseError,
    PreconditionError,
    ReadError,
    SchemaRegistrationError,
    WriteError,
)

__all__ = [
    "CertgenError",
    "ClientConstructionError",
    "SchemaRegistrationError",
    "KubernetesAPIError",
    "ReadError",
    "WriteError",
    "ConflictError",
    "NotFoundError",
    "PreconditionError",
    "GenerationError",
    "CertificateValidationError",
    "ParseError",
    "ExpiryError",
    "KeyInvalidError",
]
