"""
Validation of stored certificate material.

A secret is usable only if its certificate verifies as its own trust root
at the end of the rotation window and its private key is a consistent RSA
key matching that certificate. Any failure means the pair is regenerated.
"""

import logging
from datetime import UTC, datetime, timedelta

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..constants import CERT_KEY, DEFAULT_ROTATION_LEAD_DAYS, PRIVATE_KEY_KEY
from ..errors import (
    CertificateValidationError,
    ExpiryError,
    KeyInvalidError,
    ParseError,
)
from ..models import SecretRecord

logger = logging.getLogger(__name__)


def _as_utc(now: datetime | None) -> datetime:
    """Current time when unset; naive values are taken as UTC."""
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


class CertificateValidator:
    """Verifies certificate/key pairs against a forward-looking validity window."""

    def __init__(
        self, rotation_window: timedelta = timedelta(days=DEFAULT_ROTATION_LEAD_DAYS)
    ):
        """
        Initialize the validator.

        Args:
            rotation_window: Certificates must still be valid this far in the future
        """
        self.rotation_window = rotation_window

    def verify_certificate(
        self, certificate_pem: bytes, now: datetime | None = None
    ) -> x509.Certificate:
        """
        Verify a self-signed certificate at ``now + rotation_window``.

        Args:
            certificate_pem: PEM encoded certificate
            now: Reference time, defaults to the current time

        Returns:
            The parsed certificate

        Raises:
            ParseError: If the bytes are not exactly one PEM certificate
            ExpiryError: If the certificate does not verify at the future time
        """
        try:
            certificates = x509.load_pem_x509_certificates(certificate_pem)
        except ValueError as e:
            raise ParseError(f"failed to parse certificate data: {e}", cause=e) from e
        if len(certificates) != 1:
            raise ParseError(
                f"expected exactly one certificate, found {len(certificates)}"
            )
        certificate = certificates[0]

        # Self-signed: the certificate is its own root
        try:
            certificate.verify_directly_issued_by(certificate)
        except (ValueError, TypeError, InvalidSignature) as e:
            raise ExpiryError(
                "certificate verification failed: not signed by its own key",
                cause=e,
            ) from e

        check_time = _as_utc(now) + self.rotation_window
        if check_time < certificate.not_valid_before_utc:
            raise ExpiryError(
                f"certificate verification failed: not valid before "
                f"{certificate.not_valid_before_utc.isoformat()}"
            )
        if check_time > certificate.not_valid_after_utc:
            raise ExpiryError(
                f"certificate verification failed: expires at "
                f"{certificate.not_valid_after_utc.isoformat()}, "
                f"before {check_time.isoformat()}"
            )
        return certificate

    def verify_key(self, private_key_pem: bytes) -> rsa.RSAPrivateKey:
        """
        Parse an RSA private key and check its numbers with the library.

        Raises:
            ParseError: If the bytes are not a PEM RSA private key
            KeyInvalidError: If the key numbers are inconsistent
        """
        try:
            key = serialization.load_pem_private_key(
                private_key_pem, password=None, unsafe_skip_rsa_key_validation=True
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise ParseError(f"failed to parse key data: {e}", cause=e) from e
        if not isinstance(key, rsa.RSAPrivateKey):
            raise ParseError(
                f"failed to parse key data: expected RSA key, got {type(key).__name__}"
            )

        try:
            key.private_numbers().private_key()
        except ValueError as e:
            raise KeyInvalidError(f"key verification failed: {e}", cause=e) from e
        return key

    def validate(self, record: SecretRecord, now: datetime | None = None) -> None:
        """
        Run all checks against a secret record.

        Raises:
            CertificateValidationError: On the first failing check
        """
        if not record.has_required_keys():
            raise ParseError(
                f"secret {record.namespace}/{record.name} is missing "
                f"{CERT_KEY} or {PRIVATE_KEY_KEY}"
            )

        certificate = self.verify_certificate(record.data[CERT_KEY], now=now)
        key = self.verify_key(record.data[PRIVATE_KEY_KEY])

        key_numbers = key.public_key().public_numbers()
        if key_numbers != certificate.public_key().public_numbers():
            raise KeyInvalidError("private key does not match certificate public key")

    def is_valid(self, record: SecretRecord, now: datetime | None = None) -> bool:
        """Whether the record holds usable certificate material."""
        try:
            self.validate(record, now=now)
        except CertificateValidationError as e:
            logger.info(
                f"Secret {record.namespace}/{record.name} is not valid: {e.message}",
                extra={
                    "secret_name": record.name,
                    "namespace": record.namespace,
                    "error_type": type(e).__name__,
                },
            )
            return False
        return True
