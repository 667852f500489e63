"""
Models for certificate material and the secret that persists it.

CertificateMaterial is produced by the key pair generator and never
mutated afterwards; a rotation always replaces the whole pair.
"""

from pydantic import BaseModel, Field

from ..constants import CERT_KEY, PRIVATE_KEY_KEY, REQUIRED_SECRET_KEYS, TLS_SECRET_TYPE


class CertificateMaterial(BaseModel):
    """PEM-encoded self-signed certificate and its RSA private key."""

    model_config = {"frozen": True, "populate_by_name": True}

    certificate_pem: bytes = Field(..., description="PEM encoded X.509 certificate")
    private_key_pem: bytes = Field(..., description="PEM encoded RSA private key")

    def __repr__(self) -> str:
        # Keep key bytes out of logs and tracebacks
        return f"CertificateMaterial(certificate_pem=<{len(self.certificate_pem)} bytes>)"

    def as_secret_data(self) -> dict[str, bytes]:
        """Return the pair keyed by the kubernetes.io/tls data keys."""
        return {CERT_KEY: self.certificate_pem, PRIVATE_KEY_KEY: self.private_key_pem}


class SecretRecord(BaseModel):
    """
    Decoded view of the TLS secret.

    Data values are raw bytes; base64 handling belongs to the object store.
    """

    model_config = {"populate_by_name": True}

    name: str = Field(..., description="Secret name")
    namespace: str = Field(..., description="Secret namespace")
    data: dict[str, bytes] = Field(default_factory=dict, description="Secret data")
    type: str = Field(TLS_SECRET_TYPE, description="Kubernetes secret type")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    resource_version: str | None = Field(
        None, description="Resource version observed on read, used for updates"
    )

    def has_required_keys(self) -> bool:
        """Whether both tls.crt and tls.key are present and non-empty."""
        return all(self.data.get(key) for key in REQUIRED_SECRET_KEYS)

    def __repr__(self) -> str:
        return (
            f"SecretRecord(name={self.name!r}, namespace={self.namespace!r}, "
            f"keys={sorted(self.data)}, resource_version={self.resource_version!r})"
        )
