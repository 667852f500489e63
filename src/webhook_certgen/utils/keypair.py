"""
Self-signed certificate generation for the webhook service.

The certificate acts as its own trust root: it is injected verbatim as the
CA bundle of the conversion webhook, so no separate CA or chain exists.
"""

import logging
from datetime import UTC, datetime, timedelta

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from ..constants import (
    CLOCK_SKEW_BACKDATE_SECONDS,
    CLUSTER_DOMAIN,
    DEFAULT_CERT_VALIDITY_DAYS,
    DEFAULT_KEY_SIZE,
    RSA_PUBLIC_EXPONENT,
)
from ..errors import GenerationError
from ..models import CertificateMaterial

logger = logging.getLogger(__name__)


def service_alt_names(service_name: str, namespace: str) -> list[str]:
    """
    Derive the DNS identities a service is reachable under.

    The first entry is used as the certificate Common Name.

    Args:
        service_name: Name of the Kubernetes service
        namespace: Namespace of the service

    Returns:
        ``[svc.ns.svc, svc, svc.ns, svc.ns.svc.cluster.local]``
    """
    namespaced_service_name = f"{service_name}.{namespace}"
    return [
        f"{namespaced_service_name}.svc",
        service_name,
        namespaced_service_name,
        f"{namespaced_service_name}.svc.{CLUSTER_DOMAIN}",
    ]


class KeyPairGenerator:
    """Generates self-signed RSA certificates for a service's identities."""

    def __init__(
        self,
        key_size: int = DEFAULT_KEY_SIZE,
        validity: timedelta = timedelta(days=DEFAULT_CERT_VALIDITY_DAYS),
    ):
        """
        Initialize the generator.

        Args:
            key_size: RSA key size in bits
            validity: Lifetime of generated certificates, counted from generation time
        """
        self.key_size = key_size
        self.validity = validity

    def generate(
        self, service_name: str, namespace: str, now: datetime | None = None
    ) -> CertificateMaterial:
        """
        Generate a fresh key pair and self-signed certificate.

        Key material is random on every call.

        Args:
            service_name: Name of the webhook service
            namespace: Namespace of the webhook service
            now: Generation time, defaults to the current time

        Returns:
            PEM encoded certificate and PKCS#1 private key

        Raises:
            GenerationError: If key generation or signing fails
        """
        now = (now or datetime.now(UTC)).replace(microsecond=0)
        alt_names = service_alt_names(service_name, namespace)

        try:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT, key_size=self.key_size
            )
            certificate = self._build_certificate(private_key, alt_names, now)
            material = CertificateMaterial(
                certificate_pem=certificate.public_bytes(serialization.Encoding.PEM),
                private_key_pem=private_key.private_bytes(
                    serialization.Encoding.PEM,
                    serialization.PrivateFormat.TraditionalOpenSSL,
                    serialization.NoEncryption(),
                ),
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise GenerationError(
                f"failed to generate webhook certificate for {alt_names[0]}: {e}",
                cause=e,
            ) from e

        logger.info(
            f"Generated self-signed certificate for {alt_names[0]}",
            extra={
                "service_name": service_name,
                "namespace": namespace,
                "not_valid_after": certificate.not_valid_after_utc.isoformat(),
            },
        )
        return material

    def _build_certificate(
        self,
        private_key: rsa.RSAPrivateKey,
        alt_names: list[str],
        now: datetime,
    ) -> x509.Certificate:
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, alt_names[0])])
        public_key = private_key.public_key()

        builder = x509.CertificateBuilder()
        builder = builder.subject_name(name)
        builder = builder.issuer_name(name)
        builder = builder.not_valid_before(
            now - timedelta(seconds=CLOCK_SKEW_BACKDATE_SECONDS)
        )
        builder = builder.not_valid_after(now + self.validity)
        builder = builder.serial_number(x509.random_serial_number())
        builder = builder.public_key(public_key)
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(n) for n in alt_names]),
            critical=False,
        )
        # Own trust root, so it must be allowed to act as a CA
        builder = builder.add_extension(
            x509.BasicConstraints(ca=True, path_length=None), critical=True
        )
        builder = builder.add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        builder = builder.add_extension(
            x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False
        )
        builder = builder.add_extension(
            x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False
        )

        return builder.sign(private_key=private_key, algorithm=hashes.SHA256())
