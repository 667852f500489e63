"""
Utils package - helpers for certificate handling and cluster access.

Contains helper modules for:
- Self-signed certificate generation
- Certificate and key validation
- Kubernetes object store access
"""

from webhook_certgen.utils.keypair import KeyPairGenerator, service_alt_names
from webhook_certgen.utils.validation import CertificateValidator

__all__ = [
    "KeyPairGenerator",
    "service_alt_names",
    "CertificateValidator",
]
