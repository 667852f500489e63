"""
Webhook Certgen - keeps a conversion webhook's TLS identity valid.

This job provides a one-shot reconciliation that:
- Verifies the webhook TLS secret is present and valid for the rotation window
- Generates a fresh self-signed certificate and key when it is not
- Injects the certificate as the CA bundle of the target CRD's conversion webhook
"""

__version__ = "0.1.0"
