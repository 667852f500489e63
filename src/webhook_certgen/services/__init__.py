"""
Service layer for the certificate job.

This module provides the reconciliation services that decide and apply
changes to the webhook secret and the CRD's CA bundle.
"""

from .crd_patcher import CRDWebhookPatcher
from .orchestrator import Orchestrator, reconcile, setup_certificates
from .secret_reconciler import SecretReconciler

__all__ = [
    "CRDWebhookPatcher",
    "SecretReconciler",
    "Orchestrator",
    "reconcile",
    "setup_certificates",
]
