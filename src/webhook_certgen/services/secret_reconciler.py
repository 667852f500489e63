"""
Reconciliation of the webhook TLS secret.

State machine over the secret:
- NotFound: generate, create, propagate CA bundle (Created)
- Found but missing keys or invalid: generate, overwrite data, propagate (Rotated)
- Found and valid: untouched (NoOp), CA bundle only repaired when it drifted
"""

import logging
from datetime import datetime

from ..constants import (
    CERT_KEY,
    COMPONENT_LABEL_KEY,
    COMPONENT_WEBHOOK_CERT,
    MANAGED_BY_LABEL_KEY,
    MANAGED_BY_LABEL_VALUE,
    TLS_SECRET_TYPE,
)
from ..errors import NotFoundError
from ..models import CertificateMaterial, ReconcileOutcome, SecretRecord, SecretState
from ..utils.keypair import KeyPairGenerator
from ..utils.kubernetes import ObjectStore
from ..utils.validation import CertificateValidator
from .crd_patcher import CRDWebhookPatcher

logger = logging.getLogger(__name__)


def build_secret(
    name: str, namespace: str, material: CertificateMaterial
) -> SecretRecord:
    """Build a new TLS secret record holding the given material."""
    return SecretRecord(
        name=name,
        namespace=namespace,
        data=material.as_secret_data(),
        type=TLS_SECRET_TYPE,
        labels={
            MANAGED_BY_LABEL_KEY: MANAGED_BY_LABEL_VALUE,
            COMPONENT_LABEL_KEY: COMPONENT_WEBHOOK_CERT,
        },
    )


class SecretReconciler:
    """Creates or rotates the TLS secret and propagates its certificate."""

    def __init__(
        self,
        store: ObjectStore,
        generator: KeyPairGenerator,
        validator: CertificateValidator,
        patcher: CRDWebhookPatcher,
        repair_ca_bundle: bool = True,
    ):
        """
        Initialize the secret reconciler.

        Args:
            store: Object store for secrets and CRDs
            generator: Produces new certificate material
            validator: Decides whether stored material is usable
            patcher: Propagates the certificate to the CRD
            repair_ca_bundle: Re-assert a drifted CA bundle when the secret is valid
        """
        self.store = store
        self.generator = generator
        self.validator = validator
        self.patcher = patcher
        self.repair_ca_bundle = repair_ca_bundle

    def reconcile(
        self,
        secret_name: str,
        namespace: str,
        service_name: str,
        now: datetime | None = None,
    ) -> ReconcileOutcome:
        """
        Bring the secret and the CRD CA bundle to a valid state.

        Raises:
            ReadError: If the secret cannot be read for reasons other than 404
            GenerationError: If new material cannot be generated
            WriteError: If a secret or CRD write is rejected
            NotFoundError: If the target CRD does not exist
            PreconditionError: If the CRD lacks the conversion webhook client config
        """
        try:
            record = self.store.get_secret(secret_name, namespace)
        except NotFoundError:
            logger.info(
                f"Webhook secret {namespace}/{secret_name} not found, creating it",
                extra={"secret_name": secret_name, "namespace": namespace},
            )
            return self._create(secret_name, namespace, service_name, now)

        if self.validator.is_valid(record, now=now):
            return self._keep(record)

        return self._rotate(record, service_name, now)

    def _create(
        self,
        secret_name: str,
        namespace: str,
        service_name: str,
        now: datetime | None,
    ) -> ReconcileOutcome:
        material = self.generator.generate(service_name, namespace, now=now)
        self.store.create_secret(build_secret(secret_name, namespace, material))
        self.patcher.inject_ca_bundle(material.certificate_pem)
        return ReconcileOutcome.succeeded(SecretState.CREATED, ca_bundle_updated=True)

    def _rotate(
        self, record: SecretRecord, service_name: str, now: datetime | None
    ) -> ReconcileOutcome:
        logger.info(
            f"Rotating certificate in secret {record.namespace}/{record.name}",
            extra={
                "secret_name": record.name,
                "namespace": record.namespace,
                "operation": "rotate",
            },
        )
        material = self.generator.generate(service_name, record.namespace, now=now)
        # Only data is replaced; metadata and resource version come from the read
        self.store.update_secret(
            record.model_copy(update={"data": material.as_secret_data()})
        )
        self.patcher.inject_ca_bundle(material.certificate_pem)
        return ReconcileOutcome.succeeded(SecretState.ROTATED, ca_bundle_updated=True)

    def _keep(self, record: SecretRecord) -> ReconcileOutcome:
        logger.info(
            f"Webhook secret {record.namespace}/{record.name} is valid",
            extra={"secret_name": record.name, "namespace": record.namespace},
        )
        updated = False
        if self.repair_ca_bundle:
            updated = self.patcher.ensure_ca_bundle(record.data[CERT_KEY])
        return ReconcileOutcome.succeeded(SecretState.NOOP, ca_bundle_updated=updated)
