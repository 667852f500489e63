"""
Orchestration of a single certificate reconciliation run.

Sequences client construction, the secret reconciler and the CRD patcher
against fixed target identifiers, and reports one typed outcome.
"""

import time
from collections.abc import Callable
from datetime import datetime, timedelta

from ..errors import CertgenError, ClientConstructionError, SchemaRegistrationError
from ..models import ReconcileOutcome
from ..observability.logging import CertgenLogger
from ..settings import Settings
from ..settings import settings as default_settings
from ..utils.keypair import KeyPairGenerator
from ..utils.kubernetes import ObjectStore, build_object_store
from ..utils.validation import CertificateValidator
from .crd_patcher import CRDWebhookPatcher
from .secret_reconciler import SecretReconciler


class Orchestrator:
    """
    Runs one reconciliation against an injected or cluster-backed object store.

    Failures never escape ``reconcile``; they are returned as a failed outcome
    carrying the error class name and a contextual message.
    """

    def __init__(
        self,
        store: ObjectStore | None = None,
        settings: Settings | None = None,
        store_factory: Callable[[], ObjectStore] = build_object_store,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Object store to use; built with store_factory when omitted
            settings: Job settings, defaults to the environment-loaded settings
            store_factory: Builds the cluster-backed store on first use
        """
        self.store = store
        self.settings = settings or default_settings
        self.store_factory = store_factory
        self.logger = CertgenLogger(self.__class__.__name__)

    def build_reconciler(self, store: ObjectStore) -> SecretReconciler:
        """Wire the secret reconciler from settings."""
        return SecretReconciler(
            store=store,
            generator=KeyPairGenerator(
                key_size=self.settings.key_size,
                validity=timedelta(days=self.settings.cert_validity_days),
            ),
            validator=CertificateValidator(
                rotation_window=timedelta(seconds=self.settings.rotation_window_seconds)
            ),
            patcher=CRDWebhookPatcher(store, self.settings.crd_name),
            repair_ca_bundle=self.settings.repair_ca_bundle,
        )

    def reconcile(self, now: datetime | None = None) -> ReconcileOutcome:
        """
        Run one reconciliation.

        Args:
            now: Reference time for generation and validation, defaults to now

        Returns:
            Success with the secret's terminal state, or a failure description
        """
        secret_name = self.settings.secret_name
        namespace = self.settings.secret_namespace
        start_time = time.time()

        self.logger.log_reconciliation_start(
            secret_name=secret_name,
            namespace=namespace,
            crd_name=self.settings.crd_name,
        )

        try:
            store = self._resolve_store()
        except ClientConstructionError as e:
            return self._fail("failed to create a server client", e, start_time)
        except SchemaRegistrationError as e:
            return self._fail(
                "while adding apiextensions.v1 schema to k8s client", e, start_time
            )

        try:
            outcome = self.build_reconciler(store).reconcile(
                secret_name=secret_name,
                namespace=namespace,
                service_name=self.settings.service_name,
                now=now,
            )
        except CertgenError as e:
            return self._fail("failed to ensure webhook secret", e, start_time)

        self.logger.log_reconciliation_success(
            secret_name=secret_name,
            namespace=namespace,
            outcome=str(outcome.secret_state),
            duration=time.time() - start_time,
        )
        return outcome

    def _resolve_store(self) -> ObjectStore:
        if self.store is None:
            self.store = self.store_factory()
        return self.store

    def _fail(
        self, context: str, error: CertgenError, start_time: float
    ) -> ReconcileOutcome:
        self.logger.log_reconciliation_error(
            secret_name=self.settings.secret_name,
            namespace=self.settings.secret_namespace,
            error=error,
            duration=time.time() - start_time,
        )
        return ReconcileOutcome.failed(context, error)


def reconcile(
    store: ObjectStore | None = None, settings: Settings | None = None
) -> ReconcileOutcome:
    """Run one reconciliation and return its typed outcome."""
    return Orchestrator(store=store, settings=settings).reconcile()


def setup_certificates() -> str:
    """Run one reconciliation against the cluster; ``"success"`` or a failure description."""
    return str(reconcile())
