"""Unit tests for the reconciliation orchestrator and its typed outcome."""

from unittest.mock import MagicMock, patch

from kubernetes import config
from urllib3.exceptions import MaxRetryError

from tests.conftest import CRD_NAME, SECRET_NAME, SECRET_NAMESPACE
from tests.fixtures.object_store import InMemoryObjectStore, make_crd
from webhook_certgen.errors import (
    ClientConstructionError,
    ReadError,
    SchemaRegistrationError,
)
from webhook_certgen.models import SecretState
from webhook_certgen.services.orchestrator import (
    Orchestrator,
    reconcile,
    setup_certificates,
)
from webhook_certgen.utils.kubernetes import KubernetesObjectStore


class TestOrchestratorSuccess:
    """Test successful runs."""

    def test_missing_secret_scenario(self, store, settings, now):
        """One create with both keys, then one CRD update carrying the certificate."""
        outcome = Orchestrator(store=store, settings=settings).reconcile(now=now)

        assert outcome.success is True
        assert str(outcome) == "success"
        assert outcome.secret_state == SecretState.CREATED
        assert store.calls["create_secret"] == 1
        assert store.crd_writes == 1

        created = store.secrets[(SECRET_NAMESPACE, SECRET_NAME)]
        assert created.has_required_keys()
        assert store.ca_bundle(CRD_NAME) == created.data["tls.crt"]

    def test_idempotent_second_run(self, store, settings, now):
        orchestrator = Orchestrator(store=store, settings=settings)
        orchestrator.reconcile(now=now)
        writes = (store.secret_writes, store.crd_writes)

        outcome = orchestrator.reconcile(now=now)

        assert outcome.secret_state == SecretState.NOOP
        assert outcome.ca_bundle_updated is False
        assert (store.secret_writes, store.crd_writes) == writes

    def test_settings_drive_generation(self, store, settings, monkeypatch):
        monkeypatch.setenv("CERTGEN_CERT_VALIDITY_DAYS", "30")
        from webhook_certgen.settings import Settings

        custom = Settings(_env_file=None)
        reconciler = Orchestrator(store=store, settings=custom).build_reconciler(store)

        assert reconciler.generator.validity.days == 30
        assert reconciler.validator.rotation_window.days == 10
        assert reconciler.patcher.crd_name == CRD_NAME

    def test_store_built_lazily_by_factory(self, store, settings, now):
        factory = MagicMock(return_value=store)
        orchestrator = Orchestrator(settings=settings, store_factory=factory)

        orchestrator.reconcile(now=now)
        orchestrator.reconcile(now=now)

        factory.assert_called_once_with()


class TestOrchestratorFailure:
    """Test that failures become typed outcomes."""

    def test_precondition_failure_scenario(self, settings, now):
        """Missing client config fails the run and issues no CRD write."""
        store = InMemoryObjectStore(crds=[make_crd(CRD_NAME, with_client_config=False)])

        outcome = Orchestrator(store=store, settings=settings).reconcile(now=now)

        assert outcome.success is False
        assert outcome.error_kind == "PreconditionError"
        assert "client config" in str(outcome)
        assert str(outcome).startswith("failed to ensure webhook secret: ")
        assert store.crd_writes == 0

    def test_missing_crd(self, settings, now):
        outcome = Orchestrator(store=InMemoryObjectStore(), settings=settings).reconcile(
            now=now
        )

        assert outcome.error_kind == "NotFoundError"
        assert CRD_NAME in outcome.message

    def test_read_error(self, settings):
        store = MagicMock()
        store.get_secret.side_effect = ReadError(
            "failed to read secret", reason="Forbidden", status=403
        )

        outcome = Orchestrator(store=store, settings=settings).reconcile()

        assert outcome.success is False
        assert outcome.error_kind == "ReadError"
        assert "Forbidden" in outcome.message

    def test_client_construction_error(self, settings):
        factory = MagicMock(side_effect=ClientConstructionError("no kubeconfig"))

        outcome = Orchestrator(settings=settings, store_factory=factory).reconcile()

        assert outcome.error_kind == "ClientConstructionError"
        assert str(outcome) == "failed to create a server client: no kubeconfig"

    @patch("webhook_certgen.utils.kubernetes.config.load_kube_config")
    @patch("webhook_certgen.utils.kubernetes.config.load_incluster_config")
    def test_missing_kubeconfig_message(self, mock_incluster, mock_kubeconfig, settings):
        """The client context prefix appears once."""
        mock_incluster.side_effect = config.ConfigException("not in cluster")
        mock_kubeconfig.side_effect = config.ConfigException("no kubeconfig")

        outcome = Orchestrator(settings=settings).reconcile()

        assert str(outcome) == "failed to create a server client: no kubeconfig"

    def test_unreachable_api_server(self, settings, now):
        """Transport failures from the client become a failed outcome."""
        store = KubernetesObjectStore()
        store._v1 = MagicMock()
        store._v1.read_namespaced_secret.side_effect = MaxRetryError(
            None, "/api/v1", "connection refused"
        )

        outcome = Orchestrator(store=store, settings=settings).reconcile(now=now)

        assert outcome.success is False
        assert outcome.error_kind == "ReadError"
        assert str(outcome).startswith("failed to ensure webhook secret: ")
        assert "Max retries exceeded" in str(outcome)

    def test_schema_registration_error(self, settings):
        factory = MagicMock(side_effect=SchemaRegistrationError("no CRD API"))

        outcome = Orchestrator(settings=settings, store_factory=factory).reconcile()

        assert outcome.error_kind == "SchemaRegistrationError"
        assert "apiextensions.v1" in str(outcome)


class TestEntryPoints:
    """Test the module-level entry points."""

    def test_reconcile_uses_injected_store(self, store, settings):
        outcome = reconcile(store=store, settings=settings)
        assert outcome.secret_state == SecretState.CREATED

    def test_setup_certificates_returns_string(self, store, settings):
        with patch(
            "webhook_certgen.services.orchestrator.reconcile",
            side_effect=lambda: reconcile(store=store, settings=settings),
        ):
            assert setup_certificates() == "success"
