"""
Shared pytest fixtures for the certificate job test suite.
"""

from datetime import UTC, datetime

import pytest

from tests.fixtures.object_store import InMemoryObjectStore, make_crd
from webhook_certgen.settings import Settings
from webhook_certgen.utils.keypair import KeyPairGenerator
from webhook_certgen.utils.validation import CertificateValidator

CRD_NAME = "apirules.gateway.kyma-project.io"
SECRET_NAME = "api-gateway-webhook-service"
SECRET_NAMESPACE = "kyma-system"
SERVICE_NAME = "api-gateway-webhook-service"


@pytest.fixture
def now() -> datetime:
    """Fixed reference time, truncated to X.509 second precision."""
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def generator() -> KeyPairGenerator:
    return KeyPairGenerator()


@pytest.fixture
def validator() -> CertificateValidator:
    return CertificateValidator()


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings pointing at the test targets, isolated from any .env file."""
    monkeypatch.setenv("CERTGEN_SECRET_NAME", SECRET_NAME)
    monkeypatch.setenv("CERTGEN_SECRET_NAMESPACE", SECRET_NAMESPACE)
    monkeypatch.setenv("CERTGEN_SERVICE_NAME", SERVICE_NAME)
    monkeypatch.setenv("CERTGEN_CRD_NAME", CRD_NAME)
    return Settings(_env_file=None)


@pytest.fixture
def store() -> InMemoryObjectStore:
    """Store with the target CRD and no secret."""
    return InMemoryObjectStore(crds=[make_crd(CRD_NAME)])
