"""
Kubernetes utilities for the certificate job.

This module provides the narrow object-store capability the reconcilers
depend on, and its implementation against the Kubernetes API.

Key functionality:
- Kubernetes client management and configuration
- Secret get/create/update with base64 handling at the boundary
- CustomResourceDefinition get/update
- Translation of API errors into the job's error taxonomy
"""

import base64
import logging
from typing import Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from ..constants import APIEXTENSIONS_GROUP_VERSION, CRD_RESOURCE_PLURAL
from ..errors import (
    ClientConstructionError,
    ConflictError,
    NotFoundError,
    ReadError,
    SchemaRegistrationError,
    WriteError,
)
from ..models import SecretRecord

logger = logging.getLogger(__name__)

SECRET_KIND = "Secret"
CRD_KIND = "CustomResourceDefinition"


class ObjectStore(Protocol):
    """Typed get/create/update over the two resource kinds the job touches."""

    def get_secret(self, name: str, namespace: str) -> SecretRecord: ...
    def create_secret(self, record: SecretRecord) -> SecretRecord: ...
    def update_secret(self, record: SecretRecord) -> SecretRecord: ...
    def get_crd(self, name: str) -> client.V1CustomResourceDefinition: ...
    def update_crd(
        self, crd: client.V1CustomResourceDefinition
    ) -> client.V1CustomResourceDefinition: ...


def get_kubernetes_client() -> client.ApiClient:
    """
    Get configured Kubernetes API client.

    Tries in-cluster configuration first and falls back to the local
    kubeconfig for development.

    Returns:
        Configured Kubernetes API client

    Raises:
        ClientConstructionError: If neither configuration can be loaded
    """
    try:
        config.load_incluster_config()
        logger.debug("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        try:
            config.load_kube_config()
            logger.debug("Loaded kubeconfig from local environment")
        except config.ConfigException as e:
            raise ClientConstructionError(str(e), cause=e) from e

    return client.ApiClient()


def build_object_store(
    k8s_client: client.ApiClient | None = None,
) -> "KubernetesObjectStore":
    """
    Build an object store against the cluster and check the CRD API is served.

    Args:
        k8s_client: Optional pre-configured API client

    Returns:
        Ready-to-use KubernetesObjectStore

    Raises:
        ClientConstructionError: If the client cannot be configured
        SchemaRegistrationError: If apiextensions.k8s.io/v1 CRDs are unavailable
    """
    api_client = k8s_client or get_kubernetes_client()
    store = KubernetesObjectStore(api_client)

    try:
        resources = store.apiextensions.get_api_resources()
    except ApiException as e:
        raise SchemaRegistrationError(
            f"while discovering {APIEXTENSIONS_GROUP_VERSION} resources: {e.reason}",
            cause=e,
        ) from e
    except HTTPError as e:
        raise SchemaRegistrationError(
            f"while discovering {APIEXTENSIONS_GROUP_VERSION} resources: {e}",
            cause=e,
        ) from e

    names = {resource.name for resource in (resources.resources or [])}
    if CRD_RESOURCE_PLURAL not in names:
        raise SchemaRegistrationError(
            f"{APIEXTENSIONS_GROUP_VERSION} does not serve {CRD_RESOURCE_PLURAL}"
        )

    return store


def _decode_data(data: dict[str, str] | None) -> dict[str, bytes]:
    return {key: base64.b64decode(value) for key, value in (data or {}).items()}


def _encode_data(data: dict[str, bytes]) -> dict[str, str]:
    return {key: base64.b64encode(value).decode() for key, value in data.items()}


class KubernetesObjectStore:
    """ObjectStore backed by CoreV1Api and ApiextensionsV1Api."""

    def __init__(self, k8s_client: client.ApiClient | None = None):
        """
        Initialize the store.

        Args:
            k8s_client: Optional Kubernetes API client
        """
        self.k8s_client = k8s_client
        self._v1: client.CoreV1Api | None = None
        self._apiextensions: client.ApiextensionsV1Api | None = None

    @property
    def v1(self) -> client.CoreV1Api:
        """Get CoreV1Api client."""
        if self._v1 is None:
            self._v1 = client.CoreV1Api(self.k8s_client)
        return self._v1

    @property
    def apiextensions(self) -> client.ApiextensionsV1Api:
        """Get ApiextensionsV1Api client."""
        if self._apiextensions is None:
            self._apiextensions = client.ApiextensionsV1Api(self.k8s_client)
        return self._apiextensions

    def get_secret(self, name: str, namespace: str) -> SecretRecord:
        """
        Retrieve and decode a secret.

        Raises:
            NotFoundError: If the secret does not exist
            ReadError: If read fails for reasons other than 404
        """
        try:
            secret = self.v1.read_namespaced_secret(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(SECRET_KIND, name, namespace) from e
            raise ReadError(
                f"failed to read secret {namespace}/{name}",
                reason=e.reason,
                status=e.status,
                cause=e,
            ) from e
        except HTTPError as e:
            raise ReadError(
                f"failed to read secret {namespace}/{name}", reason=str(e), cause=e
            ) from e

        return self._to_record(secret)

    def create_secret(self, record: SecretRecord) -> SecretRecord:
        """
        Create a secret from a record.

        Raises:
            WriteError: If creation fails, including when it already exists
        """
        try:
            created = self.v1.create_namespaced_secret(
                namespace=record.namespace, body=self._to_secret(record)
            )
        except ApiException as e:
            raise WriteError(
                f"failed to create secret {record.namespace}/{record.name}",
                reason=e.reason,
                status=e.status,
                cause=e,
            ) from e
        except HTTPError as e:
            raise WriteError(
                f"failed to create secret {record.namespace}/{record.name}",
                reason=str(e),
                cause=e,
            ) from e

        logger.info(f"Created secret {record.namespace}/{record.name}")
        return self._to_record(created)

    def update_secret(self, record: SecretRecord) -> SecretRecord:
        """
        Replace a secret, guarded by the record's resource version.

        Raises:
            ConflictError: If the secret changed since it was read
            WriteError: If the update fails otherwise
        """
        try:
            updated = self.v1.replace_namespaced_secret(
                name=record.name,
                namespace=record.namespace,
                body=self._to_secret(record),
            )
        except ApiException as e:
            error_cls = ConflictError if e.status == 409 else WriteError
            raise error_cls(
                f"failed to update secret {record.namespace}/{record.name}",
                reason=e.reason,
                status=e.status,
                cause=e,
            ) from e
        except HTTPError as e:
            raise WriteError(
                f"failed to update secret {record.namespace}/{record.name}",
                reason=str(e),
                cause=e,
            ) from e

        logger.info(f"Updated secret {record.namespace}/{record.name}")
        return self._to_record(updated)

    def get_crd(self, name: str) -> client.V1CustomResourceDefinition:
        """
        Retrieve a CustomResourceDefinition.

        Raises:
            NotFoundError: If the CRD does not exist
            ReadError: If read fails for reasons other than 404
        """
        try:
            return self.apiextensions.read_custom_resource_definition(name=name)
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(CRD_KIND, name) from e
            raise ReadError(
                f"failed to get CRD {name}", reason=e.reason, status=e.status, cause=e
            ) from e
        except HTTPError as e:
            raise ReadError(f"failed to get CRD {name}", reason=str(e), cause=e) from e

    def update_crd(
        self, crd: client.V1CustomResourceDefinition
    ) -> client.V1CustomResourceDefinition:
        """
        Replace a CustomResourceDefinition, guarded by its resource version.

        Raises:
            ConflictError: If the CRD changed since it was read
            WriteError: If the update fails otherwise
        """
        name = crd.metadata.name
        try:
            updated = self.apiextensions.replace_custom_resource_definition(
                name=name, body=crd
            )
        except ApiException as e:
            error_cls = ConflictError if e.status == 409 else WriteError
            raise error_cls(
                f"while updating CRD {name}",
                reason=e.reason,
                status=e.status,
                cause=e,
            ) from e
        except HTTPError as e:
            raise WriteError(f"while updating CRD {name}", reason=str(e), cause=e) from e

        logger.info(f"Updated CustomResourceDefinition {name}")
        return updated

    @staticmethod
    def _to_record(secret: client.V1Secret) -> SecretRecord:
        metadata = secret.metadata
        return SecretRecord(
            name=metadata.name,
            namespace=metadata.namespace,
            data=_decode_data(secret.data),
            type=secret.type or "Opaque",
            labels=metadata.labels or {},
            annotations=metadata.annotations or {},
            resource_version=metadata.resource_version,
        )

    @staticmethod
    def _to_secret(record: SecretRecord) -> client.V1Secret:
        return client.V1Secret(
            metadata=client.V1ObjectMeta(
                name=record.name,
                namespace=record.namespace,
                labels=record.labels or None,
                annotations=record.annotations or None,
                resource_version=record.resource_version,
            ),
            type=record.type,
            data=_encode_data(record.data),
        )
