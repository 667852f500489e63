"""
CA bundle injection into a CRD's conversion webhook client configuration.
"""

import base64
import binascii
import logging

from kubernetes import client

from ..constants import (
    ERROR_MISSING_CLIENT_CONFIG,
    ERROR_MISSING_CONVERSION,
    ERROR_MISSING_WEBHOOK,
)
from ..errors import PreconditionError
from ..utils.kubernetes import ObjectStore

logger = logging.getLogger(__name__)


def conversion_client_config(
    crd: client.V1CustomResourceDefinition,
) -> client.ApiextensionsV1WebhookClientConfig:
    """
    Return the CRD's conversion webhook client config.

    Checked in order: conversion, webhook, client config. The first missing
    piece is reported; none of them is ever created here.

    Raises:
        PreconditionError: If any piece is missing
    """
    name = crd.metadata.name
    conversion = crd.spec.conversion if crd.spec else None
    if conversion is None or not conversion.strategy:
        raise PreconditionError(ERROR_MISSING_CONVERSION.format(name), missing="conversion")
    if conversion.webhook is None:
        raise PreconditionError(ERROR_MISSING_WEBHOOK.format(name), missing="webhook")
    if conversion.webhook.client_config is None:
        raise PreconditionError(
            ERROR_MISSING_CLIENT_CONFIG.format(name), missing="client config"
        )
    return conversion.webhook.client_config


def _decode_ca_bundle(value: str | None) -> bytes | None:
    if not value:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None


class CRDWebhookPatcher:
    """Writes a CA bundle into one CRD's conversion webhook."""

    def __init__(self, store: ObjectStore, crd_name: str):
        self.store = store
        self.crd_name = crd_name

    def inject_ca_bundle(self, ca_bundle: bytes) -> None:
        """
        Set the conversion webhook CA bundle and update the CRD.

        Args:
            ca_bundle: PEM certificate bytes (never the key)

        Raises:
            NotFoundError: If the CRD does not exist
            PreconditionError: If the CRD lacks the conversion webhook client config
            WriteError: If the update is rejected, ConflictError on stale reads
        """
        crd = self.store.get_crd(self.crd_name)
        self._write(crd, ca_bundle)

    def ensure_ca_bundle(self, ca_bundle: bytes) -> bool:
        """
        Inject the CA bundle only if the CRD currently holds a different one.

        Returns:
            True if the CRD was updated
        """
        crd = self.store.get_crd(self.crd_name)
        current = _decode_ca_bundle(conversion_client_config(crd).ca_bundle)
        if current == ca_bundle:
            logger.debug(
                f"CA bundle of CRD {self.crd_name} is up to date",
                extra={"crd_name": self.crd_name},
            )
            return False

        logger.warning(
            f"CA bundle of CRD {self.crd_name} differs from the webhook secret, repairing",
            extra={"crd_name": self.crd_name, "operation": "repair_ca_bundle"},
        )
        self._write(crd, ca_bundle)
        return True

    def _write(self, crd: client.V1CustomResourceDefinition, ca_bundle: bytes) -> None:
        client_config = conversion_client_config(crd)
        client_config.ca_bundle = base64.b64encode(ca_bundle).decode()
        self.store.update_crd(crd)
        logger.info(
            f"Injected CA bundle into conversion webhook of CRD {self.crd_name}",
            extra={"crd_name": self.crd_name, "operation": "inject_ca_bundle"},
        )
