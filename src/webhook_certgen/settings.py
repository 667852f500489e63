"""Centralized job settings using pydantic-settings.

This module provides a single source of truth for all job configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from webhook_certgen.constants import (
    DEFAULT_CERT_VALIDITY_DAYS,
    DEFAULT_CRD_NAME,
    DEFAULT_KEY_SIZE,
    DEFAULT_ROTATION_LEAD_DAYS,
    DEFAULT_SECRET_NAME,
    DEFAULT_SECRET_NAMESPACE,
    DEFAULT_SERVICE_NAME,
    MINIMUM_KEY_SIZE,
)


class Settings(BaseSettings):
    """Job configuration loaded from environment variables.

    Defaults target the API gateway conversion webhook. Override via
    environment variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Target identifiers
    secret_name: str = Field(
        default=DEFAULT_SECRET_NAME,
        description="Name of the TLS secret holding the webhook certificate",
        validation_alias="CERTGEN_SECRET_NAME",
    )
    secret_namespace: str = Field(
        default=DEFAULT_SECRET_NAMESPACE,
        description="Namespace of the TLS secret",
        validation_alias="CERTGEN_SECRET_NAMESPACE",
    )
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Name of the webhook service the certificate is issued for",
        validation_alias="CERTGEN_SERVICE_NAME",
    )
    crd_name: str = Field(
        default=DEFAULT_CRD_NAME,
        description="CustomResourceDefinition whose conversion webhook trusts the certificate",
        validation_alias="CERTGEN_CRD_NAME",
    )

    # Certificate lifecycle
    rotation_lead_days: int = Field(
        default=DEFAULT_ROTATION_LEAD_DAYS,
        ge=0,
        validation_alias="CERTGEN_ROTATION_LEAD_DAYS",
        description="Certificates expiring within this many days are regenerated",
    )
    cert_validity_days: int = Field(
        default=DEFAULT_CERT_VALIDITY_DAYS,
        gt=0,
        validation_alias="CERTGEN_CERT_VALIDITY_DAYS",
        description="Validity period of generated certificates in days",
    )
    key_size: int = Field(
        default=DEFAULT_KEY_SIZE,
        validation_alias="CERTGEN_KEY_SIZE",
        description="RSA key size in bits for generated keys",
    )
    repair_ca_bundle: bool = Field(
        default=True,
        validation_alias="CERTGEN_REPAIR_CA_BUNDLE",
        description="Re-assert the CRD CA bundle when the secret is valid but the bundle drifted",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for run tracing",
    )

    @field_validator("key_size")
    @classmethod
    def _check_key_size(cls, value: int) -> int:
        if value < MINIMUM_KEY_SIZE:
            raise ValueError(f"key size must be at least {MINIMUM_KEY_SIZE} bits")
        return value

    @property
    def rotation_window_seconds(self) -> int:
        """Look-ahead window in seconds used by certificate validation."""
        return self.rotation_lead_days * 24 * 60 * 60


# Global settings instance - initialized once at module import
settings = Settings()
