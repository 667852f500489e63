"""
Typed result of a reconciliation run.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from ..constants import SUCCESS_OUTCOME
from ..errors import CertgenError


class SecretState(StrEnum):
    """Terminal state of the TLS secret after a successful run."""

    CREATED = "Created"
    ROTATED = "Rotated"
    NOOP = "NoOp"


class ReconcileOutcome(BaseModel):
    """
    Result of a reconciliation run.

    ``str(outcome)`` yields ``"success"`` or the formatted failure, which is
    what the process entry point reports.
    """

    success: bool = Field(..., description="Whether the run completed")
    secret_state: SecretState | None = Field(
        None, description="Terminal secret state, set on success"
    )
    ca_bundle_updated: bool = Field(
        False, description="Whether the CRD CA bundle was written in this run"
    )
    error_kind: str | None = Field(None, description="Error class name on failure")
    message: str = Field(SUCCESS_OUTCOME, description="Human-readable result")

    @classmethod
    def succeeded(
        cls, secret_state: SecretState, ca_bundle_updated: bool
    ) -> "ReconcileOutcome":
        return cls(
            success=True,
            secret_state=secret_state,
            ca_bundle_updated=ca_bundle_updated,
        )

    @classmethod
    def failed(cls, context: str, error: CertgenError) -> "ReconcileOutcome":
        return cls(
            success=False,
            error_kind=type(error).__name__,
            message=f"{context}: {error.message}",
        )

    def __str__(self) -> str:
        return self.message
