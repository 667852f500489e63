"""
Certificate job error hierarchy with categorization.

This module defines the error types used throughout the certificate job.
Every failure aborts the current run; categories only describe where the
failure happened and what an operator should do about it.
"""


class CertgenError(Exception):
    """
    Base error class for all certificate job exceptions.

    Provides categorization and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize certificate job error.

        Args:
            message: Human-readable error description
            category: Error category (client, api, certificate, precondition)
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ClientConstructionError(CertgenError):
    """Kubernetes client could not be configured."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            category="client",
            user_action="Check in-cluster service account or local kubeconfig",
            cause=cause,
        )


class SchemaRegistrationError(CertgenError):
    """The CustomResourceDefinition API is not available to the client."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            category="client",
            user_action="Check that apiextensions.k8s.io/v1 is served by the cluster",
            cause=cause,
        )


class KubernetesAPIError(CertgenError):
    """Error communicating with the Kubernetes API."""

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        status: int | None = None,
        cause: Exception | None = None,
    ):
        if reason:
            message = f"{message} (reason: {reason})"
        super().__init__(
            message=message,
            category="api",
            user_action="Check RBAC permissions and cluster connectivity",
            cause=cause,
        )
        self.reason = reason
        self.status = status


class ReadError(KubernetesAPIError):
    """Reading a resource failed for a reason other than not-found."""


class WriteError(KubernetesAPIError):
    """Creating or updating a resource was rejected."""


class ConflictError(WriteError):
    """Update rejected because the resource changed since it was read."""


class NotFoundError(CertgenError):
    """A resource required by the job does not exist."""

    def __init__(self, kind: str, name: str, namespace: str | None = None):
        location = f"{namespace}/{name}" if namespace else name
        super().__init__(
            message=f"{kind} '{location}' not found",
            category="api",
            user_action=f"Ensure the {kind} is installed before running the job",
        )
        self.kind = kind
        self.name = name
        self.namespace = namespace


class PreconditionError(CertgenError):
    """The target CRD lacks the conversion webhook structure to inject into."""

    def __init__(self, message: str, missing: str):
        super().__init__(
            message=message,
            category="precondition",
            user_action=(
                "Declare spec.conversion.webhook.clientConfig on the CRD; "
                "this job does not create it"
            ),
        )
        self.missing = missing


class GenerationError(CertgenError):
    """Key generation or certificate signing failed."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message=message, category="certificate", cause=cause)


class CertificateValidationError(CertgenError):
    """Stored certificate material is unusable and must be regenerated."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message=message, category="certificate", cause=cause)


class ParseError(CertificateValidationError):
    """Certificate or key bytes are not well-formed PEM."""


class ExpiryError(CertificateValidationError):
    """Certificate does not verify at the end of the rotation window."""


class KeyInvalidError(CertificateValidationError):
    """Private key fails its consistency check or does not match the certificate."""
