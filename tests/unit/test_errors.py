"""Unit tests for the error hierarchy."""

from webhook_certgen.errors import (
    CertgenError,
    CertificateValidationError,
    ConflictError,
    ExpiryError,
    KeyInvalidError,
    KubernetesAPIError,
    NotFoundError,
    ParseError,
    PreconditionError,
    WriteError,
)


class TestErrorHierarchy:
    """Test categorization and formatting."""

    def test_validation_errors_share_base(self):
        for error_cls in (ParseError, ExpiryError, KeyInvalidError):
            assert issubclass(error_cls, CertificateValidationError)

    def test_conflict_is_write_error(self):
        error = ConflictError("while updating CRD x", reason="Conflict", status=409)

        assert isinstance(error, WriteError)
        assert isinstance(error, KubernetesAPIError)
        assert error.message == "while updating CRD x (reason: Conflict)"

    def test_user_action_appended(self):
        error = PreconditionError("client config missing", missing="client config")

        assert str(error).startswith("client config missing\nAction required: ")
        assert error.category == "precondition"

    def test_not_found_names_resource(self):
        error = NotFoundError("Secret", "webhook", "kyma-system")

        assert error.message == "Secret 'kyma-system/webhook' not found"
        assert NotFoundError("CustomResourceDefinition", "a.b").message == (
            "CustomResourceDefinition 'a.b' not found"
        )

    def test_plain_error_has_no_action(self):
        assert str(CertgenError("boom", category="certificate")) == "boom"
