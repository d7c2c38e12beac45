"""Exception types raised while provisioning the aws-auth ConfigMap.

Exception hierarchy:
    AwsAuthError (base)
    ├── InputError - ResourceProperties missing or malformed
    ├── ConfigurationError - function settings unusable (e.g. no region)
    ├── ClusterLookupError - eks:DescribeCluster failed
    ├── AssumeRoleError - sts:AssumeRole failed
    ├── AuthClientError - Kubernetes client could not be built
    ├── TemplateError - ConfigMap template substitution failed
    ├── DecodeError - rendered ConfigMap is not a valid object
    ├── ApplyError - ConfigMap create failed after all retries
    └── ResponseDeliveryError - CloudFormation response could not be sent
"""

from typing import Any, Optional

from aws_auth.models import ValidationErrorDetail


class AwsAuthError(Exception):
    """Base exception for aws-auth provisioning errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({detail_str})"

    def with_context(self, context: str) -> "AwsAuthError":
        """Return an error of the same type with ``context`` prefixed to the message."""
        return type(self)(f"{context}: {self.message}", self.details)


class InputError(AwsAuthError):
    """Exception raised when ResourceProperties fail validation."""

    def __init__(self, errors: list[ValidationErrorDetail]):
        self.errors = errors
        messages = [f"{e.field}: {e.message}" for e in errors]
        super().__init__(f"Invalid resource properties: {'; '.join(messages)}")

    def with_context(self, context: str) -> "InputError":
        error = InputError(self.errors)
        error.message = f"{context}: {error.message}"
        error.args = (error.message,)
        return error


class ConfigurationError(AwsAuthError):
    pass


class ClusterLookupError(AwsAuthError):
    pass


class AssumeRoleError(AwsAuthError):
    pass


class AuthClientError(AwsAuthError):
    pass


class TemplateError(AwsAuthError):
    pass


class DecodeError(AwsAuthError):
    pass


class ApplyError(AwsAuthError):
    """Raised once every create attempt has failed.

    The last observed error is available as ``__cause__``.
    """


class ResponseDeliveryError(AwsAuthError):
    pass
