import re
from typing import Any, Mapping

from aws_auth.errors import InputError
from aws_auth.models import BindingParameters, ValidationErrorDetail

ROLE_ARN_PATTERN = re.compile(r"^arn:aws[a-z-]*:iam::\d{12}:role/.+$")

# ResourceProperties key -> BindingParameters field
REQUIRED_PROPERTIES = {"CreateRoleArn": "create_role_arn"}

OPTIONAL_PROPERTIES = {
    "AccountId": "account_id",
    "ClusterName": "cluster_name",
    "ClusterEndpoint": "cluster_endpoint",
    "AdminUser": "admin_user",
    "AdminRoleArn": "admin_role_arn",
    "NodeInstanceRoleArn": "node_instance_role_arn",
}


def _check_string(
    key: str, value: Any, errors: list[ValidationErrorDetail]
) -> str | None:
    """Return value if it is a single-line string, otherwise record an error."""
    if not isinstance(value, str):
        errors.append(
            ValidationErrorDetail(
                field=key,
                message=f"Expected a string, got {type(value).__name__}",
            )
        )
        return None
    # Values are spliced into a YAML block; a line break would add entries
    if "\n" in value or "\r" in value:
        errors.append(
            ValidationErrorDetail(field=key, message="Must not contain line breaks")
        )
        return None
    return value.strip()


def parse_binding_parameters(properties: Mapping[str, Any]) -> BindingParameters:
    """Validate custom resource properties into BindingParameters.

    CreateRoleArn is mandatory and must be an IAM role ARN. Every other
    property degrades to an empty string when absent. All problems are
    collected and raised together as a single InputError.
    """
    errors: list[ValidationErrorDetail] = []
    values: dict[str, str] = {}

    for key, field in REQUIRED_PROPERTIES.items():
        raw = properties.get(key)
        if raw is None or raw == "":
            errors.append(ValidationErrorDetail(field=key, message=f"{key} is required"))
            continue
        value = _check_string(key, raw, errors)
        if value is None:
            continue
        if not ROLE_ARN_PATTERN.match(value):
            errors.append(
                ValidationErrorDetail(
                    field=key,
                    message=f"Invalid IAM role ARN: {value}",
                )
            )
            continue
        values[field] = value

    for key, field in OPTIONAL_PROPERTIES.items():
        raw = properties.get(key)
        if raw is None:
            values[field] = ""
            continue
        value = _check_string(key, raw, errors)
        if value is not None:
            values[field] = value

    if errors:
        raise InputError(errors)

    return BindingParameters(**values)
