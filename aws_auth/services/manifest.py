"""Render the aws-auth ConfigMap that maps IAM identities to RBAC groups.

See https://docs.aws.amazon.com/eks/latest/userguide/add-user-role.html
"""

import logging
from string import Template
from typing import Any, Optional

import yaml
from kubernetes import client as k8s_client

from aws_auth.errors import DecodeError, TemplateError
from aws_auth.logs import LoggerLike

logger = logging.getLogger(__name__)

AWS_AUTH_NAME = "aws-auth"
AWS_AUTH_NAMESPACE = "kube-system"

# Substituted by the node bootstrapper at join time, not here
EC2_PRIVATE_DNS_NAME = "{{EC2PrivateDNSName}}"


CONFIG_MAP_TEMPLATE = Template(
    """\
apiVersion: v1
kind: ConfigMap
metadata:
  name: aws-auth
  namespace: kube-system
data:
  mapRoles: |
${MapRoles}
  mapUsers: |
${MapUsers}
"""
)

NODE_ROLE_TEMPLATE = Template(
    """\
    - rolearn: ${NodeInstanceRoleArn}
      username: system:node:${EC2PrivateDNSName}
      groups:
        - system:bootstrappers
        - system:nodes"""
)

ADMIN_ROLE_TEMPLATE = Template(
    """\
    - rolearn: ${AdminRoleArn}
      username: admin-role
      groups:
        - system:masters"""
)

ADMIN_USER_TEMPLATE = Template(
    """\
    - userarn: ${AdminUserArn}
      username: ${AdminUser}
      groups:
        - system:masters"""
)


def _substitute(template: Template, values: dict[str, str]) -> str:
    try:
        return template.substitute(values)
    except (KeyError, ValueError) as e:
        raise TemplateError(f"Unable add params to spec template: {e}") from e


def render_config_map_data(
    node_instance_role_arn: str,
    account_id: str,
    admin_user: str,
    admin_role_arn: str,
) -> bytes:
    """Render the aws-auth ConfigMap document.

    The admin role binding is only emitted when ``admin_role_arn`` is set.
    The admin user binding is always emitted.
    """
    values = {
        "NodeInstanceRoleArn": node_instance_role_arn,
        "EC2PrivateDNSName": EC2_PRIVATE_DNS_NAME,
        "AdminUserArn": f"arn:aws:iam::{account_id}:user/{admin_user}",
        "AdminUser": admin_user,
        "AdminRoleArn": admin_role_arn,
    }

    role_entries = [_substitute(NODE_ROLE_TEMPLATE, values)]
    if admin_role_arn:
        role_entries.append(_substitute(ADMIN_ROLE_TEMPLATE, values))

    spec = _substitute(
        CONFIG_MAP_TEMPLATE,
        {
            "MapRoles": "\n".join(role_entries),
            "MapUsers": _substitute(ADMIN_USER_TEMPLATE, values),
        },
    )
    return spec.encode("utf-8")


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise DecodeError(f"Invalid spec yaml: {message}")


def decode_config_map(spec: bytes) -> k8s_client.V1ConfigMap:
    """Decode a rendered document into a V1ConfigMap, checking its shape."""
    try:
        document: Any = yaml.safe_load(spec)
    except yaml.YAMLError as e:
        raise DecodeError(f"Invalid spec yaml: {e}") from e

    _require(isinstance(document, dict), "document is not a mapping")
    _require(document.get("apiVersion") == "v1", "apiVersion must be v1")
    _require(document.get("kind") == "ConfigMap", "kind must be ConfigMap")

    metadata = document.get("metadata")
    _require(isinstance(metadata, dict), "metadata is not a mapping")
    _require(metadata.get("name") == AWS_AUTH_NAME, f"metadata.name must be {AWS_AUTH_NAME}")

    data = document.get("data")
    _require(isinstance(data, dict), "data is not a mapping")
    for key, value in data.items():
        _require(isinstance(value, str), f"data.{key} is not a string")
        try:
            entries = yaml.safe_load(value)
        except yaml.YAMLError as e:
            raise DecodeError(f"Invalid spec yaml: data.{key}: {e}") from e
        _require(
            isinstance(entries, list) and all(isinstance(e, dict) for e in entries),
            f"data.{key} is not a list of mappings",
        )

    return k8s_client.V1ConfigMap(
        api_version=document["apiVersion"],
        kind=document["kind"],
        metadata=k8s_client.V1ObjectMeta(
            name=metadata["name"],
            namespace=metadata.get("namespace"),
        ),
        data=data,
    )


def build_config_map(
    node_instance_role_arn: str,
    account_id: str,
    admin_user: str,
    admin_role_arn: str,
    log: Optional[LoggerLike] = None,
) -> k8s_client.V1ConfigMap:
    """Render the aws-auth document and decode it into a V1ConfigMap."""
    log = log or logger

    spec = render_config_map_data(
        node_instance_role_arn, account_id, admin_user, admin_role_arn
    )
    log.info("Config map: %s", spec.decode("utf-8"))

    return decode_config_map(spec)
