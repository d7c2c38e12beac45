"""Shared fixtures for aws-auth ConfigMap tests.

AWS and Kubernetes collaborators are replaced with MagicMock objects; no test
talks to a real AWS account or cluster.

Note:
    No __init__.py files in test directories.
"""

import base64
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from aws_auth.settings import Settings

ACCOUNT_ID = "111111111111"
CLUSTER_NAME = "demo"
CLUSTER_ENDPOINT = "https://demo.eks"
CREATE_ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/configmap-create"
NODE_ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/node"
ADMIN_ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/admin"
LOG_STREAM = "2026/10/18/[$LATEST]0123456789abcdef"

CA_PEM = b"-----BEGIN CERTIFICATE-----\nMIIBfakecertificate\n-----END CERTIFICATE-----\n"
CA_DATA = base64.b64encode(CA_PEM).decode("utf-8")


@pytest.fixture
def resource_properties() -> dict[str, Any]:
    """ResourceProperties as CloudFormation sends them."""
    return {
        "ServiceToken": "arn:aws:lambda:us-east-1:111111111111:function:aws-auth",
        "AccountId": ACCOUNT_ID,
        "CreateRoleArn": CREATE_ROLE_ARN,
        "ClusterName": CLUSTER_NAME,
        "ClusterEndpoint": CLUSTER_ENDPOINT,
        "AdminUser": "alice",
        "AdminRoleArn": ADMIN_ROLE_ARN,
        "NodeInstanceRoleArn": NODE_ROLE_ARN,
    }


@pytest.fixture
def create_event(resource_properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "RequestType": "Create",
        "ResponseURL": "https://cloudformation-custom-resource-response.s3.amazonaws.com/response?sig=abc",
        "StackId": "arn:aws:cloudformation:us-east-1:111111111111:stack/eks/guid",
        "RequestId": "7bfe2d54-710d-48a2-9d6b-cf0a2b0d8d5c",
        "ResourceType": "Custom::AwsAuthConfigMap",
        "LogicalResourceId": "AwsAuthConfigMap",
        "ResourceProperties": resource_properties,
    }


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    return SimpleNamespace(
        log_stream_name=LOG_STREAM,
        aws_request_id="c6af9ac6-7b61-11e6-9a41-93e8deadbeef",
        function_name="aws-auth-configmap",
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(aws_region="us-east-1", log_level="INFO")


@pytest.fixture
def eks_client() -> MagicMock:
    client = MagicMock()
    client.describe_cluster.return_value = {
        "cluster": {
            "name": CLUSTER_NAME,
            "endpoint": "https://ABCDEF.gr7.us-east-1.eks.amazonaws.com",
            "status": "ACTIVE",
            "certificateAuthority": {"data": CA_DATA},
        }
    }
    return client


@pytest.fixture
def sts_client() -> MagicMock:
    client = MagicMock()
    client.assume_role.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIAEXAMPLEKEYID",
            "SecretAccessKey": "example-secret-access-key",
            "SessionToken": "example-session-token",
            "Expiration": datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc),
        },
        "AssumedRoleUser": {
            "AssumedRoleId": "AROAEXAMPLE:cfn-custom-resource-configmap",
            "Arn": f"arn:aws:sts::{ACCOUNT_ID}:assumed-role/configmap-create/cfn-custom-resource-configmap",
        },
    }
    return client


@pytest.fixture
def client_error() -> Callable[[str, str], ClientError]:
    """Factory for botocore ClientError instances."""

    def _make(code: str, operation: str) -> ClientError:
        return ClientError(
            {"Error": {"Code": code, "Message": f"{code} from {operation}"}},
            operation,
        )

    return _make
