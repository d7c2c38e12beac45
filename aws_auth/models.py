from datetime import datetime
from enum import Enum
from typing import Any, Optional

import boto3
from pydantic import BaseModel, ConfigDict, Field


class RequestType(str, Enum):
    """CloudFormation custom resource lifecycle event."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResponseStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class CustomResourceRequest(BaseModel):
    """Request envelope CloudFormation sends to the custom resource function."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    request_type: RequestType = Field(..., alias="RequestType")
    response_url: str = Field(..., alias="ResponseURL")
    stack_id: str = Field(..., alias="StackId")
    request_id: str = Field(..., alias="RequestId")
    resource_type: str = Field(default="", alias="ResourceType")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    physical_resource_id: Optional[str] = Field(default=None, alias="PhysicalResourceId")
    resource_properties: dict[str, Any] = Field(
        default_factory=dict, alias="ResourceProperties"
    )
    old_resource_properties: Optional[dict[str, Any]] = Field(
        default=None, alias="OldResourceProperties"
    )


class CustomResourceResponse(BaseModel):
    """Response document PUT to the request's ResponseURL."""

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus = Field(..., alias="Status")
    reason: str = Field(default="", alias="Reason")
    physical_resource_id: str = Field(..., alias="PhysicalResourceId")
    stack_id: str = Field(..., alias="StackId")
    request_id: str = Field(..., alias="RequestId")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    no_echo: bool = Field(default=False, alias="NoEcho")
    data: dict[str, Any] = Field(default_factory=dict, alias="Data")


class ValidationErrorDetail(BaseModel):
    """Single field-level validation error."""

    field: str
    message: str


class BindingParameters(BaseModel):
    """Typed view of the custom resource properties."""

    model_config = ConfigDict(frozen=True)

    create_role_arn: str
    account_id: str = ""
    cluster_name: str = ""
    cluster_endpoint: str = ""
    admin_user: str = ""
    admin_role_arn: str = ""
    node_instance_role_arn: str = ""

    @property
    def admin_user_arn(self) -> str:
        return f"arn:aws:iam::{self.account_id}:user/{self.admin_user}"


class TemporaryCredentials(BaseModel):
    """Short-lived credentials returned by sts:AssumeRole."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str = Field(..., repr=False)
    session_token: str = Field(..., repr=False)
    expiration: Optional[datetime] = None


class ClusterMetadata(BaseModel):
    """Connection details of an EKS cluster as reported by DescribeCluster."""

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint: str = ""
    certificate_authority_data: str


class ClusterConfig(BaseModel):
    """Everything needed to talk to a cluster's API server."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    cluster_name: str
    endpoint: str
    certificate_authority_data: str
    session: boto3.Session = Field(..., repr=False)


class RetryPolicy(BaseModel):
    """Fixed-delay retry policy: no exponential backoff, no jitter."""

    model_config = ConfigDict(frozen=True)

    attempts: int = Field(default=3, ge=1)
    delay_seconds: float = Field(default=5.0, ge=0)


AWS_AUTH_RETRY_POLICY = RetryPolicy()
