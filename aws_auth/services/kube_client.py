"""Kubernetes API client authenticated with AWS IAM.

EKS accepts a bearer token that is a presigned sts:GetCallerIdentity URL.
The API server replays the request to learn which IAM principal signed it,
so no static Kubernetes credential is ever stored.
"""

import base64
import binascii
import contextlib
import logging
import os
import tempfile
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError
from botocore.signers import RequestSigner
from kubernetes import client as k8s_client

from aws_auth.errors import AuthClientError
from aws_auth.logs import LoggerLike
from aws_auth.models import ClusterConfig

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "k8s-aws-v1."
CLUSTER_ID_HEADER = "x-k8s-aws-id"
# EKS honours a token for 15 minutes from signing regardless of this value
TOKEN_EXPIRES_SECONDS = 60


def get_eks_token(session: boto3.Session, cluster_name: str) -> str:
    """Mint a bearer token for ``cluster_name`` from the session's credentials."""
    region = session.region_name
    if not region:
        raise AuthClientError("Cannot sign EKS token without a region")

    credentials = session.get_credentials()
    if credentials is None:
        raise AuthClientError("Cannot sign EKS token without AWS credentials")

    sts = session.client("sts", region_name=region)
    signer = RequestSigner(
        sts.meta.service_model.service_id,
        region,
        "sts",
        "v4",
        credentials,
        session.events,
    )
    params = {
        "method": "GET",
        "url": f"{sts.meta.endpoint_url}/?Action=GetCallerIdentity&Version=2011-06-15",
        "body": {},
        "headers": {CLUSTER_ID_HEADER: cluster_name},
        "context": {},
    }

    try:
        signed_url = signer.generate_presigned_url(
            params,
            region_name=region,
            expires_in=TOKEN_EXPIRES_SECONDS,
            operation_name="",
        )
    except BotoCoreError as e:
        raise AuthClientError(f"Unable to sign EKS token request: {e}") from e

    encoded = base64.urlsafe_b64encode(signed_url.encode("utf-8")).decode("utf-8")
    return TOKEN_PREFIX + encoded.rstrip("=")


def _write_ca_file(ca_data: str) -> str:
    """Decode the cluster CA and save it where the client can load it."""
    try:
        cert = base64.b64decode(ca_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AuthClientError(f"Invalid certificate authority data: {e}") from e

    with tempfile.NamedTemporaryFile(prefix="eks-ca-", suffix=".crt", delete=False) as fp:
        fp.write(cert)
    return fp.name


def _remove_ca_file(path: str) -> None:
    with contextlib.suppress(FileNotFoundError):
        os.unlink(path)


class EksApiClient(k8s_client.ApiClient):
    """ApiClient that deletes its certificate authority file on close."""

    def __init__(self, configuration: k8s_client.Configuration, ca_file: str):
        super().__init__(configuration)
        self.ca_file = ca_file

    def close(self) -> None:
        try:
            super().close()
        finally:
            _remove_ca_file(self.ca_file)


def new_auth_client(
    cluster_config: ClusterConfig, log: Optional[LoggerLike] = None
) -> k8s_client.ApiClient:
    """Build an ApiClient for the cluster that signs a fresh token per request."""
    log = log or logger

    if not cluster_config.endpoint:
        raise AuthClientError(
            f"No API server endpoint for cluster {cluster_config.cluster_name}"
        )

    session = cluster_config.session
    cluster_name = cluster_config.cluster_name

    ca_file = _write_ca_file(cluster_config.certificate_authority_data)

    conf = k8s_client.Configuration()
    conf.host = cluster_config.endpoint
    conf.ssl_ca_cert = ca_file
    conf.api_key_prefix["authorization"] = "Bearer"
    # Credential problems must raise AuthClientError, not surface in apply
    try:
        conf.api_key["authorization"] = get_eks_token(session, cluster_name)
    except AuthClientError:
        _remove_ca_file(ca_file)
        raise

    def _refresh_token(configuration: k8s_client.Configuration) -> None:
        configuration.api_key["authorization"] = get_eks_token(session, cluster_name)

    conf.refresh_api_key_hook = _refresh_token

    log.info("Created Kubernetes client for %s at %s", cluster_name, conf.host)
    return EksApiClient(conf, ca_file)
