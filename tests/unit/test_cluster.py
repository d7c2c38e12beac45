"""Unit tests for EKS cluster metadata lookup."""

from typing import Callable
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from aws_auth.errors import ClusterLookupError
from aws_auth.services.cluster import ClusterMetadataResolver


class TestClusterMetadataResolver:
    def test_describe(self, eks_client: MagicMock) -> None:
        metadata = ClusterMetadataResolver(eks_client).describe("demo")

        eks_client.describe_cluster.assert_called_once_with(name="demo")
        assert metadata.name == "demo"
        assert metadata.endpoint == "https://ABCDEF.gr7.us-east-1.eks.amazonaws.com"
        assert metadata.certificate_authority_data.startswith("LS0tLS1CRUdJTi")

    def test_resolve_ca(self, eks_client: MagicMock) -> None:
        ca_data = ClusterMetadataResolver(eks_client).resolve_ca("demo")

        assert ca_data == eks_client.describe_cluster.return_value["cluster"]["certificateAuthority"]["data"]

    def test_client_error_is_not_retried(
        self,
        eks_client: MagicMock,
        client_error: Callable[[str, str], ClientError],
    ) -> None:
        error = client_error("ResourceNotFoundException", "DescribeCluster")
        eks_client.describe_cluster.side_effect = error

        with pytest.raises(ClusterLookupError) as exc_info:
            ClusterMetadataResolver(eks_client).resolve_ca("demo")

        assert exc_info.value.__cause__ is error
        assert "Unable to describe cluster: demo" in str(exc_info.value)
        assert exc_info.value.details == {"cluster_name": "demo"}
        assert eks_client.describe_cluster.call_count == 1

    def test_network_error(self, eks_client: MagicMock) -> None:
        eks_client.describe_cluster.side_effect = EndpointConnectionError(
            endpoint_url="https://eks.us-east-1.amazonaws.com"
        )

        with pytest.raises(ClusterLookupError):
            ClusterMetadataResolver(eks_client).describe("demo")

    def test_missing_certificate_authority(self, eks_client: MagicMock) -> None:
        eks_client.describe_cluster.return_value = {
            "cluster": {"name": "demo", "status": "CREATING", "certificateAuthority": {}}
        }

        with pytest.raises(ClusterLookupError, match="no certificate authority data"):
            ClusterMetadataResolver(eks_client).describe("demo")

    def test_missing_endpoint_is_empty(self, eks_client: MagicMock) -> None:
        del eks_client.describe_cluster.return_value["cluster"]["endpoint"]

        assert ClusterMetadataResolver(eks_client).describe("demo").endpoint == ""

    def test_uses_given_logger(self, eks_client: MagicMock) -> None:
        log = MagicMock()

        ClusterMetadataResolver(eks_client, log=log).describe("demo")

        log.info.assert_called_once_with("Describing EKS cluster %s", "demo")
