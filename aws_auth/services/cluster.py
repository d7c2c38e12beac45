import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from aws_auth.errors import ClusterLookupError
from aws_auth.logs import LoggerLike
from aws_auth.models import ClusterMetadata

logger = logging.getLogger(__name__)


class ClusterMetadataResolver:
    """Look up EKS cluster connection details with the function's own credentials.

    A single DescribeCluster call is made per lookup; failures are not retried.
    """

    def __init__(self, eks_client: Any = None, region: Optional[str] = None, log: Optional[LoggerLike] = None):
        self._eks = eks_client
        self._region = region
        self._log = log or logger

    @property
    def eks(self) -> Any:
        if self._eks is None:
            self._eks = boto3.client("eks", region_name=self._region or None)
        return self._eks

    def describe(self, cluster_name: str) -> ClusterMetadata:
        """Return endpoint and certificate authority data for a cluster."""
        self._log.info("Describing EKS cluster %s", cluster_name)
        try:
            cluster = self.eks.describe_cluster(name=cluster_name)["cluster"]
        except (ClientError, BotoCoreError) as e:
            raise ClusterLookupError(
                f"Unable to describe cluster: {cluster_name}: {e}",
                details={"cluster_name": cluster_name},
            ) from e

        ca_data = (cluster.get("certificateAuthority") or {}).get("data")
        if not ca_data:
            raise ClusterLookupError(
                f"Cluster {cluster_name} has no certificate authority data",
                details={"cluster_name": cluster_name, "status": cluster.get("status", "")},
            )

        return ClusterMetadata(
            name=cluster_name,
            endpoint=cluster.get("endpoint") or "",
            certificate_authority_data=ca_data,
        )

    def resolve_ca(self, cluster_name: str) -> str:
        """Return the base64-encoded certificate authority of a cluster."""
        return self.describe(cluster_name).certificate_authority_data
