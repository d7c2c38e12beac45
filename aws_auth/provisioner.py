import logging
import time
from typing import Any, Callable, Mapping, Optional

from kubernetes import client as k8s_client

from aws_auth.errors import AwsAuthError
from aws_auth.logs import LoggerLike
from aws_auth.models import BindingParameters, ClusterConfig
from aws_auth.services.apply import apply_create
from aws_auth.services.cluster import ClusterMetadataResolver
from aws_auth.services.credentials import CredentialDeriver, build_session
from aws_auth.services.kube_client import new_auth_client
from aws_auth.services.manifest import AWS_AUTH_NAMESPACE, build_config_map
from aws_auth.validation import parse_binding_parameters

logger = logging.getLogger(__name__)


class AwsAuthProvisioner:
    """Create the aws-auth ConfigMap inside a newly created EKS cluster.

    The cluster is described with the function's own credentials, the
    ConfigMap is written with credentials of the role named by CreateRoleArn.
    """

    def __init__(
        self,
        region: str,
        eks_client: Any = None,
        sts_client: Any = None,
        auth_client_factory: Callable[..., k8s_client.ApiClient] = new_auth_client,
        sleep: Callable[[float], None] = time.sleep,
        log: Optional[LoggerLike] = None,
    ):
        self.region = region
        self._log = log or logger
        self._resolver = ClusterMetadataResolver(eks_client, region=region, log=self._log)
        self._deriver = CredentialDeriver(sts_client, region=region, log=self._log)
        self._auth_client_factory = auth_client_factory
        self._sleep = sleep

    def init_clientset(self, params: BindingParameters) -> k8s_client.ApiClient:
        """Assume the create role and authenticate against the cluster."""
        try:
            metadata = self._resolver.describe(params.cluster_name)
        except AwsAuthError as e:
            raise e.with_context("Unable to load cluster ca") from e

        credentials = self._deriver.assume_role(params.create_role_arn)
        session = build_session(credentials, self.region)

        cluster_config = ClusterConfig(
            cluster_name=params.cluster_name,
            endpoint=params.cluster_endpoint or metadata.endpoint,
            certificate_authority_data=metadata.certificate_authority_data,
            session=session,
        )
        try:
            return self._auth_client_factory(cluster_config, log=self._log)
        except AwsAuthError as e:
            raise e.with_context("Unable to create clientset") from e

    def provision(self, params: BindingParameters) -> k8s_client.V1ConfigMap:
        """Run the full sequence for already validated parameters."""
        try:
            api_client = self.init_clientset(params)
        except AwsAuthError as e:
            raise e.with_context("clientset init failed") from e

        try:
            try:
                config_map = build_config_map(
                    params.node_instance_role_arn,
                    params.account_id,
                    params.admin_user,
                    params.admin_role_arn,
                    log=self._log,
                )
            except AwsAuthError as e:
                raise e.with_context("Unable to create config map local data") from e

            return apply_create(
                api_client,
                AWS_AUTH_NAMESPACE,
                config_map,
                sleep=self._sleep,
                log=self._log,
            )
        finally:
            api_client.close()

    def create_aws_auth_config_map(
        self, properties: Mapping[str, Any]
    ) -> k8s_client.V1ConfigMap:
        """Validate custom resource properties, then provision.

        Validation runs before any AWS or Kubernetes call is made.
        """
        params = parse_binding_parameters(properties)
        self._log.info(
            "Provisioning aws-auth for cluster %s with role %s",
            params.cluster_name,
            params.create_role_arn,
        )
        return self.provision(params)
