import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from aws_auth.errors import AssumeRoleError, ConfigurationError
from aws_auth.logs import LoggerLike
from aws_auth.models import TemporaryCredentials

logger = logging.getLogger(__name__)

# Used as both ExternalId and RoleSessionName so the target role's trust
# policy can pin who may assume it.
EXTERNAL_ID = "cfn-custom-resource-configmap"
SESSION_DURATION_SECONDS = 3600


class CredentialDeriver:
    """Obtain temporary credentials for the role that may write to the cluster."""

    def __init__(self, sts_client: Any = None, region: Optional[str] = None, log: Optional[LoggerLike] = None):
        self._sts = sts_client
        self._region = region
        self._log = log or logger

    @property
    def sts(self) -> Any:
        if self._sts is None:
            self._sts = boto3.client("sts", region_name=self._region or None)
        return self._sts

    def assume_role(self, role_arn: str) -> TemporaryCredentials:
        """Assume ``role_arn`` for one hour. Failures are not retried."""
        self._log.info("Assuming role %s", role_arn)
        try:
            assumed = self.sts.assume_role(
                RoleArn=role_arn,
                ExternalId=EXTERNAL_ID,
                RoleSessionName=EXTERNAL_ID,
                DurationSeconds=SESSION_DURATION_SECONDS,
            )
        except NoCredentialsError as e:
            raise AssumeRoleError(
                f"Failed to locate AWS credentials: {e}",
                details={"role_arn": role_arn},
            ) from e
        except (ClientError, BotoCoreError) as e:
            raise AssumeRoleError(
                f"Failed to assume role {role_arn}: {e}",
                details={"role_arn": role_arn},
            ) from e

        creds = assumed["Credentials"]
        return TemporaryCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expiration=creds.get("Expiration"),
        )


def build_session(credentials: TemporaryCredentials, region: str) -> boto3.Session:
    """Wrap temporary credentials in a region-scoped boto3 session."""
    if not region:
        raise ConfigurationError(
            "AWS region is not configured; set AWS_REGION for the function"
        )

    return boto3.Session(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=region,
    )
