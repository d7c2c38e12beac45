import logging
import time
from typing import Callable, Optional, TypeVar

from kubernetes import client as k8s_client

from aws_auth.errors import ApplyError
from aws_auth.logs import LoggerLike
from aws_auth.models import AWS_AUTH_RETRY_POLICY, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry(
    call: Callable[[], T],
    policy: RetryPolicy = AWS_AUTH_RETRY_POLICY,
    sleep: Callable[[float], None] = time.sleep,
    log: Optional[LoggerLike] = None,
) -> T:
    """Call ``call`` until it succeeds or the policy's attempts run out.

    Every failure is treated the same way, including conflicts. The last
    exception is re-raised once all attempts have failed.
    """
    log = log or logger
    attempt = 1

    while True:
        try:
            return call()
        except Exception as e:
            log.warning(
                "Attempt %d/%d failed: %s", attempt, policy.attempts, e
            )
            if attempt >= policy.attempts:
                raise
        sleep(policy.delay_seconds)
        attempt += 1


def apply_create(
    api_client: k8s_client.ApiClient,
    namespace: str,
    config_map: k8s_client.V1ConfigMap,
    policy: RetryPolicy = AWS_AUTH_RETRY_POLICY,
    sleep: Callable[[float], None] = time.sleep,
    log: Optional[LoggerLike] = None,
) -> k8s_client.V1ConfigMap:
    """Create ``config_map`` in ``namespace``, retrying with a fixed delay.

    Only ever issues a create. A ConfigMap left by an earlier invocation makes
    every attempt fail with a conflict.
    """
    log = log or logger
    core_v1 = k8s_client.CoreV1Api(api_client)

    def _create() -> k8s_client.V1ConfigMap:
        return core_v1.create_namespaced_config_map(namespace=namespace, body=config_map)

    try:
        created = retry(_create, policy=policy, sleep=sleep, log=log)
    except Exception as e:
        raise ApplyError(
            f"Error creating ConfigMap on cluster: {e}",
            details={"namespace": namespace, "attempts": policy.attempts},
        ) from e

    log.info("Created ConfigMap %s/%s", namespace, config_map.metadata.name)
    return created
