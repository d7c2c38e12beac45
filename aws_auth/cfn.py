"""CloudFormation custom resource plumbing.

Wraps a handler ``fn(request, context) -> (physical_resource_id, data)`` as a
Lambda entry point that reports the outcome back to CloudFormation through the
request's pre-signed ResponseURL.
"""

import json
import logging
from typing import Any, Callable, Optional

import httpx

from aws_auth.errors import ResponseDeliveryError
from aws_auth.models import (
    CustomResourceRequest,
    CustomResourceResponse,
    ResponseStatus,
)
from aws_auth.settings import get_settings

logger = logging.getLogger(__name__)

CustomResourceFunction = Callable[[CustomResourceRequest, Any], tuple[str, dict[str, Any]]]


def _log_stream_name(context: Any) -> str:
    return getattr(context, "log_stream_name", "") or ""


def build_response(
    request: CustomResourceRequest,
    status: ResponseStatus,
    physical_resource_id: str,
    reason: str = "",
    data: Optional[dict[str, Any]] = None,
) -> CustomResourceResponse:
    return CustomResourceResponse(
        status=status,
        reason=reason,
        physical_resource_id=physical_resource_id,
        stack_id=request.stack_id,
        request_id=request.request_id,
        logical_resource_id=request.logical_resource_id,
        data=data or {},
    )


def send_response(
    request: CustomResourceRequest,
    response: CustomResourceResponse,
    http_client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None,
) -> None:
    """PUT the response document to the request's ResponseURL.

    The URL is a pre-signed S3 URL, so the Content-Type must be empty.
    """
    body = json.dumps(response.model_dump(mode="json", by_alias=True)).encode("utf-8")
    headers = {"content-type": ""}

    try:
        if http_client is not None:
            result = http_client.put(request.response_url, content=body, headers=headers)
        else:
            if timeout is None:
                timeout = get_settings().response_timeout_seconds
            with httpx.Client(timeout=timeout) as client:
                result = client.put(request.response_url, content=body, headers=headers)
        result.raise_for_status()
    except httpx.HTTPError as e:
        raise ResponseDeliveryError(
            f"Failed to send custom resource response: {e}",
            details={"request_id": request.request_id},
        ) from e

    logger.info(
        "Sent %s response for %s (%s)",
        response.status.value,
        request.logical_resource_id,
        request.request_id,
    )


def lambda_wrap(
    fn: CustomResourceFunction, http_client: Optional[httpx.Client] = None
) -> Callable[[dict[str, Any], Any], dict[str, Any]]:
    """Turn ``fn`` into a Lambda handler for a CloudFormation custom resource."""

    def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
        request = CustomResourceRequest.model_validate(event)
        log_stream = _log_stream_name(context)

        try:
            physical_resource_id, data = fn(request, context)
        except Exception as e:
            logger.exception("Custom resource handler failed: %s", e)
            response = build_response(
                request,
                ResponseStatus.FAILED,
                request.physical_resource_id or log_stream,
                reason=f"{e}. See the details in CloudWatch Log Stream: {log_stream}",
            )
        else:
            response = build_response(
                request,
                ResponseStatus.SUCCESS,
                physical_resource_id or request.physical_resource_id or log_stream,
                data=data,
            )

        send_response(request, response, http_client=http_client)
        return response.model_dump(mode="json", by_alias=True)

    return lambda_handler
