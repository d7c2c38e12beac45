"""Lambda entry point for the aws-auth ConfigMap custom resource.

Failures while creating the ConfigMap are logged and swallowed: the custom
resource always reports SUCCESS to CloudFormation, so a broken aws-auth
ConfigMap only shows up in the function's logs. Update and Delete events are
acknowledged without touching the cluster.
"""

from typing import Any, Optional

from aws_auth.cfn import lambda_wrap
from aws_auth.logs import configure_logging, invocation_logger
from aws_auth.models import CustomResourceRequest, RequestType
from aws_auth.provisioner import AwsAuthProvisioner
from aws_auth.settings import Settings, get_settings


def handle_event(
    request: CustomResourceRequest,
    context: Any,
    settings: Optional[Settings] = None,
    provisioner: Optional[AwsAuthProvisioner] = None,
) -> tuple[str, dict[str, Any]]:
    """Handle one custom resource event.

    Returns the physical resource id and an empty data map. Create uses the
    invocation's log stream name; Update and Delete keep the id CloudFormation
    already holds.
    """
    settings = settings or get_settings()
    physical_resource_id = getattr(context, "log_stream_name", "") or ""
    data: dict[str, Any] = {}

    log = invocation_logger(
        request.request_id,
        logical_resource_id=request.logical_resource_id,
        log_stream=physical_resource_id,
    )

    if request.request_type != RequestType.CREATE:
        log.info(
            "Ignoring %s request for %s",
            request.request_type.value,
            request.logical_resource_id,
        )
        # Log streams differ between containers; a changed id means replacement
        return request.physical_resource_id or physical_resource_id, data

    provisioner = provisioner or AwsAuthProvisioner(region=settings.aws_region, log=log)
    try:
        provisioner.create_aws_auth_config_map(request.resource_properties)
    except Exception as e:
        log.error("Unable to create aws-auth ConfigMap - reason: %s", e, exc_info=True)

    return physical_resource_id, data


def _handle(request: CustomResourceRequest, context: Any) -> tuple[str, dict[str, Any]]:
    settings = get_settings()
    configure_logging(settings.log_level)
    return handle_event(request, context, settings=settings)


lambda_handler = lambda_wrap(_handle)
