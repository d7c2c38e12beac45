from aws_auth.handler import handle_event, lambda_handler
from aws_auth.provisioner import AwsAuthProvisioner

__all__ = ["AwsAuthProvisioner", "handle_event", "lambda_handler"]
