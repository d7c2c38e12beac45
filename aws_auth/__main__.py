"""
Invoke the aws-auth custom resource function locally with a saved event.

Usage:
    python -m aws_auth event.json

    python -m aws_auth event.json --no-respond --log-level DEBUG

AWS credentials and AWS_REGION are taken from the environment (or .env).
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from aws_auth.handler import handle_event, lambda_handler
from aws_auth.logs import configure_logging
from aws_auth.models import CustomResourceRequest

logger = logging.getLogger(__name__)


class LocalContext:
    """Stand-in for the Lambda context object."""

    function_name = "aws-auth-configmap"
    log_stream_name = "local"
    aws_request_id = "local"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run the aws-auth ConfigMap custom resource handler locally",
    )
    parser.add_argument("event", type=Path, help="Path to a CloudFormation custom resource event (JSON)")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    parser.add_argument(
        "--no-respond",
        action="store_true",
        help="Do not PUT the response to the event's ResponseURL",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    event = json.loads(args.event.read_text())

    if args.no_respond:
        request = CustomResourceRequest.model_validate(event)
        physical_resource_id, data = handle_event(request, LocalContext())
        result = {"PhysicalResourceId": physical_resource_id, "Data": data}
    else:
        result = lambda_handler(event, LocalContext())

    logger.info("Result: %s", json.dumps(result))
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
