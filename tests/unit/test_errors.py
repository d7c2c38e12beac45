"""Unit tests for error formatting and invocation logging."""

import logging

import pytest

from aws_auth.errors import AwsAuthError, ClusterLookupError, InputError
from aws_auth.logs import invocation_logger
from aws_auth.models import ValidationErrorDetail


class TestAwsAuthError:
    def test_str_without_details(self) -> None:
        assert str(AwsAuthError("boom")) == "boom"

    def test_str_with_details(self) -> None:
        error = AwsAuthError("boom", details={"cluster_name": "demo", "attempts": 3})

        assert str(error) == "boom (cluster_name=demo, attempts=3)"

    def test_with_context_keeps_type_and_details(self) -> None:
        error = ClusterLookupError("Unable to describe cluster: demo", {"cluster_name": "demo"})

        wrapped = error.with_context("Unable to load cluster ca")

        assert isinstance(wrapped, ClusterLookupError)
        assert wrapped.message == "Unable to load cluster ca: Unable to describe cluster: demo"
        assert wrapped.details == {"cluster_name": "demo"}


class TestInputError:
    def test_message_lists_all_errors(self) -> None:
        error = InputError(
            [
                ValidationErrorDetail(field="CreateRoleArn", message="CreateRoleArn is required"),
                ValidationErrorDetail(field="AdminUser", message="Expected a string, got int"),
            ]
        )

        assert str(error) == (
            "Invalid resource properties: CreateRoleArn: CreateRoleArn is required; "
            "AdminUser: Expected a string, got int"
        )

    def test_with_context(self) -> None:
        errors = [ValidationErrorDetail(field="CreateRoleArn", message="CreateRoleArn is required")]

        wrapped = InputError(errors).with_context("clientset init failed")

        assert isinstance(wrapped, InputError)
        assert wrapped.errors == errors
        assert str(wrapped).startswith("clientset init failed: Invalid resource properties")


class TestInvocationLogger:
    def test_prefixes_request_id(self, caplog: pytest.LogCaptureFixture) -> None:
        log = invocation_logger("req-1", logical_resource_id="AwsAuthConfigMap")

        with caplog.at_level(logging.INFO, logger="aws_auth"):
            log.info("Describing EKS cluster %s", "demo")

        record = caplog.records[-1]
        assert record.getMessage() == "[req-1] Describing EKS cluster demo"
        assert record.logical_resource_id == "AwsAuthConfigMap"
