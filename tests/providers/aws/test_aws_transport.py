"""Tests for the boto3-backed AWS transport."""

from unittest.mock import Mock

import boto3
import pytest
from botocore.stub import Stubber
from moto import mock_aws

from resilient_provisioning.config.schemas import AWSClientConfig
from resilient_provisioning.domain.base.ports import LoggingPort, TransportPort
from resilient_provisioning.domain.errors import ErrorKind, OperationError
from resilient_provisioning.infrastructure.diagnostics import DebugSink
from resilient_provisioning.providers.aws.infrastructure import AWSClient


@pytest.mark.unit
class TestAWSClient:
    """Test suite for AWSClient."""

    @pytest.fixture
    def session(self):
        return boto3.Session(
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
            region_name="us-east-1",
        )

    @pytest.fixture
    def debug_sink(self):
        return Mock(spec=DebugSink)

    @pytest.fixture
    def aws_client(self, session, debug_sink):
        logger = Mock(spec=LoggingPort)
        return AWSClient(
            AWSClientConfig(region="us-east-1"), logger, debug_sink=debug_sink, session=session
        )

    def test_botocore_retries_are_disabled(self, aws_client):
        assert aws_client.boto_config.retries == {"max_attempts": 1, "mode": "standard"}
        assert aws_client.region_name == "us-east-1"

    def test_clients_are_cached(self, aws_client):
        assert aws_client.client("ec2") is aws_client.client("ec2")
        assert aws_client.client("ec2") is not aws_client.client("sts")

    def test_invoke_returns_response(self, aws_client, debug_sink):
        client = aws_client.client("ec2")
        with Stubber(client) as stubber:
            stubber.add_response(
                "describe_instances",
                {"Reservations": []},
                {"InstanceIds": ["i-1234567890abcdef0"]},
            )

            response = aws_client.invoke(
                "ec2", "DescribeInstances", {"InstanceIds": ["i-1234567890abcdef0"]}
            )

        assert response["Reservations"] == []
        debug_sink.record.assert_called_once()
        assert debug_sink.record.call_args.args[0] == "ec2.DescribeInstances"

    def test_invoke_translates_client_errors(self, aws_client, debug_sink):
        client = aws_client.client("ec2")
        with Stubber(client) as stubber:
            stubber.add_client_error(
                "describe_instances",
                service_error_code="RequestLimitExceeded",
                service_message="Request limit exceeded.",
                http_status_code=503,
            )

            with pytest.raises(OperationError) as excinfo:
                aws_client.invoke("ec2", "DescribeInstances")

        error = excinfo.value
        assert error.provider_code == "RequestLimitExceeded"
        assert error.http_status == 503
        assert error.origin == "ec2.DescribeInstances"
        assert error.kind is ErrorKind.UNCLASSIFIED
        assert debug_sink.record.call_args.kwargs["error"] is error

    def test_unknown_action(self, aws_client):
        with pytest.raises(OperationError) as excinfo:
            aws_client.invoke("ec2", "LaunchRocket")

        assert excinfo.value.kind is ErrorKind.FATAL

    def test_for_service_binds_transport(self, aws_client):
        transport = aws_client.for_service("ec2")
        client = aws_client.client("ec2")

        with Stubber(client) as stubber:
            stubber.add_response("describe_regions", {"Regions": [{"RegionName": "us-east-1"}]})

            response = transport.invoke("DescribeRegions")

        assert isinstance(transport, TransportPort)
        assert response["Regions"][0]["RegionName"] == "us-east-1"


@pytest.mark.aws
class TestAWSClientAgainstMoto:
    """AWSClient against moto's EC2 backend."""

    @mock_aws
    def test_not_found_error_shape(self, aws_credentials, classifier):
        aws_client = AWSClient(AWSClientConfig(region="us-east-1"))

        with pytest.raises(OperationError) as excinfo:
            aws_client.invoke(
                "ec2", "DescribeInstances", {"InstanceIds": ["i-1234567890abcdef0"]}
            )

        assert excinfo.value.provider_code == "InvalidInstanceID.NotFound"
        assert classifier.classify(excinfo.value) is ErrorKind.NOT_FOUND
