"""End-to-end lifecycle tests against moto's EC2 backend."""

import boto3
import pytest
from moto import mock_aws

from resilient_provisioning.config.schemas import AppConfig, AWSClientConfig, PollingConfig
from resilient_provisioning.domain.errors import ErrorKind
from resilient_provisioning.infrastructure.factories import (
    ResilienceLayer,
    build_resilience_layer,
)
from resilient_provisioning.providers.aws.infrastructure.handlers import (
    EC2InstanceHandler,
    LaunchTemplateHandler,
)


@pytest.fixture
def app_config():
    return AppConfig(
        provider="aws",
        aws=AWSClientConfig(region="us-east-1"),
        polling=PollingConfig(delay=0, interval=1, increment=1, max_interval=5),
    )


@pytest.fixture
def layer(aws_credentials, app_config, clock):
    with mock_aws():
        yield build_resilience_layer(
            app_config, sleep=clock.sleep, clock=clock, configure_logging=False
        )


def any_image_id():
    ec2 = boto3.client("ec2", region_name="us-east-1")
    return ec2.describe_images(Owners=["amazon"])["Images"][0]["ImageId"]


@pytest.mark.integration
@pytest.mark.aws
class TestEC2InstanceLifecycle:
    """Create, read and delete an instance through the resilience layer."""

    def test_create_read_delete(self, layer: ResilienceLayer):
        handler = layer.handler(EC2InstanceHandler)

        snapshot = handler.create({"ImageId": any_image_id(), "InstanceType": "t3.micro"})
        instance_id = snapshot["InstanceId"]

        assert snapshot["State"]["Name"] == "running"
        assert handler.read(instance_id)["State"]["Name"] == "running"

        handler.delete(instance_id)

        assert handler.read(instance_id)["State"]["Name"] == "terminated"

    def test_read_unknown_instance(self, layer: ResilienceLayer):
        handler = layer.handler(EC2InstanceHandler)

        assert handler.read("i-1234567890abcdef0") is None

    def test_not_found_is_classified(self, layer: ResilienceLayer):
        with pytest.raises(Exception) as excinfo:
            layer.aws_client.invoke(
                "ec2", "DescribeInstances", {"InstanceIds": ["i-1234567890abcdef0"]}
            )

        assert layer.classifier.classify(excinfo.value) is ErrorKind.NOT_FOUND


@pytest.mark.integration
@pytest.mark.aws
class TestLaunchTemplateLifecycle:
    """Create, adopt and delete a launch template through the resilience layer."""

    def test_create_adopt_delete(self, layer: ResilienceLayer):
        handler = layer.handler(LaunchTemplateHandler)
        template_data = {"ImageId": any_image_id(), "InstanceType": "t3.micro"}

        created = handler.create("workers", template_data)
        adopted = handler.create("workers", template_data)

        assert adopted["LaunchTemplateId"] == created["LaunchTemplateId"]

        handler.delete(created["LaunchTemplateId"])

        assert handler.read(created["LaunchTemplateId"]) is None


@pytest.mark.unit
class TestResilienceLayerFactory:
    """Test cases for build_resilience_layer."""

    def test_generic_provider_has_no_transport(self, clock):
        layer = build_resilience_layer(
            AppConfig(provider="generic"),
            sleep=clock.sleep,
            clock=clock,
            configure_logging=False,
        )

        assert layer.aws_client is None
        with pytest.raises(ValueError):
            layer.handler(EC2InstanceHandler)

    def test_configured_tables_are_merged(self, clock):
        config = AppConfig.model_validate(
            {"provider": "generic", "classification": {"transient_codes": ["Busy"]}}
        )

        layer = build_resilience_layer(
            config, sleep=clock.sleep, clock=clock, configure_logging=False
        )

        assert "Busy" in layer.classifier.config.transient_codes
        assert "Throttling" in layer.classifier.config.transient_codes
