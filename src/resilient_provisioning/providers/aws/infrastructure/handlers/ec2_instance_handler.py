"""EC2 instance handler."""

from typing import Any, Optional

from resilient_provisioning.providers.aws.infrastructure.handlers.base_handler import (
    ResourceHandler,
)
from resilient_provisioning.providers.aws.resource_states import EC2_INSTANCE


class EC2InstanceHandler(ResourceHandler):
    """Runs single EC2 instances and terminates them."""

    service = "ec2"
    vocabulary = EC2_INSTANCE
    # Fresh instances can be briefly invisible to DescribeInstances
    create_not_found_checks = 3

    def create(self, parameters: dict[str, Any], timeout: Optional[float] = None) -> Any:
        """Run one instance and wait until it is running."""
        request = {"MinCount": 1, "MaxCount": 1, **parameters}
        return self.create_and_wait(
            "RunInstances", request, "Instances[0].InstanceId", timeout=timeout
        )

    def delete(self, instance_id: str, timeout: Optional[float] = None) -> None:
        """Terminate an instance and wait until it is terminated or gone."""
        self.delete_and_wait(
            instance_id,
            "TerminateInstances",
            {"InstanceIds": [instance_id]},
            timeout=timeout,
        )
