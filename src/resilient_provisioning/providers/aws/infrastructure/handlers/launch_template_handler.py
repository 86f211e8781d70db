"""Launch template handler."""

from typing import Any, Optional

from resilient_provisioning.domain.errors import OperationError
from resilient_provisioning.providers.aws.infrastructure.handlers.base_handler import (
    ResourceHandler,
)
from resilient_provisioning.providers.aws.resource_states import LAUNCH_TEMPLATE


class LaunchTemplateHandler(ResourceHandler):
    """
    Creates and deletes launch templates.

    Creating a template whose name is taken adopts the existing template
    instead of failing.
    """

    service = "ec2"
    vocabulary = LAUNCH_TEMPLATE

    def create(
        self, name: str, template_data: dict[str, Any], timeout: Optional[float] = None
    ) -> Any:
        def adopt(error: OperationError) -> str:
            return self.find_id_by_name(name)

        return self.create_and_wait(
            "CreateLaunchTemplate",
            {"LaunchTemplateName": name, "LaunchTemplateData": template_data},
            "LaunchTemplate.LaunchTemplateId",
            timeout=timeout,
            on_exists=adopt,
        )

    def find_id_by_name(self, name: str) -> str:
        response = self.call("DescribeLaunchTemplates", {"LaunchTemplateNames": [name]})
        templates = response.get("LaunchTemplates") or []
        if not templates:
            raise OperationError(f"Launch template {name} reported as existing but not found")
        return templates[0]["LaunchTemplateId"]

    def delete(self, template_id: str, timeout: Optional[float] = None) -> None:
        self.delete_and_wait(
            template_id,
            "DeleteLaunchTemplate",
            {"LaunchTemplateId": template_id},
            timeout=timeout,
        )
