"""AWS resource handlers."""

from .base_handler import OnExists, ResourceHandler
from .ec2_instance_handler import EC2InstanceHandler
from .launch_template_handler import LaunchTemplateHandler

__all__ = ["EC2InstanceHandler", "LaunchTemplateHandler", "OnExists", "ResourceHandler"]
