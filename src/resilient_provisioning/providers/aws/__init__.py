"""AWS provider: boto3 transport, error codes, state vocabularies and handlers."""

from .error_codes import AWS_CLASSIFICATION, classification_for
from .resource_states import (
    EC2_INSTANCE,
    LAUNCH_TEMPLATE,
    ResourceStateVocabulary,
)

__all__ = [
    "AWS_CLASSIFICATION",
    "EC2_INSTANCE",
    "LAUNCH_TEMPLATE",
    "ResourceStateVocabulary",
    "classification_for",
]
