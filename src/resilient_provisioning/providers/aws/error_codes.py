"""AWS error codes and the classification tables built from them."""

from typing import Optional

from resilient_provisioning.config.defaults import GENERIC_CLASSIFICATION
from resilient_provisioning.config.schemas import ErrorClassificationConfig

# Codes meaning the addressed resource does not exist
AWS_NOT_FOUND_CODES = (
    "InvalidInstanceID.NotFound",
    "InvalidLaunchTemplateId.NotFound",
    "InvalidLaunchTemplateName.NotFoundException",
    "InvalidLaunchTemplateId.VersionNotFound",
    "InvalidFleetId.NotFound",
    "InvalidSpotFleetRequestId.NotFound",
    "InvalidGroup.NotFound",
    "InvalidSubnetID.NotFound",
    "InvalidVpcID.NotFound",
    "InvalidVolume.NotFound",
    "InvalidKeyPair.NotFound",
    "InvalidAMIID.NotFound",
    "ResourceNotFound",
    "ResourceNotFoundException",
    "NotFoundException",
)

# Throttling and service-side unavailability, always worth retrying
AWS_THROTTLING_CODES = (
    "Throttling",
    "ThrottlingException",
    "ThrottledException",
    "RequestThrottled",
    "RequestThrottledException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "ProvisionedThroughputExceededException",
    "TransactionInProgressException",
    "SlowDown",
    "EC2ThrottledException",
    "PriorRequestNotComplete",
)

AWS_UNAVAILABLE_CODES = (
    "ServiceUnavailable",
    "ServiceUnavailableException",
    "Unavailable",
    "InternalError",
    "InternalFailure",
    "RequestTimeout",
    "RequestTimeoutException",
)

AWS_ALREADY_EXISTS_PATTERNS = (
    "alreadyexists",
    "invalidlaunchtemplatename.alreadyexistsexception",
    "entityalreadyexists",
)

AWS_CLASSIFICATION = ErrorClassificationConfig(
    not_found_codes=AWS_NOT_FOUND_CODES,
    not_found_code_prefixes=("NoSuch",),
    not_found_phrases=("does not exist",),
    already_exists_patterns=AWS_ALREADY_EXISTS_PATTERNS,
    transient_codes=AWS_THROTTLING_CODES + AWS_UNAVAILABLE_CODES,
    transient_code_patterns=(r"Throttl",),
)


def classification_for(
    provider: str, extra: Optional[ErrorClassificationConfig] = None
) -> ErrorClassificationConfig:
    """
    Build the classification tables for an API family.

    Generic tables always apply; provider tables and deployment-specific
    ``extra`` entries are merged on top of them.

    Args:
        provider: ``generic`` or ``aws``
        extra: Additional entries from configuration

    Returns:
        Frozen merged classification tables
    """
    if provider == "generic":
        tables = GENERIC_CLASSIFICATION
    elif provider == "aws":
        tables = GENERIC_CLASSIFICATION.merged_with(AWS_CLASSIFICATION)
    else:
        raise ValueError(f"Unsupported provider for error classification: {provider}")

    if extra is not None:
        tables = tables.merged_with(extra)
    return tables
