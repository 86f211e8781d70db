"""Provider-independent classification tables."""

from resilient_provisioning.config.schemas import ErrorClassificationConfig

NOT_FOUND = "NotFound"
RESOURCE_NOT_FOUND = "ResourceNotfound"
INSTANCE_NOT_FOUND = "Instance.Notfound"
FORBIDDEN_INSTANCE_NOT_FOUND = "Forbidden.InstanceNotFound"
SERVICE_UNAVAILABLE = "ServiceUnavailable"
THROTTLING = "Throttling"
THROTTLING_USER = "Throttling.User"
REJECTED_THROTTLING = "Rejected.Throttling"

GENERIC_CLASSIFICATION = ErrorClassificationConfig(
    not_found_codes=(NOT_FOUND, RESOURCE_NOT_FOUND, INSTANCE_NOT_FOUND),
    forbidden_not_found_codes=(FORBIDDEN_INSTANCE_NOT_FOUND,),
    not_found_code_prefixes=("NoSuch",),
    not_found_phrases=("instance is not found", "no row found"),
    already_exists_patterns=(
        "already exist",
        "alreadyexist",
        "duplicate",
        "conflict",
        "exists",
    ),
    transient_codes=(SERVICE_UNAVAILABLE, THROTTLING, THROTTLING_USER, REJECTED_THROTTLING),
    transient_code_patterns=(r"Throttling",),
    transient_message_patterns=(
        r'^Post "?https://',
        r"Client\.Timeout",
        r"(?i)connection reset",
        r"(?i)connection (refused|aborted|closed)",
        r"(?i)timed out",
        r"(?i)read timeout",
        r"(?i)could not connect to the endpoint",
        r"(?i)no such host",
    ),
    non_transient_message_patterns=("code: 500, 您已开通过",),
    server_error_message_pattern=r"^code: 5\d{2}",
    retry_on_server_error=True,
)
