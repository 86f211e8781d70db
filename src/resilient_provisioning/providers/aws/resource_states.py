"""
State vocabularies of AWS resource types.

A vocabulary tells the generic handler how to describe one resource type
and which values of its state attribute mean "done" or "failed", both
while creating and while deleting.
"""

from dataclasses import dataclass, field
from typing import Any

from resilient_provisioning.domain.resilience import CHECKSET, DELETED, Accessor
from resilient_provisioning.infrastructure.resilience import checkset_accessor, path_accessor


@dataclass(frozen=True)
class ResourceStateVocabulary:
    """
    Describe call, state accessor and state sets of a resource type.

    Attributes:
        resource_type: Human-readable type name used in messages
        describe_action: API action returning the resource
        id_parameter: Request parameter holding the list of identifiers
        result_path: Path to the single resource inside the describe response
        accessor_path: Path to the state attribute inside the resource
        targets: States that complete a create
        fail_states: States that abort a create
        delete_targets: States that complete a delete, besides absence
        delete_fail_states: States that abort a delete
        presence_only: The accessor reports ``CHECKSET`` when the attribute
            is populated instead of returning its value
    """

    resource_type: str
    describe_action: str
    id_parameter: str
    result_path: str
    accessor_path: str
    targets: frozenset = field(default_factory=frozenset)
    fail_states: frozenset = field(default_factory=frozenset)
    delete_targets: frozenset = field(default_factory=frozenset)
    delete_fail_states: frozenset = field(default_factory=frozenset)
    presence_only: bool = False

    def describe_parameters(self, resource_id: str) -> dict[str, Any]:
        return {self.id_parameter: [resource_id]}

    def extract(self, response: Any) -> Any:
        """Pick the resource out of a describe response; ``None`` when absent."""
        return path_accessor(self.result_path)(response)

    def accessor(self) -> Accessor:
        if self.presence_only:
            return checkset_accessor(self.accessor_path)
        return path_accessor(self.accessor_path)

    def deletion_targets(self) -> frozenset:
        return self.delete_targets | {DELETED}


EC2_INSTANCE = ResourceStateVocabulary(
    resource_type="instance",
    describe_action="DescribeInstances",
    id_parameter="InstanceIds",
    result_path="Reservations[0].Instances[0]",
    accessor_path="State.Name",
    targets=frozenset({"running"}),
    fail_states=frozenset({"shutting-down", "terminated"}),
    delete_targets=frozenset({"terminated"}),
)

LAUNCH_TEMPLATE = ResourceStateVocabulary(
    resource_type="launch template",
    describe_action="DescribeLaunchTemplates",
    id_parameter="LaunchTemplateIds",
    result_path="LaunchTemplates[0]",
    accessor_path="LatestVersionNumber",
    targets=frozenset({CHECKSET}),
    presence_only=True,
)
