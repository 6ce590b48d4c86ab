"""
Broker drain planning and plan execution.
"""

from kafkadrain.reassignment.errors import (
    DrainError,
    DrainValidationError,
    InactiveDestinationError,
    InsufficientDestinationsError,
    ReassignmentInProgressError,
    ReplicaCountMismatchError,
    UsageError,
)
from kafkadrain.reassignment.executor import PlanExecutor
from kafkadrain.reassignment.load import LoadMap, build_load_map
from kafkadrain.reassignment.planner import (
    Assignment,
    AssignmentPlan,
    DrainPlanner,
    DrainResult,
)
from kafkadrain.reassignment.validation import (
    eligible_destinations,
    validate_activeness,
)

__all__ = [
    # Planning
    "DrainPlanner",
    "DrainResult",
    "Assignment",
    "AssignmentPlan",
    "LoadMap",
    "build_load_map",
    "eligible_destinations",
    "validate_activeness",
    # Execution
    "PlanExecutor",
    # Errors
    "DrainError",
    "DrainValidationError",
    "UsageError",
    "InactiveDestinationError",
    "InsufficientDestinationsError",
    "ReplicaCountMismatchError",
    "ReassignmentInProgressError",
]
