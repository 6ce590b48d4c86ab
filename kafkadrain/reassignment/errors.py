"""
Errors raised while planning or executing a broker drain.

Every error aborts the whole operation; no partial plan is ever returned.
"""

from typing import List


class DrainError(Exception):
    """Base class for drain errors."""
    pass


class DrainValidationError(DrainError):
    """The request cannot be satisfied by the current cluster state."""
    pass


class UsageError(DrainValidationError):
    """Raised when the request itself is incomplete or malformed."""
    pass


class InactiveDestinationError(DrainValidationError):
    """Raised when requested destination brokers are not active."""
    
    def __init__(self, broker_ids: List[int]):
        self.broker_ids = list(broker_ids)
        super().__init__(
            f"Broker {self.broker_ids} are not currently active"
        )


class InsufficientDestinationsError(DrainValidationError):
    """Raised when every destination already holds a replica of a partition."""
    
    def __init__(self, topic: str, partition: int):
        self.topic = topic
        self.partition = partition
        super().__init__(
            f'Not enough destination brokers to reassign topic "{topic}"'
        )


class ReplicaCountMismatchError(DrainError):
    """
    Raised when a computed replica list changed length.
    
    Signals a planner bug or corrupted topology data rather than bad input.
    """
    
    def __init__(self, topic: str, partition: int, expected: int, actual: int):
        self.topic = topic
        self.partition = partition
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Number of replicas changes after reassignment "
            f"topic: {topic}, partition: {partition} "
            f"(expected {expected}, got {actual})"
        )


class ReassignmentInProgressError(DrainError):
    """Raised when the cluster is still processing an earlier reassignment."""
    
    def __init__(self):
        super().__init__(
            "A partition reassignment is already in progress; "
            "wait for it to finish before submitting another"
        )
