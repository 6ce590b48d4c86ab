"""
Destination checks performed before and during planning.
"""

from typing import Iterable, List

from kafkadrain.cluster.metadata import PartitionInfo
from kafkadrain.reassignment.errors import (
    InactiveDestinationError,
    InsufficientDestinationsError,
)


def validate_activeness(destinations: Iterable[int], active_brokers: Iterable[int]) -> None:
    """
    Ensure every requested destination is an active broker.
    
    Args:
        destinations: Requested destination broker IDs
        active_brokers: Currently active broker IDs
    
    Raises:
        InactiveDestinationError: Listing offending IDs in request order
    """
    active = set(active_brokers)
    inactive = [b for b in destinations if b not in active]
    
    if inactive:
        raise InactiveDestinationError(inactive)


def eligible_destinations(
    partition: PartitionInfo,
    source: int,
    destinations: Iterable[int],
) -> List[int]:
    """
    Destinations that may receive the source's replica of a partition.
    
    A destination is eligible unless it already holds one of the replicas
    that stay behind.
    
    Args:
        partition: Partition containing the source broker
        source: Broker being drained
        destinations: Destination broker IDs, in caller order
    
    Returns:
        Eligible broker IDs, in caller order
    
    Raises:
        InsufficientDestinationsError: If no destination is eligible
    """
    remaining = set(partition.replicas) - {source}
    eligible = [b for b in destinations if b not in remaining]
    
    if not eligible:
        raise InsufficientDestinationsError(partition.topic, partition.partition)
    
    return eligible
