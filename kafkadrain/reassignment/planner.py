"""
Broker drain planning.

Computes, for every partition with a replica on the drained broker, a new
replica list in which that replica is handed to the least loaded eligible
destination. Leadership moves with the replica: if the drained broker led
the partition, the new broker becomes the leader.

Load is balanced within each topic only; cross-topic balance is not
attempted.
"""

import json
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from kafkadrain.cluster.metadata import ClusterSnapshot, TopicMetadata
from kafkadrain.reassignment.errors import (
    ReplicaCountMismatchError,
    UsageError,
)
from kafkadrain.reassignment.load import build_load_map
from kafkadrain.reassignment.validation import (
    eligible_destinations,
    validate_activeness,
)
from kafkadrain.utils.logging import get_logger

logger = get_logger(__name__)

PLAN_VERSION = 1


@dataclass(frozen=True)
class Assignment:
    """
    New replica placement for one partition.
    
    Attributes:
        topic: Topic name
        partition: Partition number
        replicas: New replica broker IDs; index 0 is the leader
    """
    topic: str
    partition: int
    replicas: tuple
    
    def __post_init__(self):
        object.__setattr__(self, "replicas", tuple(self.replicas))
    
    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "partition": self.partition,
            "replicas": list(self.replicas),
        }


class AssignmentPlan:
    """
    Ordered, append-only collection of assignments.
    
    Order is the order in which partitions were visited.
    """
    
    def __init__(self, assignments: Optional[Iterable[Assignment]] = None):
        self._assignments: List[Assignment] = []
        self._keys: set = set()
        
        for assignment in assignments or []:
            self.append(assignment)
    
    def append(self, assignment: Assignment) -> None:
        """
        Add an assignment.
        
        Raises:
            ValueError: If the partition already has an assignment
        """
        key = (assignment.topic, assignment.partition)
        if key in self._keys:
            raise ValueError(
                f"Duplicate assignment for {assignment.topic}/{assignment.partition}"
            )
        
        self._keys.add(key)
        self._assignments.append(assignment)
    
    def __iter__(self) -> Iterator[Assignment]:
        return iter(self._assignments)
    
    def __len__(self) -> int:
        return len(self._assignments)
    
    def __getitem__(self, index: int) -> Assignment:
        return self._assignments[index]
    
    def __bool__(self) -> bool:
        return bool(self._assignments)
    
    def topics(self) -> List[str]:
        """Distinct topic names, in plan order."""
        return list(dict.fromkeys(a.topic for a in self._assignments))
    
    def to_dict(self) -> dict:
        """Reassignment document accepted by the cluster."""
        return {
            "version": PLAN_VERSION,
            "partitions": [a.to_dict() for a in self._assignments],
        }
    
    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class DrainResult:
    """
    Outcome of a successful planning run.
    
    Attributes:
        source: Drained broker ID
        destinations: Destination broker IDs used, in order
        topics_considered: Number of topics examined
        plan: Computed assignments
    """
    source: int
    destinations: Tuple[int, ...]
    topics_considered: int
    plan: AssignmentPlan


class DrainPlanner:
    """
    Plans the evacuation of one broker.
    
    The planner is a pure computation over a snapshot: it performs no I/O
    and keeps no state between runs.
    """
    
    def resolve_destinations(
        self,
        snapshot: ClusterSnapshot,
        source: int,
        destinations: Optional[Iterable[int]] = None,
    ) -> List[int]:
        """
        Work out the destination brokers, in order.
        
        Args:
            snapshot: Cluster snapshot
            source: Broker being drained
            destinations: Explicit destinations (None means every active
                broker in topology order)
        
        Returns:
            Destination broker IDs without duplicates or the source
        """
        if destinations is None:
            candidates = snapshot.active_broker_ids()
        else:
            candidates = list(destinations)
        
        return [b for b in dict.fromkeys(candidates) if b != source]
    
    def generate_assignments(
        self,
        topics: Iterable[TopicMetadata],
        source: int,
        destinations: List[int],
    ) -> AssignmentPlan:
        """
        Compute new replica lists for every partition on the source broker.
        
        Args:
            topics: Topics to drain, in snapshot order
            source: Broker being drained
            destinations: Destination broker IDs, in caller order
        
        Returns:
            Assignment plan
        
        Raises:
            InsufficientDestinationsError: If a partition has no eligible
                destination
            ReplicaCountMismatchError: If a replica list changed length
        """
        plan = AssignmentPlan()
        
        for topic in topics:
            load = build_load_map(topic, destinations)
            
            for partition in topic.sorted_partitions():
                if not partition.is_replica(source):
                    continue
                
                was_leader = partition.is_leader(source)
                replicas = [r for r in partition.replicas if r != source]
                
                eligible = eligible_destinations(partition, source, destinations)
                assignee = load.least_loaded(eligible)
                
                if was_leader:
                    replicas.insert(0, assignee)
                else:
                    replicas.append(assignee)
                
                if len(replicas) != partition.replication_factor:
                    raise ReplicaCountMismatchError(
                        topic.name,
                        partition.partition,
                        expected=partition.replication_factor,
                        actual=len(replicas),
                    )
                
                load.increment(assignee)
                plan.append(Assignment(topic.name, partition.partition, replicas))
                
                logger.debug(
                    "Reassigned partition",
                    topic=topic.name,
                    partition=partition.partition,
                    old_replicas=list(partition.replicas),
                    new_replicas=replicas,
                    leader_moved=was_leader,
                )
        
        return plan
    
    def plan(
        self,
        snapshot: ClusterSnapshot,
        source: Optional[int],
        destinations: Optional[Iterable[int]] = None,
        topic: Optional[str] = None,
    ) -> DrainResult:
        """
        Plan draining a broker.
        
        Args:
            snapshot: Cluster snapshot
            source: Broker to drain
            destinations: Explicit destination brokers (default: all active
                brokers except the source)
            topic: Restrict the drain to one topic
        
        Returns:
            Drain result with the complete plan
        
        Raises:
            UsageError: If no source is given or the topic is unknown
            InactiveDestinationError: If a destination is not active
            InsufficientDestinationsError: If a partition cannot be moved
            ReplicaCountMismatchError: On an internal invariant violation
        """
        if source is None:
            raise UsageError("You must specify a broker ID")
        
        if topic is None:
            topics = snapshot.select_topics()
        else:
            topics = snapshot.select_topics([topic])
            if not topics:
                raise UsageError(f'Topic "{topic}" does not exist')
        
        targets = self.resolve_destinations(snapshot, source, destinations)
        validate_activeness(targets, snapshot.active_broker_ids())
        
        logger.info(
            "Planning broker drain",
            source=source,
            destinations=targets,
            topics=len(topics),
        )
        
        plan = self.generate_assignments(topics, source, targets)
        
        logger.info(
            "Planned broker drain",
            source=source,
            partitions=len(plan),
        )
        
        return DrainResult(
            source=source,
            destinations=tuple(targets),
            topics_considered=len(topics),
            plan=plan,
        )
