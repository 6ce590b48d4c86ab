"""
Cluster topology snapshot.

Read-only view of brokers, topics, partitions and replica lists taken at
planning time.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import yaml

from kafkadrain.utils.logging import get_logger

logger = get_logger(__name__)


class SnapshotError(Exception):
    """Raised when cluster topology cannot be read or is malformed."""
    pass


@dataclass
class BrokerMetadata:
    """
    Metadata about a broker in the cluster.
    
    Attributes:
        broker_id: Unique broker identifier
        host: Broker hostname/IP
        port: Broker port
        rack: Optional rack ID
        active: Whether the broker is currently registered as live
    """
    broker_id: int
    host: str = ""
    port: int = 9092
    rack: Optional[str] = None
    active: bool = True
    
    @classmethod
    def from_dict(cls, data: dict) -> "BrokerMetadata":
        """Create from dictionary."""
        return cls(
            broker_id=int(data["broker_id"]),
            host=data.get("host", ""),
            port=data.get("port", 9092),
            rack=data.get("rack"),
            active=data.get("active", True),
        )


@dataclass(frozen=True)
class PartitionInfo:
    """
    A partition and its ordered replica list.
    
    Attributes:
        topic: Topic name
        partition: Partition number
        replicas: Replica broker IDs; index 0 is the leader
    """
    topic: str
    partition: int
    replicas: tuple
    
    def __post_init__(self):
        if not self.replicas:
            raise ValueError(
                f"Partition {self.topic}/{self.partition} has no replicas"
            )
        object.__setattr__(self, "replicas", tuple(self.replicas))
    
    @property
    def leader(self) -> int:
        """Leader broker ID (first replica)."""
        return self.replicas[0]
    
    @property
    def replication_factor(self) -> int:
        return len(self.replicas)
    
    def is_replica(self, broker_id: int) -> bool:
        """Check if broker is a replica for this partition."""
        return broker_id in self.replicas
    
    def is_leader(self, broker_id: int) -> bool:
        """Check if broker is leader for this partition."""
        return self.leader == broker_id


@dataclass
class TopicMetadata:
    """
    A topic and its partitions.
    
    Attributes:
        name: Topic name
        partitions: Partition information
    """
    name: str
    partitions: List[PartitionInfo] = field(default_factory=list)
    
    def sorted_partitions(self) -> List[PartitionInfo]:
        """Partitions in ascending partition number."""
        return sorted(self.partitions, key=lambda p: p.partition)
    
    def get_partition(self, partition: int) -> Optional[PartitionInfo]:
        """
        Get partition info by number.
        
        Args:
            partition: Partition number
        
        Returns:
            Partition info or None
        """
        for p in self.partitions:
            if p.partition == partition:
                return p
        return None
    
    @classmethod
    def from_dict(cls, data: dict) -> "TopicMetadata":
        """
        Create from dictionary.
        
        Accepts the ZooKeeper topic registration layout, where
        ``partitions`` maps partition number to replica list.
        """
        name = data["name"]
        partitions = [
            PartitionInfo(
                topic=name,
                partition=int(partition),
                replicas=tuple(int(r) for r in replicas),
            )
            for partition, replicas in data.get("partitions", {}).items()
        ]
        return cls(name=name, partitions=partitions)


@dataclass
class ClusterSnapshot:
    """
    Point-in-time view of the cluster.
    
    Brokers keep the order in which the topology source returned them and
    topics keep snapshot order; both orders are observable by the planner.
    
    Attributes:
        brokers: Known brokers
        topics: Topics with their partitions
    """
    brokers: List[BrokerMetadata] = field(default_factory=list)
    topics: List[TopicMetadata] = field(default_factory=list)
    
    def active_broker_ids(self) -> List[int]:
        """IDs of active brokers in topology order."""
        return [b.broker_id for b in self.brokers if b.active]
    
    def get_topic(self, name: str) -> Optional[TopicMetadata]:
        """
        Get topic by name.
        
        Args:
            name: Topic name
        
        Returns:
            Topic metadata or None
        """
        for topic in self.topics:
            if topic.name == name:
                return topic
        return None
    
    def select_topics(self, names: Optional[Iterable[str]] = None) -> List[TopicMetadata]:
        """
        Topics to consider, in snapshot order.
        
        Args:
            names: Topic names to keep (None keeps all)
        
        Returns:
            Matching topics; unknown names are ignored
        """
        if names is None:
            return list(self.topics)
        
        wanted = set(names)
        return [t for t in self.topics if t.name in wanted]
    
    @classmethod
    def from_dict(cls, data: dict) -> "ClusterSnapshot":
        """Create from dictionary."""
        return cls(
            brokers=[BrokerMetadata.from_dict(b) for b in data.get("brokers", [])],
            topics=[TopicMetadata.from_dict(t) for t in data.get("topics", [])],
        )
    
    @classmethod
    def load(cls, path: str) -> "ClusterSnapshot":
        """
        Load a snapshot from a JSON or YAML file.
        
        Args:
            path: Snapshot file path (.json, .yaml or .yml)
        
        Returns:
            Cluster snapshot
        
        Raises:
            SnapshotError: If the file is unreadable or malformed
        """
        file_path = Path(path)
        
        try:
            with open(file_path, "r") as f:
                if file_path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
            snapshot = cls.from_dict(data or {})
        except (OSError, ValueError, KeyError, TypeError, AttributeError, yaml.YAMLError) as e:
            raise SnapshotError(f"Could not load snapshot {path}: {e}") from e
        
        logger.debug(
            "Loaded cluster snapshot",
            path=str(file_path),
            brokers=len(snapshot.brokers),
            topics=len(snapshot.topics),
        )
        
        return snapshot
