"""
Cluster topology: snapshot model and ZooKeeper access.
"""

from kafkadrain.cluster.metadata import (
    BrokerMetadata,
    ClusterSnapshot,
    PartitionInfo,
    TopicMetadata,
)

__all__ = [
    "BrokerMetadata",
    "ClusterSnapshot",
    "PartitionInfo",
    "TopicMetadata",
]
