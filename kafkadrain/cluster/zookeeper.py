"""
ZooKeeper access for cluster topology and reassignment submission.

Reads broker registrations and topic partition assignments from the
standard Kafka znode layout and writes reassignment plans to the admin
path picked up by the controller.
"""

import json
from typing import List, Optional

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException, NodeExistsError, NoNodeError
from kazoo.handlers.threading import KazooTimeoutError

from kafkadrain.cluster.metadata import (
    BrokerMetadata,
    ClusterSnapshot,
    SnapshotError,
    TopicMetadata,
)
from kafkadrain.reassignment.errors import ReassignmentInProgressError
from kafkadrain.utils.logging import get_logger

logger = get_logger(__name__)

BROKER_IDS_PATH = "/brokers/ids"
TOPICS_PATH = "/brokers/topics"
REASSIGN_PARTITIONS_PATH = "/admin/reassign_partitions"


class ClusterUnavailableError(Exception):
    """Raised when ZooKeeper cannot be reached."""
    pass


class ZookeeperClient:
    """
    Thin wrapper around a kazoo client.
    
    Usable as a context manager; the underlying connection is started on
    enter and stopped on exit.
    """
    
    def __init__(
        self,
        hosts: str,
        timeout: float = 10.0,
        client: Optional[KazooClient] = None,
    ):
        """
        Initialize ZooKeeper client.
        
        Args:
            hosts: Connection string in the form host:port,...
            timeout: Connection timeout in seconds
            client: Pre-built kazoo client (mainly for testing)
        """
        self.hosts = hosts
        self.timeout = timeout
        self._zk = client or KazooClient(hosts=hosts, timeout=timeout)
    
    def __enter__(self) -> "ZookeeperClient":
        self.start()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
    
    def start(self) -> None:
        """
        Connect to ZooKeeper.
        
        Raises:
            ClusterUnavailableError: If no connection could be established
        """
        logger.info("Connecting to zookeeper", hosts=self.hosts)
        
        try:
            self._zk.start(timeout=self.timeout)
        except (KazooTimeoutError, KazooException) as e:
            raise ClusterUnavailableError(
                f"Could not connect to zookeeper at {self.hosts}: {e}"
            ) from e
    
    def stop(self) -> None:
        """Disconnect from ZooKeeper."""
        self._zk.stop()
        self._zk.close()
    
    def _get_json(self, path: str) -> dict:
        data, _stat = self._zk.get(path)
        try:
            return json.loads(data.decode("utf-8"))
        except ValueError as e:
            raise SnapshotError(f"Invalid JSON in {path}: {e}") from e
    
    def brokers(self) -> List[BrokerMetadata]:
        """
        Get registered brokers, ordered by broker ID.
        
        Returns:
            Active broker metadata
        
        Raises:
            SnapshotError: If a registration is malformed
        """
        brokers = []
        
        try:
            children = sorted(self._zk.get_children(BROKER_IDS_PATH), key=int)
        except ValueError as e:
            raise SnapshotError(f"Invalid broker ID under {BROKER_IDS_PATH}: {e}") from e
        
        for child in children:
            path = f"{BROKER_IDS_PATH}/{child}"
            try:
                registration = self._get_json(path)
            except NoNodeError:
                # Broker went away between listing and reading
                logger.warning("Broker registration vanished", broker_id=child)
                continue
            
            try:
                broker = BrokerMetadata(
                    broker_id=int(child),
                    host=registration.get("host") or "",
                    port=registration.get("port", -1),
                    rack=registration.get("rack"),
                    active=True,
                )
            except AttributeError as e:
                raise SnapshotError(f"Malformed broker registration {path}: {e}") from e
            
            brokers.append(broker)
        
        return brokers
    
    def topic_names(self) -> List[str]:
        """Get all topic names, sorted."""
        return sorted(self._zk.get_children(TOPICS_PATH))
    
    def topic(self, name: str) -> Optional[TopicMetadata]:
        """
        Get a topic's partition assignment.
        
        Args:
            name: Topic name
        
        Returns:
            Topic metadata or None if the topic does not exist
        
        Raises:
            SnapshotError: If the topic registration is malformed
        """
        path = f"{TOPICS_PATH}/{name}"
        try:
            registration = self._get_json(path)
        except NoNodeError:
            return None
        
        try:
            return TopicMetadata.from_dict(
                {"name": name, "partitions": registration.get("partitions", {})}
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise SnapshotError(f"Malformed topic registration {path}: {e}") from e
    
    def topics(self, names: Optional[List[str]] = None) -> List[TopicMetadata]:
        """
        Get topics with their partitions.
        
        Args:
            names: Topic names to fetch (None fetches all)
        
        Returns:
            Topic metadata for the topics that exist
        """
        if names is None:
            names = self.topic_names()
        
        topics = []
        for name in names:
            topic = self.topic(name)
            if topic is not None:
                topics.append(topic)
        
        return topics
    
    def snapshot(self, topic_names: Optional[List[str]] = None) -> ClusterSnapshot:
        """
        Take a point-in-time snapshot of the cluster.
        
        Args:
            topic_names: Restrict the snapshot to these topics
        
        Returns:
            Cluster snapshot
        """
        snapshot = ClusterSnapshot(
            brokers=self.brokers(),
            topics=self.topics(topic_names),
        )
        
        logger.info(
            "Fetched cluster snapshot",
            brokers=len(snapshot.brokers),
            topics=len(snapshot.topics),
        )
        
        return snapshot
    
    def reassignment_in_progress(self) -> bool:
        """Check whether the controller is still processing a reassignment."""
        return self._zk.exists(REASSIGN_PARTITIONS_PATH) is not None
    
    def submit_reassignment(self, document: dict) -> None:
        """
        Submit a reassignment document to the controller.
        
        Args:
            document: Reassignment plan document
        
        Raises:
            ReassignmentInProgressError: If another reassignment is pending
        """
        payload = json.dumps(document).encode("utf-8")
        
        try:
            self._zk.create(REASSIGN_PARTITIONS_PATH, payload, makepath=True)
        except NodeExistsError as e:
            raise ReassignmentInProgressError() from e
        
        logger.info(
            "Submitted reassignment",
            partitions=len(document.get("partitions", [])),
        )
