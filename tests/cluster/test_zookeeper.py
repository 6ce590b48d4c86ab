"""Tests for the ZooKeeper client."""

import json

import pytest

from kafkadrain.cluster.metadata import SnapshotError
from kafkadrain.cluster.zookeeper import (
    REASSIGN_PARTITIONS_PATH,
    ClusterUnavailableError,
    ZookeeperClient,
)
from kafkadrain.reassignment.errors import ReassignmentInProgressError


class TestZookeeperClient:
    """Test ZookeeperClient."""
    
    @pytest.fixture
    def client(self, fake_zk):
        """Create client backed by the fake."""
        return ZookeeperClient("zk1:2181", client=fake_zk)
    
    def test_context_manager(self, client, fake_zk):
        """Test connection lifecycle."""
        with client:
            assert fake_zk.started
        
        assert not fake_zk.started
        assert fake_zk.closed
    
    def test_start_failure(self, fake_zk_factory):
        """Test unreachable zookeeper."""
        client = ZookeeperClient("zk1:2181", client=fake_zk_factory(fail_start=True))
        
        with pytest.raises(ClusterUnavailableError) as exc_info:
            client.start()
        
        assert "zk1:2181" in str(exc_info.value)
    
    def test_brokers_sorted_by_id(self, client):
        """Test brokers are read from registrations."""
        brokers = client.brokers()
        
        assert [b.broker_id for b in brokers] == [1, 2, 3, 4, 5]
        assert brokers[0].host == "kafka1.example.com"
        assert brokers[0].port == 9092
        assert all(b.active for b in brokers)
    
    def test_topic(self, client):
        """Test reading a topic registration."""
        topic = client.topic("events")
        
        assert topic.name == "events"
        assert topic.get_partition(2).replicas == (3, 1, 5)
        assert [p.partition for p in topic.sorted_partitions()] == [0, 1, 2]
    
    def test_missing_topic(self, client):
        """Test missing topic returns None."""
        assert client.topic("missing") is None
        assert client.topics(["missing", "logs"])[0].name == "logs"
    
    def test_invalid_broker_registration(self, client, fake_zk):
        """Test a registration that is not JSON."""
        fake_zk.nodes["/brokers/ids/3"] = b"not json"
        
        with pytest.raises(SnapshotError) as exc_info:
            client.brokers()
        
        assert "/brokers/ids/3" in str(exc_info.value)
    
    def test_broker_registration_not_a_mapping(self, client, fake_zk):
        """Test a registration holding a list."""
        fake_zk.nodes["/brokers/ids/3"] = b"[1, 2]"
        
        with pytest.raises(SnapshotError):
            client.brokers()
    
    def test_non_numeric_broker_id(self, client, fake_zk):
        """Test a broker registered under a non-numeric name."""
        fake_zk.nodes["/brokers/ids/kafka1"] = b"{}"
        
        with pytest.raises(SnapshotError):
            client.brokers()
    
    def test_partition_without_replicas(self, fake_zk_factory):
        """Test an empty replica list is reported as malformed topology."""
        client = ZookeeperClient(
            "zk1:2181",
            client=fake_zk_factory(brokers=[1, 2], topics={"t": {0: [1, 2], 1: []}}),
        )
        
        with pytest.raises(SnapshotError) as exc_info:
            client.topic("t")
        
        assert "/brokers/topics/t" in str(exc_info.value)
    
    def test_invalid_topic_registration(self, client, fake_zk):
        """Test a topic registration that is not JSON."""
        fake_zk.nodes["/brokers/topics/logs"] = b"\x00garbage"
        
        with pytest.raises(SnapshotError):
            client.snapshot()
    
    def test_snapshot(self, client):
        """Test full snapshot."""
        snapshot = client.snapshot()
        
        assert snapshot.active_broker_ids() == [1, 2, 3, 4, 5]
        assert [t.name for t in snapshot.topics] == ["events", "logs"]
    
    def test_snapshot_single_topic(self, client):
        """Test snapshot restricted to one topic."""
        snapshot = client.snapshot(["logs"])
        
        assert [t.name for t in snapshot.topics] == ["logs"]
    
    def test_submit_reassignment(self, client, fake_zk):
        """Test plan is written to the admin path."""
        document = {"version": 1, "partitions": [{"topic": "t", "partition": 0, "replicas": [2]}]}
        
        assert not client.reassignment_in_progress()
        
        client.submit_reassignment(document)
        
        assert json.loads(fake_zk.nodes[REASSIGN_PARTITIONS_PATH]) == document
        assert client.reassignment_in_progress()
    
    def test_submit_while_in_progress(self, client, fake_zk):
        """Test pending reassignment blocks submission."""
        fake_zk.nodes[REASSIGN_PARTITIONS_PATH] = b"{}"
        
        with pytest.raises(ReassignmentInProgressError):
            client.submit_reassignment({"version": 1, "partitions": []})
