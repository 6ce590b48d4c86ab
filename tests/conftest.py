"""Shared test fixtures."""

import json

import pytest
from kazoo.exceptions import NodeExistsError, NoNodeError
from kazoo.handlers.threading import KazooTimeoutError


class FakeKazooClient:
    """In-memory stand-in for kazoo.client.KazooClient."""
    
    def __init__(self, nodes=None, fail_start=False):
        self.nodes = dict(nodes or {})
        self.fail_start = fail_start
        self.started = False
        self.closed = False
    
    def start(self, timeout=15):
        if self.fail_start:
            raise KazooTimeoutError("Connection time-out")
        self.started = True
    
    def stop(self):
        self.started = False
    
    def close(self):
        self.closed = True
    
    def exists(self, path):
        return {"path": path} if path in self.nodes else None
    
    def get(self, path):
        if path not in self.nodes:
            raise NoNodeError(path)
        return self.nodes[path], None
    
    def get_children(self, path):
        prefix = path.rstrip("/") + "/"
        children = [
            p[len(prefix):] for p in self.nodes
            if p.startswith(prefix) and "/" not in p[len(prefix):]
        ]
        if not children and path not in self.nodes:
            raise NoNodeError(path)
        return children
    
    def create(self, path, value=b"", makepath=False):
        if path in self.nodes:
            raise NodeExistsError(path)
        self.nodes[path] = value
        return path


def cluster_nodes(brokers, topics):
    """
    Build znodes for a cluster.
    
    Args:
        brokers: Broker IDs
        topics: Map of topic name to {partition: replicas}
    """
    nodes = {"/brokers/ids": b"", "/brokers/topics": b""}
    
    for broker_id in brokers:
        nodes[f"/brokers/ids/{broker_id}"] = json.dumps({
            "host": f"kafka{broker_id}.example.com",
            "port": 9092,
            "version": 4,
        }).encode("utf-8")
    
    for name, partitions in topics.items():
        nodes[f"/brokers/topics/{name}"] = json.dumps({
            "version": 1,
            "partitions": {str(p): r for p, r in partitions.items()},
        }).encode("utf-8")
    
    return nodes


@pytest.fixture
def fake_zk():
    """ZooKeeper holding a five broker cluster with two topics."""
    return FakeKazooClient(cluster_nodes(
        brokers=[3, 1, 2, 5, 4],
        topics={
            "events": {0: [1, 2, 3], 1: [2, 3, 4], 2: [3, 1, 5]},
            "logs": {0: [2, 1], 1: [4, 5]},
        },
    ))


@pytest.fixture
def fake_zk_factory():
    """Factory for custom fake ZooKeeper clients."""
    def factory(brokers=(), topics=None, **kwargs):
        return FakeKazooClient(cluster_nodes(brokers, topics or {}), **kwargs)
    return factory
