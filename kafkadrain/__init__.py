"""
kafkadrain - drain a broker of a Kafka-like cluster.

Moves every replica held by one broker onto a set of surviving brokers,
keeping replication factors, leader placement and per-topic balance.
"""

__version__ = "0.1.0"
