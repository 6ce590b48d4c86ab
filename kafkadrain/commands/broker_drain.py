"""
``broker_drain``: move every replica off one broker.

For each partition with a replica on the source broker, the replica is given
to a destination broker that does not already hold that partition, keeping
the other replicas in place to minimise data movement. Among the eligible
destinations the one holding the fewest partitions of the topic wins, so the
topic stays evenly spread.
"""

import argparse
import sys
from typing import List, Optional

from kazoo.exceptions import KazooException

from kafkadrain.cluster.metadata import ClusterSnapshot, SnapshotError
from kafkadrain.cluster.zookeeper import ClusterUnavailableError, ZookeeperClient
from kafkadrain.commands.base import Command
from kafkadrain.reassignment import (
    DrainPlanner,
    DrainValidationError,
    PlanExecutor,
    ReassignmentInProgressError,
    ReplicaCountMismatchError,
    UsageError,
)
from kafkadrain.utils.config import Config
from kafkadrain.utils.logging import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERNAL_ERROR = 2


def parse_broker_list(value: Optional[str]) -> Optional[List[int]]:
    """
    Parse a comma-separated list of broker IDs.
    
    Args:
        value: e.g. "4,5,6" (None or empty means not given)
    
    Returns:
        Broker IDs in the given order, or None
    
    Raises:
        UsageError: If an entry is not an integer
    """
    if not value:
        return None
    
    brokers = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            brokers.append(int(item))
        except ValueError:
            raise UsageError(f"Invalid broker ID: {item!r}") from None
    
    return brokers


class BrokerDrainCommand(Command):
    """Drain topics from a broker."""
    
    name = "broker_drain"
    aliases = ("drain",)
    banner = "kafkadrain broker_drain BROKER"
    description = "Drain topics from a broker"
    
    def __init__(self, planner: Optional[DrainPlanner] = None):
        self.planner = planner or DrainPlanner()
    
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "broker",
            nargs="?",
            type=int,
            help="ID of the broker to drain",
        )
        parser.add_argument(
            "-T", "--topic",
            help="The topic to reassign (empty for all)",
        )
        parser.add_argument(
            "-B", "--brokers",
            help="The destination brokers, comma separated (default: all active brokers)",
        )
        parser.add_argument(
            "--snapshot",
            help="Plan against a JSON/YAML topology snapshot instead of zookeeper",
        )
        parser.add_argument(
            "-o", "--output",
            help="Write the reassignment plan to this file",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Do not submit the plan to the cluster",
        )
        parser.add_argument(
            "-y", "--yes",
            action="store_true",
            help="Do not ask for confirmation",
        )
    
    def run(self, args: argparse.Namespace, config: Config) -> int:
        if args.broker is None:
            self.error("You must specify a broker ID.")
            return EXIT_ERROR
        
        try:
            destinations = parse_broker_list(args.brokers)
            
            if args.snapshot:
                return self._drain(args, ClusterSnapshot.load(args.snapshot), destinations)
            
            zookeeper = ZookeeperClient(
                hosts=config.get("zookeeper.hosts"),
                timeout=float(config.get("zookeeper.timeout", 10.0)),
            )
            with zookeeper:
                topics = [args.topic] if args.topic else None
                snapshot = zookeeper.snapshot(topics)
                return self._drain(
                    args,
                    snapshot,
                    destinations,
                    zookeeper=None if args.dry_run else zookeeper,
                )
        
        except ReplicaCountMismatchError as e:
            print(f"FATAL: internal error: {e}", file=sys.stderr)
            logger.error(
                "Replica count changed during planning",
                topic=e.topic,
                partition=e.partition,
                expected=e.expected,
                actual=e.actual,
            )
            return EXIT_INTERNAL_ERROR
        
        except (DrainValidationError, ReassignmentInProgressError) as e:
            self.error(f"{e}.")
            return EXIT_ERROR
        
        except (SnapshotError, ClusterUnavailableError, KazooException) as e:
            self.error(str(e))
            return EXIT_ERROR
    
    def _drain(
        self,
        args: argparse.Namespace,
        snapshot: ClusterSnapshot,
        destinations: Optional[List[int]],
        zookeeper: Optional[ZookeeperClient] = None,
    ) -> int:
        result = self.planner.plan(
            snapshot,
            args.broker,
            destinations=destinations,
            topic=args.topic,
        )
        
        print(f"Num of topics considered: {result.topics_considered}")
        print(f"Num of partitions in the assignment: {len(result.plan)}")
        
        executor = PlanExecutor(
            zookeeper=zookeeper,
            output=args.output,
            assume_yes=args.yes,
        )
        executor.execute(result.plan, snapshot)
        
        return EXIT_OK
