"""
Per-topic replica load tracking.

The load map counts, for one topic, how many of its partitions each broker
holds a replica of. Destination brokers are seeded first in the order the
caller supplied them; that insertion order is the tie-break when several
candidates share the lowest count.
"""

from typing import Dict, Iterable, Iterator, List, Tuple

from kafkadrain.cluster.metadata import TopicMetadata


class LoadMap:
    """Ordered mapping of broker ID to replica count."""
    
    def __init__(self):
        self._order: List[int] = []
        self._counts: Dict[int, int] = {}
    
    def __contains__(self, broker_id: int) -> bool:
        return broker_id in self._counts
    
    def __len__(self) -> int:
        return len(self._order)
    
    def __iter__(self) -> Iterator[int]:
        return iter(self._order)
    
    def items(self) -> List[Tuple[int, int]]:
        """(broker_id, count) pairs in insertion order."""
        return [(b, self._counts[b]) for b in self._order]
    
    def get(self, broker_id: int) -> int:
        """Count for a broker; zero if never seen."""
        return self._counts.get(broker_id, 0)
    
    def seed(self, broker_id: int) -> None:
        """Add a broker at zero if not already present."""
        if broker_id not in self._counts:
            self._order.append(broker_id)
            self._counts[broker_id] = 0
    
    def increment(self, broker_id: int, amount: int = 1) -> int:
        """
        Increase a broker's count, adding it at the end if absent.
        
        Returns:
            The new count
        """
        self.seed(broker_id)
        self._counts[broker_id] += amount
        return self._counts[broker_id]
    
    def least_loaded(self, candidates: Iterable[int]) -> int:
        """
        Pick the candidate with the lowest count.
        
        Ties go to the candidate inserted first. Candidates not in the map
        are ignored.
        
        Args:
            candidates: Broker IDs to choose from
        
        Returns:
            Chosen broker ID
        
        Raises:
            ValueError: If no candidate is present in the map
        """
        wanted = set(candidates)
        ranked = [
            (self._counts[b], index, b)
            for index, b in enumerate(self._order)
            if b in wanted
        ]
        if not ranked:
            raise ValueError("No candidate broker is tracked by the load map")
        
        return min(ranked)[2]
    
    def to_dict(self) -> Dict[int, int]:
        return dict(self.items())
    
    def __repr__(self) -> str:
        return f"LoadMap({self.items()!r})"


def build_load_map(topic: TopicMetadata, destinations: Iterable[int]) -> LoadMap:
    """
    Build the load map for one topic.
    
    Args:
        topic: Topic whose partitions are counted
        destinations: Destination broker IDs, in caller order
    
    Returns:
        Load map seeded with every destination
    """
    load = LoadMap()
    
    for broker_id in destinations:
        load.seed(broker_id)
    
    for partition in topic.partitions:
        for broker_id in partition.replicas:
            load.increment(broker_id)
    
    return load
