"""
Plan presentation and execution.

Shows the operator what a plan will change, asks for confirmation, then
writes the reassignment document to a file and/or hands it to the cluster.
"""

import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from kafkadrain.cluster.metadata import ClusterSnapshot
from kafkadrain.reassignment.errors import ReassignmentInProgressError
from kafkadrain.reassignment.planner import AssignmentPlan
from kafkadrain.utils.logging import get_logger

logger = get_logger(__name__)


class PlanExecutor:
    """
    Presents and applies an assignment plan.
    
    The plan is applied as-is; cluster changes after the snapshot was taken
    are not detected here.
    """
    
    def __init__(
        self,
        zookeeper=None,
        output: Optional[str] = None,
        assume_yes: bool = False,
        prompt: Optional[Callable[[str], str]] = None,
        stdout: Optional[TextIO] = None,
    ):
        """
        Initialize plan executor.
        
        Args:
            zookeeper: ZookeeperClient used to submit the plan (None to skip)
            output: File to write the reassignment document to
            assume_yes: Skip the confirmation prompt
            prompt: Function used to ask for confirmation (default: input)
            stdout: Stream for operator-facing output
        """
        self.zookeeper = zookeeper
        self.output = output
        self.assume_yes = assume_yes
        self.prompt = prompt or input
        self.stdout = stdout or sys.stdout
    
    def _print(self, message: str = "") -> None:
        print(message, file=self.stdout)
    
    def describe(
        self,
        plan: AssignmentPlan,
        snapshot: Optional[ClusterSnapshot] = None,
    ) -> None:
        """
        Print one line per assignment.
        
        Args:
            plan: Assignment plan
            snapshot: Snapshot the plan was computed from, used to show the
                current replicas next to the new ones
        """
        self._print("This operation executes the following assignments:")
        self._print()
        self._print(f"{'Topic':<40} {'Partition':>9}  Replicas")
        
        for assignment in plan:
            new_replicas = list(assignment.replicas)
            current = None
            
            if snapshot is not None:
                topic = snapshot.get_topic(assignment.topic)
                partition = topic and topic.get_partition(assignment.partition)
                if partition:
                    current = list(partition.replicas)
            
            if current is None:
                change = f"{new_replicas}"
            else:
                change = f"{current} => {new_replicas}"
            
            self._print(f"{assignment.topic:<40} {assignment.partition:>9}  {change}")
        
        self._print()
    
    def confirm(self) -> bool:
        """Ask the operator whether to proceed."""
        if self.assume_yes:
            return True
        
        answer = self.prompt("Proceed (y/n)? ")
        return answer.strip().lower() in ("y", "yes")
    
    def write(self, plan: AssignmentPlan, path: str) -> None:
        """
        Write the reassignment document to a file.
        
        Args:
            plan: Assignment plan
            path: Destination file
        """
        Path(path).write_text(plan.to_json(indent=2) + "\n")
        
        logger.info(
            "Wrote reassignment plan",
            path=path,
            partitions=len(plan),
        )
    
    def submit(self, plan: AssignmentPlan) -> None:
        """
        Submit the plan to the cluster.
        
        Raises:
            ReassignmentInProgressError: If a reassignment is already pending
        """
        self.zookeeper.submit_reassignment(plan.to_dict())
    
    def execute(
        self,
        plan: AssignmentPlan,
        snapshot: Optional[ClusterSnapshot] = None,
    ) -> bool:
        """
        Present, confirm and apply a plan.
        
        When neither an output file nor a ZooKeeper client is configured
        the document is printed instead.
        
        Args:
            plan: Assignment plan
            snapshot: Snapshot the plan was computed from
        
        Returns:
            True if the plan was applied
        
        Raises:
            ReassignmentInProgressError: If the cluster is still processing
                an earlier reassignment; nothing is written or submitted
        """
        if not plan:
            self._print("No partitions need to be reassigned.")
            return False
        
        self.describe(plan, snapshot)
        
        if self.zookeeper is not None and self.zookeeper.reassignment_in_progress():
            raise ReassignmentInProgressError()
        
        if not self.confirm():
            self._print("Aborted, no changes made.")
            logger.info("Reassignment declined by operator")
            return False
        
        if self.output:
            self.write(plan, self.output)
            self._print(f"Reassignment plan written to {self.output}")
        
        if self.zookeeper is not None:
            self.submit(plan)
            self._print("Reassignment submitted to the cluster.")
        
        if not self.output and self.zookeeper is None:
            self._print(plan.to_json(indent=2))
        
        return True
