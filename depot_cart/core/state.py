"""Reconciliation state machine"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReconcilePhase(str, Enum):
    """Phase of the cart reconciliation pass"""
    IDLE = "idle"
    VALIDATING = "validating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ReconcileState:
    """Current reconciliation phase and the depot it refers to"""
    phase: ReconcilePhase = ReconcilePhase.IDLE
    depot_id: Optional[int] = None

    @property
    def is_validating(self) -> bool:
        return self.phase == ReconcilePhase.VALIDATING

    def suppresses(self, depot_id: int) -> bool:
        """Whether a new pass for depot_id must not be issued"""
        if self.phase == ReconcilePhase.VALIDATING:
            return True
        return self.phase == ReconcilePhase.DONE and self.depot_id == depot_id

    def start(self, depot_id: int) -> "ReconcileState":
        return ReconcileState(ReconcilePhase.VALIDATING, depot_id)

    def complete(self) -> "ReconcileState":
        return ReconcileState(ReconcilePhase.DONE, self.depot_id)

    def fail(self) -> "ReconcileState":
        return ReconcileState(ReconcilePhase.FAILED, self.depot_id)

    def discard(self) -> "ReconcileState":
        """Drop the result of a pass whose depot is no longer current"""
        return ReconcileState(ReconcilePhase.IDLE, None)
