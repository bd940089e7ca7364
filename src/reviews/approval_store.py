"""
Review Approval Store
=====================

Tracks the operator's approve/hide decision per review id, independently
of review content. Entries survive re-fetches and may be written before
the review ever appears in a batch.

State is process-lifetime only. Every operation holds a single lock, so
concurrent writes to different ids are never lost and writes to the same
id resolve last-write-wins.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class ApprovalValidationError(ValueError):
    """Approval value is not a boolean."""
    pass


class ApprovalStore(ABC):
    """Mapping of review id string -> approved flag."""

    @abstractmethod
    def set_approval(self, review_id: Union[int, str], approved: bool) -> None:
        """Insert or overwrite the flag for a review id."""

    @abstractmethod
    def get_approval(self, review_id: Union[int, str]) -> bool:
        """Stored flag, or False when the id was never set."""

    @abstractmethod
    def snapshot(self) -> Dict[str, bool]:
        """Point-in-time copy of all entries."""


class InMemoryApprovalStore(ApprovalStore):
    """Dict-backed store guarded by a mutex."""

    def __init__(self, initial: Optional[Dict[str, bool]] = None):
        self._lock = threading.Lock()
        self._approvals: Dict[str, bool] = {}
        for key, value in (initial or {}).items():
            self.set_approval(key, value)

    def set_approval(self, review_id: Union[int, str], approved: bool) -> None:
        if not isinstance(approved, bool):
            raise ApprovalValidationError(
                "Invalid approval status. Must be boolean."
            )
        key = str(review_id)
        with self._lock:
            self._approvals[key] = approved
        logger.info(
            f"Review {key} {'approved' if approved else 'hidden'}",
            extra={"review_id": key},
        )

    def get_approval(self, review_id: Union[int, str]) -> bool:
        with self._lock:
            return self._approvals.get(str(review_id), False)

    def snapshot(self) -> Dict[str, bool]:
        with self._lock:
            return dict(self._approvals)

    def __len__(self) -> int:
        with self._lock:
            return len(self._approvals)


# Process-wide default store (lazy-loaded)
_store: Optional[ApprovalStore] = None
_store_lock = threading.Lock()


def get_approval_store() -> ApprovalStore:
    """
    Get the process-wide approval store (singleton pattern).

    Returns:
        Shared InMemoryApprovalStore instance
    """
    global _store
    with _store_lock:
        if _store is None:
            _store = InMemoryApprovalStore()
        return _store
