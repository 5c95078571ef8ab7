from typing import FrozenSet, Iterable, Optional


class CompletionTracker:
    """
    In-memory set of trick ids a user has completed.

    The set only changes through toggle(). Persisting a change is the
    caller's job; if persisting fails, the caller undoes the change by
    calling toggle() again with the same id.
    """

    def __init__(self, completed_ids: Optional[Iterable[str]] = None):
        self._completed = set(completed_ids or [])
        # Bumped on every toggle so observers can detect changes cheaply
        self.version = 0

    def toggle(self, trick_id: str) -> bool:
        """Flips membership of `trick_id` and returns the new membership."""
        if trick_id in self._completed:
            self._completed.discard(trick_id)
            completed = False
        else:
            self._completed.add(trick_id)
            completed = True
        self.version += 1
        return completed

    def is_node_completed(self, trick_id: str) -> bool:
        return trick_id in self._completed

    def is_edge_completed(self, source_id: str, target_id: str) -> bool:
        return self.is_node_completed(source_id) and self.is_node_completed(target_id)

    @property
    def completed_ids(self) -> FrozenSet[str]:
        return frozenset(self._completed)

    def __contains__(self, trick_id):
        return trick_id in self._completed

    def __len__(self):
        return len(self._completed)
