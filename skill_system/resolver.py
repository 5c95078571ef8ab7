"""
Maps raw prerequisite strings onto canonical trick ids.

Prerequisite fields are free text typed by contributors. A reference may hold
another trick's id, its name with different casing or spacing, or a small
misspelling of the name. Every lookup returns a tagged ResolvedReference so
callers can tell how (and whether) a match was made.
"""

import logging
from typing import Dict, Iterable, Optional

import Levenshtein

from . import config
from .models import ResolutionMethod, ResolvedReference, Trick

logger = logging.getLogger(__name__)


def normalize_name(value: str) -> str:
    """Lowercases, collapses internal whitespace to single spaces and trims."""
    return " ".join(value.lower().split())


class PrerequisiteResolver:
    """
    Resolves references against a fixed candidate set.
    The name index is built once, in candidate order.
    """

    def __init__(
        self,
        candidates: Iterable[Trick],
        max_distance: int = None,
        max_ratio: float = None,
    ):
        self.max_distance = config.FUZZY_MAX_DISTANCE if max_distance is None else max_distance
        self.max_ratio = config.FUZZY_MAX_RATIO if max_ratio is None else max_ratio

        self._ids = set()
        # normalized name -> trick id; on duplicate names the first trick wins
        self._name_index: Dict[str, str] = {}
        for trick in candidates:
            self._ids.add(trick.trick_id)
            normalized = normalize_name(trick.name)
            if normalized not in self._name_index:
                self._name_index[normalized] = trick.trick_id
            elif self._name_index[normalized] != trick.trick_id:
                logger.debug(
                    "Duplicate trick name '%s': keeping %s, ignoring %s",
                    normalized, self._name_index[normalized], trick.trick_id,
                )

    def resolve(self, raw: str) -> ResolvedReference:
        normalized = normalize_name(raw)
        if not normalized:
            # Never fuzzy matched, but still reports how far the nearest name is
            _, distance = self._closest_name(normalized)
            return ResolvedReference(raw, None, ResolutionMethod.UNRESOLVED, distance)

        # 1. Exact (normalized) name
        target_id = self._name_index.get(normalized)
        if target_id is not None:
            return ResolvedReference(raw, target_id, ResolutionMethod.EXACT)

        # 2. The raw text is an id, verbatim apart from surrounding whitespace
        trimmed = raw.strip()
        if trimmed in self._ids:
            logger.debug("Matched prerequisite as direct id: '%s'", trimmed)
            return ResolvedReference(raw, trimmed, ResolutionMethod.DIRECT_ID)

        # 3. Closest name by edit distance
        best_name, best_distance = self._closest_name(normalized)
        if best_name is None:
            logger.warning("Prerequisite '%s' not found (no candidates)", raw)
            return ResolvedReference(raw, None, ResolutionMethod.UNRESOLVED)

        if self._accepts(best_distance, normalized):
            logger.info(
                "Fuzzy matched '%s' to '%s' with distance %d", raw, best_name, best_distance
            )
            return ResolvedReference(
                raw, self._name_index[best_name], ResolutionMethod.FUZZY, best_distance
            )

        logger.warning(
            "Prerequisite '%s' not found (closest '%s', distance %d)", raw, best_name, best_distance
        )
        return ResolvedReference(raw, None, ResolutionMethod.UNRESOLVED, best_distance)

    def _closest_name(self, normalized: str):
        # Ties keep the earliest candidate: only a strictly smaller distance replaces it.
        best_name: Optional[str] = None
        best_distance = None
        for name in self._name_index:
            distance = Levenshtein.distance(name, normalized)
            if best_distance is None or distance < best_distance:
                best_name, best_distance = name, distance
                if distance == 0:
                    break
        return best_name, best_distance

    def _accepts(self, distance: int, normalized: str) -> bool:
        return (
            distance <= self.max_distance
            or distance / (len(normalized) + 1) < self.max_ratio
        )


def resolve(raw: str, candidates: Iterable[Trick]) -> ResolvedReference:
    """One-off resolution. Build a PrerequisiteResolver when resolving many references."""
    return PrerequisiteResolver(candidates).resolve(raw)

