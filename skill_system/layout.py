"""
Deterministic layered layout for skill tree graphs.

Three steps, no force simulation:

1. Rank assignment by longest path from the sources. A depth-first pass marks
   the edges that close a cycle (back-edges); those are left out of ranking
   only, so ranking always terminates.
2. Ordering inside each rank, seeded by input order and refined with a few
   barycenter sweeps to cut down on edge crossings.
3. Coordinates: rank along the primary axis, order along the secondary axis.

The engine only sees ids and (source, target) pairs.
"""

import logging
from collections import deque
from enum import Enum
from typing import Dict, Hashable, Iterable, List, Optional, Set, Tuple

from . import config
from .exceptions import InvalidGraphError

logger = logging.getLogger(__name__)

Position = Tuple[float, float]
EdgeKey = Tuple[str, str]

_WHITE, _GRAY, _BLACK = 0, 1, 2


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"  # ranks run left to right
    VERTICAL = "vertical"  # ranks run top to bottom


def default_node_size() -> Tuple[float, float]:
    return (config.NODE_WIDTH, config.NODE_HEIGHT)


def separations(orientation: Orientation, node_size: Tuple[float, float]) -> Tuple[float, float]:
    """
    Returns (rank_separation, node_separation): the distance between
    consecutive ranks and between neighbours in one rank.
    """
    width, height = node_size
    if orientation == Orientation.HORIZONTAL:
        return width + config.RANK_GAP, height + config.NODE_GAP
    return height + config.RANK_GAP, width + config.NODE_GAP


class LayoutResult:
    """Coordinates plus the intermediate rank/order data they were derived from."""

    def __init__(self):
        self.positions: Dict[str, Position] = {}
        self.ranks: Dict[str, int] = {}
        self.orders: Dict[str, int] = {}
        self.layers: List[List[str]] = []
        self.ignored_edges: List[EdgeKey] = []

    @property
    def rank_count(self) -> int:
        return len(self.layers)


def compute_layout(
    node_ids: Iterable[str],
    edges: Iterable[EdgeKey],
    orientation: Orientation = Orientation.HORIZONTAL,
    node_size: Optional[Tuple[float, float]] = None,
    passes: Optional[int] = None,
) -> LayoutResult:
    node_ids = list(dict.fromkeys(node_ids))
    node_set = set(node_ids)
    orientation = Orientation(orientation)
    if node_size is None:
        node_size = default_node_size()
    if passes is None:
        passes = config.CROSSING_PASSES

    # Adjacency in edge order, without repeated pairs
    successors: Dict[str, List[str]] = {n: [] for n in node_ids}
    edge_keys: List[EdgeKey] = []
    seen: Set[EdgeKey] = set()
    for source_id, target_id in edges:
        if source_id not in node_set or target_id not in node_set:
            raise InvalidGraphError(source_id, target_id)
        if (source_id, target_id) in seen:
            continue
        seen.add((source_id, target_id))
        edge_keys.append((source_id, target_id))
        successors[source_id].append(target_id)

    result = LayoutResult()
    if not node_ids:
        return result

    back_edges = _find_back_edges(node_ids, successors, edge_keys)
    dag_edges = [key for key in edge_keys if key not in back_edges]
    for source_id, target_id in edge_keys:
        if (source_id, target_id) in back_edges:
            logger.warning(
                "Cycle in prerequisites: ignoring '%s' -> '%s' for ranking", source_id, target_id
            )
            result.ignored_edges.append((source_id, target_id))

    result.ranks = _assign_ranks(node_ids, dag_edges)

    layers: List[List[str]] = [[] for _ in range(max(result.ranks.values()) + 1)]
    for node_id in node_ids:
        layers[result.ranks[node_id]].append(node_id)

    if passes > 0 and len(node_ids) <= config.CROSSING_NODE_LIMIT:
        _reduce_crossings(layers, dag_edges, passes)
    elif passes > 0:
        logger.info(
            "Skipping crossing reduction for %d nodes (limit %d)",
            len(node_ids), config.CROSSING_NODE_LIMIT,
        )
    result.layers = layers

    rank_separation, node_separation = separations(orientation, node_size)
    for rank, layer in enumerate(layers):
        for order, node_id in enumerate(layer):
            result.orders[node_id] = order
            primary = rank * rank_separation
            secondary = order * node_separation
            if orientation == Orientation.HORIZONTAL:
                result.positions[node_id] = (primary, secondary)
            else:
                result.positions[node_id] = (secondary, primary)

    logger.debug(
        "Laid out %d nodes in %d ranks (%s)", len(node_ids), len(layers), orientation.value
    )
    return result


def layout(
    node_ids: Iterable[str],
    edges: Iterable[EdgeKey],
    orientation: Orientation = Orientation.HORIZONTAL,
    node_size: Optional[Tuple[float, float]] = None,
) -> Dict[str, Position]:
    """Returns the top-left corner of every node, keyed by node id."""
    return compute_layout(node_ids, edges, orientation, node_size).positions


def _find_back_edges(
    node_ids: List[str], successors: Dict[str, List[str]], edge_keys: List[EdgeKey]
) -> Set[EdgeKey]:
    # Traversal starts at the sources in input order, then at whatever a
    # source cannot reach (nodes that sit only on cycles).
    has_incoming = {target_id for _, target_id in edge_keys}
    starts = [n for n in node_ids if n not in has_incoming] + node_ids

    state: Dict[Hashable, int] = {}
    back_edges: Set[EdgeKey] = set()
    for start in starts:
        if state.get(start, _WHITE) != _WHITE:
            continue
        state[start] = _GRAY
        stack = [(start, iter(successors[start]))]
        while stack:
            node_id, children = stack[-1]
            for child in children:
                child_state = state.get(child, _WHITE)
                if child_state == _WHITE:
                    state[child] = _GRAY
                    stack.append((child, iter(successors[child])))
                    break
                if child_state == _GRAY:
                    back_edges.add((node_id, child))
            else:
                state[node_id] = _BLACK
                stack.pop()
    return back_edges


def _assign_ranks(node_ids: List[str], dag_edges: List[EdgeKey]) -> Dict[str, int]:
    """Longest-path layering over an acyclic edge set."""
    ranks = {n: 0 for n in node_ids}
    indegree = {n: 0 for n in node_ids}
    forward: Dict[str, List[str]] = {n: [] for n in node_ids}
    for source_id, target_id in dag_edges:
        forward[source_id].append(target_id)
        indegree[target_id] += 1

    queue = deque(n for n in node_ids if indegree[n] == 0)
    while queue:
        node_id = queue.popleft()
        for target_id in forward[node_id]:
            ranks[target_id] = max(ranks[target_id], ranks[node_id] + 1)
            indegree[target_id] -= 1
            if indegree[target_id] == 0:
                queue.append(target_id)
    return ranks


def _reduce_crossings(layers: List[List[str]], dag_edges: List[EdgeKey], passes: int) -> None:
    """Alternating barycenter sweeps, downward first. Reorders layers in place."""
    predecessors: Dict[str, List[str]] = {}
    successors: Dict[str, List[str]] = {}
    for source_id, target_id in dag_edges:
        predecessors.setdefault(target_id, []).append(source_id)
        successors.setdefault(source_id, []).append(target_id)

    last = len(layers) - 1
    for sweep in range(passes):
        if sweep % 2 == 0:
            for rank in range(1, last + 1):
                layers[rank] = _barycenter_order(layers[rank], layers[rank - 1], predecessors)
        else:
            for rank in range(last - 1, -1, -1):
                layers[rank] = _barycenter_order(layers[rank], layers[rank + 1], successors)


def _barycenter_order(
    layer: List[str], fixed: List[str], neighbours: Dict[str, List[str]]
) -> List[str]:
    fixed_position = {node_id: index for index, node_id in enumerate(fixed)}

    def key(item):
        index, node_id = item
        placed = [fixed_position[n] for n in neighbours.get(node_id, []) if n in fixed_position]
        # Nodes with no neighbour in the fixed rank hold their current slot
        barycenter = sum(placed) / len(placed) if placed else float(index)
        return (barycenter, index)

    return [node_id for _, node_id in sorted(enumerate(layer), key=key)]
