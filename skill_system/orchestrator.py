"""
Composes resolver, builder, layout and completion tracking into the
render-ready structure a graph-drawing surface consumes.

Structural work (resolve + build + layout) is cached against the trick
collection object itself together with category, orientation and node size. A
completion toggle only re-decorates the cached structure.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from . import config
from .builder import build_graph
from .completion import CompletionTracker
from .exceptions import UnknownTrickError
from .layout import LayoutResult, Orientation, compute_layout, default_node_size
from .models import Diagnostic, SkillGraph, Trick

logger = logging.getLogger(__name__)

# Edge styling hints for the drawing surface
EDGE_PATH_TYPE = "smoothstep"
EDGE_STROKE_WIDTH = 2
COMPLETED_STROKE = "#22c55e"
PENDING_STROKE = "#9ca3af"
PENDING_DASHARRAY = "5,5"
DEFAULT_CATEGORY_COLOR = "#3b82f6"


def orientation_for_viewport(width: float) -> Orientation:
    """Narrow viewports get a top-to-bottom tree, everything else left-to-right."""
    if width < config.MOBILE_BREAKPOINT:
        return Orientation.VERTICAL
    return Orientation.HORIZONTAL


class CompletionChange:
    """
    The result of a toggle, telling the caller which write to make against
    the external completion store.
    """

    UPSERT = "upsert"
    DELETE = "delete"

    def __init__(self, trick_id: str, completed: bool):
        self.trick_id = trick_id
        self.completed = completed

    @property
    def action(self) -> str:
        return self.UPSERT if self.completed else self.DELETE

    def __repr__(self):
        return f"CompletionChange(trick_id='{self.trick_id}', action='{self.action}')"


class RenderNode:
    def __init__(self, node_id, label, position, completed, rank, order, difficulty=None,
                 category_color=DEFAULT_CATEGORY_COLOR):
        self.id = node_id
        self.label = label
        self.position = {"x": position[0], "y": position[1]}
        self.completed = completed
        self.rank = rank
        self.order = order
        self.difficulty = difficulty
        self.category_color = category_color


class RenderEdge:
    def __init__(self, source, target, completed):
        self.id = f"{source}-{target}"
        self.source = source
        self.target = target
        self.completed = completed
        self.type = EDGE_PATH_TYPE
        self.animated = completed
        self.style = {
            "stroke": COMPLETED_STROKE if completed else PENDING_STROKE,
            "stroke_width": EDGE_STROKE_WIDTH,
            "stroke_dasharray": "0" if completed else PENDING_DASHARRAY,
        }


class Summary:
    def __init__(self, completed_count: int, total_count: int, unresolved_count: int):
        self.completed_count = completed_count
        self.total_count = total_count
        self.unresolved_count = unresolved_count

    @property
    def label(self) -> str:
        return f"{self.completed_count} / {self.total_count}"


class RenderTree:
    def __init__(
        self,
        nodes: List[RenderNode],
        edges: List[RenderEdge],
        summary: Summary,
        diagnostics: List[Diagnostic],
        orientation: Orientation,
    ):
        self.nodes = nodes
        self.edges = edges
        self.summary = summary
        self.diagnostics = diagnostics
        self.orientation = orientation


class SkillTreeOrchestrator:
    """Holds the current inputs of one skill tree view and produces its RenderTree."""

    def __init__(
        self,
        tracker: Optional[CompletionTracker] = None,
        orientation: Orientation = Orientation.HORIZONTAL,
        node_size: Optional[Tuple[float, float]] = None,
        category_color: Optional[str] = None,
    ):
        self.tracker = tracker if tracker is not None else CompletionTracker()
        self._tricks: Sequence[Trick] = []
        self._category_id: Optional[str] = None
        self._orientation = Orientation(orientation)
        self._node_size = tuple(node_size) if node_size else default_node_size()
        self.category_color = category_color or DEFAULT_CATEGORY_COLOR

        self._structure_key = None
        self._structure_source: Optional[Sequence[Trick]] = None
        self._graph: Optional[SkillGraph] = None
        self._layout: Optional[LayoutResult] = None
        self._render_key = None
        self._render_tracker: Optional[CompletionTracker] = None
        self._render: Optional[RenderTree] = None

        # Number of structural rebuilds so far
        self.structure_builds = 0

    # --- Inputs ---

    def set_tricks(self, tricks: Sequence[Trick]):
        """Replaces the trick collection. Pass a new sequence to trigger a rebuild."""
        self._tricks = tricks

    def set_category(self, category_id: Optional[str]):
        self._category_id = category_id

    def set_orientation(self, orientation: Orientation):
        self._orientation = Orientation(orientation)

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    # --- Structure ---

    @property
    def graph(self) -> SkillGraph:
        self._ensure_structure()
        return self._graph

    @property
    def layout(self) -> LayoutResult:
        self._ensure_structure()
        return self._layout

    def _ensure_structure(self):
        key = (self._category_id, self._orientation, self._node_size)
        if self._tricks is self._structure_source and key == self._structure_key:
            return

        tricks = [
            trick for trick in self._tricks
            if self._category_id is None or trick.category_id == self._category_id
        ]
        graph = build_graph(tricks)
        result = compute_layout(
            list(graph.nodes), [edge.key for edge in graph.edges],
            self._orientation, self._node_size,
        )
        for node in graph.nodes.values():
            node.rank = result.ranks[node.id]
            node.order = result.orders[node.id]
            node.position = result.positions[node.id]

        self._graph = graph
        self._layout = result
        self._structure_key = key
        self._structure_source = self._tricks
        self.structure_builds += 1
        logger.info(
            "Rebuilt skill tree: %d tricks, %d edges, %d unresolved prerequisites",
            len(graph.nodes), len(graph.edges), len(graph.diagnostics),
        )

    # --- Output ---

    def render(self) -> RenderTree:
        self._ensure_structure()
        key = (self.structure_builds, self.tracker.version, self.category_color)
        if self.tracker is not self._render_tracker or key != self._render_key:
            self._render = self._decorate()
            self._render_key = key
            self._render_tracker = self.tracker
        return self._render

    def _decorate(self) -> RenderTree:
        graph = self._graph
        nodes = [
            RenderNode(
                node.id, node.label, node.position, node.is_completed(self.tracker),
                node.rank, node.order, node.trick.difficulty, self.category_color,
            )
            for node in graph.nodes.values()
        ]
        edges = [
            RenderEdge(edge.source_id, edge.target_id, edge.is_completed(self.tracker))
            for edge in graph.edges
        ]
        summary = Summary(
            completed_count=sum(1 for node in nodes if node.completed),
            total_count=len(nodes),
            unresolved_count=len(graph.diagnostics),
        )
        return RenderTree(nodes, edges, summary, list(graph.diagnostics), self._orientation)

    # --- Completion ---

    def toggle(self, trick_id: str) -> CompletionChange:
        if trick_id not in self.graph.nodes:
            raise UnknownTrickError(trick_id)
        return CompletionChange(trick_id, self.tracker.toggle(trick_id))

    def revert(self, change: CompletionChange) -> CompletionChange:
        """Compensates a toggle whose persistence failed."""
        return CompletionChange(change.trick_id, self.tracker.toggle(change.trick_id))

    def toggle_and_persist(
        self, trick_id: str, persist: Callable[[CompletionChange], object]
    ) -> CompletionChange:
        """
        Toggles immediately, then hands the change to `persist`.
        If `persist` raises, the toggle is reverted and the error propagates.
        """
        change = self.toggle(trick_id)
        try:
            persist(change)
        except Exception:
            logger.error("Failed to persist %s; reverting", change)
            self.revert(change)
            raise
        return change
