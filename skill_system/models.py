from enum import Enum
from typing import Dict, List, Optional, Tuple


class Trick:
    """Represents a single trick record as it arrives from the data layer."""

    def __init__(
        self,
        trick_id: str,
        name: str,
        prerequisite_refs: Optional[List[str]] = None,
        difficulty: Optional[int] = None,
        category_id: Optional[str] = None,
    ):
        self.trick_id = trick_id
        self.name = name
        # Raw strings: another trick's id, its name, or a misspelling of the name
        self.prerequisite_refs = list(prerequisite_refs or [])
        self.difficulty = difficulty
        self.category_id = category_id

    @staticmethod
    def from_dict(data: dict) -> "Trick":
        """Builds a Trick from a plain mapping (API payload or database record)."""
        refs = data.get("prerequisite_refs")
        if refs is None:
            refs = data.get("prerequisite_ids")
        difficulty = data.get("difficulty")
        if difficulty is None:
            difficulty = data.get("difficulty_level")
        return Trick(
            trick_id=str(data["id"]),
            name=data.get("name") or str(data["id"]),
            prerequisite_refs=[str(ref) for ref in (refs or [])],
            difficulty=difficulty,
            category_id=data.get("category_id"),
        )

    def __repr__(self):
        return f"Trick(id='{self.trick_id}', name='{self.name}')"


class ResolutionMethod(str, Enum):
    EXACT = "exact"
    DIRECT_ID = "direct-id"
    FUZZY = "fuzzy"
    UNRESOLVED = "unresolved"


class ResolvedReference:
    """The outcome of matching one raw prerequisite string against the known tricks."""

    def __init__(
        self,
        raw: str,
        target_id: Optional[str],
        method: ResolutionMethod,
        distance: Optional[int] = None,
    ):
        self.raw = raw
        self.target_id = target_id
        self.method = method
        # Only set for fuzzy and unresolved lookups
        self.distance = distance

    @property
    def resolved(self) -> bool:
        return self.target_id is not None

    def __eq__(self, other):
        if not isinstance(other, ResolvedReference):
            return NotImplemented
        return (self.raw, self.target_id, self.method, self.distance) == (
            other.raw, other.target_id, other.method, other.distance
        )

    def __repr__(self):
        return (
            f"ResolvedReference(raw='{self.raw}', target_id={self.target_id!r}, "
            f"method='{self.method.value}', distance={self.distance})"
        )


class Node:
    """Represents a single trick node in the skill tree graph."""

    def __init__(self, trick: Trick):
        self.id = trick.trick_id
        self._trick = trick

        # --- Layout Attributes ---
        self.rank = 0
        self.order = 0
        self.position: Tuple[float, float] = (0.0, 0.0)

        # --- Relationship Attributes ---
        # Which tricks are needed BEFORE this one?
        self.requires = set()  # Set of trick ids

        # Which tricks does this one UNLOCK? (inverse of requires)
        self.unlocks = set()  # Set of trick ids

    @property
    def trick(self) -> Trick:
        return self._trick

    @property
    def label(self) -> str:
        return self._trick.name

    def is_completed(self, tracker) -> bool:
        return tracker.is_node_completed(self.id)

    def __repr__(self):
        return f"Node(id='{self.id}', rank={self.rank}, order={self.order})"


class Edge:
    """A prerequisite edge: source must be learned before target."""

    def __init__(self, source_id: str, target_id: str):
        self.source_id = source_id
        self.target_id = target_id

    @property
    def id(self) -> str:
        return f"{self.source_id}-{self.target_id}"

    @property
    def key(self) -> Tuple[str, str]:
        return (self.source_id, self.target_id)

    def is_completed(self, tracker) -> bool:
        return tracker.is_edge_completed(self.source_id, self.target_id)

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return f"Edge('{self.source_id}' -> '{self.target_id}')"


class Diagnostic:
    """A prerequisite reference that could not be turned into an edge."""

    UNRESOLVED = "unresolved"
    MISSING_NODE = "missing-node"

    def __init__(self, trick_id: str, reference: ResolvedReference, reason: str):
        self.trick_id = trick_id
        self.reference = reference
        self.reason = reason

    @property
    def raw(self) -> str:
        return self.reference.raw

    @property
    def method(self) -> ResolutionMethod:
        return self.reference.method

    @property
    def distance(self) -> Optional[int]:
        return self.reference.distance

    def __repr__(self):
        return f"Diagnostic(trick_id='{self.trick_id}', raw='{self.raw}', reason='{self.reason}')"


class SkillGraph:
    """Manages the nodes, prerequisite edges and build diagnostics of one skill tree."""

    def __init__(self):
        self.nodes: Dict[str, Node] = {}  # Maps trick id -> Node, in input order
        self.edges: List[Edge] = []
        self.diagnostics: List[Diagnostic] = []
        self._edge_keys = set()

    def add_node(self, node: Node):
        """Adds a Node to the graph. The first node with a given id wins."""
        if node.id not in self.nodes:
            self.nodes[node.id] = node

    def add_dependency(self, source_id: str, target_id: str) -> bool:
        """
        Records that `source_id` is a prerequisite of `target_id`.
        Updates the .unlocks and .requires sets on both nodes.
        Returns False when the edge already exists.
        """
        key = (source_id, target_id)
        if key in self._edge_keys:
            return False
        self._edge_keys.add(key)
        self.edges.append(Edge(source_id, target_id))
        self.nodes[target_id].requires.add(source_id)
        self.nodes[source_id].unlocks.add(target_id)
        return True

    def has_edge(self, source_id: str, target_id: str) -> bool:
        return (source_id, target_id) in self._edge_keys

    def __len__(self):
        return len(self.nodes)
