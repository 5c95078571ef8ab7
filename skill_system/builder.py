import logging
from typing import Iterable, Optional

from .models import Diagnostic, Node, ResolutionMethod, SkillGraph, Trick
from .resolver import PrerequisiteResolver

logger = logging.getLogger(__name__)


def build_graph(tricks: Iterable[Trick], resolver: Optional[PrerequisiteResolver] = None) -> SkillGraph:
    """
    Turns a flat trick collection into a SkillGraph.

    - Creates exactly one Node per trick, including isolated ones.
    - Resolves every prerequisite reference (in listed order) and adds an edge
      prerequisite -> dependent. Identical (source, target) pairs collapse
      into one edge.
    - References that cannot be resolved, or that resolve to an id with no
      node, produce a Diagnostic instead of an edge.

    Cyclic input is accepted as is.
    """
    tricks = list(tricks)
    if resolver is None:
        resolver = PrerequisiteResolver(tricks)

    graph = SkillGraph()
    for trick in tricks:
        graph.add_node(Node(trick))

    for trick in tricks:
        for raw in trick.prerequisite_refs:
            reference = resolver.resolve(raw)

            if reference.method == ResolutionMethod.UNRESOLVED:
                graph.diagnostics.append(Diagnostic(trick.trick_id, reference, Diagnostic.UNRESOLVED))
                continue

            if reference.target_id not in graph.nodes:
                logger.warning(
                    "Could not create edge: prerequisite id '%s' not found for trick '%s'",
                    reference.target_id, trick.name,
                )
                graph.diagnostics.append(Diagnostic(trick.trick_id, reference, Diagnostic.MISSING_NODE))
                continue

            if graph.add_dependency(reference.target_id, trick.trick_id):
                logger.debug(
                    "Created edge: %s -> %s",
                    graph.nodes[reference.target_id].label, trick.name,
                )

    logger.debug(
        "Built skill graph: %d nodes, %d edges, %d diagnostics",
        len(graph.nodes), len(graph.edges), len(graph.diagnostics),
    )
    return graph
