"""Translator graph reports: which project spaces can reach which.

Builds a NetworkX DiGraph whose nodes are project spaces and whose
edges are declared translators. The report is informational: expression
evaluation still requires a direct translator, so routes longer than
one hop show where an additional translator would have to be declared
(or where a chain of ``>`` steps can be written by hand).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

try:
    import networkx as nx
except ImportError:
    raise ImportError(
        "networkx required for translator graph reports: "
        "pip install codebase-migrator[graph]"
    )

from codebase_migrator.translation.translators import TranslatorGraph


class TranslatorGraphReport(BaseModel):
    """Summary of the declared translator graph."""

    model_config = ConfigDict()

    project_spaces: list[str] = Field(default_factory=list)
    direct_paths: list[str] = Field(default_factory=list)
    reachable: dict[str, list[str]] = Field(default_factory=dict)
    chained_only: list[str] = Field(default_factory=list)
    has_cycles: bool = False


def build_translator_graph(translators: TranslatorGraph) -> nx.DiGraph:
    """One edge per declared translator, annotated with its step names."""
    graph = nx.DiGraph()
    for path, translator in translators.items():
        graph.add_edge(
            path.from_project_space,
            path.to_project_space,
            steps=[step.name for step in translator.steps],
        )
    return graph


def suggest_route(
    translators: TranslatorGraph, from_space: str, to_space: str
) -> list[str] | None:
    """Shortest chain of project spaces from ``from_space`` to ``to_space``, or None."""
    graph = build_translator_graph(translators)
    try:
        return nx.shortest_path(graph, from_space, to_space)
    except (nx.NodeNotFound, nx.NetworkXNoPath):
        return None


def translator_graph_report(translators: TranslatorGraph) -> TranslatorGraphReport:
    """Compute reachability across all declared translators."""
    graph = build_translator_graph(translators)
    spaces = sorted(graph.nodes)

    reachable: dict[str, list[str]] = {}
    chained_only: list[str] = []
    for space in spaces:
        targets = sorted(nx.descendants(graph, space))
        reachable[space] = targets
        for target in targets:
            if not graph.has_edge(space, target):
                chained_only.append(f"{space}>{target}")

    return TranslatorGraphReport(
        project_spaces=spaces,
        direct_paths=[str(path) for path in translators],
        reachable=reachable,
        chained_only=chained_only,
        has_cycles=not nx.is_directed_acyclic_graph(graph),
    )
