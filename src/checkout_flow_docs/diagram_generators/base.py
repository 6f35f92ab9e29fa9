"""
Base class for diagram generators.

This module defines the abstract interface that all diagram generators must
implement, plus the node/edge collection they share.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from ..models import ObserverRecord

NODE_KINDS = ("event", "observer", "api")

_NON_ALNUM = re.compile(r'[^a-z0-9]+')

# Mermaid keywords that break parsing when used as a bare node id.
RESERVED_IDS = frozenset({
    "end", "graph", "flowchart", "subgraph", "direction", "style",
    "classdef", "class", "click", "linkstyle", "default",
})


def slugify(label: str) -> str:
    """Lowercase a label and collapse every run of non-alphanumerics to "_"."""
    return _NON_ALNUM.sub('_', label.lower())


class NodeIdAllocator:
    """
    Hands out stable diagram node ids derived from labels.

    The same (kind, label) always gets the same id. Two different labels that
    slugify to the same id get "_2", "_3", ... suffixes in first-seen order.
    Reserved diagram keywords are suffixed the same way.
    """

    def __init__(self):
        self._ids: Dict[Tuple[str, str], str] = {}
        self._used: set = set()

    def get(self, kind: str, label: str) -> str:
        key = (kind, label)
        if key in self._ids:
            return self._ids[key]

        base = slugify(label) or kind
        candidate = base
        suffix = 2
        while candidate in self._used or candidate in RESERVED_IDS:
            candidate = f"{base}_{suffix}"
            suffix += 1

        self._used.add(candidate)
        self._ids[key] = candidate
        return candidate


@dataclass
class FlowGraph:
    """
    Nodes and edges of the event -> observer -> endpoint diagram.

    Attributes:
        nodes: (node_id, kind, label) in declaration order
        edges: (source_id, target_id) in declaration order, without duplicates
    """
    nodes: List[Tuple[str, str, str]] = field(default_factory=list)
    edges: List[Tuple[str, str]] = field(default_factory=list)


def build_flow_graph(observers: Mapping[str, ObserverRecord]) -> FlowGraph:
    """
    Collect diagram nodes and edges from the observer map.

    Observers are visited in class id order, their events in registration
    order and their endpoints sorted, so the result is deterministic.
    """
    allocator = NodeIdAllocator()
    graph = FlowGraph()
    declared = set()
    seen_edges = set()

    def add_node(kind: str, label: str) -> str:
        node_id = allocator.get(kind, label)
        if node_id not in declared:
            declared.add(node_id)
            graph.nodes.append((node_id, kind, label))
        return node_id

    def add_edge(source: str, target: str) -> None:
        if (source, target) not in seen_edges:
            seen_edges.add((source, target))
            graph.edges.append((source, target))

    for class_id, record in sorted(observers.items()):
        observer_id = add_node("observer", class_id)
        for event in record.events:
            add_edge(add_node("event", event), observer_id)
        for endpoint in sorted(record.attributed_endpoints):
            add_edge(observer_id, add_node("api", endpoint))

    return graph


class DiagramGenerator(ABC):
    """
    Abstract base class for diagram generators.

    Each diagram generator turns the observer map into diagram source text in
    a specific format.
    """

    def __init__(
            self,
            colors: Optional[Dict[str, str]] = None,
            shapes: Optional[Dict[str, str]] = None,
            fontname: Optional[str] = None
    ):
        """
        Initialize the diagram generator with styling options.

        Args:
            colors: Mapping of node kind ("event", "observer", "api") to fill color.
            shapes: Mapping of node kind to node shape (DOT only).
            fontname: Font name to use for diagram text elements.
        """
        self.colors = colors or {}
        self.shapes = shapes or {}
        self.fontname = fontname or "Arial"

    def generate(self, observers: Mapping[str, ObserverRecord], output_path: Optional[str] = None) -> str:
        """
        Generate diagram source for the observer map.

        Args:
            observers: Observer map produced by DependencyResolver.
            output_path: Optional path to write the diagram source to.

        Returns:
            The diagram source as a string.
        """
        content = self.render(build_flow_graph(observers))

        if output_path:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)

        return content

    @abstractmethod
    def render(self, graph: FlowGraph) -> str:
        """Render collected nodes and edges in this generator's format."""
        pass

    @property
    @abstractmethod
    def diagram_type(self) -> str:
        """
        Return the type identifier for this diagram generator.

        Returns:
            A string identifying the diagram type (e.g., "mermaid", "dot").
        """
        pass

    @property
    def fence(self) -> str:
        """Info string used for the Markdown code fence around the diagram."""
        return self.diagram_type
