"""
Diagram generators for checkout flow visualization.

Each generator implements the DiagramGenerator interface; new formats can be
added with register_generator().

Usage:
    from checkout_flow_docs.diagram_generators import get_generator

    generator = get_generator('mermaid', colors={'event': '#dbeafe'})
    diagram = generator.generate(observers)

Available generators:
    - mermaid: Mermaid flowchart, rendered inline by most Markdown viewers
    - dot: Graphviz digraph
"""
from __future__ import annotations

from typing import Dict, Optional, Type

from .base import DiagramGenerator, FlowGraph, NodeIdAllocator, build_flow_graph, slugify
from .dot import DotDiagramGenerator
from .mermaid import MermaidDiagramGenerator

# Registry of available diagram generators
_GENERATOR_REGISTRY: Dict[str, Type[DiagramGenerator]] = {
    'mermaid': MermaidDiagramGenerator,
    'dot': DotDiagramGenerator,
}

# Public list of available generator types
AVAILABLE_GENERATORS = list(_GENERATOR_REGISTRY.keys())


def get_generator(
    diagram_type: str,
    colors: Optional[Dict[str, str]] = None,
    shapes: Optional[Dict[str, str]] = None,
    fontname: Optional[str] = None
) -> DiagramGenerator:
    """
    Get a diagram generator instance for the specified type.

    Args:
        diagram_type: The type of diagram to generate ('mermaid' or 'dot').
        colors: Optional mapping of node kind to fill color.
        shapes: Optional mapping of node kind to node shape.
        fontname: Optional font name to use for diagram text elements.

    Returns:
        An instance of the appropriate DiagramGenerator subclass.

    Raises:
        ValueError: If the diagram_type is not recognized.
    """
    if diagram_type not in _GENERATOR_REGISTRY:
        available = ', '.join(AVAILABLE_GENERATORS)
        raise ValueError(
            f"Unknown diagram type '{diagram_type}'. "
            f"Available types: {available}"
        )

    generator_class = _GENERATOR_REGISTRY[diagram_type]
    return generator_class(colors=colors, shapes=shapes, fontname=fontname)


def register_generator(diagram_type: str, generator_class: Type[DiagramGenerator]) -> None:
    """
    Register a custom diagram generator, making it available via get_generator().

    Args:
        diagram_type: The type identifier for the generator.
        generator_class: The DiagramGenerator subclass to register.
    """
    _GENERATOR_REGISTRY[diagram_type] = generator_class
    global AVAILABLE_GENERATORS
    AVAILABLE_GENERATORS = list(_GENERATOR_REGISTRY.keys())


__all__ = [
    'DiagramGenerator',
    'DotDiagramGenerator',
    'FlowGraph',
    'MermaidDiagramGenerator',
    'NodeIdAllocator',
    'build_flow_graph',
    'get_generator',
    'register_generator',
    'slugify',
    'AVAILABLE_GENERATORS',
]
