"""
DOT diagram generator.

Generates a Graphviz digraph of the checkout flow, for rendering with `dot`.
"""
from __future__ import annotations

from .base import DiagramGenerator, FlowGraph

DEFAULT_COLORS = {
    "event": "#e0e0e0",
    "observer": "#ffcc80",
    "api": "#a5d6a7",
}

DEFAULT_SHAPES = {
    "event": "ellipse",
    "observer": "box",
    "api": "note",
}


def _quote(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"', '\\"')


class DotDiagramGenerator(DiagramGenerator):
    """
    Generates a left-to-right Graphviz digraph with kind-based styling.
    """

    @property
    def diagram_type(self) -> str:
        return "dot"

    def render(self, graph: FlowGraph) -> str:
        lines = [
            'digraph CheckoutFlow {',
            f'    graph [fontname="{self.fontname}"];',
            '    rankdir=LR;',
            f'    node [style="filled,rounded", fontname="{self.fontname}", fontsize=10];',
            f'    edge [arrowsize=0.8, fontname="{self.fontname}"];',
            ''
        ]

        for node_id, kind, label in graph.nodes:
            fillcolor = self.colors.get(kind, DEFAULT_COLORS[kind])
            shape = self.shapes.get(kind, DEFAULT_SHAPES[kind])
            lines.append(
                f'    "{node_id}" [label="{_quote(label)}", fillcolor="{fillcolor}", '
                f'shape={shape}, class="kind-{kind}"];'
            )

        lines.append('')

        for source, target in graph.edges:
            lines.append(f'    "{source}" -> "{target}";')

        lines.append('}')
        return '\n'.join(lines) + '\n'
