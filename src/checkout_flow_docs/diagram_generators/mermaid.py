"""
Mermaid diagram generator.

Generates a Mermaid flowchart: events -> observers -> payment API endpoints.
"""
from __future__ import annotations

from .base import DiagramGenerator, FlowGraph

DEFAULT_STYLES = {
    "event": ("#eef6ff", "#3b82f6"),
    "observer": ("#fef3c7", "#f59e0b"),
    "api": ("#ecfdf5", "#10b981"),
}

LABEL_PREFIXES = {
    "event": "Magento event:<br/>",
    "observer": "",
    "api": "Mollie API:<br/>",
}


def _escape(text: str) -> str:
    return text.replace('"', '#quot;')


class MermaidDiagramGenerator(DiagramGenerator):
    """
    Generates a top-down Mermaid flowchart with one classDef per node kind.

    Only fill colors can be overridden; strokes keep their defaults.
    """

    @property
    def diagram_type(self) -> str:
        return "mermaid"

    def render(self, graph: FlowGraph) -> str:
        lines = ['flowchart TD']

        for node_id, kind, label in graph.nodes:
            text = _escape(label) if kind == "observer" else f"<code>{_escape(label)}</code>"
            lines.append(f'  {node_id}(["{LABEL_PREFIXES[kind]}{text}"]):::{kind}')

        for source, target in graph.edges:
            lines.append(f'  {source} --> {target}')

        for kind, (fill, stroke) in DEFAULT_STYLES.items():
            fill = self.colors.get(kind, fill)
            lines.append(f'classDef {kind} fill:{fill},stroke:{stroke},color:#111;')

        return '\n'.join(lines) + '\n'
