"""
Markdown report rendering for the checkout flow.
"""
from __future__ import annotations

import html
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .coverage import compute_coverage
from .diagram_generators import DiagramGenerator, get_generator
from .gap_detector import FlowGapDetector
from .models import ApiUsageEntry, CoverageSummary, ObserverRecord

EMPTY_CELL = "_none_"
CELL_SEPARATOR = "<br/>"


def _cell(values: Iterable[str]) -> str:
    values = list(values)
    if not values:
        return EMPTY_CELL
    return CELL_SEPARATOR.join(html.escape(value, quote=False) for value in values)


class ReportBuilder:
    """
    Renders the checkout flow Markdown document.

    Attributes:
        api_usage: Index produced by ClassIndexer
        observers: Observer map produced by DependencyResolver
        module_dir: Module root, used to build source links
        repo_url: Base URL for source links in the observer table (optional)
        diagram: Generator used for the flow diagram section
    """

    def __init__(
            self,
            api_usage: Mapping[str, ApiUsageEntry],
            observers: Mapping[str, ObserverRecord],
            module_dir: Optional[Path] = None,
            repo_url: Optional[str] = None,
            diagram: Optional[DiagramGenerator] = None
    ):
        self.api_usage = api_usage
        self.observers = observers
        self.module_dir = module_dir
        self.repo_url = repo_url
        self.diagram = diagram or get_generator('mermaid')

    def build(self, summary: Optional[CoverageSummary] = None) -> str:
        """Assemble every section of the report into one Markdown string."""
        if summary is None:
            summary = compute_coverage(self.api_usage, self.observers)

        sections = [
            "# Magento × Mollie: Checkout Flow (Deep Analysis)\n\n"
            "_Generated automatically from the Mollie Magento 2 module source._\n",
            self.render_summary(summary),
            self.render_event_table(),
            self.render_diagram(),
            self.render_observer_table(),
            self.render_gaps(),
        ]
        return "\n".join(sections)

    def render_summary(self, summary: CoverageSummary) -> str:
        return (
            "## Coverage Summary\n\n"
            f"- **{summary.events} Magento events**\n"
            f"- **{summary.observers} observers documented**\n"
            f"- **{summary.api_classes} classes using Mollie API**\n"
            f"- **{summary.endpoints} API endpoint references detected**\n\n"
            "It maps **Magento events → Observers → Services → Mollie API calls**.\n"
        )

    def event_to_observers(self) -> Dict[str, List[str]]:
        """Group observers by event name; both levels sorted, observers distinct."""
        grouped: Dict[str, set] = {}
        for class_id, record in self.observers.items():
            for event in record.events:
                grouped.setdefault(event, set()).add(class_id)
        return {event: sorted(grouped[event]) for event in sorted(grouped)}

    def render_event_table(self) -> str:
        lines = ["## Checkout-related events", "", "| Event | Observer(s) |", "|---|---|"]
        for event, class_ids in self.event_to_observers().items():
            lines.append(f"| `{event}` | {_cell(class_ids)} |")
        return "\n".join(lines) + "\n"

    def render_diagram(self) -> str:
        return (
            "## Full event → observer → API map\n\n"
            f"```{self.diagram.fence}\n"
            f"{self.diagram.generate(self.observers)}"
            "```\n"
        )

    def render_observer_table(self) -> str:
        lines = [
            "## Observer details",
            "",
            "| Observer class | Events | Services | Mollie endpoints | SDK calls |",
            "|---|---|---|---|---|",
        ]
        for class_id, record in sorted(self.observers.items()):
            lines.append(
                f"| {self.observer_link(record)} "
                f"| {_cell(record.events)} "
                f"| {_cell(record.services)} "
                f"| {_cell(sorted(record.attributed_endpoints))} "
                f"| {_cell(sorted(record.attributed_sdk_calls))} |"
            )
        return "\n".join(lines) + "\n"

    def observer_link(self, record: ObserverRecord) -> str:
        """Class name in backticks, linked to the repository when a base URL is set."""
        label = f"`{record.class_id}`"
        if not self.repo_url or record.source_path is None or self.module_dir is None:
            return label
        try:
            relative = record.source_path.relative_to(self.module_dir).as_posix()
        except ValueError:
            return label
        return f"[{label}]({self.repo_url.rstrip('/')}/{relative})"

    def render_gaps(self) -> str:
        detector = FlowGapDetector(self.api_usage, self.observers)
        gaps = detector.detect_all()
        summary = detector.get_gap_summary()

        lines = ["## Coverage gaps", ""]
        if summary['total_gaps'] == 0:
            lines.append("No gaps detected.")
            return "\n".join(lines) + "\n"

        lines.append("| Kind | Severity | Detail |")
        lines.append("|---|---|---|")
        for kind, items in gaps.items():
            for item in items:
                lines.append(f"| {kind} | {item['severity']} | {html.escape(item['message'], quote=False)} |")
        return "\n".join(lines) + "\n"


def build_endpoint_catalog(api_usage: Mapping[str, ApiUsageEntry]) -> str:
    """
    Render the flat list of distinct endpoints found anywhere in the module.
    """
    endpoints = sorted({endpoint for entry in api_usage.values() for endpoint in entry.endpoints})

    lines = [
        "# Mollie Magento 2: Auto-Generated API Calls",
        "",
        "Generated automatically from the Mollie Magento 2 plugin source.",
        "",
        "| Endpoint |",
        "|-----------|",
    ]
    if endpoints:
        lines.extend(f"| `{endpoint}` |" for endpoint in endpoints)
    else:
        lines.append("| _No endpoints found (check module path or patterns)_ |")
    return "\n".join(lines) + "\n"
