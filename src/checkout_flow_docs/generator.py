"""
Checkout Flow Docs Generator - one-shot documentation run over a payment module.

Indexes API usage, reads events.xml observer registrations, resolves observer
services, validates the result and writes <output_dir>/checkout.md.

Library Usage:
    from pathlib import Path
    from checkout_flow_docs.generator import CheckoutDocsGenerator

    generator = CheckoutDocsGenerator(
        module_dir=Path("vendor/mollie/module-payment"),
        output_dir=Path("docs"),
        repo_url="https://github.com/mollie/magento2/tree/master",
    )
    report_path = generator.run()

    # Or inspect the analysis without writing anything
    analysis = generator.analyze()
    print(analysis.summary)
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .class_indexer import ClassIndexer
from .config_helper import ConfigHelper
from .coverage import compute_coverage, validate
from .dependency_resolver import DependencyResolver
from .diagram_generators import get_generator
from .event_links import EventLinkExtractor
from .models import ApiUsageEntry, CoverageSummary, EventLink, ObserverRecord
from .report_builder import ReportBuilder, build_endpoint_catalog

REPORT_FILENAME = "checkout.md"
CATALOG_FILENAME = "index.md"


@dataclass
class CheckoutFlowAnalysis:
    """Everything one pipeline run produced, stage by stage."""
    api_usage: Dict[str, ApiUsageEntry]
    links: List[EventLink]
    observers: Dict[str, ObserverRecord]
    summary: CoverageSummary


class CheckoutDocsGenerator:
    """
    Runs the analysis pipeline and writes the Markdown report
    """

    def __init__(
            self,
            module_dir: Path,
            output_dir: Path,
            repo_url: Optional[str] = None,
            diagram_type: str = "mermaid",
            source_extension: str = ".php",
            require_etc_dir: bool = False,
            endpoint_index: bool = False,
            colors: Optional[Dict[str, str]] = None,
            shapes: Optional[Dict[str, str]] = None,
            fontname: Optional[str] = None,
            verbose: bool = False
    ):
        """
        Initialize generator

        Args:
            module_dir: Root of the payment module source tree.
            output_dir: Directory receiving checkout.md (created if absent).
            repo_url: Base URL used to link observer classes to their source (optional).
            diagram_type: Flow diagram format, "mermaid" or "dot".
            source_extension: Extension of the source files to scan.
            require_etc_dir: Only read events.xml files located below an "etc" directory.
            endpoint_index: Also write the flat endpoint catalog to index.md.
            colors: Mapping of node kind ("event", "observer", "api") to fill color.
            shapes: Mapping of node kind to Graphviz shape (DOT diagrams only).
            fontname: Font for diagram text elements.
            verbose: Print per-file skip diagnostics.

        Raises:
            ValueError: If module_dir does not exist or diagram_type is unknown.
        """
        self.module_dir = module_dir
        self.output_dir = output_dir
        self.repo_url = repo_url
        self.source_extension = source_extension
        self.require_etc_dir = require_etc_dir
        self.endpoint_index = endpoint_index
        self.verbose = verbose

        if not self.module_dir.exists() or not self.module_dir.is_dir():
            raise ValueError(f"Module directory not found or not a directory: {self.module_dir}")

        self.diagram = get_generator(diagram_type, colors=colors, shapes=shapes, fontname=fontname)

    @classmethod
    def from_config(cls, config: ConfigHelper, verbose: bool = False) -> "CheckoutDocsGenerator":
        """
        Creates a CheckoutDocsGenerator from a loaded ConfigHelper.

        Args:
            config: A fully initialized ConfigHelper instance.
            verbose: Print per-file skip diagnostics.

        Returns:
            A configured instance of CheckoutDocsGenerator.
        """
        return cls(
            module_dir=config.get_module_path(),
            output_dir=config.get_output_path(),
            repo_url=config.get_repo_url(),
            diagram_type=config.get_diagram_type(),
            source_extension=config.get_source_extension(),
            require_etc_dir=config.get_require_etc_dir(),
            endpoint_index=config.get_endpoint_index(),
            colors=config.get_diagram_colors(),
            shapes=config.get_diagram_shapes(),
            fontname=config.get_diagram_fontname(),
            verbose=verbose
        )

    def analyze(self) -> CheckoutFlowAnalysis:
        """
        Run the three analysis stages and compute coverage. Writes nothing.
        """
        indexer = ClassIndexer(self.module_dir, self.source_extension, verbose=self.verbose)
        api_usage = indexer.build()
        print(f"[SCAN] Indexed {len(api_usage)} classes with Mollie API usage")

        extractor = EventLinkExtractor(
            self.module_dir,
            source_extension=self.source_extension,
            require_etc_dir=self.require_etc_dir,
            verbose=self.verbose
        )
        links = extractor.extract()
        print(f"[SCAN] Found {len(links)} Magento event -> observer links")

        observers = DependencyResolver(api_usage, verbose=self.verbose).resolve(links)

        summary = compute_coverage(api_usage, observers)
        print(f"[SCAN] Coverage: {summary.events} events, {summary.observers} observers, "
              f"{summary.api_classes} API classes, {summary.endpoints} endpoints")

        return CheckoutFlowAnalysis(api_usage=api_usage, links=links, observers=observers, summary=summary)

    def run(self) -> Path:
        """
        Analyze the module and write the report.

        Returns:
            Path of the written checkout.md.

        Raises:
            EmptyApiIndexError: If no API usage was found. Nothing is written.
        """
        print(f"[SCAN] Starting scan at {time.strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"[SCAN] Module directory: {self.module_dir}")

        analysis = self.analyze()
        validate(analysis.summary)

        builder = ReportBuilder(
            analysis.api_usage,
            analysis.observers,
            module_dir=self.module_dir,
            repo_url=self.repo_url,
            diagram=self.diagram
        )
        content = builder.build(analysis.summary)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        report_path = self.output_dir / REPORT_FILENAME
        report_path.write_text(content, encoding='utf-8')
        print(f"[SCAN] Checkout flow written to {report_path}")

        if self.endpoint_index:
            catalog_path = self.output_dir / CATALOG_FILENAME
            catalog_path.write_text(build_endpoint_catalog(analysis.api_usage), encoding='utf-8')
            print(f"[SCAN] Endpoint catalog written to {catalog_path}")

        return report_path
