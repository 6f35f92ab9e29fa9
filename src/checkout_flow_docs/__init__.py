"""
Checkout Flow Docs

Static documentation generator for Magento 2 payment modules.
Maps framework events -> observers -> injected services -> Mollie API calls
and writes the result as Markdown.

Offline only: source files are pattern-matched, never executed.
"""

__version__ = "0.1.0"

from .class_indexer import ClassIndexer
from .dependency_resolver import DependencyResolver
from .detector import detect_api_usage
from .event_links import EventLinkExtractor
from .generator import CheckoutDocsGenerator
from .models import ApiUsageEntry, CoverageSummary, EventLink, ObserverRecord

__all__ = [
    "ApiUsageEntry",
    "CheckoutDocsGenerator",
    "ClassIndexer",
    "CoverageSummary",
    "DependencyResolver",
    "EventLink",
    "EventLinkExtractor",
    "ObserverRecord",
    "detect_api_usage",
    "__version__",
]
