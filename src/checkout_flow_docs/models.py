"""
Data model shared by the checkout flow pipeline stages.

Each stage owns and returns its own structure:
    ClassIndexer        -> Dict[str, ApiUsageEntry]
    EventLinkExtractor  -> List[EventLink]
    DependencyResolver  -> Dict[str, ObserverRecord]
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Set

NAMESPACE_SEPARATOR = "\\"


def canonical_class_id(identifier: str) -> str:
    """
    Normalize a class identifier to the form used as a lookup key.

    Strips surrounding whitespace, a nullable marker and leading namespace
    separators, so that "\\Vendor\\Module\\Foo" and "Vendor\\Module\\Foo"
    are the same key.
    """
    return identifier.strip().lstrip("?").lstrip(NAMESPACE_SEPARATOR)


@dataclass(frozen=True)
class ApiUsageEntry:
    """
    API usage detected in one source class.

    Attributes:
        class_id: Namespace-qualified class name (e.g., "Mollie\\Payment\\Model\\Client\\Payments")
        source_path: File the class was read from
        endpoints: Versioned REST paths found in the file (e.g., "/v2/payments")
        sdk_calls: Normalized SDK calls ("payments::create") and wrapper markers
    """
    class_id: str
    source_path: Path
    endpoints: FrozenSet[str] = frozenset()
    sdk_calls: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class EventLink:
    """
    One observer registration found in an events.xml file.

    Attributes:
        event_name: Framework event name (e.g., "sales_order_place_after")
        observer_class_id: Value of the observer "instance" attribute
        resolved_source_path: Candidate source file for the observer (may not exist)
        config_path: events.xml file that declared the link
    """
    event_name: str
    observer_class_id: str
    resolved_source_path: Optional[Path] = None
    config_path: Optional[Path] = None


@dataclass
class ObserverRecord:
    """
    Aggregated view of an observer across every event it is registered for.

    events and services keep duplicates; the attributed sets do not.
    resolved_services holds the index class ids that the services matched.
    """
    class_id: str
    events: List[str] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    resolved_services: Set[str] = field(default_factory=set)
    attributed_endpoints: Set[str] = field(default_factory=set)
    attributed_sdk_calls: Set[str] = field(default_factory=set)
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class CoverageSummary:
    """Headline counts shown at the top of the generated report."""
    events: int
    observers: int
    api_classes: int
    endpoints: int
