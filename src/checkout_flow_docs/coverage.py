"""
Coverage summary and validation of a completed analysis.
"""
from __future__ import annotations

from typing import Mapping

from .models import ApiUsageEntry, CoverageSummary, ObserverRecord


class EmptyApiIndexError(ValueError):
    """Raised when a full scan found no class using the payment API."""


def compute_coverage(
        api_usage: Mapping[str, ApiUsageEntry],
        observers: Mapping[str, ObserverRecord]
) -> CoverageSummary:
    """
    Count what the analysis found.

    The endpoint total is summed per class: an endpoint string used by two
    classes counts twice. build_endpoint_catalog lists the distinct ones.
    """
    event_names = {event for record in observers.values() for event in record.events}
    return CoverageSummary(
        events=len(event_names),
        observers=len(observers),
        api_classes=len(api_usage),
        endpoints=sum(len(entry.endpoints) for entry in api_usage.values()),
    )


def validate(summary: CoverageSummary) -> None:
    """
    Reject an analysis that indexed no API classes.

    Raises:
        EmptyApiIndexError: if summary.api_classes is zero
    """
    if summary.api_classes == 0:
        raise EmptyApiIndexError("No API classes detected, check the detection patterns against the module source.")
