"""
Gap Detection for Checkout Flow Analysis.

Points out where the documented flow is probably incomplete:
- Observers whose source file could not be found
- Observers with no attributed API usage
- API classes that no observer reaches through constructor injection
"""
from __future__ import annotations

from typing import Dict, List, Mapping

from .models import NAMESPACE_SEPARATOR, ApiUsageEntry, ObserverRecord, canonical_class_id


class FlowGapDetector:
    """
    Detects gaps in the observer -> service -> API chain.

    This class only reads the results of a finished analysis; it never
    rescans the module.
    """

    def __init__(self, api_usage: Mapping[str, ApiUsageEntry], observers: Mapping[str, ObserverRecord]):
        """
        Initialize the gap detector.

        Args:
            api_usage: Index produced by ClassIndexer.
            observers: Observer map produced by DependencyResolver.
        """
        self.api_usage = api_usage
        self.observers = observers

    def detect_all(self) -> Dict[str, List[Dict[str, str]]]:
        """
        Run all gap detections.

        Returns:
            A dictionary with keys:
            - 'missing_sources': Observers whose class file was not found
            - 'unattributed_observers': Observers with no API endpoints or SDK calls
            - 'unreached_api_classes': API classes not injected into any observer
        """
        return {
            'missing_sources': self.detect_missing_sources(),
            'unattributed_observers': self.detect_unattributed_observers(),
            'unreached_api_classes': self.detect_unreached_api_classes(),
        }

    def detect_missing_sources(self) -> List[Dict[str, str]]:
        """
        Observers that are registered in events.xml but whose class file was never read.

        Their services are unknown, so any API usage they have is invisible.
        """
        missing = []
        for class_id, record in sorted(self.observers.items()):
            if record.source_path is None:
                missing.append({
                    'observer': class_id,
                    'severity': 'warning',
                    'message': f"Source for observer '{class_id}' was not found"
                })
        return missing

    def detect_unattributed_observers(self) -> List[Dict[str, str]]:
        """Observers that were read but reach no API usage through their services."""
        unattributed = []
        for class_id, record in sorted(self.observers.items()):
            if record.source_path is None:
                continue
            if not record.attributed_endpoints and not record.attributed_sdk_calls:
                unattributed.append({
                    'observer': class_id,
                    'severity': 'info',
                    'message': f"Observer '{class_id}' has no detected API usage"
                })
        return unattributed

    def detect_unreached_api_classes(self) -> List[Dict[str, str]]:
        """
        API classes that never appear as a declared observer service.

        Only direct injection is checked; a class reached through another
        service will still be listed here. A class counts as reached when the
        resolver matched it, when a service names it in full, or when an
        unqualified service has the same short name.
        """
        reached = set()
        short_names = set()
        for record in self.observers.values():
            reached.update(record.resolved_services)
            for service in record.services:
                service_id = canonical_class_id(service)
                reached.add(service_id)
                if NAMESPACE_SEPARATOR not in service_id:
                    short_names.add(service_id)

        unreached = []
        for class_id in sorted(self.api_usage):
            if class_id in reached or class_id.rsplit(NAMESPACE_SEPARATOR, 1)[-1] in short_names:
                continue
            unreached.append({
                'api_class': class_id,
                'severity': 'info',
                'message': f"API class '{class_id}' is not injected into any observer"
            })
        return unreached

    def get_gap_summary(self) -> Dict[str, int]:
        """
        Get a summary count of all gaps.

        Returns:
            A dictionary with counts for each gap type plus 'total_gaps'.
        """
        gaps = self.detect_all()

        counts = {
            'missing_sources_count': len(gaps['missing_sources']),
            'unattributed_observers_count': len(gaps['unattributed_observers']),
            'unreached_api_classes_count': len(gaps['unreached_api_classes']),
        }
        counts['total_gaps'] = sum(counts.values())

        return counts
