from __future__ import annotations

import unittest
from pathlib import Path

from checkout_flow_docs.coverage import EmptyApiIndexError, compute_coverage, validate
from checkout_flow_docs.models import ApiUsageEntry, CoverageSummary, ObserverRecord


def _entry(class_id: str, *endpoints: str) -> ApiUsageEntry:
    return ApiUsageEntry(class_id=class_id, source_path=Path(f"{class_id}.php"), endpoints=frozenset(endpoints))


class TestCoverage(unittest.TestCase):

    def test_counts(self):
        api_usage = {
            "A": _entry("A", "/v2/payments", "/v2/orders"),
            "B": _entry("B", "/v2/payments"),
            "C": ApiUsageEntry(class_id="C", source_path=Path("C.php"), sdk_calls=frozenset({"orders::get"})),
        }
        observers = {
            "ObsA": ObserverRecord(class_id="ObsA", events=["e1", "e2", "e1"]),
            "ObsB": ObserverRecord(class_id="ObsB", events=["e2"]),
        }

        summary = compute_coverage(api_usage, observers)

        self.assertEqual(summary, CoverageSummary(events=2, observers=2, api_classes=3, endpoints=3))

    def test_endpoint_total_is_summed_per_class(self):
        api_usage = {
            "A": _entry("A", "/v2/payments"),
            "B": _entry("B", "/v2/payments"),
        }
        self.assertEqual(compute_coverage(api_usage, {}).endpoints, 2)

    def test_validate_rejects_empty_index(self):
        with self.assertRaises(EmptyApiIndexError):
            validate(CoverageSummary(events=3, observers=2, api_classes=0, endpoints=0))

    def test_empty_index_error_is_value_error(self):
        self.assertTrue(issubclass(EmptyApiIndexError, ValueError))

    def test_validate_accepts_non_empty_index(self):
        validate(CoverageSummary(events=0, observers=0, api_classes=1, endpoints=0))


if __name__ == '__main__':
    unittest.main()
