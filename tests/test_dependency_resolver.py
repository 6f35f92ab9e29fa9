from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from checkout_flow_docs.class_indexer import ClassIndexer
from checkout_flow_docs.dependency_resolver import DependencyResolver, parse_imports
from checkout_flow_docs.detector import INDIRECT_CALL_MARKER
from checkout_flow_docs.event_links import EventLinkExtractor
from checkout_flow_docs.gap_detector import FlowGapDetector
from checkout_flow_docs.models import ApiUsageEntry, EventLink
from module_fixture import MISSING_OBSERVER, ORDER_PLACED, PAYMENT_SERVICE, build_module, write_files

OBSERVER_SOURCE = """<?php
namespace Vendor\\Module\\Observer;

class PaymentObserver
{
    public function __construct(\\Vendor\\Module\\Api\\PaymentService $service, \\Vendor\\Module\\Logger $log)
    {
    }
}
"""


class TestDependencyResolver(unittest.TestCase):
    """
    Tests for observer -> service -> API attribution.
    """

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.module_dir = Path(self.temp_dir.name)
        self.api_usage = {
            "Vendor\\Module\\Api\\PaymentService": ApiUsageEntry(
                class_id="Vendor\\Module\\Api\\PaymentService",
                source_path=self.module_dir / "Api" / "PaymentService.php",
                endpoints=frozenset({"/v2/payments/tr_123"}),
                sdk_calls=frozenset({"payments::get"}),
            )
        }

    def tearDown(self):
        self.temp_dir.cleanup()

    def _link(self, event: str, class_id: str, relative: str) -> EventLink:
        return EventLink(event_name=event, observer_class_id=class_id, resolved_source_path=self.module_dir / relative)

    def test_attributes_endpoints_from_matched_service_only(self):
        write_files(self.module_dir, {"Observer/PaymentObserver.php": OBSERVER_SOURCE})
        link = self._link("sales_order_place_after", "Vendor\\Module\\Observer\\PaymentObserver",
                          "Observer/PaymentObserver.php")

        observers = DependencyResolver(self.api_usage).resolve([link])

        record = observers["Vendor\\Module\\Observer\\PaymentObserver"]
        self.assertEqual(record.services, ["Vendor\\Module\\Api\\PaymentService", "Vendor\\Module\\Logger"])
        self.assertEqual(record.attributed_endpoints, {"/v2/payments/tr_123"})
        self.assertEqual(record.attributed_sdk_calls, {"payments::get"})
        self.assertEqual(record.resolved_services, {"Vendor\\Module\\Api\\PaymentService"})
        self.assertEqual(record.source_path, self.module_dir / "Observer" / "PaymentObserver.php")

    def test_empty_source_file_is_still_read(self):
        write_files(self.module_dir, {"Observer/Empty.php": ""})
        link = self._link("e", "Vendor\\Module\\Observer\\Empty", "Observer/Empty.php")

        observers = DependencyResolver(self.api_usage).resolve([link])

        record = observers["Vendor\\Module\\Observer\\Empty"]
        self.assertEqual(record.source_path, self.module_dir / "Observer" / "Empty.php")
        self.assertEqual(record.services, [])
        self.assertEqual(FlowGapDetector(self.api_usage, observers).detect_missing_sources(), [])

    def test_missing_source_still_records_event(self):
        link = self._link("sales_order_invoice_pay", "Vendor\\Module\\Observer\\Gone", "Observer/Gone.php")

        observers = DependencyResolver(self.api_usage).resolve([link])

        record = observers["Vendor\\Module\\Observer\\Gone"]
        self.assertEqual(record.events, ["sales_order_invoice_pay"])
        self.assertEqual(record.services, [])
        self.assertIsNone(record.source_path)

    def test_link_without_candidate_path(self):
        link = EventLink(event_name="e", observer_class_id="Vendor\\Module\\Observer\\NoPath")
        observers = DependencyResolver(self.api_usage).resolve([link])
        self.assertEqual(observers["Vendor\\Module\\Observer\\NoPath"].events, ["e"])

    def test_no_constructor_means_no_services(self):
        write_files(self.module_dir, {"Observer/Plain.php": "<?php\nnamespace Vendor\\Module\\Observer;\n\nclass Plain {}\n"})
        link = self._link("e", "Vendor\\Module\\Observer\\Plain", "Observer/Plain.php")

        record = DependencyResolver(self.api_usage).resolve([link])["Vendor\\Module\\Observer\\Plain"]

        self.assertEqual(record.services, [])
        self.assertEqual(record.attributed_endpoints, set())

    def test_events_and_services_keep_duplicates(self):
        write_files(self.module_dir, {"Observer/PaymentObserver.php": OBSERVER_SOURCE})
        class_id = "Vendor\\Module\\Observer\\PaymentObserver"
        links = [
            self._link("sales_order_place_after", class_id, "Observer/PaymentObserver.php"),
            self._link("sales_order_place_after", class_id, "Observer/PaymentObserver.php"),
        ]

        record = DependencyResolver(self.api_usage).resolve(links)[class_id]

        self.assertEqual(record.events, ["sales_order_place_after", "sales_order_place_after"])
        self.assertEqual(len(record.services), 4)
        self.assertEqual(record.attributed_endpoints, {"/v2/payments/tr_123"})

    def test_records_only_created_from_links(self):
        observers = DependencyResolver(self.api_usage).resolve([])
        self.assertEqual(observers, {})

    def test_imported_short_name_is_resolved(self):
        write_files(self.module_dir, {"Observer/Imported.php": """<?php
namespace Vendor\\Module\\Observer;

use Vendor\\Module\\Api\\PaymentService as Payments;

class Imported
{
    public function __construct(Payments $payments) {}
}
"""})
        link = self._link("e", "Vendor\\Module\\Observer\\Imported", "Observer/Imported.php")

        record = DependencyResolver(self.api_usage).resolve([link])["Vendor\\Module\\Observer\\Imported"]

        self.assertEqual(record.services, ["Payments"])
        self.assertEqual(record.resolved_services, {"Vendor\\Module\\Api\\PaymentService"})
        self.assertEqual(record.attributed_endpoints, {"/v2/payments/tr_123"})

    def test_same_namespace_short_name_is_resolved(self):
        write_files(self.module_dir, {"Api/Observer.php": """<?php
namespace Vendor\\Module\\Api;

class Observer
{
    public function __construct(PaymentService $service) {}
}
"""})
        link = self._link("e", "Vendor\\Module\\Api\\Observer", "Api/Observer.php")

        record = DependencyResolver(self.api_usage).resolve([link])["Vendor\\Module\\Api\\Observer"]

        self.assertEqual(record.attributed_sdk_calls, {"payments::get"})

    def test_parse_imports(self):
        imports = parse_imports("use Foo\\Bar\\Baz;\nuse \\Foo\\Qux as Alias;\n")
        self.assertEqual(imports, {"Baz": "Foo\\Bar\\Baz", "Alias": "Foo\\Qux"})

    def test_fixture_module_pipeline(self):
        build_module(self.module_dir)
        api_usage = ClassIndexer(self.module_dir).build()
        links = EventLinkExtractor(self.module_dir).extract()

        observers = DependencyResolver(api_usage).resolve(links)

        self.assertEqual(sorted(observers), [MISSING_OBSERVER, ORDER_PLACED])
        placed = observers[ORDER_PLACED]
        self.assertEqual(placed.events, ["sales_order_place_after", "checkout_submit_all_after"])
        self.assertEqual(placed.services.count(PAYMENT_SERVICE), 2)
        self.assertEqual(placed.attributed_endpoints, {"/v2/payments/tr_123"})
        self.assertEqual(placed.attributed_sdk_calls, {"payments::create", "refunds::create", INDIRECT_CALL_MARKER})
        self.assertEqual(observers[MISSING_OBSERVER].services, [])


if __name__ == '__main__':
    unittest.main()
