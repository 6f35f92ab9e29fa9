from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from checkout_flow_docs.class_indexer import ClassIndexer, extract_class_id
from checkout_flow_docs.detector import INDIRECT_CALL_MARKER
from module_fixture import PAYMENT_SERVICE, REFUND_SERVICE, build_module, write_files


class TestExtractClassId(unittest.TestCase):

    def test_namespace_and_class(self):
        code = "<?php\nnamespace Vendor\\Module\\Api;\n\nfinal class PaymentService\n{\n}\n"
        self.assertEqual(extract_class_id(code), "Vendor\\Module\\Api\\PaymentService")

    def test_missing_namespace(self):
        self.assertIsNone(extract_class_id("<?php\nclass Foo {}\n"))

    def test_interface_is_skipped(self):
        code = "<?php\nnamespace Vendor\\Module;\n\ninterface ClientInterface\n{\n}\n"
        self.assertIsNone(extract_class_id(code))

    def test_multiple_classes_are_skipped(self):
        code = "<?php\nnamespace Vendor\\Module;\n\nclass A {}\nclass B {}\n"
        self.assertIsNone(extract_class_id(code))


class TestClassIndexer(unittest.TestCase):
    """
    Tests for the ClassIndexer, using a temporary module tree.
    """

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.module_dir = build_module(Path(self.temp_dir.name))

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_indexes_only_classes_with_api_usage(self):
        index = ClassIndexer(self.module_dir).build()
        self.assertEqual(sorted(index), [PAYMENT_SERVICE, REFUND_SERVICE])

    def test_entry_contents(self):
        index = ClassIndexer(self.module_dir).build()

        payments = index[PAYMENT_SERVICE]
        self.assertEqual(payments.endpoints, frozenset({"/v2/payments/tr_123"}))
        self.assertEqual(payments.sdk_calls, frozenset({"payments::create"}))
        self.assertEqual(payments.source_path.name, "PaymentService.php")

        refunds = index[REFUND_SERVICE]
        self.assertEqual(refunds.endpoints, frozenset())
        self.assertIn("refunds::create", refunds.sdk_calls)

    def test_perform_http_call_adds_indirect_marker(self):
        write_files(self.module_dir, {
            "Vendor/Module/Client.php": "<?php\nnamespace Vendor\\Module;\n\nclass Client\n{\n"
                                        "    public function call($url) { return $this->performHttpCall('GET', $url); }\n}\n"
        })
        index = ClassIndexer(self.module_dir).build()
        self.assertEqual(index["Vendor\\Module\\Client"].sdk_calls, frozenset({INDIRECT_CALL_MARKER}))

    def test_wrapper_literal_path_recorded(self):
        write_files(self.module_dir, {
            "Vendor/Module/Methods.php": "<?php\nnamespace Vendor\\Module;\n\nclass Methods\n{\n"
                                         "    public function all() { return $this->performHttpCall('GET', 'v2/methods'); }\n}\n"
        })
        index = ClassIndexer(self.module_dir).build()
        self.assertEqual(
            index["Vendor\\Module\\Methods"].sdk_calls,
            frozenset({"performHttpCall: v2/methods", INDIRECT_CALL_MARKER})
        )

    def test_other_extensions_are_ignored(self):
        write_files(self.module_dir, {
            "view/frontend/web/js/checkout.js": "fetch('/v2/payments/tr_999');",
        })
        index = ClassIndexer(self.module_dir).build()
        self.assertEqual(len(index), 2)

    def test_empty_file_is_skipped(self):
        write_files(self.module_dir, {"Vendor/Module/Empty.php": ""})
        index = ClassIndexer(self.module_dir).build()
        self.assertEqual(len(index), 2)

    def test_duplicate_class_first_write_wins(self):
        header = "<?php\nnamespace Vendor\\Module;\n\nclass Dup\n{\n"
        write_files(self.module_dir, {
            "a/Dup.php": header + "    const URL = '/v2/orders';\n}\n",
            "b/Dup.php": header + "    const URL = '/v2/refunds';\n}\n",
        })

        indexer = ClassIndexer(self.module_dir)
        index = indexer.build()

        entry = index["Vendor\\Module\\Dup"]
        self.assertEqual(entry.endpoints, frozenset({"/v2/orders"}))
        self.assertEqual(entry.source_path, self.module_dir / "a" / "Dup.php")
        self.assertEqual(indexer.duplicates, [("Vendor\\Module\\Dup", self.module_dir / "b" / "Dup.php")])

    def test_empty_module(self):
        with tempfile.TemporaryDirectory() as empty:
            self.assertEqual(ClassIndexer(Path(empty)).build(), {})


if __name__ == '__main__':
    unittest.main()
