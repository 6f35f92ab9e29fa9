"""
Dependency Resolver

Follows each observer to its constructor-injected services and attributes the
API usage of those services to the observer.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional

from .class_indexer import NAMESPACE_PATTERN, read_source
from .models import NAMESPACE_SEPARATOR, ApiUsageEntry, EventLink, ObserverRecord, canonical_class_id

CONSTRUCTOR_PATTERN = re.compile(r'function\s+__construct\s*\(([^)]*)\)')
PARAMETER_PATTERN = re.compile(r'([A-Z][A-Za-z0-9_\\]+)\s+\$([A-Za-z0-9_]+)')
USE_PATTERN = re.compile(r'^\s*use\s+\\?([A-Za-z0-9_\\]+)(?:\s+as\s+(\w+))?\s*;', re.MULTILINE | re.IGNORECASE)


def parse_imports(code: str) -> Dict[str, str]:
    """
    Map short names to fully-qualified names from "use" statements.

    "use Mollie\\Payment\\Config as MollieConfig;" gives {"MollieConfig": "Mollie\\Payment\\Config"}.
    """
    imports = {}
    for match in USE_PATTERN.finditer(code):
        qualified = canonical_class_id(match.group(1))
        alias = match.group(2) or qualified.rsplit(NAMESPACE_SEPARATOR, 1)[-1]
        imports[alias] = qualified
    return imports


class DependencyResolver:
    """
    Builds the observer map from event links and the API-usage index.

    Attributes:
        api_usage: Index produced by ClassIndexer (read-only here)
    """

    def __init__(self, api_usage: Mapping[str, ApiUsageEntry], verbose: bool = False):
        self.api_usage = api_usage
        self.verbose = verbose

    def resolve(self, links: Iterable[EventLink]) -> Dict[str, ObserverRecord]:
        """
        Walk event links in order and build one ObserverRecord per observer.

        Missing files, constructors that do not match and services without
        API usage are all skipped silently; every observer still gets a record.
        """
        observers: Dict[str, ObserverRecord] = {}

        for link in links:
            record = observers.get(link.observer_class_id)
            if record is None:
                record = ObserverRecord(class_id=link.observer_class_id)
                observers[link.observer_class_id] = record
            record.events.append(link.event_name)

            path = link.resolved_source_path
            if path is None or not path.is_file():
                if self.verbose:
                    print(f"[SCAN] No source for observer {link.observer_class_id} ({path})")
                continue

            code = read_source(path)
            if code is None:
                continue
            record.source_path = path
            self._collect_services(record, code)

        return observers

    def _collect_services(self, record: ObserverRecord, code: str) -> None:
        constructor = CONSTRUCTOR_PATTERN.search(code)
        if not constructor:
            return

        imports = parse_imports(code)
        namespace_match = NAMESPACE_PATTERN.search(code)
        namespace = canonical_class_id(namespace_match.group(1)) if namespace_match else None

        for match in PARAMETER_PATTERN.finditer(constructor.group(1)):
            service_type = match.group(1).strip()
            record.services.append(service_type)

            entry = self.lookup(service_type, imports, namespace)
            if entry is not None:
                record.resolved_services.add(entry.class_id)
                record.attributed_endpoints.update(entry.endpoints)
                record.attributed_sdk_calls.update(entry.sdk_calls)

    def lookup(
            self,
            service_type: str,
            imports: Optional[Mapping[str, str]] = None,
            namespace: Optional[str] = None
    ) -> Optional[ApiUsageEntry]:
        """
        Find the index entry for a declared constructor type.

        Tries the type as written, then qualified through the file's imports,
        then relative to the observer's own namespace.
        """
        class_id = canonical_class_id(service_type)
        entry = self.api_usage.get(class_id)
        if entry is not None:
            return entry

        head, _, rest = class_id.partition(NAMESPACE_SEPARATOR)
        if imports and head in imports:
            qualified = imports[head] + (NAMESPACE_SEPARATOR + rest if rest else "")
            entry = self.api_usage.get(qualified)
            if entry is not None:
                return entry

        if namespace:
            return self.api_usage.get(namespace + NAMESPACE_SEPARATOR + class_id)
        return None
