"""
Event-Link Extractor

Reads every events.xml in the module and lists the (event, observer) pairs
it declares.

Both layouts are accepted:
    <config><event name="...">...</event></config>
    <config><events><event name="...">...</event></events></config>
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, List

from .models import NAMESPACE_SEPARATOR, EventLink, canonical_class_id

EVENTS_FILENAME = "events.xml"


class EventLinkExtractor:
    """
    Extracts event -> observer links from declarative event configuration.

    Attributes:
        module_dir: Root of the module source tree
        source_extension: Extension appended to observer paths (".php")
        require_etc_dir: Only accept events.xml files below an "etc" directory
    """

    def __init__(
            self,
            module_dir: Path,
            source_extension: str = ".php",
            require_etc_dir: bool = False,
            verbose: bool = False
    ):
        self.module_dir = module_dir
        self.source_extension = source_extension
        self.require_etc_dir = require_etc_dir
        self.verbose = verbose

    def iter_config_files(self) -> Iterator[Path]:
        """Yield every events.xml file (name matched case-insensitively), sorted."""
        for path in sorted(self.module_dir.rglob("*")):
            if not path.is_file() or path.name.lower() != EVENTS_FILENAME:
                continue
            if self.require_etc_dir and "etc" not in path.relative_to(self.module_dir).parts[:-1]:
                continue
            yield path

    def extract(self) -> List[EventLink]:
        """
        Parse all event configuration files.

        Returns:
            EventLinks in file order then document order. Duplicates are kept.
        """
        links: List[EventLink] = []
        for config_file in self.iter_config_files():
            links.extend(self._parse_file(config_file))
        return links

    def _parse_file(self, config_file: Path) -> List[EventLink]:
        try:
            root = ET.parse(config_file).getroot()
        except (ET.ParseError, OSError) as e:
            if self.verbose:
                print(f"[SCAN] Skipping unparsable {config_file}: {e}")
            return []

        event_nodes = root.findall("event") or root.findall("events/event")

        links = []
        for event_node in event_nodes:
            event_name = event_node.get("name", "")
            for observer_node in event_node.findall("observer"):
                instance = canonical_class_id(observer_node.get("instance") or "")
                if not instance:
                    continue
                links.append(EventLink(
                    event_name=event_name,
                    observer_class_id=instance,
                    resolved_source_path=self.candidate_path(instance),
                    config_path=config_file,
                ))
        return links

    def candidate_path(self, instance: str) -> Path:
        """
        Map an observer class to the file it would live in under the module root.

        Example: "Vendor\\Module\\Observer\\A" -> <module_dir>/Vendor/Module/Observer/A.php
        """
        relative = canonical_class_id(instance).replace(NAMESPACE_SEPARATOR, "/")
        return self.module_dir / f"{relative}{self.source_extension}"
