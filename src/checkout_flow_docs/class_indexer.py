"""
Class Indexer

Walks the module source tree and builds the API-usage index: a mapping of
namespace-qualified class name -> ApiUsageEntry for every class whose source
text shows evidence of talking to the payment API.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .detector import INDIRECT_CALL_MARKER, detect_api_usage, detect_wrapper_calls, has_indirect_call
from .models import NAMESPACE_SEPARATOR, ApiUsageEntry, canonical_class_id

NAMESPACE_PATTERN = re.compile(r'^\s*namespace\s+([^;{\s]+)\s*[;{]', re.MULTILINE)
CLASS_PATTERN = re.compile(r'^\s*(?:(?:abstract|final|readonly)\s+)*class\s+(\w+)', re.MULTILINE)


def read_source(path: Path) -> Optional[str]:
    """Read a source file as text, returning None when it cannot be read."""
    try:
        return path.read_text(encoding='utf-8', errors='replace')
    except OSError:
        return None


def extract_class_id(code: str) -> Optional[str]:
    """
    Build "Namespace\\ClassName" from a source file header.

    Returns None unless the file declares exactly one namespace and exactly
    one class. Traits, interfaces and multi-class files are left out.
    """
    namespaces = NAMESPACE_PATTERN.findall(code)
    classes = CLASS_PATTERN.findall(code)
    if len(namespaces) != 1 or len(classes) != 1:
        return None
    return canonical_class_id(namespaces[0]) + NAMESPACE_SEPARATOR + classes[0]


class ClassIndexer:
    """
    Builds the API-usage index for a module directory.

    Attributes:
        module_dir: Root of the module source tree
        source_extension: Extension of the files to scan (".php")
        duplicates: (class_id, ignored path) pairs dropped by the first-write-wins rule
    """

    def __init__(self, module_dir: Path, source_extension: str = ".php", verbose: bool = False):
        self.module_dir = module_dir
        self.source_extension = source_extension
        self.verbose = verbose
        self.duplicates: List[Tuple[str, Path]] = []

    def iter_source_files(self) -> Iterator[Path]:
        """Yield every source file under the module root, in sorted order."""
        for path in sorted(self.module_dir.rglob(f"*{self.source_extension}")):
            if path.is_file():
                yield path

    def build(self) -> Dict[str, ApiUsageEntry]:
        """
        Scan all source files and return the API-usage index.

        The first file to declare a given class wins; later files declaring the
        same class are recorded in self.duplicates and ignored.
        """
        index: Dict[str, ApiUsageEntry] = {}

        for path in self.iter_source_files():
            entry = self.index_file(path)
            if entry is None:
                continue
            if entry.class_id in index:
                self.duplicates.append((entry.class_id, path))
                print(f"[SCAN] Warning: {entry.class_id} already indexed from "
                      f"{index[entry.class_id].source_path}, ignoring {path}")
                continue
            index[entry.class_id] = entry

        return index

    def index_file(self, path: Path) -> Optional[ApiUsageEntry]:
        """
        Analyze a single source file.

        Args:
            path: Source file to read

        Returns:
            An ApiUsageEntry, or None if the file has no usable class header
            or no API usage.
        """
        code = read_source(path)
        if not code:
            if self.verbose:
                print(f"[SCAN] Skipping unreadable or empty file: {path}")
            return None

        class_id = extract_class_id(code)
        if class_id is None:
            return None

        endpoints, sdk_calls = detect_api_usage(code)
        sdk_calls |= detect_wrapper_calls(code)

        # Endpoint computed at runtime: only the wrapper itself is visible
        if has_indirect_call(code):
            sdk_calls.add(INDIRECT_CALL_MARKER)

        if not endpoints and not sdk_calls:
            return None

        return ApiUsageEntry(
            class_id=class_id,
            source_path=path,
            endpoints=frozenset(endpoints),
            sdk_calls=frozenset(sdk_calls),
        )
