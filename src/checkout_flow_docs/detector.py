"""
Endpoint and SDK call detection.

Pattern matching over raw source text. Nothing is parsed or executed, so
dynamically built endpoints stay invisible unless a wrapper marker catches them.
"""
from __future__ import annotations

import re
from typing import Optional, Set, Tuple

SDK_RESOURCES = ("payments", "orders", "refunds", "shipments", "captures")
SDK_ACTIONS = ("create", "get", "update", "cancel", "list", "capture", "refund")

INDIRECT_CALL_MARKER = "custom Mollie SDK wrapper call"
INDIRECT_CALL_TOKENS = ("mollieApiClient", "performHttpCall")

ENDPOINT_PATTERN = re.compile(r'/v\d+/[\w/:]+', re.IGNORECASE)

SDK_CALL_PATTERN = re.compile(
    r'(?:->|::)\s*(' + '|'.join(SDK_RESOURCES) + r')\s*->\s*(' + '|'.join(SDK_ACTIONS) + r')\s*\(',
    re.IGNORECASE
)

# performHttpCall($method, 'v2/payments', ...) or performHttpCallToFullUrl($method, 'https://api.mollie.com/v2/...')
WRAPPER_CALL_PATTERN = re.compile(
    r'performHttpCall(?:ToFullUrl)?\s*\([^,]+,\s*["\'](?:https?://api\.mollie\.com/)?(v\d+/[\w/:-]+)["\']',
    re.IGNORECASE
)


def detect_api_usage(code: Optional[str]) -> Tuple[Set[str], Set[str]]:
    """
    Extract endpoint paths and SDK call signatures from a block of source text.

    Args:
        code: Source text (None or empty is accepted)

    Returns:
        Tuple of (endpoints, sdk_calls). Endpoints keep their original casing,
        SDK calls are normalized to lower-case "resource::action".
    """
    if not code:
        return set(), set()

    endpoints = {match.group(0) for match in ENDPOINT_PATTERN.finditer(code)}
    sdk_calls = {
        f"{match.group(1).lower()}::{match.group(2).lower()}"
        for match in SDK_CALL_PATTERN.finditer(code)
    }
    return endpoints, sdk_calls


def detect_wrapper_calls(code: Optional[str]) -> Set[str]:
    """Literal API paths handed to the performHttpCall wrappers."""
    if not code:
        return set()
    return {f"performHttpCall: {match.group(1)}" for match in WRAPPER_CALL_PATTERN.finditer(code)}


def has_indirect_call(code: Optional[str]) -> bool:
    """True when the text references the API client or the HTTP call wrapper."""
    if not code:
        return False
    return any(token in code for token in INDIRECT_CALL_TOKENS)
