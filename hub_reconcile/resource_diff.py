"""Module for comparing nested resource documents.

Documents are compared through a canonical serialization so that two specs
that differ only in key order are considered equal.
"""

import difflib
import json
from typing import Any, Generator

import yaml

from .exceptions import DecodeError


__all__ = ["canonical_bytes", "spec_changed", "perform_spec_diff"]


def canonical_bytes(doc: Any) -> bytes:
    """Return a stable byte encoding of a nested document."""
    try:
        return json.dumps(
            doc, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")
    except (TypeError, ValueError) as err:
        raise DecodeError(f"Document is not serializable: {err}") from err


def spec_changed(existing: Any, desired: Any) -> bool:
    """Return True if the existing spec does not match the desired spec."""
    return canonical_bytes(existing) != canonical_bytes(desired)


def perform_spec_diff(
    existing: Any, desired: Any, n: int = 3
) -> Generator[str, None, None]:
    """Generate a unified diff between two specs for display in logs."""
    a = yaml.dump(existing, sort_keys=True, explicit_start=True).splitlines()
    b = yaml.dump(desired, sort_keys=True, explicit_start=True).splitlines()
    yield from difflib.unified_diff(
        a, b, fromfile="existing", tofile="desired", n=n, lineterm=""
    )
