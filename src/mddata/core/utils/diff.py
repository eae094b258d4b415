"""Structural comparison of document data trees"""

from typing import Any


def compare_structure(reference: dict[str, Any], target: dict[str, Any]) -> tuple[bool, str]:
    """Check every header key of reference appears at the same nesting in target.

    Sibling order is irrelevant. Returns (ok, report); the report lists one
    missing path per line. Keys below a missing key are not listed.
    """
    missing: list[str] = []

    def walk(ref: dict[str, Any], tgt: dict[str, Any], prefix: tuple[str, ...]) -> None:
        for key, sub in ref.items():
            if key.startswith('_') or not isinstance(sub, dict):
                continue
            path = prefix + (key,)
            found = tgt.get(key)
            if not isinstance(found, dict):
                missing.append(".".join(path))
                continue
            walk(sub, found, path)

    walk(reference, target, ())
    if not missing:
        return True, ""
    return False, "".join(f"missing: {path}\n" for path in missing)
