"""Version specifier coercion and ordering for npm-style specifiers."""

import re
from typing import Any

import semantic_version

from .models import NormalizedVersion, ParseStatus, Selection

MAX_SPEC_LENGTH = 256
MAX_SAFE_COMPONENT = 2 ** 53 - 1

# First major[.minor[.patch]] group that is not part of a longer ASCII digit run.
_COERCE_RE = re.compile(r'(?:^|[^\d])(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?:$|[^\d])', re.ASCII)


def normalize(spec: Any) -> NormalizedVersion:
    """Coerce a specifier such as "^1.2.3", "~1.2", ">=1" or "v2" to major.minor.patch.

    Range operators, prerelease tags and build metadata are ignored; missing
    minor or patch parts default to 0. Input without a usable digit group is
    reported as unparseable rather than raising.

    Args:
        spec: Raw specifier from a manifest.

    Returns:
        NormalizedVersion carrying the parse status.
    """
    if not isinstance(spec, str):
        return NormalizedVersion(raw=str(spec), status=ParseStatus.UNPARSEABLE)
    if not spec or len(spec) > MAX_SPEC_LENGTH:
        return NormalizedVersion(raw=spec, status=ParseStatus.UNPARSEABLE)

    m = _COERCE_RE.search(spec)
    if not m:
        return NormalizedVersion(raw=spec, status=ParseStatus.UNPARSEABLE)

    parts = [int(g) if g is not None else 0 for g in m.groups()]
    if any(p > MAX_SAFE_COMPONENT for p in parts):
        return NormalizedVersion(raw=spec, status=ParseStatus.UNPARSEABLE)

    major, minor, patch = parts
    version = semantic_version.Version(major=major, minor=minor, patch=patch)
    return NormalizedVersion(raw=spec, status=ParseStatus.PARSED, version=version)


def select_higher(spec_a: str, spec_b: str) -> Selection:
    """Pick the higher of two specifiers.

    Unparseable specifiers always lose to parseable ones; when neither can be
    ordered, or both coerce to the same version, the first argument wins.
    """
    norm_a = normalize(spec_a)
    norm_b = normalize(spec_b)

    if not norm_a.is_parsed and not norm_b.is_parsed:
        return Selection(selected=spec_a, preferred_is_a=True)
    if not norm_a.is_parsed:
        return Selection(selected=spec_b, preferred_is_a=False)
    if not norm_b.is_parsed:
        return Selection(selected=spec_a, preferred_is_a=True)

    if norm_a.version > norm_b.version:
        return Selection(selected=spec_a, preferred_is_a=True)
    if norm_b.version > norm_a.version:
        return Selection(selected=spec_b, preferred_is_a=False)
    return Selection(selected=spec_a, preferred_is_a=True)


def is_lower(current: str, selected: str) -> bool:
    """Return True only when both specifiers parse and current < selected."""
    norm_current = normalize(current)
    norm_selected = normalize(selected)
    if not (norm_current.is_parsed and norm_selected.is_parsed):
        return False
    return norm_current.version < norm_selected.version
