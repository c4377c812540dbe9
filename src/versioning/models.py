"""Data models for version normalization and comparison."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import semantic_version


class DependencyClass(Enum):
    """Enum for the package.json dependency groupings."""
    NORMAL = "dependencies"
    DEVELOPMENT = "devDependencies"


class ParseStatus(Enum):
    """Outcome of coercing a version specifier."""
    PARSED = "parsed"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class NormalizedVersion:
    """Coerced form of a version specifier.

    ``version`` is only set when ``status`` is PARSED; callers branch on the
    status instead of testing the version for None.
    """
    raw: str
    status: ParseStatus
    version: Optional[semantic_version.Version] = None

    @property
    def is_parsed(self) -> bool:
        return self.status == ParseStatus.PARSED


@dataclass(frozen=True)
class Selection:
    """Result of choosing between two specifiers."""
    selected: str
    preferred_is_a: bool
