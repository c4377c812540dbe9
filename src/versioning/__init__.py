"""Version specifier normalization and ordering."""

from .comparator import is_lower, normalize, select_higher
from .models import DependencyClass, NormalizedVersion, ParseStatus, Selection

__all__ = [
    "DependencyClass",
    "NormalizedVersion",
    "ParseStatus",
    "Selection",
    "is_lower",
    "normalize",
    "select_higher",
]
