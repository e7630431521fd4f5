# src/eunit_runner/utils/__init__.py

from .utils_matching import is_hidden_below, matches_basename
from .utils_paths import (
    replace_path_segment,
    shorten_path_for_display,
)
from .utils_system import find_executable


__all__ = [  # noqa: RUF022
    # utils_matching
    "is_hidden_below",
    "matches_basename",
    # utils_paths
    "replace_path_segment",
    "shorten_path_for_display",
    # utils_system
    "find_executable",
]
