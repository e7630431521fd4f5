# src/eunit_runner/utils/utils_matching.py


from pathlib import Path

from apathetic_utils import fnmatchcase_portable


def matches_basename(path: Path | str, pattern: str) -> bool:
    """Case-sensitive glob match against the final path component only.

    The directory part of `path` never takes part in the match, so a pattern
    like ``"foo*"`` matches ``src/foo_bar.erl`` and ``test/deep/foo.erl``.
    """
    return fnmatchcase_portable(Path(path).name, pattern)


def is_hidden_below(path: Path, base: Path) -> bool:
    """True when any component of `path` below `base` starts with a dot."""
    try:
        parts = path.relative_to(base).parts
    except ValueError:
        parts = path.parts
    return any(part.startswith(".") for part in parts)
