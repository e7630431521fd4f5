# src/eunit_runner/discovery.py
"""Test module discovery.

Turns a set of source directories and glob patterns into the list of module
names handed to the test engine. Patterns never carry the extension: the
runner appends ``.erl`` itself, so ``foo*`` selects ``foo.erl``,
``foo_tests.erl``, ``foobar.erl`` and so on.

A module ``X_tests`` is the conventional companion of ``X``. EUnit already
runs ``X_tests`` when asked to test ``X``, so when both are discovered only
``X`` is kept.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

from .constants import DEFAULT_PATTERNS, SOURCE_EXTENSION, TEST_SUFFIX
from .logs import getAppLogger
from .utils import is_hidden_below, matches_basename


def _files_in(directory: Path, filename_pattern: str) -> list[Path]:
    logger = getAppLogger()

    if directory.is_file():
        return [directory] if matches_basename(directory, filename_pattern) else []

    if not directory.is_dir():
        # umbrella children commonly lack a test/ dir
        logger.trace(f"[discovery] Skipping missing directory: {directory}")
        return []

    # dotfiles and dot-directories are never sources
    return [
        p
        for p in directory.rglob("*")
        if p.is_file()
        and not is_hidden_below(p, directory)
        and matches_basename(p, filename_pattern)
    ]


def find_source_files(
    directories: Sequence[Path | str],
    patterns: Sequence[str] | None = None,
) -> list[Path]:
    """Collect every source file matching any pattern under any directory.

    Files are returned once each, sorted, even when several patterns or
    overlapping directories reach them.
    """
    logger = getAppLogger()
    patterns = list(patterns) if patterns else list(DEFAULT_PATTERNS)

    found: set[Path] = set()
    for pattern in patterns:
        filename_pattern = pattern + SOURCE_EXTENSION
        for directory in directories:
            matches = _files_in(Path(directory), filename_pattern)
            logger.trace(
                f"[discovery] {filename_pattern!r} in {directory}: {len(matches)} match(es)"
            )
            found.update(Path(p).absolute() for p in matches)

    return sorted(found)


def module_name_from_path(path: Path | str) -> str:
    """Module name for a source file: its base name without the extension."""
    name = Path(path).name
    if name.endswith(SOURCE_EXTENSION):
        return name[: -len(SOURCE_EXTENSION)]
    return name


def is_tests_module(module_name: str) -> bool:
    return module_name.endswith(TEST_SUFFIX) and module_name != TEST_SUFFIX


def without_test_suffix(module_name: str) -> str:
    if is_tests_module(module_name):
        return module_name[: -len(TEST_SUFFIX)]
    return module_name


def remove_test_duplicates(module_names: Iterable[str]) -> list[str]:
    """Drop ``X_tests`` whenever ``X`` is also present.

    Returns a sorted list with no duplicates.
    """
    logger = getAppLogger()
    all_names = set(module_names)

    kept: list[str] = []
    for name in sorted(all_names):
        if is_tests_module(name) and without_test_suffix(name) in all_names:
            logger.trace(
                f"[discovery] Dropping {name}: covered by {without_test_suffix(name)}"
            )
            continue
        kept.append(name)
    return kept


def resolve_test_modules(
    directories: Sequence[Path | str],
    patterns: Sequence[str] | None = None,
) -> list[str]:
    """Resolve the test modules to run.

    Args:
        directories: Directories to search (recursively). Missing directories
            contribute nothing.
        patterns: Globs without extension. ``None`` or empty means ``["*"]``.

    Returns:
        Sorted module names with ``X_tests`` removed where ``X`` exists.

    Raises:
        ValueError: if `directories` is empty.
    """
    logger = getAppLogger()
    if not directories:
        xmsg = "resolve_test_modules() needs at least one directory to search"
        raise ValueError(xmsg)

    files = find_source_files(directories, patterns)

    names: set[str] = set()
    for f in files:
        name = module_name_from_path(f)
        if not name:
            logger.trace(f"[discovery] Ignoring file with empty module name: {f}")
            continue
        names.add(name)

    modules = remove_test_duplicates(names)
    logger.debug(
        "Resolved %d test module(s) from %d source file(s)", len(modules), len(files)
    )
    return modules
