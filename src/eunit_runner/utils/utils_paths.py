# src/eunit_runner/utils/utils_paths.py


from pathlib import Path


def shorten_path_for_display(
    path: Path | str,
    *,
    cwd: Path | None = None,
    config_dir: Path | None = None,
) -> str:
    """Shorten an absolute path for display purposes.

    Tries to make the path relative to cwd first, then config_dir, and picks
    the shortest result. If neither works, returns the absolute path as a string.
    """
    path_obj = Path(path).resolve()

    candidates: list[str] = []
    for base in (cwd, config_dir):
        if not base:
            continue
        try:
            rel = str(path_obj.relative_to(Path(base).resolve()))
        except ValueError:
            continue
        candidates.append(rel or ".")

    if candidates:
        return min(candidates, key=len)

    return str(path_obj)


def replace_path_segment(path: str, old: str, new: str) -> str:
    """Swap every path segment exactly equal to `old` for `new`.

    Only whole segments are replaced: ``_build/dev`` becomes ``_build/eunit``
    but ``_build/devel`` is left alone.
    """
    parts = Path(path).parts
    if not parts:
        return path
    return str(Path(*[new if p == old else p for p in parts]))
