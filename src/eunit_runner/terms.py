# src/eunit_runner/terms.py
"""Erlang term rendering for option lists handed to erl/erlc.

Python values map onto Erlang terms as follows:

    str        → atom           "verbose"        → verbose
    ErlString  → string         ErlString("a")   → "a"
    Path       → string         Path("/x/ebin")  → "/x/ebin"
    tuple      → tuple          ("d", "TEST")    → {d, 'TEST'}
    list       → list           ["a", "b"]       → [a, b]
    bool       → true / false
    int, float → number
    None       → undefined

Config files (JSON/TOML) have no tuples, so `term_from_config()` reads a
single-key object ``{"report": ...}`` as ``{report, ...}`` and supports the
explicit forms ``{"$tuple": [...]}`` and ``{"$string": "..."}``.
"""

import re
from pathlib import Path
from typing import Any


Term = Any

_UNQUOTED_ATOM = re.compile(r"^[a-z][A-Za-z0-9_@]*$")
_RESERVED_WORDS = frozenset(
    {
        "after",
        "and",
        "andalso",
        "band",
        "begin",
        "bnot",
        "bor",
        "bsl",
        "bsr",
        "bxor",
        "case",
        "catch",
        "cond",
        "div",
        "end",
        "fun",
        "if",
        "let",
        "maybe",
        "not",
        "of",
        "or",
        "orelse",
        "receive",
        "rem",
        "try",
        "when",
        "xor",
    }
)


class ErlString(str):
    """A value rendered as an Erlang string literal instead of an atom."""

    __slots__ = ()


def format_atom(name: str) -> str:
    if _UNQUOTED_ATOM.match(name) and name not in _RESERVED_WORDS:
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def format_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_term(term: Term) -> str:  # noqa: PLR0911
    """Render a Python value as Erlang source text."""
    # bool before int: bool is an int subclass
    if isinstance(term, bool):
        return "true" if term else "false"
    if term is None:
        return "undefined"
    if isinstance(term, ErlString):
        return format_string(term)
    if isinstance(term, Path):
        return format_string(str(term))
    if isinstance(term, str):
        return format_atom(term)
    if isinstance(term, (int, float)):
        return repr(term)
    if isinstance(term, tuple):
        return "{" + ", ".join(format_term(t) for t in term) + "}"
    if isinstance(term, list):
        return "[" + ", ".join(format_term(t) for t in term) + "]"

    xmsg = f"Cannot render {type(term).__name__} as an Erlang term: {term!r}"
    raise TypeError(xmsg)


def term_from_config(value: Any) -> Term:  # noqa: PLR0911
    """Convert a JSON/TOML/Python config value into a term."""
    if isinstance(value, (bool, int, float, ErlString, Path)) or value is None:
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, tuple):
        return tuple(term_from_config(v) for v in value)
    if isinstance(value, list):
        return [term_from_config(v) for v in value]
    if isinstance(value, dict):
        if len(value) != 1:
            xmsg = (
                "Erlang term objects must have exactly one key "
                f"(got {sorted(value)!r})"
            )
            raise ValueError(xmsg)
        ((key, inner),) = value.items()
        if key == "$string":
            if not isinstance(inner, str):
                xmsg = f"'$string' expects a string, got {type(inner).__name__}"
                raise TypeError(xmsg)
            return ErlString(inner)
        if key == "$tuple":
            if not isinstance(inner, list):
                xmsg = f"'$tuple' expects a list, got {type(inner).__name__}"
                raise TypeError(xmsg)
            return tuple(term_from_config(v) for v in inner)
        return (str(key), term_from_config(inner))

    xmsg = f"Unsupported value in Erlang term config: {value!r}"
    raise TypeError(xmsg)


def terms_from_config(values: list[Any]) -> list[Term]:
    return [term_from_config(v) for v in values]


def has_keyword(terms: list[Term], key: str) -> bool:
    """True if `terms` holds a ``{key, ...}`` tuple (proplist-style lookup)."""
    return any(
        isinstance(term, tuple) and len(term) > 0 and term[0] == key
        for term in terms
    )
