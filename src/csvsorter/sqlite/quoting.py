from __future__ import annotations

import re

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_DOT_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\t", "\\t"),
    ("\n", "\\n"),
    ("\r", "\\r"),
)


def is_plain_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


def quote_identifier(name: str) -> str:
    """
    SQL-safe column token.

    Plain identifiers are returned as-is; anything else is wrapped in double
    quotes with each embedded double quote written twice.
    """
    if is_plain_identifier(name):
        return name
    return '"' + name.replace('"', '""') + '"'


def quote_dot_argument(value: str) -> str:
    """
    Double-quoted argument for a sqlite3 shell dot-command.

    The shell resolves backslash escapes inside double quotes, so backslashes
    and quotes are escaped and control characters are written as ``\\t`` etc.
    """
    for raw, escaped in _DOT_ESCAPES:
        value = value.replace(raw, escaped)
    return f'"{value}"'
