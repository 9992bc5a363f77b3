"""SPDX license identifier extraction.

Tokenizes a license expression into its identifiers. This is not an SPDX
grammar validator: malformed input degrades to whatever whitespace-separated
tokens remain.
"""
import re
from collections.abc import Iterable
from typing import Optional

_PARENS = re.compile(r"[()]")
_OPERATORS = frozenset({"AND", "OR", "WITH"})


def extract_license_ids(spdx_expression: Optional[str]) -> list[str]:
    """Extract license identifiers from an SPDX expression.

    Operators are matched case-insensitively as whole tokens only, so the
    ``-or-`` inside ``GPL-2.0-or-later`` is part of the identifier.

    Args:
        spdx_expression: Expression such as "(MIT OR Apache-2.0)", or None.

    Returns:
        Identifiers in expression order. Duplicates are kept; the lone
        "+" operator token is dropped.
    """
    if not spdx_expression:
        return []

    tokens = _PARENS.sub(" ", spdx_expression).split()
    return [
        token
        for token in tokens
        if token != "+" and token.upper() not in _OPERATORS
    ]


def unique_license_ids(expressions: Iterable[Optional[str]]) -> set[str]:
    """Collect the distinct identifiers across many expressions.

    Args:
        expressions: SPDX expressions; None and empty entries are ignored.

    Returns:
        Set of identifiers found in any expression.
    """
    ids: set[str] = set()
    for expression in expressions:
        ids.update(extract_license_ids(expression))
    return ids
