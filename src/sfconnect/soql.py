"""
Positional parameter substitution for SOQL.

SOQL has no bind variables over REST, so ``$1``, ``$2``, ... placeholders are
replaced textually with escaped SOQL literals before the query is sent.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional, Sequence

from simple_salesforce.format import quote_soql_value

# "$10" is placeholder 10, never placeholder 1 followed by "0"; "$01" is not a placeholder.
_PLACEHOLDER = re.compile(r"\$([1-9][0-9]*)(?![0-9])")


def to_soql_literal(value: Any) -> str:
    """Escape one parameter value as a SOQL literal.

    Dates (and datetimes, truncated to their date) become ``YYYY-MM-DD``.
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return quote_soql_value(value)


def substitute(template: str, params: Optional[Sequence[Any]] = None) -> str:
    """Replace every ``$i`` in *template* with the escaped ``params[i-1]``.

    Placeholders with no matching parameter are left as they are, and so is
    the template when *params* is None or empty.
    """
    if not params:
        return template

    literals = [to_soql_literal(p) for p in params]

    def _replace(m: re.Match[str]) -> str:
        idx = int(m.group(1))
        if 1 <= idx <= len(literals):
            return literals[idx - 1]
        return m.group(0)

    # One pass over the template so a value containing "$2" is never re-read.
    return _PLACEHOLDER.sub(_replace, template)
