"""
credlify.substitution - Template Placeholder Substitution
=========================================================

Templates carry placeholders of the form ``%%[name]%%``, where ``name``
contains letters, digits, periods, underscores and hyphens. Names are
case sensitive.

Rules
-----
- A placeholder with a value in the mapping is replaced by that value
  (converted with ``str``).
- A placeholder without a value is left exactly as it is. Template sets
  written for other tools rely on this, so it is not an error.
- Substitution is a single left-to-right pass. Inserted values are never
  scanned again, so a value containing ``%%[other]%%`` stays literal.

>>> substitute("a %%[x]%% b", {"x": "1"})
'a 1 b'
>>> substitute("a %%[y]%% b", {"x": "1"})
'a %%[y]%% b'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any


PLACEHOLDER_PATTERN = re.compile(r"%%\[([A-Za-z0-9._-]+)\]%%")


def substitute(text: str, values: Mapping[str, Any]) -> str:
    """
    Replace every resolvable placeholder in ``text``.

    Parameters
    ----------
    text : str
        Template text.

    values : Mapping[str, Any]
        Replacement values keyed by placeholder name.

    Returns
    -------
    str
        The text with known placeholders replaced.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in values:
            return str(values[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def find_placeholders(text: str) -> list[str]:
    """Return the distinct placeholder names in ``text``, in order of appearance."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(text)))
