"""Name normalisation for exposed schema fields and configuration keys."""

from __future__ import annotations

import re


_NON_ALPHANUMERIC = re.compile(r"[^0-9a-zA-Z]+")
_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")
_UNDERSCORES = re.compile(r"_+")


def to_compliant_name(name: str) -> str:
    """Convert ``name`` to lower snake case, e.g. ``stringProp`` -> ``string_prop``."""
    value = _NON_ALPHANUMERIC.sub("_", name)
    value = _FIRST_CAP.sub(r"\1_\2", value)
    value = _ALL_CAP.sub(r"\1_\2", value)
    return _UNDERSCORES.sub("_", value).strip("_").lower()
