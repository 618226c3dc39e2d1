"""Conversion of option mappings and free-form strings into argument lists."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping
import re

EXTRA_PARAMS_PATTERN = re.compile(r'\S*".+?"|\S+')
"""Matches ``--flag="quoted value"`` as one token, otherwise any run of non-space characters."""


def swap_keys_using_map(options: Mapping[str, Any], key_map: Mapping[str, str]) -> Dict[str, Any]:
    """Return a copy of ``options`` with keys renamed through ``key_map``.

    Keys missing from ``key_map`` are kept as they are. Insertion order is
    preserved and ``options`` is left untouched.
    """

    return {key_map.get(key, key): value for key, value in options.items()}


def _flag(key: str) -> str:
    return key if key.startswith("-") else f"--{key}"


def get_spawn_parameter_array(options: Mapping[str, Any]) -> List[str]:
    """Flatten ``options`` into command-line tokens.

    ``True`` produces a bare flag, ``False`` and ``None`` produce nothing, and
    any other value produces the flag followed by the value as its own token.
    """

    tokens: List[str] = []
    for key, value in options.items():
        if value is None or value is False:
            continue
        if value is True:
            tokens.append(_flag(key))
            continue
        tokens.extend([_flag(key), str(value)])
    return tokens


def map_options(options: Mapping[str, Any] | None, key_map: Mapping[str, str]) -> List[str]:
    if not options:
        return []
    return get_spawn_parameter_array(swap_keys_using_map(options, key_map))


def tokenize_extra_parameters(raw: str | None) -> List[str]:
    """Split a free-form argument string, keeping ``--flag="a b"`` segments intact.

    Escaped quotes inside a quoted segment are not supported.
    """

    if not raw:
        return []
    return EXTRA_PARAMS_PATTERN.findall(raw)


__all__ = [
    "EXTRA_PARAMS_PATTERN",
    "get_spawn_parameter_array",
    "map_options",
    "swap_keys_using_map",
    "tokenize_extra_parameters",
]
