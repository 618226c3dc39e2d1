"""SDK version handling and the version-dependent command grammars.

The dotnet CLI changed its grammar twice in ways that matter here:

* ``dotnet new --list`` took the search term *before* the option until SDK
  6.0.100, after the option from 6.0.100, and became the ``dotnet new list``
  subcommand in 7.0.100.
* ``dotnet format`` replaced ``--fix-whitespace``/``--fix-style``/
  ``--fix-analyzers`` with the ``whitespace``/``style``/``analyzers``
  subcommands in SDK 6.

Both are modelled as small closed sets of variants so the compatibility
matrix can be tested without running any process.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any, Dict, List, Mapping, Tuple
import re

from .models import FORMAT_LEGACY_FLAGS

_VERSION_PATTERN = re.compile(
    r"^\s*v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?\s*$"
)


def _prerelease_key(prerelease: Tuple[str, ...]) -> Tuple[Tuple[int, int | str], ...]:
    return tuple((0, int(part)) if part.isdigit() else (1, part) for part in prerelease)


@total_ordering
@dataclass(frozen=True)
class SdkVersion:
    """Semantic version of an installed SDK."""

    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str | "SdkVersion") -> "SdkVersion":
        if isinstance(text, SdkVersion):
            return text
        match = _VERSION_PATTERN.match(str(text))
        if match is None:
            raise ValueError(f"Invalid SDK version: {text!r}")
        prerelease = match.group("prerelease")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
        )

    def _key(self) -> tuple:
        # A release sorts after all of its prereleases.
        return (
            self.major,
            self.minor,
            self.patch,
            0 if self.prerelease else 1,
            _prerelease_key(self.prerelease),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SdkVersion):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        return f"{core}-{'.'.join(self.prerelease)}" if self.prerelease else core


NET6_FEATURE_BAND = SdkVersion(6, 0, 100)
NET7_FEATURE_BAND = SdkVersion(7, 0, 100)


class TemplateListGrammar(str, Enum):
    LEGACY = "legacy"
    """``new <search> --list`` (before 6.0.100)."""
    LIST_OPTION = "list-option"
    """``new --list <search>`` (6.0.100 up to 7.0.100)."""
    LIST_COMMAND = "list-command"
    """``new list <search>`` (7.0.100 and later)."""


def template_list_grammar(version: str | SdkVersion) -> TemplateListGrammar:
    parsed = SdkVersion.parse(version)
    if parsed < NET6_FEATURE_BAND:
        return TemplateListGrammar.LEGACY
    if parsed < NET7_FEATURE_BAND:
        return TemplateListGrammar.LIST_OPTION
    return TemplateListGrammar.LIST_COMMAND


def template_list_arguments(
    version: str | SdkVersion,
    search: str | None = None,
    language: str | None = None,
) -> List[str]:
    """Build the arguments listing installed templates for the given SDK version."""

    grammar = template_list_grammar(version)
    params = ["new"]
    if grammar is TemplateListGrammar.LEGACY:
        if search:
            params.append(search)
        params.append("--list")
    elif grammar is TemplateListGrammar.LIST_OPTION:
        params.append("--list")
        if search:
            params.append(search)
    else:
        params.append("list")
        if search:
            params.append(search)
    if language:
        params.extend(["--language", language])
    return params


class FormatSubcommand(str, Enum):
    WHITESPACE = "whitespace"
    STYLE = "style"
    ANALYZERS = "analyzers"


_SUBCOMMAND_FLAGS: Tuple[Tuple[FormatSubcommand, str], ...] = (
    (FormatSubcommand.WHITESPACE, "fix_whitespace"),
    (FormatSubcommand.STYLE, "fix_style"),
    (FormatSubcommand.ANALYZERS, "fix_analyzers"),
)


@dataclass(slots=True)
class FormatInvocation:
    """One ``dotnet format`` call: an optional subcommand plus its options."""

    subcommand: FormatSubcommand | None
    options: Dict[str, Any] = field(default_factory=dict)


def uses_format_subcommands(version: str | SdkVersion, options: Mapping[str, Any] | None) -> bool:
    if not options or SdkVersion.parse(version).major < 6:
        return False
    return any(options.get(flag) is not None for flag in FORMAT_LEGACY_FLAGS)


def plan_format_subcommands(
    version: str | SdkVersion, options: Mapping[str, Any] | None
) -> List[FormatInvocation]:
    """Decide which ``dotnet format`` invocations to make.

    Returns a single invocation without a subcommand when the unified command
    applies. Otherwise one invocation per selected subcommand is returned, in
    whitespace, style, analyzers order. When any legacy flag is truthy, only
    the truthy ones are selected; otherwise every flag not explicitly
    ``False`` is.
    """

    options = dict(options or {})
    if not uses_format_subcommands(version, options):
        return [FormatInvocation(subcommand=None, options=options)]

    flags = {name: options.pop(name, None) for name in FORMAT_LEGACY_FLAGS}
    explicit = any(value is not None and value is not False for value in flags.values())

    invocations: List[FormatInvocation] = []
    for subcommand, name in _SUBCOMMAND_FLAGS:
        value = flags[name]
        if value is False or (explicit and value is None):
            continue
        sub_options = dict(options)
        if subcommand is not FormatSubcommand.WHITESPACE and isinstance(value, str):
            sub_options["severity"] = value
        invocations.append(FormatInvocation(subcommand=subcommand, options=sub_options))
    return invocations


__all__ = [
    "FormatInvocation",
    "FormatSubcommand",
    "NET6_FEATURE_BAND",
    "NET7_FEATURE_BAND",
    "SdkVersion",
    "TemplateListGrammar",
    "plan_format_subcommands",
    "template_list_arguments",
    "template_list_grammar",
    "uses_format_subcommands",
]
