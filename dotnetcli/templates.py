"""Parsing of the tabular output printed by ``dotnet new list``."""
from __future__ import annotations

from typing import List, Tuple
import re

from .models import DotnetTemplate

_SEPARATOR_PATTERN = re.compile(r"^\s*-+(\s+-+)*\s*$")
_COLUMN_PATTERN = re.compile(r"-+")


def _column_spans(separator: str) -> List[Tuple[int, int | None]]:
    matches = list(_COLUMN_PATTERN.finditer(separator))
    spans: List[Tuple[int, int | None]] = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else None
        spans.append((match.start(), end))
    return spans


def _split(value: str, separator: str) -> List[str]:
    return [part.strip() for part in value.split(separator) if part.strip()]


def parse_dotnet_new_list_output(output: str) -> List[DotnetTemplate]:
    """Parse ``dotnet new list`` output into template descriptors.

    Columns are located from the dashed separator line under the header, so
    names containing spaces are kept whole. Output without a separator line
    yields an empty list.
    """

    lines = output.splitlines()
    separator_index = next(
        (index for index, line in enumerate(lines) if _SEPARATOR_PATTERN.match(line)),
        None,
    )
    if separator_index is None:
        return []

    spans = _column_spans(lines[separator_index])
    templates: List[DotnetTemplate] = []
    for line in lines[separator_index + 1:]:
        if not line.strip():
            continue
        cells = [line[start:end].strip() if end is not None else line[start:].strip() for start, end in spans]
        cells.extend([""] * (4 - len(cells)))
        name, short_names, languages, tags = cells[:4]
        if not name:
            continue
        templates.append(
            DotnetTemplate(
                name=name,
                short_names=_split(short_names, ","),
                languages=[language.strip("[]") for language in _split(languages, ",")],
                tags=_split(tags, "/"),
            )
        )
    return templates


__all__ = ["parse_dotnet_new_list_output"]
