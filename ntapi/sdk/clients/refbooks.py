"""Reference book (refbook) listing and archive parsing.

Refbooks are dated snapshots of instrument master data. ``GET /refbooks``
lists the available dates, ``GET /refbooks/{date}`` lists the per-market
archives and each ``{name}.json.zip`` holds exactly one JSON array of
records.
"""

from __future__ import annotations

import io
import json
import re
import zipfile
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.exceptions import InvalidInputError, SerializationError

REFBOOKS_PATH = "/refbooks"

# Pseudo-name selecting every archive of the latest date
ALL = "all"

_DATE = re.compile(r"\d{4}-\d{2}-\d{2}/")
_ARCHIVE = re.compile(r"([A-Za-z0-9_]+)\.json\.zip")


def dates_path() -> str:
    return REFBOOKS_PATH


def names_path(reference_date: str) -> str:
    return f"{REFBOOKS_PATH}/{reference_date}"


def archive_path(reference_date: str, name: str) -> str:
    return f"{REFBOOKS_PATH}/{reference_date}/{name}.json.zip"


def parse_latest_date(content: str) -> str:
    """Latest ``YYYY-MM-DD`` directory in a refbook listing.

    Examples:
        >>> parse_latest_date('<a href="2024-01-02/">x</a> <a href="2024-03-01/">y</a>')
        '2024-03-01'

    Raises:
        InvalidInputError: The listing names no dates
    """
    dates = sorted(match.rstrip("/") for match in _DATE.findall(content))
    if not dates:
        raise InvalidInputError("No refbook dates found")
    return dates[-1]


def parse_names(content: str) -> list[str]:
    """Sorted, de-duplicated archive names in a dated listing.

    Examples:
        >>> parse_names("usa.json.zip FORTS.json.zip usa.json.zip")
        ['FORTS', 'usa']
    """
    return sorted(set(_ARCHIVE.findall(content)))


def parse_archive(content: bytes) -> list[dict[str, Any]]:
    """Records held in a single-entry refbook archive.

    Raises:
        InvalidInputError: Not a zip archive, or not exactly one entry
        SerializationError: The entry is not a JSON array of objects
    """
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            entries = archive.namelist()
            if len(entries) != 1:
                raise InvalidInputError(
                    f"Expected one file in the archive, found {len(entries)}", value=entries
                )
            raw = archive.read(entries[0])
    except zipfile.BadZipFile as exc:
        raise InvalidInputError(f"Malformed refbook archive: {exc}") from exc

    try:
        records = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SerializationError(f"Invalid refbook JSON: {exc}") from exc
    if not isinstance(records, list) or not all(isinstance(item, dict) for item in records):
        raise SerializationError("Refbook must be a JSON array of objects")
    return records


def build_filters(filters: Mapping[str, Any] | None, show_expired: bool) -> dict[str, Any]:
    """Copy caller filters, adding ``istrade=1`` unless expired rows are wanted."""
    result = dict(filters or {})
    if not show_expired:
        result["istrade"] = 1
    return result


def refbook_name(filters: Mapping[str, Any]) -> str | None:
    """Archive named by the ``mkt_short_code`` filter, if it is a string."""
    value = filters.get("mkt_short_code")
    return value if isinstance(value, str) else None


def matches(record: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    """Every filter key is present in ``record`` with an equal value."""
    return all(key in record and record[key] == value for key, value in filters.items())


def select(records: Iterable[Mapping[str, Any]], filters: Mapping[str, Any]) -> list[Any]:
    return [record for record in records if matches(record, filters)]
