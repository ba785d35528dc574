"""
Vehicle Dimension Matching.

Pure, synchronous lookup of wrappable square footage for a free-text
(year, make, model). Works over any sequence of rows exposing the
``VehicleRow`` attributes, so the same code serves ORM rows loaded from the
database and the bundled reference table.

Matching:
    1. make equal after normalization, model contained in either direction
    2. exact: requested year inside the row's range (or either side unbounded)
    3. closest_year: row whose range end is nearest the requested year,
       accepted within ``max_year_distance`` years
    4. any_year: first make+model row, whatever its years

Usage:
    from wrapcommand.backend.services.vehicle_matching import match_vehicle

    match = match_vehicle(rows, "2015", "Ford", "F150")
    if match:
        print(match.sqft.without_roof)
"""

import json
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Literal, Protocol

REFERENCE_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "vehicle_dimensions.json"

DEFAULT_MAX_YEAR_DISTANCE = 15

MatchType = Literal["exact", "closest_year", "any_year"]

MAKE_ALIASES = {
    "chevy": "chevrolet",
    "chev": "chevrolet",
    "vw": "volkswagen",
    "mercedes-benz": "mercedes",
    "mercedes benz": "mercedes",
    "benz": "mercedes",
    "merc": "mercedes",
    "mb": "mercedes",
}

MODEL_ALIASES = {
    "ram1500": "ram 1500",
    "ram2500": "ram 2500",
    "silverado1500": "silverado 1500",
    "silverado2500": "silverado 2500",
}

_YEAR_RE = re.compile(r"\b(\d{4})\b")
_QUERY_YEAR_RE = re.compile(r"\b(19[89]\d|20[0-3]\d)\b")
_F_SERIES_RE = re.compile(r"\bf\s?-?\s?(\d{3})\b")
_PUNCT_RE = re.compile(r"[^\w\s\-.]")
_RANGE_RE = re.compile(r"^\s*(\d{4})\s*(?:[-–—]\s*(\d{4})?|(\+))?\s*$")


class VehicleRow(Protocol):
    make: str
    model: str
    year_start: int | None
    year_end: int | None
    total_sqft: float
    side_sqft: float
    back_sqft: float
    hood_sqft: float
    roof_sqft: float


@dataclass(frozen=True)
class VehicleRecord:
    """In-memory vehicle row, used for the bundled reference table."""

    make: str
    model: str
    year_start: int | None
    year_end: int | None
    total_sqft: float
    side_sqft: float = 0.0
    back_sqft: float = 0.0
    hood_sqft: float = 0.0
    roof_sqft: float = 0.0


@dataclass(frozen=True)
class PanelSqft:
    sides: float
    back: float
    hood: float
    roof: float


@dataclass(frozen=True)
class SqftOptions:
    """Square footage figures for one vehicle."""

    with_roof: float
    without_roof: float
    roof_only: float
    panels: PanelSqft


@dataclass(frozen=True)
class VehicleMatch:
    make: str
    model: str
    year_start: int | None
    year_end: int | None
    match_type: MatchType
    sqft: SqftOptions


@dataclass(frozen=True)
class ParsedVehicleQuery:
    normalized: str
    year: int | None = None
    make: str | None = None
    model: str | None = None


@dataclass(frozen=True)
class VehicleOption:
    label: str
    value: str
    make: str = field(compare=False)
    model: str = field(compare=False)
    year_start: int | None = field(default=None, compare=False)
    year_end: int | None = field(default=None, compare=False)


# =============================================================================
# Normalization
# =============================================================================


def _clean(text: str | None) -> str:
    if not text:
        return ""
    cleaned = text.lower().strip()
    cleaned = cleaned.replace("'", "").replace("’", "")
    cleaned = _PUNCT_RE.sub("", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def normalize_make(make: str | None) -> str:
    """Normalize a make name, resolving common aliases (``Chevy`` → ``chevrolet``)."""
    cleaned = _clean(make)
    return MAKE_ALIASES.get(cleaned, cleaned)


def normalize_model(model: str | None) -> str:
    """
    Normalize a model name.

    ``F150``, ``F 150`` and ``F-150`` all become ``f-150``; a trailing
    ``van`` is dropped (``Sprinter Van`` → ``sprinter``).
    """
    cleaned = _clean(model)
    cleaned = MODEL_ALIASES.get(cleaned, cleaned)
    cleaned = _F_SERIES_RE.sub(r"f-\1", cleaned)
    if cleaned.endswith(" van"):
        cleaned = cleaned[: -len(" van")].strip()
    return cleaned


def normalize_vehicle_name(text: str | None) -> str:
    """Normalize a free-text vehicle description (make aliases and model forms)."""
    cleaned = _clean(text)
    if not cleaned:
        return ""
    words = cleaned.split(" ")
    for width in (2, 1):
        head = " ".join(words[:width])
        if head in MAKE_ALIASES:
            words = MAKE_ALIASES[head].split(" ") + words[width:]
            break
    return normalize_model(" ".join(words))


# =============================================================================
# Years
# =============================================================================


def parse_year(value: str | int | None) -> int | None:
    """Return the first 4-digit year in ``value``, or None."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    found = _YEAR_RE.search(value)
    return int(found.group(1)) if found else None


def parse_year_range(value: str | None) -> tuple[int | None, int | None]:
    """
    Parse a textual year range.

    ``"2008-2017"`` and ``"2008–2017"`` → (2008, 2017); ``"2015"`` →
    (2015, 2015); ``"2019+"`` → (2019, None). Anything else → (None, None).
    """
    if not value:
        return None, None
    found = _RANGE_RE.match(value)
    if found is None:
        return None, None
    start = int(found.group(1))
    if found.group(3):
        return start, None
    if found.group(2):
        end = int(found.group(2))
        return (start, end) if start <= end else (end, start)
    if "-" in value or "–" in value or "—" in value:
        return start, None
    return start, start


def format_year_range(year_start: int | None, year_end: int | None, sep: str = "-") -> str | None:
    if year_start is None and year_end is None:
        return None
    if year_end is None:
        return f"{year_start}+"
    if year_start is None or year_start == year_end:
        return str(year_end)
    return f"{year_start}{sep}{year_end}"


def _year_in_range(year: int | None, row: VehicleRow) -> bool:
    if year is None:
        return True
    if row.year_start is not None and year < row.year_start:
        return False
    if row.year_end is not None and year > row.year_end:
        return False
    return True


def _year_distance(year: int, row: VehicleRow) -> int | None:
    reference = row.year_end if row.year_end is not None else row.year_start
    if reference is None:
        return None
    return abs(reference - year)


# =============================================================================
# Matching
# =============================================================================


def sqft_options(row: VehicleRow) -> SqftOptions:
    """Derive with-roof, without-roof, roof-only and per-panel figures for a row."""
    panels = PanelSqft(
        sides=float(row.side_sqft),
        back=float(row.back_sqft),
        hood=float(row.hood_sqft),
        roof=float(row.roof_sqft),
    )
    return SqftOptions(
        with_roof=float(row.total_sqft),
        without_roof=round(panels.sides + panels.back + panels.hood, 1),
        roof_only=panels.roof,
        panels=panels,
    )


def _model_matches(wanted: str, candidate: str) -> bool:
    return bool(candidate) and (wanted in candidate or candidate in wanted)


def find_candidates(rows: Iterable[VehicleRow], make: str, model: str) -> list[VehicleRow]:
    """
    Rows whose make matches exactly and whose model matches by containment.

    Rows with an identical model come first so that ``Transit Connect`` is
    not answered with ``Transit``; otherwise table order is kept.
    """
    wanted_make = normalize_make(make)
    wanted_model = normalize_model(model)
    if not wanted_make or not wanted_model:
        return []
    candidates = [
        row for row in rows
        if normalize_make(row.make) == wanted_make
        and _model_matches(wanted_model, normalize_model(row.model))
    ]
    candidates.sort(key=lambda row: normalize_model(row.model) != wanted_model)
    return candidates


def match_vehicle(
    rows: Iterable[VehicleRow],
    year: str | int | None,
    make: str,
    model: str,
    max_year_distance: int = DEFAULT_MAX_YEAR_DISTANCE,
) -> VehicleMatch | None:
    """
    Find the best-matching row for a vehicle and return its sqft figures.

    Returns None only when no row shares both make and model.
    Ties on year distance go to the earliest row.
    """
    candidates = find_candidates(rows, make, model)
    if not candidates:
        return None

    requested = parse_year(year)
    chosen: VehicleRow | None = None
    match_type: MatchType = "exact"

    for row in candidates:
        if _year_in_range(requested, row):
            chosen = row
            break

    if chosen is None and requested is not None:
        best_distance: int | None = None
        for row in candidates:
            distance = _year_distance(requested, row)
            if distance is None:
                continue
            if best_distance is None or distance < best_distance:
                best_distance = distance
                chosen = row
        if best_distance is not None and best_distance <= max_year_distance:
            match_type = "closest_year"
        else:
            chosen = None

    if chosen is None:
        chosen = candidates[0]
        match_type = "any_year"

    return VehicleMatch(
        make=chosen.make,
        model=chosen.model,
        year_start=chosen.year_start,
        year_end=chosen.year_end,
        match_type=match_type,
        sqft=sqft_options(chosen),
    )


def get_vehicle_sqft_options(
    rows: Iterable[VehicleRow],
    year: str | int | None,
    make: str,
    model: str,
    max_year_distance: int = DEFAULT_MAX_YEAR_DISTANCE,
) -> SqftOptions | None:
    """Shorthand for ``match_vehicle(...).sqft``."""
    match = match_vehicle(rows, year, make, model, max_year_distance)
    return match.sqft if match else None


# =============================================================================
# Natural-language queries
# =============================================================================


def parse_vehicle_query(text: str, known_makes: Iterable[str] = ()) -> ParsedVehicleQuery:
    """
    Split a query such as ``"2020 Ford F150"`` into year, make and model.

    The make is the longest known make that prefixes the remaining text,
    falling back to the first word.
    """
    if not text or not text.strip():
        return ParsedVehicleQuery(normalized="")

    found = _QUERY_YEAR_RE.search(text)
    year = int(found.group(1)) if found else None
    remainder = _QUERY_YEAR_RE.sub(" ", text) if found else text
    normalized = normalize_vehicle_name(remainder)
    if not normalized:
        return ParsedVehicleQuery(normalized="", year=year)

    makes = {normalize_make(m) for m in known_makes} | set(MAKE_ALIASES.values())
    make = None
    for candidate in sorted(makes, key=len, reverse=True):
        if normalized == candidate or normalized.startswith(candidate + " "):
            make = candidate
            break
    if make is None:
        make = normalized.split(" ")[0]

    model = normalized[len(make):].strip() or None
    return ParsedVehicleQuery(normalized=normalized, year=year, make=make, model=model)


def lookup_query(
    rows: Sequence[VehicleRow],
    text: str,
    max_year_distance: int = DEFAULT_MAX_YEAR_DISTANCE,
) -> tuple[ParsedVehicleQuery, VehicleMatch | None]:
    """Parse a natural-language query and match it against ``rows``."""
    parsed = parse_vehicle_query(text, known_makes=(row.make for row in rows))
    if not parsed.make or not parsed.model:
        return parsed, None
    return parsed, match_vehicle(rows, parsed.year, parsed.make, parsed.model, max_year_distance)


# =============================================================================
# Catalog helpers
# =============================================================================


def list_makes(rows: Iterable[VehicleRow]) -> list[str]:
    """Distinct makes as stored, sorted case-insensitively."""
    seen: dict[str, str] = {}
    for row in rows:
        seen.setdefault(normalize_make(row.make), row.make)
    return sorted(seen.values(), key=str.lower)


def list_models(rows: Iterable[VehicleRow], make: str) -> list[str]:
    """Distinct models for a make, sorted case-insensitively."""
    wanted = normalize_make(make)
    seen: dict[str, str] = {}
    for row in rows:
        if normalize_make(row.make) == wanted:
            seen.setdefault(normalize_model(row.model), row.model)
    return sorted(seen.values(), key=str.lower)


def list_years(
    rows: Iterable[VehicleRow],
    make: str,
    model: str,
    current_year: int | None = None,
) -> list[int]:
    """
    Individual model years available for a make and model, newest first.

    Open-ended ranges run up to ``current_year + 1``.
    """
    last_year = (current_year or date.today().year) + 1
    wanted_make = normalize_make(make)
    wanted_model = normalize_model(model)
    years: set[int] = set()
    for row in rows:
        if normalize_make(row.make) != wanted_make or normalize_model(row.model) != wanted_model:
            continue
        if row.year_start is None and row.year_end is None:
            continue
        start = row.year_start if row.year_start is not None else row.year_end
        end = row.year_end if row.year_end is not None else max(start, last_year)
        years.update(range(start, end + 1))
    return sorted(years, reverse=True)


def vehicle_options(rows: Iterable[VehicleRow]) -> list[VehicleOption]:
    """Dropdown options, one per row, ordered by make, model and newest years."""
    options = []
    for row in rows:
        label_years = format_year_range(row.year_start, row.year_end, sep="–")
        label = f"{label_years} {row.make} {row.model}" if label_years else f"{row.make} {row.model}"
        value = "|".join((
            normalize_make(row.make),
            normalize_model(row.model),
            format_year_range(row.year_start, row.year_end) or "",
        ))
        options.append(VehicleOption(
            label=label,
            value=value,
            make=row.make,
            model=row.model,
            year_start=row.year_start,
            year_end=row.year_end,
        ))
    options.sort(key=lambda o: (o.make.lower(), o.model.lower(), -(o.year_end or o.year_start or 0)))
    return options


# =============================================================================
# Reference table
# =============================================================================


def _record_from_dict(item: dict) -> VehicleRecord:
    year_start, year_end = item.get("year_start"), item.get("year_end")
    if "years" in item:
        year_start, year_end = parse_year_range(item["years"])
    panels = item.get("panels", {})
    return VehicleRecord(
        make=item["make"],
        model=item["model"],
        year_start=year_start,
        year_end=year_end,
        total_sqft=float(item["total_sqft"]),
        side_sqft=float(panels.get("sides", 0.0)),
        back_sqft=float(panels.get("back", 0.0)),
        hood_sqft=float(panels.get("hood", 0.0)),
        roof_sqft=float(panels.get("roof", 0.0)),
    )


@lru_cache
def load_reference_table(path: Path = REFERENCE_TABLE_PATH) -> tuple[VehicleRecord, ...]:
    """Load the bundled vehicle reference table (cached)."""
    with open(path, encoding="utf-8") as f:
        return tuple(_record_from_dict(item) for item in json.load(f))
