"""Spreadsheet ingestion for demand events and supply vehicles.

Uploaded files are read into rows (column name -> raw cell value), then each
row is coerced into a typed point. Rows that cannot be coerced are dropped;
a file that yields no valid rows at all is rejected with IngestionError.
"""

import csv
import io
import logging
import math
import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import PurePath
from typing import Any

import openpyxl

from demandmap.heatmap.models import DemandEvent, SupplyRecord

logger = logging.getLogger(__name__)

Row = dict[str, Any]

# Spreadsheet serial date 25569 is 1970-01-01
EXCEL_EPOCH_SERIAL = 25569
SECONDS_PER_DAY = 86400

# M/D/YY H:MM or M/D/YYYY H:MM
_US_DATETIME_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2,4})\s+(\d{1,2}):(\d{2})")

# Bare four-digit year, read as January 1st of that year
_YEAR_RE = re.compile(r"^[1-9]\d{3}$")

# Serial numbers that arrive as text (CSV cells)
_SERIAL_RE = re.compile(r"^\d{1,6}(\.\d+)?$")

SPREADSHEET_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv", ".txt"}


class IngestionError(Exception):
    """Raised when an uploaded file cannot produce a usable dataset."""


# ---------------------------------------------------------------------------
# Reading rows
# ---------------------------------------------------------------------------

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _read_xlsx(content: bytes) -> list[Row]:
    """Read the first worksheet, using its first row as the header."""
    wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        ws = wb[wb.sheetnames[0]]
        rows = ws.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        keys = [str(v).strip() if v is not None else "" for v in header]

        result = []
        for values in rows:
            row = {
                key: value
                for key, value in zip(keys, values)
                if key and not _is_blank(value)
            }
            if row:
                result.append(row)
        return result
    finally:
        wb.close()


def _read_csv(content: bytes) -> list[Row]:
    text = content.decode("utf-8-sig")
    reader = csv.DictReader(io.StringIO(text))
    result = []
    for record in reader:
        row = {
            key.strip(): value
            for key, value in record.items()
            if key and not _is_blank(value)
        }
        if row:
            result.append(row)
    return result


def read_rows(filename: str, content: bytes) -> list[Row]:
    """Read an uploaded .xlsx or .csv file into a list of rows."""
    suffix = PurePath(filename or "").suffix.lower()
    if suffix in SPREADSHEET_SUFFIXES:
        reader = _read_xlsx
    elif suffix in CSV_SUFFIXES:
        reader = _read_csv
    else:
        raise IngestionError(f"Unsupported file type: {suffix or filename!r}")

    try:
        return reader(content)
    except Exception as e:
        logger.error(f"Failed to read {filename}: {e}")
        raise IngestionError(f"Failed to read file: {filename}") from e


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp cell.

    Accepts datetimes, spreadsheet serial numbers, ISO-8601 strings and the
    M/D/YY H:MM textual form. Naive values are taken as UTC.
    """
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            seconds = (value - EXCEL_EPOCH_SERIAL) * SECONDS_PER_DAY
            return datetime(1970, 1, 1, tzinfo=UTC) + timedelta(seconds=seconds)
        except OverflowError:
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if _YEAR_RE.match(text):
        return datetime(int(text), 1, 1, tzinfo=UTC)
    if _SERIAL_RE.match(text):
        return parse_timestamp(float(text))
    try:
        return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    match = _US_DATETIME_RE.search(text)
    if not match:
        return None
    month, day, year, hour, minute = (int(g) for g in match.groups())
    if year < 100:
        year += 2000
    try:
        return datetime(year, month, day, hour, minute, tzinfo=UTC)
    except ValueError:
        return None


def parse_coordinate(value: Any) -> float | None:
    """Coerce a latitude/longitude cell to a finite float."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


# ---------------------------------------------------------------------------
# Column heuristics
# ---------------------------------------------------------------------------

def _find_key(keys: list[str], *fragments: str) -> str | None:
    """First key whose lower-cased name contains any of the fragments."""
    for key in keys:
        lowered = key.lower()
        if any(fragment in lowered for fragment in fragments):
            return key
    return None


def _demand_values(row: Row) -> tuple[Any, Any, Any] | None:
    keys = list(row.keys())
    if keys == ["timestamp", "latitude", "longitude"]:
        return row["timestamp"], row["latitude"], row["longitude"]
    if len(keys) < 3:
        return None

    time_key = _find_key(keys, "time", "date")
    lat_key = _find_key(keys, "lat")
    lng_key = _find_key(keys, "lng", "lon")
    if time_key and lat_key and lng_key:
        return row[time_key], row[lat_key], row[lng_key]
    # Positional: timestamp, latitude, longitude
    return row[keys[0]], row[keys[1]], row[keys[2]]


def _supply_values(row: Row) -> tuple[Any, Any, Any, Any] | None:
    keys = list(row.keys())
    if len(keys) < 4:
        return None

    start_key = _find_key(keys, "start")
    end_key = _find_key(keys, "end")
    lat_key = _find_key(keys, "lat")
    lng_key = _find_key(keys, "lng", "lon")
    if start_key and end_key and lat_key and lng_key:
        return row[start_key], row[end_key], row[lat_key], row[lng_key]
    # Positional: start_time, end_time, latitude, longitude
    return row[keys[0]], row[keys[1]], row[keys[2]], row[keys[3]]


def _parse_demand_row(row: Row) -> DemandEvent | None:
    values = _demand_values(row)
    if values is None:
        return None
    timestamp = parse_timestamp(values[0])
    latitude = parse_coordinate(values[1])
    longitude = parse_coordinate(values[2])
    if timestamp is None or latitude is None or longitude is None:
        return None
    return DemandEvent(timestamp=timestamp, latitude=latitude, longitude=longitude)


def _parse_supply_row(row: Row) -> SupplyRecord | None:
    values = _supply_values(row)
    if values is None:
        return None
    start_time = parse_timestamp(values[0])
    end_time = parse_timestamp(values[1])
    latitude = parse_coordinate(values[2])
    longitude = parse_coordinate(values[3])
    if None in (start_time, end_time, latitude, longitude):
        return None
    return SupplyRecord(
        start_time=start_time,
        end_time=end_time,
        latitude=latitude,
        longitude=longitude,
    )


def _parse_rows(rows: list[Row], parse: Callable[[Row], Any], kind: str) -> list:
    parsed = [item for item in map(parse, rows) if item is not None]
    dropped = len(rows) - len(parsed)
    if dropped:
        logger.debug(f"Dropped {dropped} malformed {kind} rows out of {len(rows)}")
    return parsed


def parse_demand_rows(rows: list[Row]) -> list[DemandEvent]:
    """Coerce rows into demand events, dropping malformed rows."""
    return _parse_rows(rows, _parse_demand_row, "demand")


def parse_supply_rows(rows: list[Row]) -> list[SupplyRecord]:
    """Coerce rows into supply records, dropping malformed rows."""
    return _parse_rows(rows, _parse_supply_row, "supply")


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def load_demand(filename: str, content: bytes) -> list[DemandEvent]:
    """Read and parse a demand file. Raises IngestionError if nothing is usable."""
    events = parse_demand_rows(read_rows(filename, content))
    if not events:
        raise IngestionError("No valid demand events found in file")
    logger.info(f"Loaded {len(events)} demand events from {filename}")
    return events


def load_supply(filename: str, content: bytes) -> list[SupplyRecord]:
    """Read and parse a supply file. Raises IngestionError if nothing is usable."""
    records = parse_supply_rows(read_rows(filename, content))
    if not records:
        raise IngestionError("No valid supply vehicles found in file")
    logger.info(f"Loaded {len(records)} supply vehicles from {filename}")
    return records
