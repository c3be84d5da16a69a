"""
Dataset loading.

Responsibilities:
- fetch the remote CSV (one attempt, no retry)
- encoding detection + newline normalization
- header-keyed row parsing
- metric normalization (round half up, absent stays absent)
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from typing import Dict, Iterable, List, Optional, Union

import httpx
from charset_normalizer import from_bytes

from .config import Columns, Settings
from .errors import EmptyDataError, LoadError
from .models import Record

logger = logging.getLogger(__name__)

# leading numeric prefix, the way parseFloat reads "3.4%" as 3.4
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def decode_payload(raw: bytes) -> str:
    """
    Decode fetched bytes to text with LF newlines.

    The encoding is detected best-effort via charset-normalizer. If the detected
    encoding fails, UTF-8 is tried, and as a last resort the detected encoding is
    used with replacement characters.
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"

    # UTF-8 with a BOM: drop the BOM so it doesn't end up in the first header name
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
            logger.warning("Payload is not valid in any detected encoding; decoded with replacement characters")

    logger.debug("Decoded %d bytes as %s", len(raw), decode_used)
    return text.replace("\r\n", "\n").replace("\r", "\n")


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves towards positive infinity (-2.5 -> -2)."""
    # x + 0.5 is inexact near 0.5 and above 2**52
    f = math.floor(x)
    return int(f) + (1 if x - f >= 0.5 else 0)


def parse_number(text: Optional[str]) -> Optional[float]:
    if text is None:
        return None
    m = _NUMBER_PREFIX.match(text)
    if m is None:
        return None
    number = float(m.group(1))
    return number if math.isfinite(number) else None


def parse_year(text: Optional[str]) -> Optional[Union[int, float]]:
    if text is None or not text.strip():
        return None
    try:
        number = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def normalize_value(raw: Optional[str]) -> Optional[int]:
    """
    Round a present metric value to an integer.

    Absent or empty values stay absent (None), they are never coerced to 0.
    """
    if raw is None or raw.strip() == "":
        return None
    number = parse_number(raw)
    if number is None:
        logger.warning("Ignoring non-numeric metric value %r", raw)
        return None
    return round_half_up(number)


def parse_records(text: str, columns: Optional[Columns] = None) -> List[Record]:
    """
    Parse CSV text into Records.

    The first line is the header; every following non-blank line becomes one
    Record keyed by header names. Short rows are padded with absent fields.
    Malformed input raises LoadError and nothing is returned.
    """
    columns = columns or Columns()
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=",", strict=True)

    try:
        rows = [row for row in reader if row]
    except csv.Error as e:
        raise LoadError(f"Malformed CSV at line {reader.line_num}: {e}") from e

    if not rows:
        raise LoadError("CSV has no header row")

    header = [name.strip() for name in rows[0]]
    if any(not name for name in header):
        raise LoadError("CSV header contains an empty column name")
    if len(set(header)) != len(header):
        raise LoadError("CSV header contains duplicate column names")

    width = len(header)
    records: List[Record] = []

    for i, row in enumerate(rows[1:], start=2):
        if len(row) > width:
            raise LoadError(f"Row {i} has {len(row)} fields, expected {width}")

        fields: Dict[str, str] = dict(zip(header, row))
        records.append(_to_record(fields, columns))

    logger.debug("Parsed %d records with columns %s", len(records), header)
    return records


def _to_record(fields: Dict[str, str], columns: Columns) -> Record:
    category = fields.get(columns.category)
    value = normalize_value(fields.get(columns.value))

    if columns.value in fields and value is not None:
        fields[columns.value] = str(value)

    return Record(
        category=category if category else None,
        year=parse_year(fields.get(columns.year)),
        value=value,
        raw=tuple(fields.items()),
    )


async def fetch_csv(
    url: str,
    *,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bytes:
    """Issue the single read-only GET for the dataset."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            r = await client.get(url)
            r.raise_for_status()
            return r.content
    except httpx.HTTPStatusError as e:
        raise LoadError(f"HTTP {e.response.status_code} fetching {url}") from e
    except httpx.HTTPError as e:
        raise LoadError(f"Could not fetch {url}: {e}") from e


async def load_dataset(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Record]:
    logger.info("Fetching dataset from %s", settings.data_url)
    raw = await fetch_csv(settings.data_url, timeout=settings.timeout, transport=transport)
    records = parse_records(decode_payload(raw), settings.columns)

    if not records:
        if settings.empty_dataset == "error":
            raise EmptyDataError("Dataset contains no rows")
        logger.warning("Dataset contains no rows")

    logger.info("Loaded %d records", len(records))
    return records


def categories(records: Iterable[Record]) -> List[str]:
    """Distinct categories in order of first appearance."""
    seen: Dict[str, None] = {}
    for record in records:
        if record.category and record.category not in seen:
            seen[record.category] = None
    return list(seen)


def default_selection(records: List[Record]) -> Optional[str]:
    if not records:
        return None
    return records[0].category
