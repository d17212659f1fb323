"""Wire-format decoding of the remote stats payload."""

import math
from typing import List, Union

from .types import FormatError, Readings

FIELD_COUNT = 7
DEFAULT_DELIMITER = ","


def _split(text: str, delimiter: str) -> List[str]:
    text = text.strip()
    if delimiter.isspace():
        # Runs of blanks separate fields in the space-delimited variant.
        return text.split()
    return [p.strip() for p in text.split(delimiter)]


def _parse_float(token: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise FormatError("not-a-number", token) from None
    if not math.isfinite(value):
        raise FormatError("not-a-number", token)
    return value


def decode(raw: Union[bytes, str], delimiter: str = DEFAULT_DELIMITER) -> Readings:
    """
    Parse a raw snapshot into Readings.

    Raises FormatError with reason "not-utf8", "field-count", "not-a-number"
    or "negative-value". Nothing is returned unless all 7 fields are valid.
    An empty delimiter is a caller error and raises a plain ValueError.
    """
    if not delimiter:
        raise ValueError("delimiter must not be empty")

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise FormatError("not-utf8") from None

    parts = _split(raw, delimiter)
    if len(parts) != FIELD_COUNT:
        raise FormatError("field-count", str(len(parts)))

    values = [_parse_float(p) for p in parts]

    for token, value in zip(parts, values):
        if value < 0:
            raise FormatError("negative-value", token)

    return Readings.from_values(*values)


def encode(readings: Readings, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Render Readings back into the wire format."""
    return delimiter.join(repr(float(v)) for v in readings.values())
