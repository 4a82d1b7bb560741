"""Numeric helpers for values read from git output."""

import re
from typing import Union

# Only unsigned decimal counts are valid; anything else is treated as missing data
COUNT_RE = re.compile(r'^\s*(\d+)\s*$')

# Size units, largest first
UNITS = (
    ('GB', 1024 ** 3),
    ('MB', 1024 ** 2),
    ('KB', 1024),
)

Countable = Union[str, bytes, int, None]


def parse_count(value: Countable, default: int = 0) -> int:
    """Convert a value into a non-negative integer, returning default if it isn't one.

    Strings and bytes may have surrounding whitespace. bool is not accepted as an int.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value if value >= 0 else default
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='replace')
    if isinstance(value, str) and (m := COUNT_RE.match(value)):
        return int(m.group(1))
    return default


def safe_add(*values: Countable) -> int:
    """Add the values together, counting any that aren't valid counts as zero."""
    return sum(parse_count(v) for v in values)


def format_size(num_bytes: Countable) -> str:
    """Format a byte count for humans using binary (1024) units.

    Values are truncated to two decimals, never rounded up into the next unit.
    """
    count = parse_count(num_bytes)
    for unit, size in UNITS:
        if count >= size:
            hundredths = count * 100 // size
            return f'{hundredths // 100}.{hundredths % 100:02d} {unit}'
    return f'{count} B'
