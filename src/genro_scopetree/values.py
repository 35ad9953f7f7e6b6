# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Value coercion.

Node values are opaque, but in practice they belong to a closed set of
kinds: ``str``, ``int``, ``float``, ``bool``, ``timedelta``,
``datetime`` and lists of one of those. Each ``to_*`` function accepts
any value and either returns it converted or raises ConversionError.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from .exceptions import ConversionError

TRUE_STRINGS = frozenset(('1', 't', 'true', 'on'))
FALSE_STRINGS = frozenset(('0', 'f', 'false', 'off'))

DURATION_RE = re.compile(
    r'^(?:\s*(\d+)\s*d(?:ays?)?)?'
    r'(?:\s*(\d+)\s*h(?:ours?)?)?'
    r'(?:\s*(\d+)\s*m(?:in(?:ute)?s?)?)?'
    r'(?:\s*(\d+)\s*s(?:econds?)?)?$'
)
DURATION_HMS_RE = re.compile(r'^([0-9]{2,10}):([0-9]{2})(?::([0-9]{2}))?$')
INT_RE = re.compile(r'^[+-]?[0-9]+$')
# zone abbreviation such as MST or CEST, read as UTC
ZONE_NAME_RE = re.compile(r'\s[A-Z]{2,5}(?=\s|$)')
FRACTION_RE = re.compile(r'(?<=:[0-9]{2})\.([0-9]+)')

# tried in order after ISO 8601; %Z marks a zone abbreviation
KNOWN_TIME_FORMATS = (
    '%a %b %d %H:%M:%S %Y',         # ANSIC
    '%a %b %d %H:%M:%S %Z %Y',      # Unix date
    '%a %b %d %H:%M:%S %z %Y',      # Ruby date
    '%d %b %y %H:%M %Z',            # RFC 822
    '%d %b %y %H:%M %z',            # RFC 822 with numeric zone
    '%A, %d-%b-%y %H:%M:%S %Z',     # RFC 850
    '%a, %d %b %Y %H:%M:%S %Z',     # RFC 1123
    '%a, %d %b %Y %H:%M:%S %z',     # RFC 1123 with numeric zone
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d',
)


def to_string(value: Any) -> str:
    """Return the string form of a value; never fails."""
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_int(value: Any) -> int:
    """Coerce a value to int.

    Raises:
        ConversionError: If the value is not an integer or integer literal.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    s = to_string(value)
    if not INT_RE.match(s):
        raise ConversionError(f'invalid integer: {s!r}')
    return int(s)


def to_float(value: Any) -> float:
    """Coerce a value to float.

    Raises:
        ConversionError: If the value cannot be parsed as a float.
    """
    if isinstance(value, float):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    s = to_string(value)
    try:
        return float(s)
    except ValueError:
        raise ConversionError(f'invalid float: {s!r}') from None


def to_bool(value: Any) -> bool:
    """Coerce a value to bool, accepting 1/t/true/on and 0/f/false/off.

    Raises:
        ConversionError: If the value is not a recognised boolean.
    """
    if isinstance(value, bool):
        return value
    s = to_string(value).lower()
    if s in TRUE_STRINGS:
        return True
    if s in FALSE_STRINGS:
        return False
    raise ConversionError(f'bad value: {s!r}')


def to_duration(value: Any) -> timedelta:
    """Coerce a value to a timedelta.

    Accepts ``HH:MM``, ``HH:MM:SS`` and ``<days>d<hours>h<minutes>m<seconds>s``
    where each part is optional (at least one must be present) and units
    may be spelled out (``2 days 3 hours``). Days are 24 hours.

    Raises:
        ConversionError: If the value is not a recognised duration.
    """
    if isinstance(value, timedelta):
        return value
    s = to_string(value)
    if not s:
        raise ConversionError('bad duration: empty value')

    match = DURATION_HMS_RE.match(s)
    if match:
        hours, minutes, seconds = (int(g or 0) for g in match.groups())
        return timedelta(hours=hours, minutes=minutes, seconds=seconds)

    match = DURATION_RE.match(s)
    if not match or not any(match.groups()):
        raise ConversionError(f'bad duration: {s!r}')
    days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)


def _normalise_time(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


def to_time(value: Any) -> datetime:
    """Coerce a value to an aware UTC datetime, truncated to seconds.

    Naive timestamps and zone abbreviations (``MST``, ``CET``...) are
    assumed to be UTC. Fractional seconds beyond microseconds are dropped.

    Raises:
        ConversionError: If no known layout matches.
    """
    if isinstance(value, datetime):
        return _normalise_time(value)
    s = to_string(value).strip()

    iso = s[:-1] + '+00:00' if s.endswith(('Z', 'z')) else s
    iso = FRACTION_RE.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), iso, count=1)
    try:
        return _normalise_time(datetime.fromisoformat(iso))
    except ValueError:
        pass

    zone = ZONE_NAME_RE.search(s)
    for layout in KNOWN_TIME_FORMATS:
        text = s
        if '%Z' in layout:
            if zone is None:
                continue
            text = s[:zone.start()] + s[zone.end():]
            layout = layout.replace(' %Z', '')
        try:
            return _normalise_time(datetime.strptime(text, layout))
        except ValueError:
            continue
    raise ConversionError(f'bad time format: {s!r}')


CONVERTERS: dict[str, Callable[[Any], Any]] = {
    'string': to_string,
    'int': to_int,
    'float': to_float,
    'bool': to_bool,
    'duration': to_duration,
    'time': to_time,
    'date': to_time,
}
