"""
Primary functions for projecting a single Caddy log record onto the GoAccess output columns.

The columns correspond one-to-one with the GoAccess format specifiers of `GOACCESS_LOG_FORMAT`:

- %x  A date and time field matching the time-format and date-format variables; here, integer epoch seconds.
- %v  The server name (virtual host).
- %h  The client IP address, either IPv4 or IPv6.
- %m  The request method.
- %U  The URL path requested, including any query string.
- %s  The status code that the server sends back to the client.
- %b  The size of the object returned to the client.
- %R  The 'Referer' HTTP request header.
- %u  The user-agent HTTP request header.
- %M  The MIME-type of the requested resource.
- %T  The time taken to serve the request, in seconds.
"""

import decimal
import math
from collections.abc import Mapping

from ._caddy_log_record import CaddyLogRecord
from ._globals import _CaddyLogOutputLine

_TOKEN_SPECIAL_CHARACTERS = frozenset('()<>@,;:\\"/[]?=')


def format_caddy_log_record(
    *,
    record: CaddyLogRecord,
    client_host: str,
    normalized_request_headers: Mapping[str, str],
    normalized_response_headers: Mapping[str, str],
) -> _CaddyLogOutputLine:
    """Extract and format the output columns of an accepted record."""
    mime_type = parse_media_type(normalized_response_headers.get("content-type", ""))

    output_line = _CaddyLogOutputLine(
        timestamp=str(int(record.timestamp)),
        host=record.request.host,
        client_host=client_host,
        method=record.request.method,
        uri=record.request.uri,
        status=str(record.status),
        size=str(record.size),
        referer=normalized_request_headers.get("referer", ""),
        user_agent=normalized_request_headers.get("user-agent", ""),
        mime_type=mime_type,
        duration=format_duration(record.duration),
    )

    return output_line


def parse_media_type(content_type: str) -> str:
    """
    Extract the media type from the value of a 'Content-Type' header.

    Parameters such as 'charset' are dropped and the result is lowercased, so 'text/HTML; charset=utf-8' becomes
    'text/html'. A value without a valid 'type' or 'type/subtype' token returns an empty string.
    """
    media_type = content_type.split(";", 1)[0].lower().strip()

    main_type, separator, subtype = media_type.partition("/")
    if not _is_token(main_type):
        return ""
    if separator != "" and not _is_token(subtype):
        return ""

    return media_type


def _is_token(value: str) -> bool:
    if value == "":
        return False

    return all(0x20 < ord(character) < 0x7F and character not in _TOKEN_SPECIAL_CHARACTERS for character in value)


def format_duration(duration: float) -> str:
    """
    Format seconds using the fewest digits that parse back to exactly the same float.

    Positional notation is always used (1e-05 becomes '0.00001') and integral values carry no fractional part.
    """
    if math.isnan(duration):
        return "NaN"
    if math.isinf(duration):
        return "+Inf" if duration > 0 else "-Inf"

    # repr gives the shortest round-trip digits; Decimal re-expresses them without an exponent
    formatted_duration = format(decimal.Decimal(repr(duration)), "f")
    if "." in formatted_duration:
        formatted_duration = formatted_duration.rstrip("0").rstrip(".")

    return formatted_duration
