"""
Primary function for converting a single decoded Caddy log record into a GoAccess line.

The strategy is to...

1) Normalize the request and response header maps into single-valued, lowercase-keyed views.
   These views are derived values; the decoded record itself is left untouched.
2) Resolve the effective client host from the remote address and any 'X-Forwarded-For' header.
3) Apply the prefix filters; rejected records produce no line.
4) Project the remaining fields onto the fixed GoAccess columns and join them with tabs.
"""

from ._caddy_log_line_formatter import format_caddy_log_record
from ._caddy_log_record import CaddyLogRecord
from ._header_utils import normalize_headers
from ._ip_utils import resolve_client_host
from ._log_filter import LogFilterConfig, is_record_included


def convert_caddy_log_record(*, record: CaddyLogRecord, filter_config: LogFilterConfig) -> str | None:
    """Return the tab-joined GoAccess line for the record, or None if the filters reject it."""
    normalized_request_headers = normalize_headers(record.request.headers)
    normalized_response_headers = normalize_headers(record.response_headers)

    client_host = resolve_client_host(record.request.remote_address, normalized_request_headers)

    if not is_record_included(
        host=record.request.host,
        uri=record.request.uri,
        client_host=client_host,
        filter_config=filter_config,
    ):
        return None

    output_line = format_caddy_log_record(
        record=record,
        client_host=client_host,
        normalized_request_headers=normalized_request_headers,
        normalized_response_headers=normalized_response_headers,
    )

    return output_line.to_line()
