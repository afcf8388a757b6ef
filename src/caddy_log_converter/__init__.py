"""
Caddy log converter
===================

Conversion of Caddy's structured JSON access logs into the tab-separated format read by GoAccess.

Each JSON record is reduced to eleven columns (timestamp, virtual host, client address, method, URI, status, size,
referer, user agent, MIME type and duration). Records can be filtered on the way through by the prefix of their
host, their URI or their client address.

To analyze the output, pass the format from `GOACCESS_LOG_FORMAT` to GoAccess, for example...

    caddy_log_converter access.log.gz | goaccess --log-format="$(caddy_log_converter --print-log-format)" \
        --date-format=%s --time-format=%s -
"""

from ._buffered_json_reader import BufferedJSONReader
from ._caddy_log_file_converter import (
    CaddyLogDecodeError,
    CaddyLogFileConversionError,
    ConversionSummary,
    convert_caddy_log_file,
    convert_caddy_log_files,
)
from ._caddy_log_line_formatter import format_caddy_log_record, format_duration, parse_media_type
from ._caddy_log_record import CaddyLogRecord, CaddyLogRequest, CaddyLogTLS
from ._caddy_log_record_converter import convert_caddy_log_record
from ._config import CADDY_LOG_CONVERTER_BASE_FOLDER_PATH
from ._globals import GOACCESS_LOG_FORMAT
from ._header_utils import normalize_headers
from ._ip_utils import resolve_client_host, split_host_port
from ._log_filter import LogFilterConfig, is_record_included

__all__ = [
    "BufferedJSONReader",
    "CADDY_LOG_CONVERTER_BASE_FOLDER_PATH",
    "CaddyLogDecodeError",
    "CaddyLogFileConversionError",
    "CaddyLogRecord",
    "CaddyLogRequest",
    "CaddyLogTLS",
    "ConversionSummary",
    "GOACCESS_LOG_FORMAT",
    "LogFilterConfig",
    "convert_caddy_log_file",
    "convert_caddy_log_files",
    "convert_caddy_log_record",
    "format_caddy_log_record",
    "format_duration",
    "is_record_included",
    "normalize_headers",
    "parse_media_type",
    "resolve_client_host",
    "split_host_port",
]
