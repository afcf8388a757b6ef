import collections

# TS VHost ClientIP Method URI Status Size Referer UserAgent MimeType Duration
# %x %v    %h       %m     %U  %s     %b   %R      %u        %M       %T
GOACCESS_LOG_FORMAT = r"%x\t%v\t%h\t%m\t%U\t%s\t%b\t%R\t%u\t%M\t%T"

_OUTPUT_FIELDS = (
    "timestamp",  # %x
    "host",  # %v
    "client_host",  # %h
    "method",  # %m
    "uri",  # %U
    "status",  # %s
    "size",  # %b
    "referer",  # %R
    "user_agent",  # %u
    "mime_type",  # %M
    "duration",  # %T
)


class _CaddyLogOutputLine(collections.namedtuple("CaddyLogOutputLine", _OUTPUT_FIELDS)):
    __slots__ = ()

    def to_line(self) -> str:
        return "\t".join(self)


_GZIP_SUFFIX = ".gz"
