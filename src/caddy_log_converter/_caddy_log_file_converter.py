"""Primary functions for converting whole Caddy log files into GoAccess lines."""

import contextlib
import gzip
import io
import pathlib
import sys
import typing

import tqdm
from pydantic import ConfigDict, Field, validate_call

from ._buffered_json_reader import BufferedJSONReader
from ._caddy_log_record import CaddyLogRecord
from ._caddy_log_record_converter import convert_caddy_log_record
from ._config import PROGRESS_REPORT_INTERVAL
from ._globals import _GZIP_SUFFIX
from ._log_filter import LogFilterConfig


class CaddyLogDecodeError(ValueError):
    """Raised when a Caddy log file contains content that cannot be decoded into a log record."""


class CaddyLogFileConversionError(Exception):
    """
    Raised when one of several Caddy log files cannot be converted.

    The original error is chained as `__cause__`. The summaries of the files completed before the failing one are kept
    on `conversion_summaries`.
    """

    def __init__(
        self, *, caddy_log_file_path: str | pathlib.Path, conversion_summaries: list["ConversionSummary"]
    ) -> None:
        self.caddy_log_file_path = caddy_log_file_path
        self.conversion_summaries = conversion_summaries
        super().__init__(f"Could not process {caddy_log_file_path}!")


class ConversionSummary(typing.NamedTuple):
    total: int
    included: int
    excluded: int


@validate_call(config=ConfigDict(arbitrary_types_allowed=True))
def convert_caddy_log_file(
    *,
    caddy_log_file_path: str | pathlib.Path,
    filter_config: LogFilterConfig | None = None,
    output_stream: io.TextIOBase | None = None,
    diagnostic_stream: io.TextIOBase | None = None,
    maximum_buffer_size_in_bytes: int = Field(ge=1, default=10**8),
) -> ConversionSummary:
    """
    Convert a single Caddy JSON access log file into GoAccess lines.

    Files whose name ends in '.gz' are decompressed on the fly. The file is decoded one record at a time, so it may
    be arbitrarily large; every accepted record is written to the output as soon as it is decoded.

    Parameters
    ----------
    caddy_log_file_path : str or pathlib.Path
        Path to the Caddy log file, either plain text or gzip-compressed.
    filter_config : LogFilterConfig, optional
        The prefix rules to apply. Defaults to no filtering.
    output_stream : io.TextIOBase, optional
        Where to write the GoAccess lines. Defaults to standard output.
    diagnostic_stream : io.TextIOBase, optional
        Where to write progress reports. Defaults to standard error.
    maximum_buffer_size_in_bytes : int, default: 100 MB
        The theoretical maximum amount of RAM (in bytes) to use for the undecoded remainder of the file.

    Returns
    -------
    conversion_summary : ConversionSummary
        The number of records processed, included and excluded.

    Raises
    ------
    OSError
        If the file cannot be opened or its gzip header cannot be read.
    CaddyLogDecodeError
        If a record cannot be decoded. Lines for earlier records have already been written at that point.
    """
    filter_config = filter_config or LogFilterConfig()
    output_stream = output_stream or sys.stdout
    diagnostic_stream = diagnostic_stream or sys.stderr

    with contextlib.ExitStack() as exit_stack:
        binary_stream = exit_stack.enter_context(open(file=caddy_log_file_path, mode="rb"))
        if str(caddy_log_file_path).endswith(_GZIP_SUFFIX):
            binary_stream = exit_stack.enter_context(gzip.GzipFile(fileobj=binary_stream, mode="rb"))

            # Read the gzip header now so that a corrupt file fails before any line is written
            binary_stream.peek(1)

        text_stream = exit_stack.enter_context(io.TextIOWrapper(binary_stream, encoding="utf-8", errors="replace"))
        buffered_json_reader = BufferedJSONReader(
            text_stream=text_stream,
            maximum_buffer_size_in_bytes=maximum_buffer_size_in_bytes,
        )

        return _convert_decoded_records(
            buffered_json_reader=buffered_json_reader,
            caddy_log_file_path=caddy_log_file_path,
            filter_config=filter_config,
            output_stream=output_stream,
            diagnostic_stream=diagnostic_stream,
        )


def _convert_decoded_records(
    *,
    buffered_json_reader: BufferedJSONReader,
    caddy_log_file_path: str | pathlib.Path,
    filter_config: LogFilterConfig,
    output_stream: io.TextIOBase,
    diagnostic_stream: io.TextIOBase,
) -> ConversionSummary:
    total, included, excluded = 0, 0, 0
    while True:
        try:
            value = next(buffered_json_reader)
            record = CaddyLogRecord.model_validate(value)
        except StopIteration:
            break
        except ValueError as exception:
            # Covers both malformed JSON and pydantic.ValidationError for ill-typed fields
            message = f"Unable to decode record {total} of '{caddy_log_file_path}': {exception}"
            raise CaddyLogDecodeError(message) from exception

        line = convert_caddy_log_record(record=record, filter_config=filter_config)
        if line is not None:
            output_stream.write(f"{line}\n")
            included += 1
        else:
            excluded += 1
        total += 1

        if total % PROGRESS_REPORT_INTERVAL == 0:
            diagnostic_stream.write(f"processed {total} ({included} included, {excluded} excluded)\n")

    return ConversionSummary(total=total, included=included, excluded=excluded)


def convert_caddy_log_files(
    *,
    caddy_log_file_paths: typing.Iterable[str | pathlib.Path],
    filter_config: LogFilterConfig | None = None,
    output_stream: io.TextIOBase | None = None,
    diagnostic_stream: io.TextIOBase | None = None,
    maximum_buffer_size_in_bytes: int = 10**8,
    file_tqdm_kwargs: dict | None = None,
) -> list[ConversionSummary]:
    """
    Convert several Caddy log files in the given order, writing all lines to the same output.

    Processing stops at the first file that fails; later files are not attempted.

    Parameters
    ----------
    caddy_log_file_paths : iterable of str or pathlib.Path
        Paths to the Caddy log files, each either plain text or gzip-compressed.
    filter_config : LogFilterConfig, optional
        The prefix rules to apply to every file. Defaults to no filtering.
    output_stream : io.TextIOBase, optional
        Where to write the GoAccess lines. Defaults to standard output.
    diagnostic_stream : io.TextIOBase, optional
        Where to write progress reports. Defaults to standard error.
    maximum_buffer_size_in_bytes : int, default: 100 MB
        The theoretical maximum amount of RAM (in bytes) to use for the undecoded remainder of each file.
    file_tqdm_kwargs : dict, optional
        Keyword arguments to pass to the tqdm progress bar over files.
        The bar is disabled unless `disable=False` is passed.

    Returns
    -------
    conversion_summaries : list of ConversionSummary
        One summary per file, in the order the files were processed.

    Raises
    ------
    CaddyLogFileConversionError
        If a file cannot be opened or decoded. The underlying error is chained as its `__cause__`.
    """
    filter_config = filter_config or LogFilterConfig()
    diagnostic_stream = diagnostic_stream or sys.stderr
    file_tqdm_kwargs = file_tqdm_kwargs or dict()

    caddy_log_file_paths = list(caddy_log_file_paths)
    resolved_tqdm_kwargs = dict(desc="Converting log files...", unit="file", disable=True, file=diagnostic_stream)
    resolved_tqdm_kwargs.update(file_tqdm_kwargs)

    conversion_summaries = list()
    for caddy_log_file_path in tqdm.tqdm(
        iterable=caddy_log_file_paths, total=len(caddy_log_file_paths), **resolved_tqdm_kwargs
    ):
        try:
            conversion_summary = convert_caddy_log_file(
                caddy_log_file_path=caddy_log_file_path,
                filter_config=filter_config,
                output_stream=output_stream,
                diagnostic_stream=diagnostic_stream,
                maximum_buffer_size_in_bytes=maximum_buffer_size_in_bytes,
            )
        except Exception as exception:
            raise CaddyLogFileConversionError(
                caddy_log_file_path=caddy_log_file_path, conversion_summaries=conversion_summaries
            ) from exception
        conversion_summaries.append(conversion_summary)

    return conversion_summaries
