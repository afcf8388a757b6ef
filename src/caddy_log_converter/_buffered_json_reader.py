import io
import json
import math
import re

_WHITESPACE_REGEX = re.compile(pattern=r"[ \t\n\r]*")

# What may remain after the error position when a value was merely cut off at the end of a buffer
_PARTIAL_TOKEN_REGEX = re.compile(pattern=r"[^\s{}\[\],:]*")


def _parse_finite_float(value: str) -> float:
    parsed_value = float(value)
    if not math.isfinite(parsed_value):
        raise ValueError(f"Out of range float value '{value}' is not valid JSON.")

    return parsed_value


def _reject_constant(value: str) -> None:
    raise ValueError(f"Constant '{value}' is not valid JSON.")


class BufferedJSONReader:
    def __init__(self, *, text_stream: io.TextIOBase, maximum_buffer_size_in_bytes: int = 10**8):
        """
        Lazily decode a stream of concatenated JSON values using buffers of a specified size.

        Values may be separated by any amount of JSON whitespace, including none at all, and a single value may span
        any number of reads as long as it fits within the maximum buffer size.

        Parameters
        ----------
        text_stream : io.TextIOBase
            The text stream to decode values from. The stream is not closed by the reader.
        maximum_buffer_size_in_bytes : int, default: 100 MB
            The theoretical maximum amount of RAM (in bytes) to be used by the undecoded remainder of the stream.
        """
        self.text_stream = text_stream
        self.maximum_buffer_size_in_bytes = maximum_buffer_size_in_bytes

        # Each read is 3x less than the theoretical maximum so that a value split across reads still fits
        self.read_size_in_characters = max(int(maximum_buffer_size_in_bytes / 3), 1)

        self.buffer = ""
        self.position = 0
        self.offset = 0
        self.is_stream_exhausted = False
        self.number_of_decoded_values = 0

        self._decoder = json.JSONDecoder(parse_float=_parse_finite_float, parse_constant=_reject_constant)

    def __iter__(self):
        return self

    def __next__(self) -> object:
        """Decode the next value from the stream, or raise StopIteration if the stream is exhausted."""
        while True:
            self.position = _WHITESPACE_REGEX.match(string=self.buffer, pos=self.position).end()

            if self.position == len(self.buffer):
                if self.is_stream_exhausted:
                    raise StopIteration

                self._read_next_buffer()
                continue

            try:
                value, end = self._decoder.raw_decode(self.buffer, self.position)
            except json.JSONDecodeError as exception:
                # The value may simply be cut off by the end of the buffer; anything else is fatal right away
                is_truncated = exception.msg.startswith("Unterminated string") or (
                    _PARTIAL_TOKEN_REGEX.fullmatch(self.buffer, exception.pos) is not None
                )
                if self.is_stream_exhausted or not is_truncated:
                    raise

                self._read_next_buffer(decode_error=exception)
                continue

            # A number ending exactly at the buffer boundary may continue in the next read
            is_number = isinstance(value, int | float) and not isinstance(value, bool)
            if is_number and end == len(self.buffer) and not self.is_stream_exhausted:
                self._read_next_buffer()
                continue

            self.position = end
            self.number_of_decoded_values += 1

            return value

    def _read_next_buffer(self, decode_error: json.JSONDecodeError | None = None) -> None:
        # Drop content that has already been decoded
        self.offset += self.position
        self.buffer = self.buffer[self.position :]
        self.position = 0

        if len(self.buffer.encode("utf-8")) > self.maximum_buffer_size_in_bytes:
            message = (
                f"BufferedJSONReader encountered a value at offset {self.offset} that exceeds the buffer size! "
                "Try increasing the `maximum_buffer_size_in_bytes` to account for this value."
            )
            if decode_error is not None:
                message += f" Last decoding error: {decode_error.msg}."
            raise ValueError(message)

        next_content = self.text_stream.read(self.read_size_in_characters)
        if next_content == "":
            self.is_stream_exhausted = True
            return

        self.buffer += next_content
