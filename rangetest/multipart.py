"""Streaming reader for multipart bodies (RFC 2046), as used by multipart/byteranges."""

from typing import Iterable, Iterator, List, Optional, Tuple

import httpx

from .errors import MultipartDecodeError
from .log import logger


_LWSP = b' \t'
# bytes allowed right after a boundary for it to count as a delimiter
_DELIMITER_FOLLOWERS = b'- \t\r\n'


class Part:
    """One body part. Headers are parsed eagerly, the body is read on demand."""

    def __init__(self, reader: 'MultipartReader', index: int, headers: httpx.Headers):
        self._reader = reader
        self.index = index
        self.headers = headers
        self._consumed = False

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.headers.get_list(name)
        return values[0] if values else default

    def read(self) -> bytes:
        """Return the whole part body. Later calls return an empty bytes string."""
        if self._consumed:
            return b''
        self._consumed = True
        return self._reader._read_body()

    def _drain(self):
        if not self._consumed:
            self.read()


class MultipartReader:
    """
    Single pass iterator of `Part` over a chunked byte stream.

    Iteration stops on the close delimiter. Running out of input before it,
    or any line breaking the multipart grammar, raises `MultipartDecodeError`.
    The reader cannot be restarted.
    """

    def __init__(self, stream: Iterable[bytes], boundary: str):
        if not boundary:
            raise ValueError('boundary is required')
        self._chunks = iter(stream)
        self._buffer = bytearray()
        self._exhausted = False
        try:
            self._dash_boundary = b'--' + boundary.encode('latin-1')
        except UnicodeEncodeError as exc:
            raise MultipartDecodeError(f'invalid multipart boundary {boundary!r}') from exc
        self._nl = b'\r\n'
        self._current: Optional[Part] = None
        self._parts_read = 0
        self._finished = False

    def __iter__(self) -> Iterator[Part]:
        return self

    def __next__(self) -> Part:
        if self._finished:
            raise StopIteration
        if self._current is not None:
            self._current._drain()
            self._current = None

        while True:
            line = self._read_line()
            if not line:
                self._finished = True
                raise MultipartDecodeError('unexpected end of multipart body, missing close delimiter')
            if self._is_close_delimiter(line):
                self._finished = True
                raise StopIteration
            if self._is_delimiter(line):
                break
            if self._parts_read:
                self._finished = True
                raise MultipartDecodeError(f'expecting a new part; got line {bytes(line)!r}')
            # preamble

        self._current = Part(self, self._parts_read, self._read_headers())
        self._parts_read += 1
        logger.debug(f'multipart part {self._current.index + 1}: {dict(self._current.headers)}')
        return self._current

    def _fill(self) -> bool:
        while not self._exhausted:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                self._exhausted = True
                break
            if chunk:
                self._buffer.extend(chunk)
                return True
        return False

    def _read_line(self) -> bytes:
        """Next line including its terminator, or what is left at end of input."""
        searched = 0
        while True:
            idx = self._buffer.find(b'\n', searched)
            if idx >= 0:
                line = bytes(self._buffer[: idx + 1])
                del self._buffer[: idx + 1]
                return line
            searched = len(self._buffer)
            if not self._fill():
                line = bytes(self._buffer)
                self._buffer.clear()
                return line

    def _is_delimiter(self, line: bytes) -> bool:
        if not line.startswith(self._dash_boundary):
            return False
        rest = line[len(self._dash_boundary) :]
        if not rest.endswith(b'\n') or rest.rstrip(_LWSP + b'\r\n'):
            return False
        # the first delimiter decides the line terminator used for the body
        if self._parts_read == 0 and not rest.endswith(b'\r\n'):
            self._nl = b'\n'
        return True

    def _is_close_delimiter(self, line: bytes) -> bool:
        return line.startswith(self._dash_boundary + b'--')

    def _read_headers(self) -> httpx.Headers:
        headers: List[Tuple[str, str]] = []
        while True:
            line = self._read_line()
            if not line.endswith(b'\n'):
                self._finished = True
                raise MultipartDecodeError('unexpected end of multipart body in part headers')
            if line in (b'\r\n', b'\n'):
                return httpx.Headers(headers)

            text = line.decode('latin-1').rstrip('\r\n')
            if text[:1] in (' ', '\t') and headers:
                name, value = headers[-1]
                headers[-1] = (name, f'{value} {text.strip()}')
                continue
            name, sep, value = text.partition(':')
            if not sep or not name.strip() or name != name.rstrip():
                self._finished = True
                raise MultipartDecodeError(f'malformed part header line {text!r}')
            headers.append((name, value.strip()))

    def _read_body(self) -> bytes:
        delimiter = self._nl + self._dash_boundary
        searched = 0
        while True:
            idx = self._buffer.find(delimiter, searched)
            follower = idx + len(delimiter)
            if idx >= 0 and follower < len(self._buffer):
                if self._buffer[follower] in _DELIMITER_FOLLOWERS:
                    body = bytes(self._buffer[:idx])
                    # leave the dash-boundary line for the next __next__ call
                    del self._buffer[: idx + len(self._nl)]
                    return body
                searched = idx + 1
                continue
            searched = idx if idx >= 0 else max(0, len(self._buffer) - len(delimiter) + 1)
            if not self._fill():
                self._finished = True
                raise MultipartDecodeError('unexpected end of multipart body in part content')
