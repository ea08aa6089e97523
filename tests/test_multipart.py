import pytest

from rangetest.errors import MultipartDecodeError
from rangetest.multipart import MultipartReader
from tests.apps.ranges import multipart_body


DATA = bytes(range(256)) * 2


def _chunked(body, size):
    return [body[idx : idx + size] for idx in range(0, len(body), size)]


def _parts(reader):
    return [(part.get('content-range'), part.read()) for part in reader]


@pytest.mark.parametrize('chunk_size', [1, 7, 64, 4096])
def test_parts_in_order(chunk_size):
    body = multipart_body(DATA, [(0, 99), (200, 299), (400, 499)], boundary='xyz')
    reader = MultipartReader(_chunked(body, chunk_size), 'xyz')

    assert _parts(reader) == [
        ('bytes 0-99/512', DATA[0:100]),
        ('bytes 200-299/512', DATA[200:300]),
        ('bytes 400-499/512', DATA[400:500]),
    ]


def test_part_headers_are_case_insensitive():
    body = multipart_body(DATA, [(0, 9), (10, 19)], boundary='xyz')
    part = next(MultipartReader([body], 'xyz'))

    assert part.index == 0
    assert part.get('CONTENT-TYPE') == 'text/plain'
    assert part.headers['content-range'] == 'bytes 0-9/512'
    assert part.get('x-missing') is None


def test_body_containing_boundary_like_bytes():
    data = b'\r\n--xy\r\n--xyzz' + b'x' * 10
    body = multipart_body(data, [(0, 14), (15, 24)], boundary='xyz')

    assert [content for _, content in _parts(MultipartReader([body], 'xyz'))] == [data[:15], data[15:]]


def test_unread_part_is_skipped():
    body = multipart_body(DATA, [(0, 99), (200, 299)], boundary='xyz')
    reader = MultipartReader(_chunked(body, 13), 'xyz')

    next(reader)
    second = next(reader)

    assert second.index == 1
    assert second.read() == DATA[200:300]
    assert second.read() == b''


def test_preamble_and_epilogue_ignored():
    body = b'This is the preamble.\r\nIt is ignored.\r\n'
    body += multipart_body(DATA, [(0, 9), (20, 29)], boundary='xyz')
    body += b'This is the epilogue.\r\n'

    assert [content for _, content in _parts(MultipartReader([body], 'xyz'))] == [DATA[0:10], DATA[20:30]]


def test_lf_line_endings():
    body = multipart_body(DATA, [(0, 9), (20, 29)], boundary='xyz', nl=b'\n')

    assert _parts(MultipartReader([body], 'xyz')) == [
        ('bytes 0-9/512', DATA[0:10]),
        ('bytes 20-29/512', DATA[20:30]),
    ]


def test_transport_padding_after_delimiter():
    body = (
        b'--xyz  \t\r\n'
        b'Content-Range: bytes 0-2/3\r\n'
        b'\r\n'
        b'abc\r\n'
        b'--xyz--\r\n'
    )

    assert _parts(MultipartReader([body], 'xyz')) == [('bytes 0-2/3', b'abc')]


def test_folded_header():
    body = b'--xyz\r\nContent-Type: text/plain;\r\n charset=utf-8\r\n\r\nabc\r\n--xyz--\r\n'
    part = next(MultipartReader([body], 'xyz'))

    assert part.get('content-type') == 'text/plain; charset=utf-8'


def test_empty_part_body():
    body = b'--xyz\r\nContent-Range: bytes 0-0/1\r\n\r\n\r\n--xyz--\r\n'

    assert _parts(MultipartReader([body], 'xyz')) == [('bytes 0-0/1', b'')]


def test_no_parts():
    assert list(MultipartReader([b'--xyz--\r\n'], 'xyz')) == []


def test_single_pass():
    body = multipart_body(DATA, [(0, 9), (20, 29)], boundary='xyz')
    reader = MultipartReader([body], 'xyz')

    assert len(list(reader)) == 2
    assert list(reader) == []
    with pytest.raises(StopIteration):
        next(reader)


def test_empty_body():
    with pytest.raises(MultipartDecodeError, match='missing close delimiter'):
        list(MultipartReader([], 'xyz'))


def test_missing_close_delimiter():
    body = multipart_body(DATA, [(0, 9), (20, 29)], boundary='xyz')
    reader = MultipartReader([body[: -len(b'--xyz--\r\n')]], 'xyz')

    assert next(reader).read() == DATA[0:10]
    with pytest.raises(MultipartDecodeError, match='in part content'):
        next(reader).read()


def test_truncated_headers():
    with pytest.raises(MultipartDecodeError, match='in part headers'):
        next(MultipartReader([b'--xyz\r\nContent-Range: bytes 0-0/1\r\n'], 'xyz'))


def test_malformed_header_line():
    body = b'--xyz\r\nnot a header\r\n\r\nabc\r\n--xyz--\r\n'

    with pytest.raises(MultipartDecodeError, match="malformed part header line 'not a header'"):
        next(MultipartReader([body], 'xyz'))


def test_garbage_after_delimiter():
    body = b'--xyz\r\n\r\nabc\r\n--xyz garbage\r\n\r\ndef\r\n--xyz--\r\n'
    reader = MultipartReader([body], 'xyz')

    assert next(reader).read() == b'abc'
    with pytest.raises(MultipartDecodeError, match='expecting a new part'):
        next(reader)


def test_wrong_boundary():
    body = multipart_body(DATA, [(0, 9), (20, 29)], boundary='xyz')

    with pytest.raises(MultipartDecodeError):
        list(MultipartReader([body], 'abc'))


def test_boundary_required():
    with pytest.raises(ValueError):
        MultipartReader([b''], '')


def test_non_latin1_boundary():
    with pytest.raises(MultipartDecodeError, match="invalid multipart boundary '€'"):
        MultipartReader([b''], '€')


def test_repeated_part_header_returns_first():
    body = b'--xyz\r\nContent-Range: bytes 0-2/3\r\nContent-Range: bytes 1-2/3\r\n\r\nabc\r\n--xyz--\r\n'
    part = next(MultipartReader([body], 'xyz'))

    assert part.get('content-range') == 'bytes 0-2/3'
    assert part.get('content-type') is None
    assert part.get('content-type', '') == ''
