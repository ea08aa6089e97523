"""HTTP Content-Range utilities according to RFC 7233."""


def content_range(first: int, last: int, length: int) -> str:
    return f'bytes {first}-{last}/{length}'
