"""Media type parsing for Content-Type header values."""

from email.message import Message
from email.utils import collapse_rfc2231_value
from typing import Dict, Optional, Tuple


def parse_media_type(value: Optional[str]) -> Tuple[str, Dict[str, str]]:
    """
    Split a Content-Type value into its lowercased media type and parameters.

    Raises:
        ValueError: empty value or a type without a `type/subtype` form
    """
    if not value or not value.strip():
        raise ValueError('no media type')

    media_type = value.split(';', 1)[0].strip().lower()
    kind, sep, subtype = media_type.partition('/')
    if not sep or not kind or not subtype or '/' in subtype:
        raise ValueError(f'invalid media type {media_type!r}')

    message = Message()
    message['content-type'] = value
    params = {}
    for key, param in message.get_params(failobj=[])[1:]:
        params[key.lower()] = collapse_rfc2231_value(param)
    return media_type, params
