from dataclasses import dataclass
from typing import Optional

import httpx

from .constants import DEFAULT_TIMEOUT, USER_AGENT


@dataclass
class ClientSettings:
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = USER_AGENT
    # the harness talks to test servers with self-signed certificates
    verify: bool = False


def build_client(
    settings: Optional[ClientSettings] = None, transport: Optional[httpx.BaseTransport] = None
) -> httpx.Client:
    settings = settings or ClientSettings()
    return httpx.Client(
        headers={'user-agent': settings.user_agent, 'accept-encoding': 'identity'},
        timeout=httpx.Timeout(settings.timeout),
        verify=settings.verify,
        follow_redirects=False,
        transport=transport,
    )
