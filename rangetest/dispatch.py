from contextlib import contextmanager
from typing import Iterator

import httpx

from .errors import TransportError
from .log import logger
from .scenarios import RangeScenario


class Dispatcher:
    """Sends one request per scenario to the resource under test."""

    def __init__(self, url: str, client: httpx.Client):
        self.url = url
        self.client = client

    def build_request(self, scenario: RangeScenario) -> httpx.Request:
        headers = {}
        if scenario.range is not None:
            headers['range'] = scenario.range
        return self.client.build_request(str(scenario.method), self.url, headers=headers)

    @contextmanager
    def dispatch(self, scenario: RangeScenario) -> Iterator[httpx.Response]:
        """
        Issue the scenario request and yield the streamed response.

        The response is closed on exit. Any `httpx.HTTPError`, raised while
        sending or while the caller reads the body, is re-raised as
        `TransportError`. No retries.
        """
        request = self.build_request(scenario)
        logger.debug(f'{request.method} {request.url} range={scenario.range!r}')
        try:
            response = self.client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise TransportError.from_exception(exc) from exc

        logger.debug(f'{scenario.name}: HTTP {response.status_code}')
        try:
            yield response
        except httpx.HTTPError as exc:
            raise TransportError.from_exception(exc) from exc
        finally:
            response.close()
