from dataclasses import dataclass
from typing import Callable, Dict, Optional, Type

import httpx

from .constants import MULTIPART_BYTERANGES
from .dataset import ReferenceDataset
from .errors import MismatchError, ScenarioError
from .multipart import MultipartReader
from .scenarios import ByteSpan, ErrorStatus, Expectation, FullBody, MultiRange, RangeScenario, SingleRange
from .utils.mime import parse_media_type


@dataclass(frozen=True)
class ValidationOutcome:
    scenario_name: str
    passed: bool
    detail: Optional[str] = None

    @classmethod
    def success(cls, name: str) -> 'ValidationOutcome':
        return cls(name, True)

    @classmethod
    def failure(cls, name: str, detail: str) -> 'ValidationOutcome':
        return cls(name, False, detail)


def _content_length(response: httpx.Response) -> Optional[int]:
    value = response.headers.get('content-length')
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _media_type(value: Optional[str]):
    try:
        return parse_media_type(value)
    except ValueError as exc:
        raise MismatchError(f'unable to parse content type header: {exc}') from exc


class Validator:
    """
    Checks a response against a scenario expectation.

    Checks run in a fixed order and stop at the first mismatch, which becomes
    the outcome detail.
    """

    def __init__(self, dataset: ReferenceDataset):
        self.dataset = dataset
        self._checks: Dict[Type, Callable[[RangeScenario, Expectation, httpx.Response], None]] = {
            FullBody: self._check_full_body,
            SingleRange: self._check_single_range,
            MultiRange: self._check_multi_range,
            ErrorStatus: self._check_error_status,
        }

    def validate(self, scenario: RangeScenario, response: httpx.Response) -> ValidationOutcome:
        try:
            self.check(scenario, response)
        except ScenarioError as exc:
            return ValidationOutcome.failure(scenario.name, str(exc))
        return ValidationOutcome.success(scenario.name)

    def check(self, scenario: RangeScenario, response: httpx.Response):
        if response.status_code != scenario.expected_status:
            raise MismatchError(
                f'unexpected HTTP status code. Expected {scenario.expected_status} got {response.status_code}'
            )
        self._checks[type(scenario.expected)](scenario, scenario.expected, response)

    def _check_error_status(self, scenario: RangeScenario, expected: ErrorStatus, response: httpx.Response):
        pass

    def _check_full_body(self, scenario: RangeScenario, expected: FullBody, response: httpx.Response):
        self._check_entity(scenario, response, self.dataset.data)

    def _check_single_range(self, scenario: RangeScenario, expected: SingleRange, response: httpx.Response):
        self._check_entity(scenario, response, self.dataset.slice(expected.start, expected.end), expected)

    def _check_entity(
        self,
        scenario: RangeScenario,
        response: httpx.Response,
        expected_data: bytes,
        span: Optional[ByteSpan] = None,
    ):
        length = _content_length(response)
        if length != len(expected_data):
            raise MismatchError(
                f'incorrect value of content length header. Expected {len(expected_data)} got {length}'
            )

        media_type, _ = _media_type(response.headers.get('content-type'))
        if media_type != self.dataset.media_type:
            raise MismatchError(
                f"incorrect value of content type header. Expected '{self.dataset.media_type}' got '{media_type}'"
            )

        for name, value in scenario.headers.items():
            received = response.headers.get(name, '')
            if received != value:
                raise MismatchError(
                    f"incorrect or missing {_header_title(name)} header. Expected '{value}' got '{received}'"
                )

        if span is not None:
            received = response.headers.get('content-range', '')
            if received != span.content_range:
                raise MismatchError(
                    f"incorrect or missing Content-Range header. Expected '{span.content_range}' got '{received}'"
                )

        if not scenario.reads_body:
            return

        data = response.read()
        if len(data) != len(expected_data):
            raise MismatchError(f'incorrect data length. Expected {len(expected_data)} got {len(data)}')
        if data != expected_data:
            raise MismatchError('invalid data returned')

    def _check_multi_range(self, scenario: RangeScenario, expected: MultiRange, response: httpx.Response):
        media_type, params = _media_type(response.headers.get('content-type'))
        if media_type != MULTIPART_BYTERANGES:
            raise MismatchError(
                f"incorrect value of content type header. Expected '{MULTIPART_BYTERANGES}' got '{media_type}'"
            )
        boundary = params.get('boundary')
        if not boundary:
            raise MismatchError('missing multipart boundary')

        expected_count = len(expected.parts)
        received = 0
        for part in MultipartReader(response.iter_bytes(), boundary):
            if part.index >= expected_count:
                raise MismatchError(
                    'unexpected number of data parts returned. '
                    f'Expected {expected_count} but got at least {part.index + 1}'
                )
            span = expected.parts[part.index]
            number = part.index + 1

            part_type = part.get('content-type', '')
            try:
                part_media_type, _ = parse_media_type(part_type)
            except ValueError:
                part_media_type = part_type
            if part_media_type != self.dataset.media_type:
                raise MismatchError(
                    f'invalid content type header value in part {number}. '
                    f"Expected '{self.dataset.media_type}' got '{part_type}'"
                )

            part_range = part.get('content-range', '')
            if part_range != span.content_range:
                raise MismatchError(
                    f'invalid content range header value in part {number}. '
                    f"Expected '{span.content_range}' got '{part_range}'"
                )

            if part.read() != self.dataset.slice(span.start, span.end):
                raise MismatchError(f'invalid data returned in part {number}')
            received += 1

        if received != expected_count:
            raise MismatchError(
                f'unexpected number of data parts returned. Expected {expected_count} got {received}'
            )


def _header_title(name: str) -> str:
    return '-'.join(word.capitalize() for word in name.split('-'))
