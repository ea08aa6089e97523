from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Tuple, Union

from .constants import Methods
from .dataset import ReferenceDataset
from .utils.range import content_range


@dataclass(frozen=True)
class ByteSpan:
    start: int
    end: int
    total: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return content_range(self.start, self.end, self.total)


@dataclass(frozen=True)
class FullBody:
    status: ClassVar[int] = 200


@dataclass(frozen=True)
class SingleRange(ByteSpan):
    status: ClassVar[int] = 206


@dataclass(frozen=True)
class MultiRange:
    parts: Tuple[ByteSpan, ...]

    status: ClassVar[int] = 206


@dataclass(frozen=True)
class ErrorStatus:
    code: int

    @property
    def status(self) -> int:
        return self.code


Expectation = Union[FullBody, SingleRange, MultiRange, ErrorStatus]


@dataclass(frozen=True)
class RangeScenario:
    name: str
    expected: Expectation
    range: Optional[str] = None
    method: Methods = Methods.GET
    # exact-match response headers checked on top of the expectation
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def expected_status(self) -> int:
        return self.expected.status

    @property
    def reads_body(self) -> bool:
        return self.method != Methods.HEAD


def build_catalog(dataset: ReferenceDataset) -> Tuple[RangeScenario, ...]:
    """Conformance scenarios for a payload of `dataset.length` bytes, in report order.

    The literal offsets assume the 500 bytes payload shipped with the package.
    """
    size = dataset.length

    def span(start: int, end: int) -> ByteSpan:
        return ByteSpan(start, end, size)

    return (
        RangeScenario(
            'HEAD request',
            FullBody(),
            method=Methods.HEAD,
            headers={'accept-ranges': 'bytes'},
        ),
        RangeScenario('Get all data without range', FullBody()),
        RangeScenario('Get all data with range', SingleRange(0, size - 1, size), range='bytes=0-'),
        RangeScenario('Get single absolute range', SingleRange(0, 99, size), range='bytes=0-99'),
        RangeScenario(
            'Get single relative range with start index',
            SingleRange(400, size - 1, size),
            range='bytes=400-',
        ),
        RangeScenario(
            'Get single relative range with end index',
            SingleRange(size - 100, size - 1, size),
            range='bytes=-100',
        ),
        RangeScenario(
            'Get multiple absolute ranges',
            MultiRange((span(0, 99), span(200, 299), span(400, 499))),
            range='bytes=0-99,200-299,400-499',
        ),
        RangeScenario(
            'Get multiple absolute and relative ranges',
            MultiRange((span(0, 99), span(size - 100, size - 1))),
            range='bytes=0-99,-100',
        ),
        RangeScenario('Unsupported unit type', FullBody(), range='centimeters=0-'),
        RangeScenario('Index out of range', ErrorStatus(416), range=f'bytes={size + 200}-{size + 300}'),
    )
