import hashlib
from dataclasses import dataclass
from importlib import resources

from .constants import DATASET_LENGTH, DATASET_MEDIA_TYPE, DATASET_SHA256
from .errors import DatasetError
from .log import logger


@dataclass(frozen=True)
class ReferenceDataset:
    """The payload the target is expected to serve, byte for byte."""

    data: bytes
    media_type: str = DATASET_MEDIA_TYPE

    @property
    def length(self) -> int:
        return len(self.data)

    def slice(self, first: int, last: int) -> bytes:
        """Bytes in the inclusive [first, last] span."""
        return self.data[first : last + 1]


def load_dataset(package: str = 'rangetest', resource: str = 'data/data.txt') -> ReferenceDataset:
    try:
        data = resources.files(package).joinpath(resource).read_bytes()
    except (OSError, ModuleNotFoundError) as exc:
        raise DatasetError(f'unable to load reference payload {resource}: {exc}') from exc

    if len(data) != DATASET_LENGTH:
        raise DatasetError(f'corrupt reference payload. Expected {DATASET_LENGTH} bytes got {len(data)}')
    if hashlib.sha256(data).hexdigest() != DATASET_SHA256:
        raise DatasetError('corrupt reference payload. Checksum mismatch')

    logger.debug(f'Loaded reference payload {resource} ({len(data)} bytes, {DATASET_MEDIA_TYPE})')
    return ReferenceDataset(data)
