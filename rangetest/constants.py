from enum import Enum


class StrEnum(str, Enum):
    def __str__(self) -> str:
        return str(self.value)


class Methods(StrEnum):
    GET = 'GET'
    HEAD = 'HEAD'


USER_AGENT = 'rangetest/1.0'
DEFAULT_TIMEOUT = 10.0

DATASET_MEDIA_TYPE = 'text/plain'
DATASET_LENGTH = 500
DATASET_SHA256 = '9cb9203d93e929a51b30035cd48d6664591870368790055770fbddb9e14acbd0'

MULTIPART_BYTERANGES = 'multipart/byteranges'
