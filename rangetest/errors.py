class RangetestError(Exception):
    """rangetest base exception"""


class FatalError(RangetestError):
    """Aborts the whole run"""


class DatasetError(FatalError):
    """The bundled reference payload is missing or corrupt"""


class ScenarioError(RangetestError):
    """Fails a single scenario, the run goes on"""


class TransportError(ScenarioError):
    @classmethod
    def from_exception(cls, exc: BaseException) -> 'TransportError':
        return cls(str(exc) or exc.__class__.__name__)


class MismatchError(ScenarioError):
    pass


class MultipartDecodeError(ScenarioError):
    pass
