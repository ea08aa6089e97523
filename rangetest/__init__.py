from .dataset import ReferenceDataset, load_dataset  # noqa
from .runner import Suite, run_suite  # noqa
from .scenarios import RangeScenario, build_catalog  # noqa
from .validator import ValidationOutcome, Validator  # noqa


__version__ = '1.0.0'
