from typing import Callable, Iterator, List, Optional, Sequence

import click
import httpx

from .dataset import ReferenceDataset
from .dispatch import Dispatcher
from .errors import ScenarioError
from .http import ClientSettings, build_client
from .log import logger
from .scenarios import RangeScenario, build_catalog
from .validator import ValidationOutcome, Validator


PASS_MARKER = click.style('[PASS]', fg='green')
FAIL_MARKER = click.style('[FAIL]', fg='red')
DETAIL_INDENT = ' ' * 7


def format_outcome(outcome: ValidationOutcome) -> str:
    if outcome.passed:
        return f'{PASS_MARKER} {outcome.scenario_name}'
    return f'{FAIL_MARKER} {outcome.scenario_name}\n{DETAIL_INDENT}{outcome.detail}'


def report(outcome: ValidationOutcome):
    click.echo(format_outcome(outcome))


class Suite:
    """Runs every scenario once, in catalog order, against a single URL."""

    def __init__(
        self,
        url: str,
        dataset: ReferenceDataset,
        client: httpx.Client,
        scenarios: Optional[Sequence[RangeScenario]] = None,
    ):
        self.url = url
        self.dataset = dataset
        self.scenarios = tuple(scenarios) if scenarios is not None else build_catalog(dataset)
        self.dispatcher = Dispatcher(url, client)
        self.validator = Validator(dataset)

    def run_scenario(self, scenario: RangeScenario) -> ValidationOutcome:
        try:
            with self.dispatcher.dispatch(scenario) as response:
                return self.validator.validate(scenario, response)
        except ScenarioError as exc:
            return ValidationOutcome.failure(scenario.name, str(exc))

    def __iter__(self) -> Iterator[ValidationOutcome]:
        for scenario in self.scenarios:
            yield self.run_scenario(scenario)


def run_suite(
    url: str,
    dataset: ReferenceDataset,
    settings: Optional[ClientSettings] = None,
    transport: Optional[httpx.BaseTransport] = None,
    reporter: Optional[Callable[[ValidationOutcome], None]] = report,
) -> List[ValidationOutcome]:
    outcomes = []
    with build_client(settings, transport=transport) as client:
        suite = Suite(url, dataset, client)
        logger.info(f'Running {len(suite.scenarios)} range scenarios against {url}')
        for outcome in suite:
            if reporter is not None:
                reporter(outcome)
            outcomes.append(outcome)

    failed = sum(1 for outcome in outcomes if not outcome.passed)
    logger.info(f'{len(outcomes) - failed} passed, {failed} failed')
    return outcomes
