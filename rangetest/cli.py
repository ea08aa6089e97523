import json
import pathlib
import sys
from enum import Enum
from typing import Any, Callable, List, Optional, Type, TypeVar, Union

import click
import httpx

from .dataset import load_dataset
from .errors import FatalError
from .http import ClientSettings
from .log import LogLevels, configure_logging, logger
from .runner import run_suite


_AnyCallable = Callable[..., Any]
FC = TypeVar('FC', bound=Union[_AnyCallable, click.Command])


class EnumType(click.Choice):
    def __init__(self, enum: Enum, case_sensitive=False) -> None:
        self.__enum = enum
        super().__init__(choices=[item.value for item in enum], case_sensitive=case_sensitive)

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> Enum:
        if value is None or isinstance(value, Enum):
            return value

        converted_str = super().convert(value, param, ctx)
        return self.__enum(converted_str)


class AbsoluteURL(click.ParamType):
    name = 'url'

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            self.fail(f'{value!r} is not a valid URL: {exc}', param, ctx)
        if url.scheme not in ('http', 'https') or not url.host:
            self.fail(f'{value!r} is not an absolute http(s) URL', param, ctx)
        return value


def _pretty_print_default(value: Optional[bool]) -> Optional[str]:
    if isinstance(value, bool):
        return 'enabled' if value else 'disabled'
    if isinstance(value, Enum):
        return value.value
    return value


def option(*param_decls: str, cls: Optional[Type[click.Option]] = None, **attrs: Any) -> Callable[[FC], FC]:
    attrs['show_envvar'] = True
    if 'default' in attrs:
        attrs['show_default'] = _pretty_print_default(attrs['default'])
    return click.option(*param_decls, cls=cls, **attrs)


@click.command(context_settings={'show_default': True}, help='Check HTTP range request support of a URL.')
@option('-u', '--url', type=AbsoluteURL(), required=True, help='Absolute URL of the 500 bytes text/plain resource')
@option(
    '--timeout',
    type=click.FloatRange(0, min_open=True),
    default=ClientSettings.timeout,
    help='Per-request timeout (in seconds)',
)
@option('--strict/--no-strict', default=False, help='Exit with status 1 when any scenario fails')
@option('--log/--no-log', 'log_enabled', default=True, help='Enable logging')
@option('--log-level', type=EnumType(LogLevels), default=LogLevels.warning, help='Log level')
@option(
    '--log-config',
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=pathlib.Path),
    help='Logging configuration file (json)',
)
@click.version_option(package_name='rangetest', message='%(prog)s %(version)s')
def cli(
    url: str,
    timeout: float,
    strict: bool,
    log_enabled: bool,
    log_level: LogLevels,
    log_config: Optional[pathlib.Path],
) -> None:
    log_dictconfig = None
    if log_config:
        with log_config.open() as log_config_file:
            try:
                log_dictconfig = json.loads(log_config_file.read())
            except Exception:
                click.echo('Unable to parse provided logging config.', err=True)
                raise click.exceptions.Exit(1)

    configure_logging(log_level, log_dictconfig, enabled=log_enabled)

    try:
        dataset = load_dataset()
    except FatalError as exc:
        logger.critical(str(exc))
        click.echo(str(exc), err=True)
        raise click.exceptions.Exit(1)

    outcomes = run_suite(url, dataset, ClientSettings(timeout=timeout))

    if strict and not all(outcome.passed for outcome in outcomes):
        raise click.exceptions.Exit(1)


def entrypoint(args: Optional[List[str]] = None):
    try:
        code = cli.main(args=args, prog_name='rangetest', auto_envvar_prefix='RANGETEST', standalone_mode=False)
    except click.ClickException as exc:
        # usage errors exit 1 rather than click's 2
        exc.show()
        code = 1
    except click.exceptions.Abort:
        click.echo('Aborted!', err=True)
        code = 1
    sys.exit(code or 0)
