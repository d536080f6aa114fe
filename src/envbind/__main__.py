"""Command-line utilities for envbind configuration structures.

Targets are given as import strings (`package.module:Config`) and must
name a Pydantic model class.
"""

from json import dumps
from typing import TYPE_CHECKING, Any

from click import BadParameter, Choice, ClickException, ParamType, argument, echo, group, option
from pydantic import BaseModel, ImportString, TypeAdapter, ValidationError
from yaml import safe_dump

from envbind.core import Resolver
from envbind.errors import DefinitionError, EnvError

if TYPE_CHECKING:
    from click import Context, Parameter

_IMPORT_STRING = TypeAdapter(ImportString)


class ModelParam(ParamType):
    """Click parameter importing a model class from an import string."""

    name = 'model'

    def convert(self, value: Any, param: 'Parameter | None',  # noqa: ANN401
                ctx: 'Context | None') -> type[BaseModel]:
        """Import and check the target model.

        Args:
            value: Import string or an already imported class.
            param: Click parameter.
            ctx: Click context.

        Returns:
            The imported model class.
        """
        if isinstance(value, type) and issubclass(value, BaseModel):
            return value

        try:
            target = _IMPORT_STRING.validate_python(value)
        except ValidationError:
            self.fail(f'can not import {value!r}', param, ctx)

        if not isinstance(target, type) or not issubclass(target, BaseModel):
            self.fail(f'{value!r} is not a model class', param, ctx)

        return target


prefix_option = option(
    '-p', '--prefix',
    default='',
    help='Root prefix of all variable names.',
)


@group(help='Command-line utilities for environment-bound configuration.')
def cli() -> None:
    """Root CLI group for envbind tools."""
    return None


@cli.command(
    name='usage',
    help='Print the variables read by a configuration model.',
)
@argument('target', type=ModelParam())
@prefix_option
def print_usage(target: type[BaseModel], prefix: str) -> None:
    """Print the usage table of a model.

    Args:
        target: Configuration model class.
        prefix: Root prefix.
    """
    try:
        echo(Resolver({}).usage(target, prefix))
    except EnvError as error:
        raise BadParameter(str(error), param_hint='TARGET') from error


@cli.command(
    name='resolve',
    help=(
        'Resolve a configuration model from the current environment '
        'and print its values. Secrets are masked.'
    ),
)
@argument('target', type=ModelParam())
@prefix_option
@option(
    '-f', '--format', 'output_format',
    type=Choice(['json', 'yaml']),
    default='json',
    help='Output format.',
)
def print_resolved(target: type[BaseModel], prefix: str, output_format: str) -> None:
    """Resolve a model and print it.

    Args:
        target: Configuration model class.
        prefix: Root prefix.
        output_format: `json` or `yaml`.

    Raises:
        BadParameter: If the model declaration is not supported.
        ClickException: If the model can not be resolved or validated.
    """
    try:
        config = Resolver().with_prefix(target, prefix)
    except DefinitionError as error:
        raise BadParameter(str(error), param_hint='TARGET') from error
    except (EnvError, ValidationError) as error:
        raise ClickException(str(error)) from error

    content = config.model_dump(mode='json')
    if output_format == 'yaml':
        echo(safe_dump(content, sort_keys=False, allow_unicode=True), nl=False)
        return

    echo(dumps(content, ensure_ascii=False, indent=4))


if __name__ == '__main__':
    cli()
