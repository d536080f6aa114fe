"""Library settings.

Knobs controlling how collection values are split, resolved from the
process environment with `pydantic-settings` under the `ENVBIND_` prefix.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from envbind.models import SettingsModel


class BindingSettings(SettingsModel):
    """Settings for collection parsing.

    Values are read from `ENVBIND_ITEM_SEPARATOR`, `ENVBIND_PAIR_SEPARATOR`
    and `ENVBIND_STRIP_ITEMS` when the model is instantiated.
    """

    model_config = SettingsConfigDict(
        env_prefix='ENVBIND_',
        frozen=True,
        extra='ignore',
    )

    item_separator: str = Field(
        default=',',
        min_length=1,
        title='Item separator',
        description='Separator between items of list, set and mapping values.',
    )

    pair_separator: str = Field(
        default='=',
        min_length=1,
        title='Pair separator',
        description='Separator between a key and its value in mapping items.',
    )

    strip_items: bool = Field(
        default=True,
        title='Strip items',
        description='Strip surrounding whitespace from items, keys and values.',
    )
