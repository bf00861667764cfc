'''
methods to tokenize the raw arguments and to convert and check their values.
'''
import re
from dataclasses import dataclass
from enum import Enum
from inspect import isclass
from typing import Iterable, List, Optional, Tuple, Union

from .errors import DslArgumentError

USAGE_TOKEN = '-usage'
DEFAULT_SEPARATOR = ','

_NAME_VALUE_SEPARATOR = re.compile('[=:]')


@dataclass(frozen=True)
class NameValuePair:
    '''
        One raw argument split into an optional name and a value.

        Attributes:
        - original (`Optional[str]`):
            The raw argument as supplied by the caller.
        - name (`Optional[str]`):
            The trimmed text before the first `=` or `:`, `None` for a positional argument.
        - value (`Optional[str]`):
            The trimmed text after the first separator, or the whole trimmed argument.
    '''
    original: Optional[str]
    name: Optional[str]
    value: Optional[str]

    @property
    def is_positional(self) -> bool:
        return self.name is None

    def __str__(self) -> str:
        return str(self.original)


NULL_TOKEN = NameValuePair(None, None, None)


def tokenize(arg: Optional[str]) -> NameValuePair:
    '''
        Split a raw argument on the first `=` or `:`.

        Any later separator characters are kept in the value, so `"message: ERROR: oops"`
        is named `message` with the value `ERROR: oops`. An empty value after the
        separator is kept as `""`.

        Parameters:
        - arg (`Optional[str]`):
            The raw argument, `None` arguments are mapped to `NULL_TOKEN`.

        Returns:
        - `NameValuePair`
    '''
    if arg is None:
        return NULL_TOKEN

    parts = _NAME_VALUE_SEPARATOR.split(arg, maxsplit=1)
    if len(parts) == 1:
        return NameValuePair(arg, None, arg.strip())

    return NameValuePair(arg, parts[0].strip(), parts[1].strip())


def split_values(val: str, sep: str) -> List[str]:
    '''
        Split a string joined by a separator into trimmed values.

        Empty trailing segments are dropped, so `"a,b,"` gives `['a', 'b']`, while an
        empty string is still one empty value.

        Parameters:
        - val (`str`):
            The input string joined by the separator.
        - sep (`str`):
            The separator, matched literally.

        Returns:
        - `List[str]`

        Example:
        ```python
        split_values('1, 2 ,3', ',')  # ['1', '2', '3']
        ```
    '''
    items = val.split(sep)
    if len(items) > 1:
        while items and items[-1] == '':
            items.pop()

    return [item.strip() for item in items]


def allowed_values_of(
    choices: Union[None, type, Iterable[str]]
) -> Optional[Tuple[str, ...]]:
    '''
        Normalize the allowed values of a parameter to a tuple of strings.

        Parameters:
        - choices (`Union[None, type, Iterable[str]]`):
            `None` for no restriction, `bool` for `true`/`false`, an `Enum` subclass
            for the names of its members, or the allowed strings themselves.

        Returns:
        - `Optional[Tuple[str, ...]]`
    '''
    if choices is None:
        return None
    if choices is bool:
        return ('true', 'false')
    if isclass(choices) and issubclass(choices, Enum):
        return tuple(item.name for item in choices)
    if isinstance(choices, str):
        return (choices, )

    return tuple(map(str, choices))


def format_choices(choices: Iterable[str]) -> str:
    return '[' + ', '.join(choices) + ']'


def check_allowed_value(
    name: str, value: str, choices: Optional[Tuple[str, ...]]
) -> str:
    '''
        Match a value case-insensitively against the allowed values.

        Returns:
        - `str`
            The allowed value in the case it was declared with, or the value unchanged
            when there is no restriction.

        Raises:
        - `DslArgumentError`:
            If the value is not one of the allowed values.
    '''
    if choices is None:
        return value

    for choice in choices:
        if choice.lower() == value.lower():
            return choice

    raise DslArgumentError(
        f"{name} parameter value '{value}' must be one of: {format_choices(choices)}"
    )


def parse_bool(val: Optional[str]) -> bool:
    return val is not None and val.lower() == 'true'
