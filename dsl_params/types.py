'''
defined the parameter specifications to bind the DSL arguments.
'''
import warnings
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import DslSchemaError
from .utils import DEFAULT_SEPARATOR, allowed_values_of, format_choices


class ArgKind(Enum):
    '''
        Enum representing the kinds of declared parameters.

        Kinds:
        - Required: A value must be supplied, either by name or by position.
        - Optional: The value may be omitted and then falls back to the default.
        - Group: A repeating group of parameters, identified by its first parameter.

        The kind determines how the binding engine consumes the arguments for a
        parameter and how its values are collected.
    '''
    Required = 'required'
    Optional = 'optional'
    Group = 'group'


class DslArg:
    '''
        Base of the declared parameters. Use `RequiredArg`, `OptionalArg` or
        `RepeatingArgGroup`, and dispatch on `kind`.
    '''
    kind: ClassVar[ArgKind]

    @property
    def is_required(self) -> bool:
        return self.kind is ArgKind.Required

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class SimpleDslArg(DslArg):
    '''
        A parameter holding plain string values.

        Attributes:
        - name (str):
            The name of the parameter, matched case-insensitively.
        - allow_multiple (bool, optional):
            Whether the parameter collects more than one value.
        - separator (str, optional):
            The separator to split one argument into multiple values. Only used when
            `allow_multiple` is set. Default `,`.
        - allowed_values (Optional[Tuple[str, ...]], optional):
            The values accepted for the parameter. Also accepts `bool` or an `Enum`
            subclass on construction.

        Instances are immutable, the `allowing_multiple_values` and `with_allowed_values`
        methods return a new, reconfigured parameter.
    '''
    name: str
    allow_multiple: bool = False
    separator: str = DEFAULT_SEPARATOR
    allowed_values: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise DslSchemaError('Parameter name must not be empty')
        if not self.separator:
            raise DslSchemaError(
                f'The separator of "{self.name}" must not be empty'
            )
        if not self.allow_multiple and self.separator != DEFAULT_SEPARATOR:
            warnings.warn(
                f'The separator "{self.separator}" of "{self.name}" is ignored as multiple values are not allowed.',
                UserWarning
            )
        object.__setattr__(
            self, 'allowed_values', allowed_values_of(self.allowed_values)
        )

    def allowing_multiple_values(self, separator: str = DEFAULT_SEPARATOR):
        return replace(self, allow_multiple=True, separator=separator)

    def with_allowed_values(self, *values: Union[str, type]):
        if len(values) == 1 and isinstance(values[0], type):
            return replace(self, allowed_values=values[0])
        return replace(self, allowed_values=values)

    @property
    def usage(self) -> str:
        doc_suffix = [self.name]
        if self.is_required:
            doc_suffix.append('REQUIRED.')
        else:
            doc_suffix.append('Optional.')
        if self.allowed_values is not None:
            doc_suffix.append(
                f'One of {format_choices(self.allowed_values)}.'
            )
        if self.allow_multiple:
            doc_suffix.append(
                f'Multiple values allowed, each argument is splitted with "{self.separator}".'
            )

        return ' '.join(doc_suffix)


@dataclass(frozen=True)
class RequiredArg(SimpleDslArg):
    kind: ClassVar[ArgKind] = ArgKind.Required


@dataclass(frozen=True)
class OptionalArg(SimpleDslArg):
    '''
        A parameter that may be omitted.

        Attributes:
        - default (Optional[str], optional):
            The value used when no argument is supplied for the parameter.
    '''
    kind: ClassVar[ArgKind] = ArgKind.Optional

    default: Optional[str] = None

    def with_default(self, default: Optional[str]) -> 'OptionalArg':
        return replace(self, default=default)

    @property
    def usage(self) -> str:
        usage = super(OptionalArg, self).usage
        if self.default is not None:
            usage += f' Default `{self.default}`.'
        return usage


class RepeatingArgGroup(DslArg):
    '''
        A group of parameters that may be supplied any number of times.

        The first parameter is the identity of the group: every argument naming it
        starts a new repetition, and the group is looked up by its name.

        Parameters:
        - identity (`RequiredArg`):
            The parameter identifying the group.
        - members (`SimpleDslArg`):
            The other parameters of the group, required or optional.

        Example:
        ```python
        group = RepeatingArgGroup(RequiredArg('user'), OptionalArg('age'))
        ```
    '''
    kind: ClassVar[ArgKind] = ArgKind.Group

    def __init__(self, identity: RequiredArg, *members: SimpleDslArg) -> None:
        if not isinstance(identity, RequiredArg):
            raise DslSchemaError(
                'The identity of a repeating group must be a required parameter'
            )
        if identity.allow_multiple:
            raise DslSchemaError(
                f'The identity of repeating group {identity.name} must take a single value'
            )
        self._identity = identity
        self._members = tuple(members)

        self._params_by_key: Dict[str, SimpleDslArg] = {identity.key: identity}
        for member in self._members:
            if isinstance(member, RepeatingArgGroup):
                raise DslSchemaError(
                    f"Repeating groups cannot be nested: '{member.name}' in group {identity.name}"
                )
            if not isinstance(member, SimpleDslArg):
                raise TypeError(
                    f'Unsupported parameter {member!r} in group {identity.name}'
                )
            if member.key in self._params_by_key:
                raise DslSchemaError(
                    f"Duplicate parameter '{member.name}' in group {identity.name}"
                )
            self._params_by_key[member.key] = member

    @property
    def identity(self) -> RequiredArg:
        return self._identity

    @property
    def members(self) -> Tuple[SimpleDslArg, ...]:
        return self._members

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def params(self) -> Tuple[SimpleDslArg, ...]:
        return (self._identity, ) + self._members

    def param(self, name: Optional[str]) -> Optional[SimpleDslArg]:
        if name is None:
            return None
        return self._params_by_key.get(name.lower())

    @property
    def usage(self) -> str:
        return f'{self.name} Repeating group.'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepeatingArgGroup):
            return NotImplemented
        return self.params == other.params

    def __hash__(self) -> int:
        return hash(self.params)

    def __repr__(self) -> str:
        params = ', '.join(map(repr, self.params))
        return f'RepeatingArgGroup({params})'


def check_params(params: Sequence[DslArg]) -> Dict[str, DslArg]:
    '''
        Check the declared parameters and index them by their lower case name.

        Parameters:
        - params (`Sequence[DslArg]`):
            The declared parameters, in declaration order.

        Returns:
        - `Dict[str, DslArg]`

        Raises:
        - `DslSchemaError`:
            If a name is declared twice, ignoring case, or a required parameter follows
            an optional parameter or a repeating group.
    '''
    params_by_key: Dict[str, DslArg] = {}
    seen_optional = False
    for param in params:
        if not isinstance(param, DslArg):
            raise TypeError(f'Unsupported parameter {param!r}')
        if param.is_required and seen_optional:
            raise DslSchemaError(
                'Required parameters must appear before optional parameters'
            )
        if not param.is_required:
            seen_optional = True
        if param.key in params_by_key:
            raise DslSchemaError(f"Duplicate parameter '{param.name}'")
        params_by_key[param.key] = param

    return params_by_key


def format_usage(params: Iterable[DslArg]) -> str:
    '''
        Render one line per declared parameter, members of repeating groups indented.
    '''
    lines: List[str] = []
    for param in params:
        lines.append(param.usage)
        if param.kind is ArgKind.Group:
            for member in param.params:
                lines.append('    ' + member.usage)

    return '\n'.join(lines)
