'''
typed access to the values bound by the parser.
'''
from decimal import Decimal
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from .errors import DslAccessError, UnknownParameterError
from .types import ArgKind, DslArg, RepeatingArgGroup, SimpleDslArg
from .utils import parse_bool

_T = TypeVar('_T')
_EnumType = TypeVar('_EnumType', bound=Enum)

ValueReplacer = Callable[[str], str]


class DslValues:
    '''
        Accessors shared by the parsed parameters and by each repetition of a group.

        Subclasses provide `has_value`, `value` and `values`, the conversions are built
        on top of them.
    '''

    def has_value(self, name: str) -> bool:
        raise NotImplementedError

    def value(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def values(self, name: str) -> List[str]:
        raise NotImplementedError

    def value_as(self, name: str, mapper: Callable[[str], _T]) -> Optional[_T]:
        value = self.value(name)
        return mapper(value) if value is not None else None

    def value_as_enum(self, name: str,
                      enum_type: Type[_EnumType]) -> Optional[_EnumType]:
        return self.value_as(name, lambda val: enum_type[val])

    def _convert(self, name: str, mapper: Callable[[str], _T]) -> _T:
        value = self.value(name)
        if value is None:
            raise ValueError(f'No value supplied for parameter: {name}')
        return mapper(value)

    def value_as_int(self, name: str) -> int:
        return self._convert(name, int)

    def value_as_long(self, name: str) -> int:
        return self._convert(name, int)

    def value_as_float(self, name: str) -> float:
        return self._convert(name, float)

    def value_as_double(self, name: str) -> float:
        return self._convert(name, float)

    def value_as_decimal(self, name: str) -> Decimal:
        '''
            Convert the value with arbitrary precision.

            Raises:
            - `ValueError`: If there is no value.
            - `decimal.InvalidOperation`: If the value is not a number.
        '''
        return self._convert(name, Decimal)

    def value_as_bool(self, name: str) -> bool:
        '''
            `True` only for `true`, ignoring case. Never raises for a declared parameter.
        '''
        return parse_bool(self.value(name))

    def value_as_optional_int(self, name: str) -> Optional[int]:
        return self.value_as_int(name) if self.has_value(name) else None

    def value_as_optional_long(self, name: str) -> Optional[int]:
        return self.value_as_long(name) if self.has_value(name) else None

    def value_as_optional_float(self, name: str) -> Optional[float]:
        return self.value_as_float(name) if self.has_value(name) else None

    def value_as_param(self, name: str) -> Optional[str]:
        return self.value_as_param_named(name, name)

    def value_as_param_named(self, old_name: str,
                             new_name: str) -> Optional[str]:
        '''
            Format the value of `old_name` as an argument for `new_name`, e.g. `new: 12`.
        '''
        value = self.value(old_name)
        return f'{new_name}: {value}' if value is not None else None

    def values_as(self, name: str, mapper: Callable[[str], _T]) -> List[_T]:
        return [mapper(value) for value in self.values(name)]

    def values_as_ints(self, name: str) -> List[int]:
        return self.values_as(name, int)

    def values_as_longs(self, name: str) -> List[int]:
        return self.values_as(name, int)

    def values_as_floats(self, name: str) -> List[float]:
        return self.values_as(name, float)

    def values_as_decimals(self, name: str) -> List[Decimal]:
        return self.values_as(name, Decimal)

    def values_as_enums(self, name: str,
                        enum_type: Type[_EnumType]) -> List[_EnumType]:
        return self.values_as(name, lambda val: enum_type[val])

    def values_as_optional(self, name: str) -> Optional[List[str]]:
        values = self.values(name)
        return values if values else None


def _single_value(param: SimpleDslArg,
                  values: Sequence[str]) -> Optional[str]:
    if param.allow_multiple:
        raise DslAccessError(
            f'values() should be used when multiple values are allowed: {param.name}'
        )
    return values[0] if values else None


def _replaced(values: Iterable[str],
              value_replacer: Optional[ValueReplacer]) -> List[str]:
    if value_replacer is None:
        return list(values)
    return [value_replacer(value) for value in values]


class RepeatingGroup(DslValues):
    '''
        The values supplied for one repetition of a `RepeatingArgGroup`.
    '''

    def __init__(
        self,
        group: RepeatingArgGroup,
        values_by_key: Mapping[str, Sequence[str]],
        value_replacer: Optional[ValueReplacer] = None
    ) -> None:
        self._group = group
        self._values_by_key: Dict[str, Tuple[str, ...]] = {
            key: tuple(values)
            for key, values in values_by_key.items()
        }
        self._value_replacer = value_replacer

    def get_params(self) -> Tuple[SimpleDslArg, ...]:
        return self._group.params

    def has_param(self, name: str) -> bool:
        return self._group.param(name) is not None

    def _param(self, name: str) -> SimpleDslArg:
        param = self._group.param(name)
        if param is None:
            raise UnknownParameterError(
                f'Parameter {name} does not exist in this repeating group'
            )
        return param

    def has_value(self, name: str) -> bool:
        return len(self._values_by_key.get(self._param(name).key, ())) > 0

    def value(self, name: str) -> Optional[str]:
        param = self._param(name)
        value = _single_value(param, self._values_by_key.get(param.key, ()))
        if value is None or self._value_replacer is None:
            return value
        return self._value_replacer(value)

    def values(self, name: str) -> List[str]:
        return _replaced(
            self._values_by_key.get(self._param(name).key, ()),
            self._value_replacer
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            param.name: list(self._values_by_key.get(param.key, ()))
            for param in self._group.params
        }

    def __repr__(self) -> str:
        return f'RepeatingGroup({self.to_dict()!r})'


class DslParams(DslValues):
    '''
        The values bound to the declared parameters by one parse.

        Values are looked up by parameter name, ignoring case. The object is read-only,
        parse the arguments again to bind other values.

        Example:
        ```python
        params = parse_args(['a: 1', 'b: x, y'], RequiredArg('a'),
                            OptionalArg('b').allowing_multiple_values())
        params.value_as_int('a')  # 1
        params.values('b')  # ['x', 'y']
        ```
    '''

    def __init__(
        self,
        params: Sequence[DslArg],
        values_by_key: Mapping[str, Sequence[str]],
        groups_by_key: Mapping[str, Sequence[RepeatingGroup]],
        value_replacer: Optional[ValueReplacer] = None,
        applied: Sequence[Tuple[str, str]] = ()
    ) -> None:
        self._params = tuple(params)
        self._params_by_key = {param.key: param for param in self._params}
        self._values_by_key: Dict[str, Tuple[str, ...]] = {
            key: tuple(values)
            for key, values in values_by_key.items()
        }
        self._groups_by_key: Dict[str, Tuple[RepeatingGroup, ...]] = {
            key: tuple(groups)
            for key, groups in groups_by_key.items()
        }
        self._value_replacer = value_replacer
        self._applied = tuple(applied)

    def get_params(self) -> Tuple[DslArg, ...]:
        return self._params

    @property
    def applied(self) -> Tuple[Tuple[str, str], ...]:
        '''
            The `(name, value)` pairs bound to the simple parameters, in the order they
            were bound, followed by the defaults that were applied.
        '''
        return self._applied

    def _param(self, name: Optional[str]) -> DslArg:
        param = self._params_by_key.get(
            name.lower()
        ) if name is not None else None
        if param is None:
            raise UnknownParameterError(f'{name} was not a parameter')
        return param

    def _simple_param(self, name: str) -> SimpleDslArg:
        param = self._param(name)
        if param.kind is ArgKind.Group:
            raise DslAccessError(
                f'{name} is a repeating group, use values_as_group()'
            )
        return param

    def has_value(self, name: str) -> bool:
        param = self._params_by_key.get(
            name.lower()
        ) if name is not None else None
        if param is None:
            return False
        if param.kind is ArgKind.Group:
            return len(self._groups_by_key.get(param.key, ())) > 0
        return len(self._values_by_key.get(param.key, ())) > 0

    def value(self, name: str) -> Optional[str]:
        param = self._simple_param(name)
        value = _single_value(param, self._values_by_key.get(param.key, ()))
        if value is None or self._value_replacer is None:
            return value
        return self._value_replacer(value)

    def values(self, name: str) -> List[str]:
        param = self._simple_param(name)
        return _replaced(
            self._values_by_key.get(param.key, ()), self._value_replacer
        )

    def values_as_group(self, name: str) -> Tuple[RepeatingGroup, ...]:
        param = self._param(name)
        if param.kind is not ArgKind.Group:
            raise DslAccessError(f'{name} was not a repeating group')
        return self._groups_by_key.get(param.key, ())

    def copy_args(self, *names: str) -> List[str]:
        '''
            Format the bound values of some parameters back into `name: value` arguments.

            Each name is copied once, in the order first given. The repetitions of a
            group are flattened, each one in the declaration order of its parameters.
            Parameters without values are skipped.

            Parameters:
            - names (`str`): The names of the parameters to copy.

            Returns:
            - `List[str]`
                Arguments that can be passed on to another DSL method.
        '''
        copied: List[str] = []
        seen = set()
        for name in names:
            param = self._param(name)
            if param.key in seen:
                continue
            seen.add(param.key)

            if param.kind is ArgKind.Group:
                for group in self._groups_by_key.get(param.key, ()):
                    for member in param.params:
                        copied.extend(
                            f'{member.name}: {value}'
                            for value in group.values(member.name)
                        )
            else:
                copied.extend(
                    f'{param.name}: {value}'
                    for value in self.values(param.name)
                )

        return copied

    def to_dict(self) -> Dict[str, Any]:
        '''
            The bound values as plain lists, groups as lists of dictionaries.
        '''
        result: Dict[str, Any] = {}
        for param in self._params:
            if param.kind is ArgKind.Group:
                result[param.name] = [
                    group.to_dict()
                    for group in self._groups_by_key.get(param.key, ())
                ]
            else:
                result[param.name] = list(
                    self._values_by_key.get(param.key, ())
                )

        return result

    def __repr__(self) -> str:
        return f'DslParams({self.to_dict()!r})'
