'''
The binding engine to match the DSL arguments against the declared parameters.
'''
import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Tuple

from .errors import DslArgumentError, DslParamsUsageError
from .types import (
    ArgKind,
    DslArg,
    RepeatingArgGroup,
    RequiredArg,
    SimpleDslArg,
    check_params,
)
from .utils import (
    NULL_TOKEN,
    USAGE_TOKEN,
    NameValuePair,
    check_allowed_value,
    split_values,
    tokenize,
)
from .values import DslParams, RepeatingGroup, ValueReplacer

logger = logging.getLogger(__name__)


def _matches(param: SimpleDslArg, argument: NameValuePair) -> bool:
    return argument.is_positional or argument.name.lower() == param.key


class _SimpleArgumentBinder:
    '''
        Collects the values of simple parameters, keyed by their lower case name.
    '''

    def __init__(self, missing_value_error: str) -> None:
        self._values_by_key: Dict[str, List[str]] = {}
        self._missing_value_error = missing_value_error
        self.applied: List[Tuple[str, str]] = []

    def values_of(self, param: SimpleDslArg) -> List[str]:
        return self._values_by_key.setdefault(param.key, [])

    def consume(self, param: SimpleDslArg, arguments: Deque[NameValuePair]):
        '''
            Consume the next argument for the parameter, and while multiple values are
            allowed, every following argument that is positional or names it.
        '''
        while arguments and _matches(param, arguments[0]):
            self.add_value(param, arguments.popleft().value)
            if not param.allow_multiple:
                break

    def add_value(self, param: SimpleDslArg, value: str):
        values = self.values_of(param)
        if param.allow_multiple:
            items = split_values(value, param.separator)
        else:
            items = [value]

        for item in items:
            if not param.allow_multiple and len(values) == 1:
                raise DslArgumentError(
                    f'Multiple {param.name} parameters are not allowed'
                )
            checked = check_allowed_value(
                param.name, item, param.allowed_values
            )
            values.append(checked)
            self.applied.append((param.name, checked))

    def collect(self, param: SimpleDslArg) -> List[str]:
        '''
            The values of the parameter, or its default when none were supplied.

            Raises:
            - `DslArgumentError`: If a required parameter has no value.
        '''
        values = self._values_by_key.get(param.key)
        if values:
            return values
        if param.kind is ArgKind.Required:
            raise DslArgumentError(self._missing_value_error % param.name)
        if param.default is not None:
            self.applied.append((param.name, param.default))
            return [param.default]
        return []


class _RepeatingGroupBinder:

    def __init__(self, value_replacer: Optional[ValueReplacer]) -> None:
        self._groups_by_key: Dict[str, List[RepeatingGroup]] = {}
        self._value_replacer = value_replacer

    def consume(
        self, group: RepeatingArgGroup, arguments: Deque[NameValuePair]
    ):
        '''
            Consume one repetition of the group, starting at an argument naming its identity.

            The repetition ends before an argument naming a parameter outside the group,
            or naming again a parameter of the group that takes a single value.
        '''
        binder = _SimpleArgumentBinder(
            'Did not supply a value for %s in group ' + group.name
        )
        binder.consume(group.identity, arguments)

        while arguments:
            argument = arguments[0]
            if argument.is_positional:
                raise DslArgumentError(
                    f'Unexpected ambiguous argument {argument}'
                )

            param = group.param(argument.name)
            if param is None:
                break
            if binder.values_of(param) and not param.allow_multiple:
                break

            binder.add_value(param, argument.value)
            arguments.popleft()

        values_by_key = {}
        for param in group.params:
            values = binder.collect(param)
            if values:
                values_by_key[param.key] = values

        logger.debug(
            'Bound repetition %d of group %s',
            len(self._groups_by_key.get(group.key, ())) + 1, group.name
        )
        self._groups_by_key.setdefault(group.key, []).append(
            RepeatingGroup(group, values_by_key, self._value_replacer)
        )

    def collect(self, group: RepeatingArgGroup) -> List[RepeatingGroup]:
        return self._groups_by_key.get(group.key, [])


class DslParamsParser:
    '''
        Bind a list of DSL arguments to the declared parameters.

        Arguments are either named, `name: value` or `name=value`, or positional. The
        parser first walks the leading required parameters in order, binding positional
        arguments and arguments naming the current parameter. It then binds every
        remaining argument by its name. Positional arguments are only accepted for the
        leading required parameters.

        Parameters:
        - value_replacer (`Optional[Callable[[str], str]]`, optional):
            Applied to every value when it is read back, e.g. to expand placeholders.

        Example:
        ```python
        parser = DslParamsParser()
        params = parser.parse(
            ['joe', 'age: 12'], RequiredArg('user'), OptionalArg('age')
        )
        params.value('user')  # 'joe'
        ```
    '''

    def __init__(self, value_replacer: Optional[ValueReplacer] = None) -> None:
        self._value_replacer = value_replacer

    def parse(
        self,
        args: Optional[Sequence[Optional[str]]],
        *params: DslArg,
        value_replacer: Optional[ValueReplacer] = None
    ) -> DslParams:
        '''
            Parse the arguments into the values of the declared parameters.

            Parameters:
            - args (`Optional[Sequence[Optional[str]]]`):
                The raw arguments. `None` arguments are ignored.
            - params (`DslArg`):
                The declared parameters, required ones first.
            - value_replacer (`Optional[Callable[[str], str]]`, optional):
                Overrides the replacer the parser was created with, for this call only.

            Returns:
            - `DslParams`

            Raises:
            - `DslParamsUsageError`:
                If the only argument is `-usage`, carrying the declared parameters.
            - `DslSchemaError`:
                If the declared parameters are inconsistent.
            - `DslArgumentError`:
                On the first argument that can not be bound, or a missing required value.
        '''
        args = list(args) if args is not None else []
        if len(args) == 1 and args[0] == USAGE_TOKEN:
            raise DslParamsUsageError(params)

        params_by_key = check_params(params)
        arguments = deque(
            argument for argument in map(tokenize, args)
            if argument is not NULL_TOKEN
        )
        logger.debug(
            'Binding %d arguments to %d parameters', len(arguments), len(params)
        )

        if value_replacer is None:
            value_replacer = self._value_replacer
        simple_binder = _SimpleArgumentBinder('Missing value for parameter: %s')
        group_binder = _RepeatingGroupBinder(value_replacer)

        for param in params:
            if not arguments or param.kind is not ArgKind.Required:
                break
            if not _matches(param, arguments[0]):
                break
            simple_binder.consume(param, arguments)

        while arguments:
            argument = arguments[0]
            if argument.is_positional:
                raise DslArgumentError(
                    f'Unexpected ambiguous argument {argument}'
                )

            param = params_by_key.get(argument.name.lower())
            if param is None:
                raise DslArgumentError(f'Unexpected argument {argument}')

            if param.kind is ArgKind.Group:
                group_binder.consume(param, arguments)
            else:
                simple_binder.consume(param, arguments)

        values_by_key = {}
        groups_by_key = {}
        for param in params:
            if param.kind is ArgKind.Group:
                groups_by_key[param.key] = group_binder.collect(param)
            else:
                values_by_key[param.key] = simple_binder.collect(param)

        return DslParams(
            params,
            values_by_key,
            groups_by_key,
            value_replacer=value_replacer,
            applied=simple_binder.applied
        )


def parse_args(
    args: Optional[Sequence[Optional[str]]],
    *params: DslArg,
    value_replacer: Optional[ValueReplacer] = None
) -> DslParams:
    parser = DslParamsParser()
    return parser.parse(args, *params, value_replacer=value_replacer)


def get_single_required_param_value(
    args: Optional[Sequence[Optional[str]]], name: str
) -> Optional[str]:
    return parse_args(args, RequiredArg(name)).value(name)


def check_empty(args: Optional[Sequence[Optional[str]]]) -> None:
    '''
        Check a DSL method taking no parameters was not given any argument.
    '''
    parse_args(args)
