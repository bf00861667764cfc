from enum import Enum

import pytest

from ..errors import DslArgumentError, DslParamsUsageError, DslSchemaError
from ..parser import (
    DslParamsParser,
    check_empty,
    get_single_required_param_value,
    parse_args,
)
from ..types import OptionalArg, RepeatingArgGroup, RequiredArg


class PossiblePets(Enum):
    COW = 0
    SHEEP = 1
    GOAT = 2
    DRAGON = 3


def _error_of(args, *params) -> str:
    with pytest.raises(DslArgumentError) as e:
        parse_args(args, *params)
    return str(e.value)


def test_required_args_when_named():
    params = parse_args(['a=1', 'b=2'], RequiredArg('a'), RequiredArg('b'))

    assert params.value('a') == '1'
    assert params.value('b') == '2'


def test_required_args_when_unnamed():
    params = parse_args(['1', '2'], RequiredArg('a'), RequiredArg('b'))

    assert params.value('a') == '1'
    assert params.value('b') == '2'


def test_named_required_args_in_any_order():
    in_order = parse_args(['a=1', 'b=2'], RequiredArg('a'), RequiredArg('b'))
    reversed_order = parse_args(
        ['b=2', 'a=1'], RequiredArg('a'), RequiredArg('b')
    )

    assert in_order.to_dict() == reversed_order.to_dict() == {
        'a': ['1'],
        'b': ['2']
    }


def test_mixture_of_named_and_unnamed_args():
    params = parse_args(
        ['a=1', '2', 'c: 3'],
        RequiredArg('a'),
        RequiredArg('b'),
        OptionalArg('c'),
    )

    assert params.value_as_int('a') == 1
    assert params.value_as_int('b') == 2
    assert params.value_as_int('c') == 3


def test_multiple_values_across_positional_args():
    params = parse_args(
        ['a=1', 'b=2', '3', 'c=4'],
        RequiredArg('a'),
        RequiredArg('b').allowing_multiple_values(),
        RequiredArg('c'),
    )

    assert params.values('a') == ['1']
    assert params.values('b') == ['2', '3']
    assert params.values('c') == ['4']


def test_multiple_values_with_default_separator():
    params = parse_args(
        ['a: 1, 2, 3', 'b: x'],
        RequiredArg('a').allowing_multiple_values(),
        OptionalArg('b').allowing_multiple_values(),
    )

    assert params.values('a') == ['1', '2', '3']
    assert params.values('b') == ['x']


def test_multiple_values_with_custom_separator():
    params = parse_args(
        ['a: 1;2', 'b: x|y', 'b: z'],
        RequiredArg('a').allowing_multiple_values(';'),
        OptionalArg('b').allowing_multiple_values('|'),
    )

    assert params.values('a') == ['1', '2']
    assert params.values('b') == ['x', 'y', 'z']


def test_optional_args_in_any_order():
    params = parse_args(
        ['1', '2', 'd: 4', 'c: 3'],
        RequiredArg('a'),
        RequiredArg('b'),
        OptionalArg('c'),
        OptionalArg('d'),
    )

    assert params.to_dict() == {
        'a': ['1'],
        'b': ['2'],
        'c': ['3'],
        'd': ['4']
    }


def test_default_for_optional_arg():
    params = parse_args([], OptionalArg('a', default='1'), OptionalArg('b'))

    assert params.value('a') == '1'
    assert params.has_value('a')
    assert params.value('b') is None
    assert not params.has_value('b')


def test_supplied_value_overrides_default_even_when_empty():
    params = parse_args(['a: '], OptionalArg('a', default='1'))

    assert params.value('a') == ''
    assert params.has_value('a')


def test_match_params_ignoring_case():
    params = parse_args(['a=1', 'B=2'], RequiredArg('A'), OptionalArg('b'))

    assert params.value('a') == '1'
    assert params.value('B') == '2'
    assert params.has_value('a')
    assert params.has_value('B')


def test_ignore_null_arguments():
    params = parse_args(
        [None, 'a=1', None, 'b=2', None], OptionalArg('a'), OptionalArg('b')
    )

    assert params.value('a') == '1'
    assert params.value('b') == '2'


def test_allowed_values_are_returned_in_declared_case():
    params = parse_args(
        ['a: Value1', 'b: VALUE2, value1'],
        RequiredArg('a').with_allowed_values('value1', 'value2'),
        RequiredArg('b').with_allowed_values('value1', 'value2')
        .allowing_multiple_values(),
    )

    assert params.value('a') == 'value1'
    assert params.values('b') == ['value2', 'value1']


def test_allowed_values_from_bool_and_enum():
    params = parse_args(
        ['thisWorks: TRUE', 'pet: dragon'],
        RequiredArg('thisWorks').with_allowed_values(bool),
        RequiredArg('pet').with_allowed_values(PossiblePets),
    )

    assert params.value_as_bool('thisWorks')
    assert params.value('pet') == 'DRAGON'
    assert params.value_as_enum('pet', PossiblePets) is PossiblePets.DRAGON


def test_reject_values_not_allowed():
    assert _error_of(
        ['pet: UNICORN'],
        RequiredArg('pet').with_allowed_values(PossiblePets),
    ) == "pet parameter value 'UNICORN' must be one of: [COW, SHEEP, GOAT, DRAGON]"

    assert _error_of(
        ['a: value', 'myValue: 1'],
        RequiredArg('a'),
        RequiredArg('myValue').with_allowed_values('A', 'B'),
    ) == "myValue parameter value '1' must be one of: [A, B]"


def test_reject_each_split_value_not_allowed():
    assert _error_of(
        ['a: x, z'],
        RequiredArg('a').with_allowed_values('x', 'y').allowing_multiple_values(),
    ) == "a parameter value 'z' must be one of: [x, y]"


def test_reject_multiple_values_when_not_allowed():
    assert _error_of(
        ['foo: value1', 'foo: value2'], RequiredArg('foo')
    ) == 'Multiple foo parameters are not allowed'
    assert _error_of(
        ['foo: value1', 'foo: value1'], OptionalArg('foo')
    ) == 'Multiple foo parameters are not allowed'


def test_reject_missing_required_value():
    assert _error_of(['a=1'], RequiredArg('a'),
                     RequiredArg('b')) == 'Missing value for parameter: b'


def test_reject_unexpected_argument():
    assert _error_of(['a=1', 'b=2'],
                     RequiredArg('a')) == 'Unexpected argument b=2'


def test_reject_positional_argument_after_optional_arg():
    assert _error_of(['a=1', '2'], OptionalArg('a'),
                     OptionalArg('b')) == 'Unexpected ambiguous argument 2'
    assert _error_of(['b=1', '2'], RequiredArg('a'),
                     OptionalArg('b')) == 'Unexpected ambiguous argument 2'


def test_reject_positional_argument_for_optional_args_only():
    assert _error_of(['1', '2'], OptionalArg('a'),
                     OptionalArg('b')) == 'Unexpected ambiguous argument 1'


def test_reject_positional_argument_after_out_of_order_required_args():
    assert _error_of(
        ['b=2', '1', 'c: 3'],
        RequiredArg('a'),
        RequiredArg('b'),
        OptionalArg('c'),
    ) == 'Unexpected ambiguous argument 1'


def test_reject_inconsistent_params_before_binding():
    with pytest.raises(DslSchemaError):
        parse_args(['a=1', 'b=2'], OptionalArg('b'), RequiredArg('a'))
    with pytest.raises(DslSchemaError):
        parse_args(['a=1'], RequiredArg('a'), OptionalArg('A'))


def test_usage_argument_returns_params():
    params = (RequiredArg('a'), OptionalArg('b'))

    with pytest.raises(DslParamsUsageError) as e:
        parse_args(['-usage'], *params)

    assert e.value.params == params
    assert e.value.format_usage() == 'a REQUIRED.\nb Optional.'


def test_usage_argument_skips_params_checks():
    params = (OptionalArg('b'), RequiredArg('a'), RequiredArg('a'))

    with pytest.raises(DslParamsUsageError) as e:
        parse_args(['-usage'], *params)

    assert e.value.params == params


def test_usage_only_as_sole_argument():
    assert _error_of(['-usage', 'a: 1'], OptionalArg('a')) == (
        'Unexpected ambiguous argument -usage'
    )


def test_groups_of_params():
    params = parse_args(
        ['a: value', 'group: Joe', 'value: 1', 'group: Jenny', 'value: 2'],
        RequiredArg('a'),
        RepeatingArgGroup(RequiredArg('group'), RequiredArg('value')),
    )

    assert params.value('a') == 'value'
    groups = params.values_as_group('group')
    assert len(groups) == 2
    assert groups[0].value('group') == 'Joe'
    assert groups[0].value('value') == '1'
    assert groups[1].value('group') == 'Jenny'
    assert groups[1].value('value') == '2'


def test_each_named_identity_starts_a_new_group():
    params = parse_args(
        ['group: a', 'group: b', 'group: c'],
        RepeatingArgGroup(RequiredArg('group'), OptionalArg('value')),
    )

    groups = params.values_as_group('group')
    assert [group.value('group') for group in groups] == ['a', 'b', 'c']


def test_group_members_in_any_order():
    params = parse_args(
        ['group: Joe', 'value: 1', 'other: x', 'group: Jenny', 'other: y', 'value: 2'],
        RepeatingArgGroup(
            RequiredArg('group'), RequiredArg('value'), OptionalArg('other')
        ),
    )

    assert params.to_dict() == {
        'group': [
            {
                'group': ['Joe'],
                'value': ['1'],
                'other': ['x']
            },
            {
                'group': ['Jenny'],
                'value': ['2'],
                'other': ['y']
            },
        ]
    }


def test_arguments_following_a_group():
    params = parse_args(
        [
            'a: value', 'group: Joe', 'value: 1', 'group: Jenny', 'value: 2',
            'b: 12', 'c: hello'
        ],
        RequiredArg('a'),
        OptionalArg('b'),
        RepeatingArgGroup(RequiredArg('group'), RequiredArg('value')),
        OptionalArg('c'),
    )

    assert params.value('b') == '12'
    assert params.value('c') == 'hello'
    assert len(params.values_as_group('group')) == 2


def test_group_without_repetitions():
    params = parse_args(
        ['a: 1'], RequiredArg('a'), RepeatingArgGroup(RequiredArg('group'))
    )

    assert params.values_as_group('group') == ()
    assert not params.has_value('group')


def test_ignore_null_arguments_in_groups():
    params = parse_args(
        ['a=1', None, 'b=2', None],
        RepeatingArgGroup(RequiredArg('a'), RequiredArg('b')),
    )

    group, = params.values_as_group('a')
    assert group.value('a') == '1'
    assert group.value('b') == '2'


def test_multiple_values_in_group():
    params = parse_args(
        [
            'a: value', 'group: Joe', 'value: 1', 'value: 2, 3', 'group: Jenny',
            'value: 4;5'
        ],
        RequiredArg('a'),
        RepeatingArgGroup(
            RequiredArg('group'),
            RequiredArg('value').allowing_multiple_values(),
        ),
    )

    groups = params.values_as_group('group')
    assert groups[0].values('value') == ['1', '2', '3']
    assert groups[1].values('value') == ['4;5']


def test_defaults_and_omitted_values_in_groups():
    params = parse_args(
        ['group: Joe', 'value: 1', 'group: Jenny', 'other: x'],
        RepeatingArgGroup(
            RequiredArg('group'),
            OptionalArg('value'),
            OptionalArg('other', default='none'),
        ),
    )

    joe, jenny = params.values_as_group('group')
    assert joe.value('value') == '1'
    assert joe.value('other') == 'none'
    assert jenny.value('value') is None
    assert not jenny.has_value('value')
    assert jenny.value('other') == 'x'


def test_allowed_values_in_groups():
    params = parse_args(
        ['myGroup: Joe', 'myValue: a'],
        RepeatingArgGroup(
            RequiredArg('myGroup'),
            RequiredArg('myValue').with_allowed_values('A', 'B'),
        ),
    )

    group, = params.values_as_group('myGroup')
    assert group.value('myValue') == 'A'

    assert _error_of(
        ['a: value', 'myGroup: Joe', 'myValue: 1'],
        RequiredArg('a'),
        RepeatingArgGroup(
            RequiredArg('myGroup'),
            RequiredArg('myValue').with_allowed_values('A', 'B'),
        ),
    ) == "myValue parameter value '1' must be one of: [A, B]"

    assert _error_of(
        ['a: value', 'myGroup: Joe', 'myValue: 1'],
        RequiredArg('a'),
        RepeatingArgGroup(
            RequiredArg('myGroup').with_allowed_values('A', 'B'),
            RequiredArg('myValue'),
        ),
    ) == "myGroup parameter value 'Joe' must be one of: [A, B]"


def test_reject_missing_required_value_in_group():
    assert _error_of(
        ['a: value', 'myGroup: Joe', 'myGroup: Jenny', 'myValue: 2'],
        RequiredArg('a'),
        RepeatingArgGroup(RequiredArg('myGroup'), RequiredArg('myValue')),
    ) == 'Did not supply a value for myValue in group myGroup'


def test_reject_positional_argument_in_group():
    assert _error_of(
        ['group: Joe', '1'],
        RepeatingArgGroup(RequiredArg('group'), OptionalArg('value')),
    ) == 'Unexpected ambiguous argument 1'


def test_two_groups():
    params = parse_args(
        ['user: joe', 'age: 1', 'pet: cow', 'user: jenny', 'pet: goat', 'legs: 4'],
        RepeatingArgGroup(RequiredArg('user'), OptionalArg('age')),
        RepeatingArgGroup(RequiredArg('pet'), OptionalArg('legs')),
    )

    assert [group.value('user') for group in params.values_as_group('user')
            ] == ['joe', 'jenny']
    assert [group.value('pet') for group in params.values_as_group('pet')
            ] == ['cow', 'goat']
    assert params.values_as_group('pet')[1].value_as_int('legs') == 4


def test_parse_is_idempotent():
    args = ['1', 'b: x, y', 'group: g', 'value: v']
    params = (
        RequiredArg('a'),
        OptionalArg('b').allowing_multiple_values(),
        OptionalArg('c', default='z'),
        RepeatingArgGroup(RequiredArg('group'), OptionalArg('value')),
    )
    parser = DslParamsParser()

    assert parser.parse(args, *params).to_dict() == parser.parse(
        args, *params
    ).to_dict()


def test_applied_values():
    params = parse_args(
        ['b: 2', 'a: 1', 'c: x, y'],
        OptionalArg('a'),
        OptionalArg('b'),
        OptionalArg('c').allowing_multiple_values(),
        OptionalArg('d', default='4'),
        OptionalArg('e'),
    )

    assert params.applied == (
        ('b', '2'), ('a', '1'), ('c', 'x'), ('c', 'y'), ('d', '4')
    )


def test_value_replacer():
    replacements = {'${host}': 'localhost'}

    def replace(value):
        return replacements.get(value, value)

    parser = DslParamsParser(value_replacer=replace)
    params = parser.parse(
        ['a: ${host}', 'b: ${host}, other', 'g: ${host}', 'v: ${host}, x'],
        RequiredArg('a'),
        OptionalArg('b').allowing_multiple_values(),
        RepeatingArgGroup(
            RequiredArg('g'), OptionalArg('v').allowing_multiple_values()
        ),
    )

    assert params.value('a') == 'localhost'
    assert params.values('b') == ['localhost', 'other']
    group, = params.values_as_group('g')
    assert group.value('g') == 'localhost'
    assert group.values('v') == ['localhost', 'x']
    assert group.to_dict()['v'] == ['${host}', 'x']
    assert params.copy_args('a', 'g') == [
        'a: localhost', 'g: localhost', 'v: localhost', 'v: x'
    ]
    assert params.to_dict()['a'] == ['${host}']

    plain = parser.parse(['a: ${host}'], RequiredArg('a'),
                         value_replacer=lambda value: value.upper())
    assert plain.value('a') == '${HOST}'


def test_get_single_required_param_value():
    assert get_single_required_param_value(['name: joe'], 'name') == 'joe'
    assert get_single_required_param_value(['joe'], 'name') == 'joe'


def test_check_empty():
    check_empty([])
    check_empty([None])
    check_empty(None)

    with pytest.raises(DslArgumentError, match='Unexpected argument a: 1'):
        check_empty(['a: 1'])
    with pytest.raises(DslArgumentError, match='Unexpected ambiguous argument 1'):
        check_empty(['1'])
