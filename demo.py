import logging
import sys
from enum import Enum

from dsl_params import (
    DslParamsUsageError,
    OptionalArg,
    RepeatingArgGroup,
    RequiredArg,
    parse_args,
)


class Side(Enum):
    BUY = 'buy'
    SELL = 'sell'


PLACE_ORDER_PARAMS = (
    RequiredArg('instrument'),
    RequiredArg('side', allowed_values=Side),
    OptionalArg('quantity', default='1'),
    OptionalArg('tags').allowing_multiple_values(),
    RepeatingArgGroup(RequiredArg('fill'), OptionalArg('price')),
)


def place_order(*args: str):
    params = parse_args(args, *PLACE_ORDER_PARAMS)
    print(params.value('instrument'), params.value_as_enum('side', Side))
    print('quantity', params.value_as_int('quantity'))
    print('tags', params.values('tags'))
    for fill in params.values_as_group('fill'):
        print('fill', fill.value('fill'), fill.value_as_decimal('price'))
    print(params.copy_args('instrument', 'fill'))


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)

    try:
        place_order(*(sys.argv[1:] or [
            'EURUSD', 'side: buy', 'tags: fast, test', 'fill: 1', 'price: 1.1',
            'fill: 2', 'price: 1.2'
        ]))
    except DslParamsUsageError as e:
        print(e.format_usage())
