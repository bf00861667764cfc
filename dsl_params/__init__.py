'''
Bind loosely-structured DSL arguments, e.g. `['user: joe', 'age=12']`, to declared parameters.
'''
from .errors import (
    DslAccessError,
    DslArgumentError,
    DslError,
    DslParamsUsageError,
    DslSchemaError,
    UnknownParameterError,
)
from .parser import (
    DslParamsParser,
    check_empty,
    get_single_required_param_value,
    parse_args,
)
from .types import ArgKind, OptionalArg, RepeatingArgGroup, RequiredArg, format_usage
from .utils import USAGE_TOKEN, NameValuePair, tokenize
from .values import DslParams, DslValues, RepeatingGroup
