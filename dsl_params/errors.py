'''
exceptions raised while defining a schema, binding arguments and reading values.
'''
from typing import Sequence


class DslError(ValueError):
    '''
        Base class for all the recoverable errors raised by `dsl_params`.
    '''


class DslSchemaError(DslError):
    '''
        The declared parameters are inconsistent, e.g. duplicate names or a required
        parameter declared after an optional one.
    '''


class DslArgumentError(DslError):
    '''
        The supplied arguments do not satisfy the declared parameters.
    '''


class DslAccessError(DslError):
    '''
        A bound value was requested in a way its parameter does not support.
    '''


class UnknownParameterError(DslAccessError):
    pass


class DslParamsUsageError(Exception):
    '''
        Raised instead of binding when the caller asked for the usage of a DSL method.

        Attributes:
        - params (`Sequence[DslArg]`):
            The declared parameters, in declaration order, for rendering a help message.
    '''

    def __init__(self, params: Sequence) -> None:
        super(DslParamsUsageError, self).__init__('usage requested')
        self.params = tuple(params)

    def format_usage(self) -> str:
        from .types import format_usage
        return format_usage(self.params)
