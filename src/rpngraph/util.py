from functools import wraps


class RPNError(Exception):
    pass


class UnknownSymbol(RPNError):
    '''
    Symbol is neither a registered operator nor a registered constant.
    '''
    def __init__(self, symbol):
        super().__init__('Unknown symbol {}'.format(symbol))
        self.symbol = symbol


class EvaluationError(RPNError):
    '''
    Reason why evaluating the stack produced no usable number.

    Raised while walking the stack, then caught by the engine and handed back
    inside a Failure; callers of the engine never see it raised.
    '''
    DEFAULT_MESSAGE = 'Error'

    def __init__(self, message=None):
        super().__init__(message or type(self).DEFAULT_MESSAGE)


class EmptyStack(EvaluationError):
    pass


class UndefinedVariable(EvaluationError):
    def __init__(self, name):
        super().__init__('{} is not set'.format(name))
        self.name = name


class MissingOperand(EvaluationError):
    '''
    Operator found fewer operands below it than it needs.

    :param cause: The error of the operand evaluation that failed, if any.
    '''
    ARITIES = {
        1: 'unary',
        2: 'binary',
    }

    def __init__(self, symbol, arity, cause=None):
        super().__init__('Missing {} operand'.format(self.ARITIES[arity]))
        self.symbol = symbol
        self.arity = arity
        self.cause = cause


class InfiniteValue(EvaluationError):
    def __init__(self):
        super().__init__('Infinite value')


class NotANumber(EvaluationError):
    def __init__(self):
        super().__init__('Not a number')


def wrap_user_errors(fmt):
    '''
    Ugly hack decorator that converts exceptions to user errors.

    Passes through RPNErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except Exception as e:
                raise RPNError(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator
