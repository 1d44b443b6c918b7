'''
Expression engine: a stack of operations, evaluated from the top down and
described from the bottom up.
'''

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Optional, Union
import logging
import math

import numpy as np

from .lexer import isnumber, tonumber
from .util import (RPNError, EvaluationError, EmptyStack, UndefinedVariable,
                   MissingOperand, InfiniteValue, NotANumber, UnknownSymbol)


logger = logging.getLogger(__name__)

# Precedence classes. Only used to decide on parentheses when describing.
ATOMIC = math.inf
INFIX = -math.inf


def format_number(value):
    '''
    Operand display text: integral values without a fractional part.
    '''
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


class Operation:
    '''
    Something that can sit on the stack.
    '''
    arity = 0
    precedence = ATOMIC

    @property
    def description(self):
        return self.symbol


@dataclass(frozen=True)
class Operand(Operation):
    value: float

    @property
    def description(self):
        return format_number(self.value)

    def resolve(self, variable_values):
        return self.value


@dataclass(frozen=True)
class Variable(Operation):
    name: str

    @property
    def description(self):
        return self.name

    def resolve(self, variable_values):
        try:
            return float(variable_values[self.name])
        except KeyError:
            raise UndefinedVariable(self.name) from None


@dataclass(frozen=True)
class Constant(Operation):
    symbol: str
    value: float

    def resolve(self, variable_values):
        return self.value


@dataclass(frozen=True)
class UnaryOperation(Operation):
    symbol: str
    function: Callable[[float], float] = field(compare=False, repr=False)
    arity = 1


@dataclass(frozen=True)
class BinaryOperation(Operation):
    '''
    Operation on the two expressions below it.

    function is called with the operand nearest the top first.
    '''
    symbol: str
    function: Callable[[float, float], float] = field(compare=False,
                                                      repr=False)
    arity = 2
    precedence = INFIX


@dataclass(frozen=True)
class Success:
    value: float


@dataclass(frozen=True)
class Failure:
    message: str
    error: Optional[RPNError] = field(default=None, compare=False)

    @classmethod
    def of(cls, error):
        return cls(error.args[0], error)


EvaluationResult = Union[Success, Failure]


# numpy rather than math: IEEE-754 results (nan, ±inf) instead of exceptions
# on domain errors, division by zero and overflow.
OPERATIONS = (
    UnaryOperation('√', np.sqrt),
    UnaryOperation('sin', np.sin),
    UnaryOperation('cos', np.cos),
    UnaryOperation('tan', np.tan),
    UnaryOperation('log₁₀', np.log10),
    UnaryOperation('ln', np.log),
    UnaryOperation('ᐩ/-', np.negative),
    BinaryOperation('×', np.multiply),
    BinaryOperation('+', np.add),
    BinaryOperation('÷', lambda a, b: np.divide(b, a)),
    BinaryOperation('−', lambda a, b: np.subtract(b, a)),
    BinaryOperation('pow', lambda a, b: np.power(b, a)),
    Constant('π', math.pi),
)


class ExpressionEngine:
    '''
    RPN expression engine.

    Holds a stack of operations. Every push evaluates the stack and hands back
    an EvaluationResult; nothing here raises on bad input, errors come back as
    a Failure.

    :param variable_values: Mapping of variable names to values. Owned by the
        caller, who may change it between evaluations.
    :param strict: Fail with UnknownSymbol instead of ignoring unknown
        operator and constant symbols.
    '''

    REGISTRY = MappingProxyType({operation.symbol: operation
                                 for operation
                                 in OPERATIONS})

    def __init__(self, variable_values=None, strict=False):
        self._stack = []
        self.variable_values = {} if variable_values is None \
            else variable_values
        self.strict = strict

    def __len__(self):
        return len(self._stack)

    @property
    def stack(self):
        '''
        Snapshot of the stack, bottom first.
        '''
        return tuple(self._stack)

    @property
    def program(self):
        '''
        Stack as a list of string tokens, bottom first.

        Assigning a list of tokens replaces the stack without evaluating it.
        '''
        return [operation.description for operation in self._stack]

    @program.setter
    def program(self, tokens):
        self._stack = [self._parse(token) for token in tokens]
        logger.debug('Loaded program of %d operation(s)', len(self._stack))

    def _parse(self, token):
        '''
        Turn token into a registered operation, an operand, or a variable.
        '''
        operation = self.REGISTRY.get(token)
        if operation is not None:
            return operation
        elif isnumber(token):
            return Operand(tonumber(token))
        else:
            return Variable(token)

    def arity(self, symbol):
        '''
        Return number of operands a registered symbol takes, else None.
        '''
        operation = self.REGISTRY.get(symbol)
        return None if operation is None else operation.arity

    def _push(self, operation):
        self._stack.append(operation)
        logger.debug('Pushed %s', operation.description)

    def _push_registered(self, symbol, kinds):
        operation = self.REGISTRY.get(symbol)
        if isinstance(operation, kinds):
            self._push(operation)
        elif self.strict:
            return Failure.of(UnknownSymbol(symbol))
        else:
            logger.warning('Ignoring unknown symbol %r', symbol)
        return self.evaluate()

    def push_operand(self, value):
        self._push(Operand(float(value)))
        return self.evaluate()

    def push_variable(self, name):
        self._push(Variable(name))
        return self.evaluate()

    def push_constant(self, symbol):
        '''
        Push registered constant; unknown symbols leave the stack as is.
        '''
        return self._push_registered(symbol, Constant)

    def apply_operator(self, symbol):
        '''
        Push registered operator; unknown symbols leave the stack as is.
        '''
        return self._push_registered(symbol,
                                     (UnaryOperation, BinaryOperation))

    def push_token(self, token):
        '''
        Push token the way a program token would be loaded, then evaluate.
        '''
        self._push(self._parse(token))
        return self.evaluate()

    def store(self, name, value):
        '''
        Set variable, then re-evaluate with the new value.
        '''
        self.variable_values[name] = value
        logger.debug('Stored %s = %s', name, value)
        return self.evaluate()

    def undo(self):
        '''
        Drop the last operation, if any. Does not evaluate.
        '''
        if self._stack:
            operation = self._stack.pop()
            logger.debug('Undid %s', operation.description)

    def clear(self):
        '''
        Clear everything from the stack. Variables are left alone.
        '''
        self._stack.clear()
        logger.debug('Cleared stack')

    def _evaluate(self, ops):
        '''
        Evaluate the expression whose root is the last of ops.

        Walks down from the top keeping a stack of operators still waiting
        for operands. Returns the value and the number of operations left
        unused below the expression.

        Raises EvaluationError. When an operand is missing, the outermost
        waiting operator is the one blamed.
        '''
        frames = []
        index = len(ops)
        while True:
            if not index:
                if frames:
                    waiting, _ = frames[0]
                    raise MissingOperand(waiting.symbol, waiting.arity)
                raise EmptyStack()
            index -= 1
            operation = ops[index]
            if operation.arity:
                frames.append((operation, []))
                continue
            try:
                value = operation.resolve(self.variable_values)
            except UndefinedVariable as e:
                if not frames:
                    raise
                waiting, _ = frames[0]
                raise MissingOperand(waiting.symbol, waiting.arity, e)
            while frames:
                waiting, operands = frames[-1]
                operands.append(value)
                if len(operands) < waiting.arity:
                    break
                frames.pop()
                value = float(waiting.function(*operands))
            else:
                return value, index

    def evaluate(self):
        '''
        Evaluate the expression at the top of the stack.

        Operations below a complete expression are ignored.
        '''
        try:
            with np.errstate(all='ignore'):
                value, leftover = self._evaluate(self.stack)
        except EvaluationError as e:
            return Failure.of(e)
        if leftover:
            logger.debug('%d operation(s) left below result', leftover)
        if math.isinf(value):
            return Failure.of(InfiniteValue())
        elif math.isnan(value):
            return Failure.of(NotANumber())
        return Success(value)

    def _wraps(self, ops, index):
        '''
        Return True if binary operation at index needs parentheses.

        It does when the operator that takes it as an operand has the same
        symbol or the same precedence. Operators working on fragments pushed
        after this one are passed over.
        '''
        operation = ops[index]
        # Fragments sitting above the one this operation produces
        above = 0
        for following in ops[index + 1:]:
            if not following.arity:
                above += 1
            elif following.arity > above:
                return following.symbol == operation.symbol or \
                    following.precedence == operation.precedence
            else:
                above -= following.arity - 1
        return False

    def render(self):
        '''
        Describe the whole stack in infix, bottom first.

        Returns one fragment per complete expression; a missing binary operand
        shows up as ?, unary operations with nothing to apply to are skipped.
        '''
        ops = self.stack
        fragments = []
        for index, operation in enumerate(ops):
            if not operation.arity:
                fragments.append(operation.description)
            elif operation.arity == 1:
                if fragments:
                    fragments.append('{}({})'.format(operation.symbol,
                                                     fragments.pop()))
            elif len(fragments) < 2:
                right = fragments.pop() if fragments else '?'
                fragments.append('?' + operation.symbol + right)
            else:
                right = fragments.pop()
                left = fragments.pop()
                fmt = '({}{}{})' if self._wraps(ops, index) else '{}{}{}'
                fragments.append(fmt.format(left, operation.symbol, right))
        return fragments

    def history(self):
        '''
        Rendered fragments as one line, the way the calculator showed them.
        '''
        fragments = self.render()
        if not fragments:
            return ''
        return ', '.join(fragments) + ' ='

    @property
    def label(self):
        '''
        Last rendered expression, used as a graph title. None if nothing.
        '''
        fragments = self.render()
        return fragments[-1] if fragments else None
