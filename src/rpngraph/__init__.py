'''
RPN graphing calculator.

An expression engine that takes operands, variables, constants and operators
in reverse Polish order, evaluates what is on its stack, and describes it back
in infix, plus a sampler that walks a program across a domain to plot it.

Takes what used to be a pocket graphing calculator's brain, without the
pocket: no views, no gestures, just the stack and what you can do with it.
'''

from .cli import CLI
from .engine import (ExpressionEngine, Success, Failure, Operand, Variable,
                     Constant, UnaryOperation, BinaryOperation)
from .lexer import Lexer
from .sampler import SampleGenerator, Statistics
from .util import RPNError


__all__ = ('ExpressionEngine', 'Success', 'Failure', 'Operand', 'Variable',
           'Constant', 'UnaryOperation', 'BinaryOperation', 'SampleGenerator',
           'Statistics', 'Lexer', 'CLI', 'RPNError')
