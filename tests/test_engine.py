'''
Expression engine tests
'''

import math

from rpngraph.engine import (ExpressionEngine, Success, Failure, Operand,
                             Variable, Constant, BinaryOperation,
                             format_number)
from rpngraph.util import (EmptyStack, UndefinedVariable, MissingOperand,
                           InfiniteValue, NotANumber, UnknownSymbol)

from pytest import approx, mark


def test_subtraction_order(engine):
    engine.push_operand(3)
    engine.push_operand(4)
    assert engine.apply_operator('−') == Success(-1)


@mark.parametrize('symbol, expected', [
    ('×', 12),
    ('+', 7),
    ('÷', 0.75),
    ('−', -1),
    ('pow', 81),
])
def test_binary(load, symbol, expected):
    assert load(3, 4, symbol).evaluate() == Success(expected)


@mark.parametrize('symbol, operand, expected', [
    ('√', 16, 4),
    ('sin', 0, 0),
    ('cos', 0, 1),
    ('tan', 0, 0),
    ('log₁₀', 1000, 3),
    ('ln', 1, 0),
    ('ᐩ/-', 5, -5),
])
def test_unary(load, symbol, operand, expected):
    result = load(operand, symbol).evaluate()
    assert result.value == approx(expected)


def test_pi_halved(load):
    assert load('π', 2, '÷').evaluate() == Success(math.pi / 2)


def test_push_returns_evaluation(engine):
    assert engine.push_operand(2) == Success(2)
    assert engine.push_constant('π') == Success(math.pi)
    assert engine.apply_operator('×') == Success(2 * math.pi)
    assert engine.apply_operator('ᐩ/-') == Success(-2 * math.pi)


def test_empty_stack(engine):
    result = engine.evaluate()
    assert result == Failure('Error')
    assert isinstance(result.error, EmptyStack)


def test_undefined_variable(engine):
    result = engine.push_variable('M')
    assert result == Failure('M is not set')
    assert isinstance(result.error, UndefinedVariable)
    assert result.error.name == 'M'
    assert engine.program == ['M']


def test_variable_bound(engine):
    engine.variable_values['M'] = 3
    engine.push_variable('M')
    assert engine.push_operand(2) == Success(2)
    assert engine.apply_operator('pow') == Success(9)


def test_caller_owns_variable_values():
    values = {}
    engine = ExpressionEngine(values)
    assert isinstance(engine.push_variable('x'), Failure)
    values['x'] = 1.5
    assert engine.evaluate() == Success(1.5)


def test_store(engine):
    engine.push_variable('M')
    assert engine.store('M', 4) == Success(4)
    assert engine.variable_values == {'M': 4}


def test_missing_unary_operand(load):
    result = load('sin').evaluate()
    assert result == Failure('Missing unary operand')
    assert result.error.symbol == 'sin'
    assert result.error.arity == 1


def test_missing_binary_operand(load):
    assert load('+').evaluate() == Failure('Missing binary operand')
    assert load(1, '+').evaluate() == Failure('Missing binary operand')


def test_outermost_operator_blamed(load):
    # sin has its operand, the × above it doesn't.
    result = load(2, 'sin', '×').evaluate()
    assert result == Failure('Missing binary operand')
    assert result.error.symbol == '×'


def test_undefined_variable_under_operator(load):
    result = load(1, 'M', '+').evaluate()
    assert result == Failure('Missing binary operand')
    assert isinstance(result.error, MissingOperand)
    assert isinstance(result.error.cause, UndefinedVariable)


def test_infinite(load):
    result = load(1, 0, '÷').evaluate()
    assert result == Failure('Infinite value')
    assert isinstance(result.error, InfiniteValue)
    assert load(0, 'ln').evaluate() == Failure('Infinite value')
    assert load(10, 400, 'pow').evaluate() == Failure('Infinite value')


def test_not_a_number(load):
    result = load(-1, '√').evaluate()
    assert result == Failure('Not a number')
    assert isinstance(result.error, NotANumber)
    assert load(0, 0, '÷').evaluate() == Failure('Not a number')


def test_leftovers_ignored(load):
    assert load(1, 2, 3, '+').evaluate() == Success(5)
    assert load(1, 2, '+', 7).evaluate() == Success(7)


def test_failure_leaves_stack(engine):
    engine.push_operand(1)
    assert isinstance(engine.apply_operator('÷'), Failure)
    assert engine.program == ['1', '÷']
    engine.undo()
    assert engine.evaluate() == Success(1)


def test_unknown_symbol_ignored(engine):
    engine.push_operand(2)
    assert engine.apply_operator('%') == Success(2)
    assert engine.push_constant('e') == Success(2)
    assert engine.program == ['2']


def test_unknown_symbol_strict():
    engine = ExpressionEngine(strict=True)
    engine.push_operand(2)
    result = engine.apply_operator('%')
    assert result == Failure('Unknown symbol %')
    assert isinstance(result.error, UnknownSymbol)
    assert engine.program == ['2']


def test_kinds_not_mixed(engine):
    engine.push_operand(2)
    engine.push_constant('×')
    engine.apply_operator('π')
    assert engine.program == ['2']


def test_undo_empty(engine):
    engine.undo()
    assert len(engine) == 0


def test_undo_then_clear(load):
    engine = load(1, 2, '+')
    engine.undo()
    assert engine.program == ['1', '2']
    engine.clear()
    assert engine.stack == ()


def test_clear_keeps_variables(engine):
    engine.store('M', 1)
    engine.push_operand(1)
    engine.clear()
    assert engine.variable_values == {'M': 1}


def test_registry():
    registry = ExpressionEngine.REGISTRY
    assert sorted(registry) == sorted([
        '√', 'sin', 'cos', 'tan', 'log₁₀', 'ln', 'ᐩ/-',
        '×', '+', '÷', '−', 'pow', 'π',
    ])
    assert registry['π'] == Constant('π', math.pi)
    assert isinstance(registry['−'], BinaryOperation)


def test_arity(engine):
    assert engine.arity('π') == 0
    assert engine.arity('sin') == 1
    assert engine.arity('pow') == 2
    assert engine.arity('M') is None


class TestRender:
    def test_single(self, load):
        assert load(3, 4, '−').render() == ['3−4']

    def test_wrapped_by_following_operator(self, load):
        assert load(3, 4, '−', 2, '×').render() == ['(3−4)×2']

    def test_wrapped_when_operator_follows(self, load):
        assert load(2, 3, 4, '−', '×').render() == ['2×(3−4)']

    def test_nested(self, load):
        engine = load(1, 2, '+', 3, 4, '+', '×')
        assert engine.render() == ['(1+2)×(3+4)']

    def test_separate_expressions_unwrapped(self, load):
        # × takes 3 and 4; nothing ever takes 1+2.
        assert load(1, 2, '+', 3, 4, '×').render() == ['1+2', '3×4']
        assert load(1, 2, '+', 3, 4, '×', '−').render() == ['(1+2)−(3×4)']

    def test_wrapped_past_inner_operator(self, load):
        assert load(1, 2, '−', 3, 4, '×', '+').render() == ['(1−2)+(3×4)']
        assert load(1, 2, '+', 3, 'sin', '×').render() == ['(1+2)×sin(3)']

    def test_unary(self, load):
        assert load(3, 4, '+', 'sin').render() == ['sin(3+4)']
        assert load('M', 'cos', 'ᐩ/-').render() == ['ᐩ/-(cos(M))']

    def test_unary_skipped(self, load):
        assert load('√', 9).render() == ['9']

    def test_several_expressions(self, load):
        assert load(1, 2, '+', 'π', 0.5).render() == ['1+2', 'π', '0.5']

    def test_placeholders(self, load):
        assert load('+').render() == ['?+?']
        assert load(7, '×').render() == ['?×7']

    def test_empty(self, engine):
        assert engine.render() == []

    def test_history(self, load):
        assert load(1, 2, '+', 'π').history() == '1+2, π ='
        assert ExpressionEngine().history() == ''

    def test_label(self, load):
        assert load(1, 'M', '+').label == '1+M'
        assert ExpressionEngine().label is None


class TestProgram:
    def test_serialize(self, engine):
        engine.push_operand(3)
        engine.push_operand(0.25)
        engine.push_variable('M')
        engine.push_constant('π')
        engine.apply_operator('+')
        assert engine.program == ['3', '0.25', 'M', 'π', '+']

    def test_deserialize(self, engine):
        engine.program = ['3', '1_000', 'x', 'π', '÷']
        assert engine.stack == (
            Operand(3.0),
            Operand(1000.0),
            Variable('x'),
            ExpressionEngine.REGISTRY['π'],
            ExpressionEngine.REGISTRY['÷'],
        )

    def test_deserialize_does_not_evaluate(self, engine):
        engine.program = ['1', '0', '÷']
        assert len(engine) == 3

    def test_replaces_stack(self, load):
        engine = load(1, 2)
        engine.program = ['5']
        assert engine.program == ['5']

    @mark.parametrize('tokens', [
        ['3', '4', '−', '2', '×'],
        ['M', 'sin', '2', 'pow', 'M', 'cos', '2', 'pow', '+'],
        ['0.1', '1e-05', '×', '-7'],
        ['+', '√', 'x', 'ln'],
        ['1e+300', '1e+300', '×'],
    ])
    def test_round_trip(self, tokens):
        values = {'M': 0.5, 'x': 2}
        original = ExpressionEngine(values)
        original.program = tokens
        copy = ExpressionEngine(values)
        copy.program = original.program
        assert copy.stack == original.stack
        assert copy.render() == original.render()
        assert copy.evaluate() == original.evaluate()

    def test_round_trip_pushed(self, engine):
        engine.push_operand(1 / 3)
        engine.push_operand(2 ** 70)
        engine.push_operand(-0.5)
        copy = ExpressionEngine()
        copy.program = engine.program
        assert copy.stack == engine.stack

    def test_push_token(self, engine):
        assert engine.push_token('2') == Success(2)
        assert engine.push_token('π') == Success(math.pi)
        assert engine.push_token('×') == Success(2 * math.pi)
        assert engine.push_token('y') == Failure('y is not set')


@mark.parametrize('value, text', [
    (3.0, '3'),
    (-4.0, '-4'),
    (0.5, '0.5'),
    (1e-05, '1e-05'),
    (1e20, '100000000000000000000'),
    (math.inf, 'inf'),
])
def test_format_number(value, text):
    assert format_number(value) == text
