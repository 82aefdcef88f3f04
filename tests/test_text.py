'''
Text calculator tests
'''

import math

from handcalc.text import TextCalculator
from handcalc.util import ErrorCode

from pytest import approx, mark


def test_starts_at_zero(calculator):
    assert calculator.machine.values == [0.0]
    assert calculator.value() == '0'


def test_evaluate(calculator):
    assert calculator.evaluate('1 + 5 / 3.2 * 7.3167 - 8 * 33.33 =') == \
        calculator.double_to_string(1 + 5 / 3.2 * 7.3167 - 8 * 33.33)
    assert calculator.evaluate('2*3=') == '6'


def test_lone_close_paren(calculator):
    assert not calculator.parse(')')
    assert calculator.get_error() is ErrorCode.NO_MATCHING_PAREN
    assert calculator.evaluate('1 + 1 =') == 'Error'


def test_divide_by_zero(calculator):
    assert calculator.evaluate('1 / 0 =') == 'Error'
    assert calculator.get_error() is ErrorCode.DIVIDE_BY_ZERO
    calculator.clear_error()
    assert calculator.evaluate('1 + 1 =') == '2'


def test_bad_character_rejects_statement(calculator):
    calculator.parse('1 +')
    assert not calculator.parse('2 x 3')
    assert calculator.get_error() is ErrorCode.NO_ERROR
    assert calculator.machine.values == [1.0]
    assert calculator.machine.operators == ['+']


def test_results_do_not_pile_up(calculator):
    for _ in range(3):
        assert calculator.parse('1 + 1 =')
    assert calculator.machine.values == [2.0]


def test_fresh_grouping(calculator):
    assert calculator.parse('1 + 2 =')
    assert calculator.parse('(3')
    # Nothing left of 3 from before.
    assert calculator.machine.values == [3.0]
    assert calculator.parse(') =')
    assert calculator.machine.values == [3.0]


def test_close_paren_is_eager(calculator):
    assert calculator.parse('2 * (3 + 4)')
    assert calculator.machine.operators == ['*']
    assert calculator.value() == '7'


def test_percent(calculator):
    assert calculator.evaluate('50 % =') == '0.5'
    assert calculator.evaluate('30 + 5 % =') == '31.5'
    assert calculator.evaluate('200 - 10 % =') == '180'


def test_atof_values(calculator):
    assert calculator.evaluate('1.2.3 + 1 =') == '2.2'
    assert calculator.evaluate('. + 1 =') == '1'


def test_total(calculator):
    calculator.parse('2 + 3')
    assert calculator.total() is ErrorCode.NO_ERROR
    assert calculator.value() == '5'


def test_set_value(calculator):
    calculator.parse('2 + 3')
    calculator.set_value('10')
    assert calculator.machine.values == [2.0, 10.0]
    calculator.machine.values.clear()
    calculator.set_value('4')
    assert calculator.machine.values == [4.0]


def test_memories(calculator):
    calculator.evaluate('6 =')
    assert calculator.copy_to_memory()
    assert calculator.copy_to_memory(5)
    assert not calculator.copy_to_memory(100)
    calculator.evaluate('1 =')
    assert calculator.recall_memory(5)
    assert calculator.value() == '6'
    calculator.evaluate('2 =')
    assert calculator.recall_memory()
    assert calculator.value() == '6'
    assert not calculator.recall_memory(-1)
    assert calculator.value() == '6'
    calculator.clear_memory()
    assert calculator.machine.get_memory() == 0.0


def test_memory_stack(calculator):
    calculator.evaluate('1 =')
    calculator.push()
    calculator.evaluate('2 =')
    calculator.push()
    calculator.evaluate('3 =')
    calculator.pop()
    assert calculator.value() == '2'
    calculator.pop()
    assert calculator.value() == '1'
    calculator.pop()
    assert calculator.value() == '0'


def test_clear_all(calculator):
    calculator.evaluate('6 =')
    calculator.copy_to_memory(1)
    calculator.push()
    calculator.parse('1 / 0 =')
    calculator.clear_all()
    assert calculator.get_error() is ErrorCode.NO_ERROR
    assert calculator.machine.values == [0.0]
    assert calculator.machine.get_memory_at(1) == 0.0
    assert calculator.machine.memory_depth() == 0


def test_classifiers(calculator):
    assert all(map(calculator.is_operator, '+-*/%()sr='))
    assert not calculator.is_operator('M')
    assert all(map(calculator.is_memory_operator, '+-*/=%MA'))
    assert not calculator.is_memory_operator('(')
    assert all(map(calculator.is_numeric, '0123456789.'))
    assert not calculator.is_numeric('-')
    assert all(map(calculator.is_whitespace, ' \t\n\r'))
    assert not calculator.is_whitespace('0')


@mark.parametrize('value,text', [
    (0, '0'),
    (0.0, '0'),
    (-0.0, '0'),
    (0.1, '0.1'),
    (-0.1, '-0.1'),
    (9.9, '9.9'),
    (-9.9, '-9.9'),
    (0.3, '0.3'),
    (123456.789, '123456.789'),
    (100000000, '100000000'),
    (1 / 3, '0.33333333'),
    (1e-9, '0'),
    (-1e-9, '0'),
    (math.inf, 'inf'),
    (-math.inf, '-inf'),
    (math.nan, 'nan'),
])
def test_double_to_string(calculator, value, text):
    assert calculator.double_to_string(value) == text


def test_double_to_string_precision():
    assert TextCalculator(precision=2).double_to_string(3.14159) == '3.14'
    assert TextCalculator().double_to_string(3.14159, 3) == '3.141'


@mark.parametrize('value', [0, 0.1, -0.1, 9.9, -9.9, 123456.789, 100000000])
def test_round_trip(calculator, value):
    text = calculator.double_to_string(value)
    assert calculator.lexer.to_float(text) == approx(value, abs=1e-8)
