'''
Memory tests
'''

from handcalc.memory import MemoryMachine
from handcalc.util import ErrorCode

from pytest import approx, mark


def test_scalar(memory_machine):
    assert memory_machine.get_memory() == 0.0
    memory_machine.set_memory(3.5)
    assert memory_machine.get_memory() == 3.5


def test_indexed(memory_machine):
    memory_machine.set_memory_at(5, 2.0)
    assert memory_machine.get_memory_at(5) == 2.0
    assert memory_machine.get_memory_at(6) == 0.0


def test_indexed_out_of_range(memory_machine):
    assert memory_machine.set_memory_at(100, 1.0) is ErrorCode.NO_ERROR
    assert memory_machine.set_memory_at(-1, 1.0) is ErrorCode.NO_ERROR
    assert memory_machine.get_memory_at(100) == 0.0
    assert memory_machine.get_memory_at(-1) == 0.0
    assert not any(memory_machine.memories)


def test_memory_size():
    m = MemoryMachine(10)
    assert m.memory_size == 10
    assert m.in_range(9)
    assert not m.in_range(10)
    assert MemoryMachine().memory_size == MemoryMachine.DEFAULT_MEMORY_SIZE


def test_stack(memory_machine):
    assert memory_machine.pop_memory() == 0.0
    assert memory_machine.peek_memory() == 0.0
    for value in (1, 2, 6):
        memory_machine.push_memory(value)
    assert memory_machine.memory_depth() == 3
    assert memory_machine.peek_memory() == 6.0
    assert memory_machine.memory_stack_sum() == 9.0
    assert memory_machine.memory_stack_average() == 3.0
    assert memory_machine.pop_memory() == 6.0
    assert memory_machine.memory_depth() == 2
    memory_machine.clear_memory_stack()
    assert memory_machine.memory_depth() == 0
    assert memory_machine.memory_stack_average() == 0.0


@mark.parametrize('code,expected', [
    ('=', 4.0),
    ('A', 0.0),
    ('+', 14.0),
    ('-', 6.0),
    ('*', 40.0),
    ('/', 2.5),
    ('%', 0.4),
])
def test_memory_operation(memory_machine, code, expected):
    memory_machine.set_memory(10)
    memory_machine.push_value(4)
    assert memory_machine.memory_operation(code) is ErrorCode.NO_ERROR
    assert memory_machine.get_memory() == approx(expected)


def test_indexed_memory_operation(memory_machine):
    memory_machine.set_memory_at(7, 1)
    memory_machine.push_value(2)
    assert memory_machine.memory_operation('+', 7) is ErrorCode.NO_ERROR
    assert memory_machine.get_memory_at(7) == 3.0
    assert memory_machine.get_memory() == 0.0


def test_memory_divide_by_zero_is_local(memory_machine):
    memory_machine.set_memory(10)
    memory_machine.push_value(0)
    assert memory_machine.memory_operation('/') is ErrorCode.DIVIDE_BY_ZERO
    assert memory_machine.get_memory() == 10.0
    assert memory_machine.get_error() is ErrorCode.NO_ERROR


def test_unknown_memory_operation(memory_machine):
    assert memory_machine.memory_operation('s') is ErrorCode.UNKNOWN_OPERATOR
    assert memory_machine.get_error() is ErrorCode.NO_ERROR


def test_memory_survives_clear_error(memory_machine):
    memory_machine.set_memory(1)
    memory_machine.set_memory_at(0, 2)
    memory_machine.push_memory(3)
    memory_machine.set_error(ErrorCode.DIVIDE_BY_ZERO)
    memory_machine.clear_error()
    assert memory_machine.get_memory() == 1.0
    assert memory_machine.get_memory_at(0) == 2.0
    assert memory_machine.memory_depth() == 1


def test_clear_all_memory(memory_machine):
    memory_machine.set_memory(1)
    memory_machine.set_memory_at(0, 2)
    memory_machine.push_memory(3)
    memory_machine.clear_all_memory()
    assert memory_machine.get_memory() == 0.0
    assert memory_machine.get_memory_at(0) == 0.0
    assert memory_machine.memory_depth() == 0
