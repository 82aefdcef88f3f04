import logging

from .machine import Machine
from .operators import (ADDITION, SUBTRACTION, MULTIPLICATION, DIVISION,
                        PERCENT, EVALUATE)
from .util import CalcError, ErrorCode, error_codes


log = logging.getLogger(__name__)

CLEAR = 'A'


class MemoryMachine(Machine):
    '''
    Machine with memories.

    - a simple (scalar) memory,
    - an array of indexed memories, memory_size long,
    - an unbounded memory stack.

    Memories survive clear_error(); only clear_all_memory() wipes them.
    '''

    DEFAULT_MEMORY_SIZE = 100

    def __init__(self, memory_size=None):
        super().__init__()
        self.memory_size = memory_size or type(self).DEFAULT_MEMORY_SIZE
        self.memory = 0.0
        self.memories = [0.0] * self.memory_size
        self.memory_stack = []

    def get_memory(self):
        return self.memory

    def set_memory(self, value):
        self.memory = float(value)
        return ErrorCode.NO_ERROR

    def in_range(self, index):
        return 0 <= index < self.memory_size

    def get_memory_at(self, index):
        '''
        Indexed memory, 0 when out of range.
        '''
        if not self.in_range(index):
            return 0.0
        return self.memories[index]

    def set_memory_at(self, index, value):
        '''
        Set indexed memory. Out of range is silently ignored.
        '''
        if self.in_range(index):
            self.memories[index] = float(value)
        return ErrorCode.NO_ERROR

    def push_memory(self, value):
        self.memory_stack.append(float(value))

    def pop_memory(self):
        '''
        Pop the memory stack, 0 if empty.
        '''
        if not self.memory_stack:
            return 0.0
        return self.memory_stack.pop()

    def peek_memory(self):
        if not self.memory_stack:
            return 0.0
        return self.memory_stack[-1]

    def memory_depth(self):
        return len(self.memory_stack)

    def memory_stack_sum(self):
        return sum(self.memory_stack)

    def memory_stack_average(self):
        if not self.memory_stack:
            return 0.0
        return self.memory_stack_sum() / self.memory_depth()

    def clear_memory_stack(self):
        self.memory_stack.clear()

    def clear_all_memory(self):
        '''
        Clear simple, indexed and stack memory.
        '''
        self.memory = 0.0
        self.memories = [0.0] * self.memory_size
        self.clear_memory_stack()

    @error_codes
    def memory_operation(self, code, index=None):
        '''
        Combine the current value into a memory: M OP value -> M.

        Operates on the simple memory, or memories[index] if given.

            =   store value
            A   clear
            +   M + value
            -   M - value
            *   M * value
            /   M / value
            %   M / 100 * value

        Dividing by a zero value fails without touching the error state.
        '''
        if index is None:
            memory = self.get_memory()
            store = self.set_memory
        else:
            memory = self.get_memory_at(index)
            store = lambda value: self.set_memory_at(index, value)  # noqa: E731
        value = self.current_value()
        log.debug('memory %s %s (index %s) with %r', memory, code, index,
                  value)
        if code == EVALUATE:
            return store(value)
        elif code == CLEAR:
            return store(0.0)
        elif code == ADDITION:
            return store(memory + value)
        elif code == SUBTRACTION:
            return store(memory - value)
        elif code == MULTIPLICATION:
            return store(memory * value)
        elif code == DIVISION:
            if value == 0:
                raise CalcError(ErrorCode.DIVIDE_BY_ZERO)
            return store(memory / value)
        elif code == PERCENT:
            return store(memory / 100.0 * value)
        log.warning('memory operation %r unknown', code)
        raise CalcError(ErrorCode.UNKNOWN_OPERATOR)
