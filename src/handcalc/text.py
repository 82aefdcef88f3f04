'''
Text layer: statements in, display strings out.

Wraps a MemoryMachine. Values go in and come out as strings, so this can
drive a command line calculator as is, or be built upon to respond to
single keystrokes. Recalling a memory replaces the current value rather than
pushing a new one.
'''

from decimal import Decimal, ROUND_CEILING
import logging
import math

from .lexer import Lexer
from .memory import MemoryMachine, CLEAR
from .operators import (ADDITION, SUBTRACTION, MULTIPLICATION, DIVISION,
                        PERCENT, OPEN_PAREN, CLOSE_PAREN, EVALUATE)
from .util import CalcError


log = logging.getLogger(__name__)

MEMORY = 'M'


class TextCalculator:
    '''
    String based calculator around a MemoryMachine.
    '''

    DEFAULT_PRECISION = 8

    NUMERIC = frozenset('0123456789.')
    WHITESPACE = frozenset(' \t\n\r')
    MEMORY_OPERATORS = frozenset({ADDITION, SUBTRACTION, MULTIPLICATION,
                                  DIVISION, EVALUATE, PERCENT, MEMORY, CLEAR})

    def __init__(self, precision=None, memories=None):
        '''
        Create calculator showing 0.

        :param precision: Decimal places kept by double_to_string().
        :param memories: Number of indexed memories.
        '''
        if precision is None:
            precision = type(self).DEFAULT_PRECISION
        self.precision = precision
        self.machine = MemoryMachine(memories)
        self.lexer = Lexer()
        self.enter_value('0')

    def parse(self, statement):
        '''
        Evaluate a statement, like "1 + 5 / 3.2 * 7.3167 - 8 * 33.33 =".

        Return True if nothing failed. A statement that doesn't lex is
        rejected as a whole, without touching the machine.

        Unary + and - are not understood.
        '''
        log.debug('parse(%r)', statement)
        try:
            lexemes = [self.lexer.matchedgroups(match)
                       for match
                       in self.lexer.lex(statement)
                       if self.lexer.isfeedable(match)]
        except CalcError as e:
            log.debug('rejecting %r: %s', statement, e.args[-1])
            return False
        for groups in lexemes:
            if 'operator' in groups:
                ok = self.enter(groups['operator'])
            else:
                ok = self.enter_value(groups['number'])
            if not ok:
                log.debug('parse aborted at %r: %s', groups,
                          self.get_error().name)
                return False
        return True

    def evaluate(self, statement):
        '''
        Parse statement and return the resulting display value, or "Error".
        '''
        if self.parse(statement):
            return self.value()
        return 'Error'

    def enter_value(self, value):
        '''
        Push a numeric value, expressed as text.

        With no operator pending, whatever is on the value stack is finished
        with, so it is cleared first. Otherwise 1+1= 1+1= 1+1= leaves
        [2 2 2] behind. Nothing is cleared while an error is pending.
        '''
        if not self.machine.operators and not self.get_error():
            self.machine.values.clear()
        return not self.machine.push_value(self.lexer.to_float(value))

    def enter(self, code):
        '''
        Enter an operator, like "+", "(" or "=".

        An open paren will evaluate to a value, so it is treated like one:
        with no operator pending, the value stack is cleared first. A close
        paren is resolved at once, which is where unmatched ones fail.
        '''
        if (code == OPEN_PAREN and not self.machine.operators and
                not self.get_error()):
            self.machine.values.clear()
        err = self.machine.push_operator(code)
        if not err and code == CLOSE_PAREN:
            err = self.machine.evaluate_one()
        return not err

    def total(self):
        '''
        Evaluate everything, like pressing "=".
        '''
        return self.machine.evaluate_all()

    def value(self):
        '''
        Current value as a display string.
        '''
        return self.double_to_string(self.machine.current_value())

    def set_value(self, value):
        '''
        Replace (don't push) the current value.
        '''
        self._replace(self.lexer.to_float(value))

    def _replace(self, value):
        values = self.machine.values
        if values:
            values[-1] = value
        else:
            values.append(value)

    def copy_to_memory(self, index=None):
        '''
        Copy current value to the simple memory, or memories[index].

        Return False if index is out of range.
        '''
        value = self.machine.current_value()
        if index is None:
            self.machine.set_memory(value)
            return True
        if not self.machine.in_range(index):
            return False
        self.machine.set_memory_at(index, value)
        return True

    def recall_memory(self, index=None):
        '''
        Replace current value with the simple memory, or memories[index].

        Return False if index is out of range.
        '''
        if index is None:
            self._replace(self.machine.get_memory())
            return True
        if not self.machine.in_range(index):
            return False
        self._replace(self.machine.get_memory_at(index))
        return True

    def push(self):
        '''
        Push a copy of the current value onto the memory stack.
        '''
        self.machine.push_memory(self.machine.current_value())

    def pop(self):
        '''
        Pop the memory stack into the current value.
        '''
        self._replace(self.machine.pop_memory())

    def clear_memory(self):
        self.machine.set_memory(0.0)

    def clear_all(self):
        '''
        Clear every memory, both stacks and any error. Leaves 0 showing.
        '''
        self.machine.clear_all_memory()
        self.machine.clear_error()
        self.machine.values.append(0.0)

    def is_operator(self, code):
        return code == EVALUATE or self.machine.is_operator(code)

    def is_memory_operator(self, code):
        return code in type(self).MEMORY_OPERATORS

    def is_numeric(self, char):
        return char in type(self).NUMERIC

    def is_whitespace(self, char):
        return char in type(self).WHITESPACE

    def get_error(self):
        return self.machine.get_error()

    def clear_error(self):
        self.machine.clear_error()

    def double_to_string(self, value, precision=None):
        '''
        Convert value to the shortest display string at precision.

        No trailing decimal point, no spurious leading zero: 9.9 is "9.9",
        not "09.9". Anything that truncates to zero is "0".

        Digits are produced one decimal place at a time, as long as either
        the integral part isn't done or what's left exceeds 10**-precision.
        Decimal (from the shortest repr) keeps 0.3 from turning into
        0.29999999.
        '''
        if precision is None:
            precision = self.precision
        if not math.isfinite(value):
            return repr(value)
        if value == 0:
            return '0'
        remaining = abs(Decimal(repr(value)))
        threshold = Decimal(1).scaleb(-precision)
        exponent = max(remaining.to_integral_value(ROUND_CEILING).adjusted(),
                       0)
        digits = []
        while exponent >= 0 or remaining > threshold:
            weight = Decimal(1).scaleb(exponent)
            digit = int(remaining // weight)
            remaining -= digit * weight
            digits.append(str(digit))
            if exponent == 0:
                digits.append('.')
            exponent -= 1
        integral, _, fractional = ''.join(digits).partition('.')
        integral = integral.lstrip('0') or '0'
        text = integral + ('.' + fractional if fractional else '')
        if text == '0':
            return '0'
        return '-' + text if value < 0 else text
