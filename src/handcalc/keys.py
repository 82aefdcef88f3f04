'''
Hand calculator keyboard.

KeyCalculator is a state machine driven by key() (and set_value()). Its
state is in .state, and get_display() renders the things a calculator
screen shows.

Keys:

    0-9 .       number entry
    B           backspace
    `           change sign
    + - * /     binary operators
    ( )         grouping
    % s r       percent, square, square root (evaluated at once)
    =           evaluate
    A           clear; twice in a row clears everything
    M           memory command, see _handle_memory()
'''

from enum import Enum
import logging

from .memory import CLEAR
from .operators import (BINARY, OPEN_PAREN, CLOSE_PAREN, PERCENT, SQUARE,
                        SQUARE_ROOT, EVALUATE)
from .text import TextCalculator, MEMORY


log = logging.getLogger(__name__)

CHANGE_SIGN = '`'
BACKSPACE = 'B'
DECIMAL_POINT = '.'
DIGITS = frozenset('0123456789')

# Evaluated as soon as they are entered, like most calculators do.
IMMEDIATE = frozenset({PERCENT, SQUARE, SQUARE_ROOT})


class State(Enum):
    # Initial state
    READY_FOR_ANY = 'A'
    # Waiting for a digit, a point, +/- or an open paren
    READY_FOR_NUMBER = 'N'
    # Waiting for an operator
    READY_FOR_OPERATOR = 'O'
    # A number is being typed
    ENTERING_NUMBER = '>'
    # A memory command is being typed
    ENTERING_MEMORY = 'M'
    # Only A gets out of here
    ERROR = 'X'


class Display(Enum):
    '''
    get_display() selectors.
    '''
    VALUE = 'value'
    MEMORY_ID = 'memory_id'
    STATUS = 'status'
    OPERATOR_STACK = 'operator_stack'
    VALUE_STACK = 'value_stack'


class KeyCalculator(TextCalculator):
    '''
    Calculator fed one key at a time.
    '''

    NUMBER_BUFFER_SIZE = 64
    ADDRESS_BUFFER_SIZE = 8
    MAX_MEMORIES_SHOWN = 8

    def __init__(self, precision=None, memories=None):
        super().__init__(precision=precision, memories=memories)
        self.state = State.READY_FOR_ANY
        self._number = ''
        self._address = ''
        self._clear_presses = 0
        # Binary operator repeated by another =
        self._chain = None
        # The current value is a cleared operand, to be replaced rather than
        # pushed on by the next number.
        self._placeholder = False
        self._operand_missing = False

    def key(self, code):
        '''
        Process one key. Return True if it was accepted.
        '''
        log.debug('key %r in %s', code, self.state.name)
        if self.get_error():
            self._change_state(State.ERROR)

        if self.state is State.ERROR:
            if code != CLEAR:
                return False
            self.clear_error()
            self.machine.push_value(0.0)
            self._number = self._address = ''
            self._chain = None
            self._clear_presses = 0
            self._placeholder = False
            self._change_state(State.READY_FOR_ANY)
            return True

        if code == CLEAR and self._clear_presses:
            return self._handle_clear(all_clear=True)

        accepted = self._key(code)
        if accepted:
            if code != CLEAR:
                self._clear_presses = 0
            if code != EVALUATE:
                self._chain = None
        return accepted

    def _key(self, code):
        if self.state is State.ENTERING_MEMORY:
            return self._handle_memory(code)

        # Chaining: 1 + = = = gives 2, 4, 8 and so does 1 + 1 = = =.
        # Only for + - * /, not % and friends.
        if code == EVALUATE:
            if (self.state is State.READY_FOR_NUMBER and
                    self.machine.peek_operator() in BINARY):
                if self._placeholder:
                    self._placeholder = False
                else:
                    self.machine.push_value(self.machine.current_value())
                self._change_state(State.READY_FOR_OPERATOR)
            elif (self.state is State.READY_FOR_ANY and
                  self._chain and not self.machine.operators):
                self.machine.push_operator(self._chain)
                self.machine.push_value(self.machine.current_value())
                self._change_state(State.READY_FOR_OPERATOR)

        # 15 + * means "I meant *, not +". Never for parens, which nest.
        if (self.state is State.READY_FOR_NUMBER and
                self.machine.is_operator(code) and
                code not in (OPEN_PAREN, CLOSE_PAREN) and
                self.machine.operators and
                self.machine.peek_operator() != OPEN_PAREN):
            log.debug('replacing %s with %s',
                      self.machine.peek_operator(), code)
            self.machine.operators[-1] = code
            return True

        if self.state in (State.READY_FOR_ANY, State.READY_FOR_NUMBER,
                          State.ENTERING_NUMBER):
            if code in DIGITS or code in (DECIMAL_POINT, BACKSPACE):
                return self._build_number(code)
            if code == CHANGE_SIGN and self._number:
                return self._toggle_sign()
            if code == OPEN_PAREN:
                if self._placeholder:
                    # The group will be the operand.
                    self.machine.pop_value()
                    self._placeholder = False
                accepted = self.enter(code)
                self._change_state(State.READY_FOR_NUMBER)
                return accepted

        if not (self.is_operator(code) or
                code in (CHANGE_SIGN, CLEAR, MEMORY)):
            log.debug('dropping key %r', code)
            return False
        # Whatever is on top was entered after the pending operator.
        right_operand = bool(self.machine.operators and (
            self._number or
            self.state in (State.READY_FOR_OPERATOR, State.READY_FOR_ANY)))
        self.commit()

        if self.is_operator(code) and (
                self.state is State.READY_FOR_OPERATOR or
                self.state is State.READY_FOR_ANY and self.machine.values):
            return self._handle_operator(code)

        if code == CHANGE_SIGN:
            return self._handle_change_sign()
        elif code == CLEAR:
            return self._handle_clear(placeholder=right_operand)
        elif code == MEMORY:
            return self._handle_memory(code)
        log.debug('dropping key %r', code)
        return False

    def commit(self):
        '''
        Push the number being typed, if any. Return True if one was.
        '''
        if self._number:
            number, self._number = self._number, ''
            log.debug('committing %s', number)
            if self._placeholder:
                self._placeholder = False
                self._replace(self.lexer.to_float(number))
            else:
                self.enter_value(number)
            self._change_state(State.READY_FOR_OPERATOR)
            return True
        if self.state is State.ENTERING_NUMBER:
            # Backspaced away to nothing.
            self.cancel_input()
        return False

    def set_value(self, value):
        '''
        Push value, given as text, dropping any number being typed.
        '''
        self._number = ''
        self.enter_value(value)
        self._change_state(State.READY_FOR_ANY)

    def cancel_input(self):
        '''
        Drop the number or memory address being typed.
        '''
        if self.state is State.ENTERING_NUMBER:
            self._number = ''
            self._change_state(State.READY_FOR_NUMBER
                               if self.machine.operators
                               else State.READY_FOR_ANY)
        elif self.state is State.ENTERING_MEMORY:
            self._address = ''
            self._change_state(State.READY_FOR_ANY)

    def open_parens(self):
        '''
        Number of open parens on the operator stack, less close parens.
        '''
        operators = self.machine.operators
        return operators.count(OPEN_PAREN) - operators.count(CLOSE_PAREN)

    def get_display(self, which):
        '''
        Return the text representation selected by a Display.
        '''
        if which is Display.VALUE:
            return self._number or self.value()
        elif which is Display.MEMORY_ID:
            return self._memory_id()
        elif which is Display.STATUS:
            return self._status()
        elif which is Display.OPERATOR_STACK:
            return '[ ' + ''.join(code + ' '
                                  for code
                                  in self.machine.operators) + ']'
        elif which is Display.VALUE_STACK:
            return '[ ' + ''.join(self.double_to_string(value) + ' '
                                  for value
                                  in self.machine.values) + ']'
        raise ValueError('Unexpected display {!r}'.format(which))

    def _change_state(self, state):
        if state is not self.state:
            log.debug('state %s -> %s', self.state.name, state.name)
        self.state = state

    def _handle_operator(self, code):
        if code == CLOSE_PAREN and self.open_parens() <= 0:
            log.debug('rejecting ) without a matching (')
            return False
        self._placeholder = False
        chain = next((operator
                      for operator
                      in self.machine.operators
                      if operator in BINARY), None)
        if not self.enter(code):
            return False
        accepted = True
        if code == EVALUATE:
            self._chain = chain
            state = State.READY_FOR_ANY
        elif code == CLOSE_PAREN:
            state = State.READY_FOR_OPERATOR
        elif code in IMMEDIATE:
            accepted = not self.machine.evaluate_one()
            # A number typed next replaces the result as the pending
            # operator's operand.
            self._placeholder = bool(self.machine.operators)
            state = State.READY_FOR_ANY
        else:
            state = State.READY_FOR_NUMBER
        self._change_state(state)
        return accepted

    def _handle_clear(self, all_clear=False, placeholder=False):
        '''
        First A clears the value, a second one in a row clears everything.

        Clearing an operand typed after a pending operator leaves a 0 that
        the next number replaces, so 5 + 3 A 2 = is 7. With no such operand
        yet, the value under the operator is kept: 5 + A 2 = is 7 too.
        '''
        self._clear_presses += 1
        if all_clear:
            self.clear_all()
            self._number = ''
            self._placeholder = False
            self._change_state(State.READY_FOR_ANY)
            return True
        # A pending binary operator still needs its number.
        pending = (self.machine.operators and
                   self.machine.peek_operator() != OPEN_PAREN)
        self._change_state(State.READY_FOR_NUMBER
                           if pending
                           else State.READY_FOR_ANY)
        if self.machine.operators and not placeholder:
            self._placeholder = True
            return not self.machine.push_value(0.0)
        self._placeholder = placeholder
        return not self.machine.clear()

    def _toggle_sign(self):
        '''
        +/- while typing puts a leading - on the number, or takes it off.
        '''
        if not self.lexer.to_float(self._number):
            return False
        if self._number.startswith('-'):
            self._number = self._number[1:]
        else:
            self._number = '-' + self._number
        return True

    def _handle_change_sign(self):
        '''
        Negate the current value in place.
        '''
        value = self.machine.current_value()
        if not self.machine.values or value == 0:
            return False
        self.machine.values[-1] = -value
        self._change_state(State.READY_FOR_NUMBER)
        return True

    def _build_number(self, code):
        '''
        Add a digit or point to the number being typed, or backspace.
        '''
        self._change_state(State.ENTERING_NUMBER)
        if code == BACKSPACE:
            if not self._number:
                return False
            self._number = self._number[:-1]
            if self._number == '-':
                # A sign alone is no number.
                self._number = ''
            return True
        if len(self._number) >= type(self).NUMBER_BUFFER_SIZE:
            return False
        # One point per number
        if code == DECIMAL_POINT and DECIMAL_POINT in self._number:
            return False
        self._number += code
        return True

    def _handle_memory(self, code):
        '''
        Memory commands.

        There is a simple memory, the indexed memories and a memory stack.
        After M, the next keys mean:

            MM      recall simple memory    (M -> value)
            M=      store simple memory     (value -> M)
            MA      clear simple memory     (0 -> M)
            M+      M + value -> M, likewise M- M* M/ M%
            M3M     recall M[3]
            M99+    M[99] + value -> M[99]
            M.      cancel

        B takes back an address digit. Anything else bails out of memory
        mode and is rejected.
        '''
        if self.state is not State.ENTERING_MEMORY:
            # 5 + M M: the recall is the right operand, not a new left one.
            self._operand_missing = bool(
                self.state is State.READY_FOR_NUMBER and
                self.machine.operators and
                not self._placeholder)
            self._change_state(State.ENTERING_MEMORY)
            return True

        if code == DECIMAL_POINT:
            self._leave_memory()
            return True
        if code == BACKSPACE:
            if not self._address:
                return False
            self._address = self._address[:-1]
            return True
        if code in DIGITS:
            address = self._address + code
            if (len(address) >= type(self).ADDRESS_BUFFER_SIZE or
                    not self.machine.in_range(int(address))):
                log.debug('memory address %s would be out of range', address)
                return False
            self._address = address
            return True

        index = int(self._address) if self._address else None
        if code == MEMORY:
            log.debug('recalling memory %s', index)
            if self._operand_missing:
                self.machine.push_value(0.0)
                self._placeholder = True
            accepted = self.recall_memory(index)
        elif self.is_memory_operator(code):
            log.debug('memory operation %s on %s', code, index)
            accepted = not self.machine.memory_operation(code, index)
        else:
            accepted = False
        self._leave_memory()
        return accepted

    def _leave_memory(self):
        self._address = ''
        self._change_state(State.READY_FOR_ANY)

    def _memory_id(self):
        '''
        "M[_7]  (3.5)": the address being typed, and what's there now.
        '''
        width = len(str(self.machine.memory_size - 1))
        if len(self._address) > width:
            address = '?'
        else:
            address = self._address.rjust(width, '_')
        if self._address:
            value = self.machine.get_memory_at(int(self._address))
        else:
            value = self.machine.get_memory()
        return 'M[{}]  ({})'.format(address, self.double_to_string(value))

    def _status(self):
        '''
        Status line, as complex as "((  M[1,2,4,...]  S(5)  M=3.14159265".

        Open parens, then indexes of indexed memories in use, then the
        memory stack depth, then the simple memory. Parts that don't apply
        are left out.
        '''
        parts = []
        parens = self.open_parens()
        if parens > 0:
            parts.append(OPEN_PAREN * parens)
        used = [str(index)
                for index, value
                in enumerate(self.machine.memories)
                if value]
        if used:
            shown = used[:type(self).MAX_MEMORIES_SHOWN]
            if len(used) > len(shown):
                shown.append('...')
            parts.append('M[{}]'.format(','.join(shown)))
        if self.machine.memory_depth():
            parts.append('S({})'.format(self.machine.memory_depth()))
        if self.machine.get_memory():
            parts.append('M=' + self.double_to_string(
                self.machine.get_memory()))
        return '  '.join(parts)
