import logging

from .operators import OPERATORS, OPEN_PAREN, EVALUATE
from .util import CalcError, ErrorCode, error_codes


log = logging.getLogger(__name__)


class Machine:
    '''
    Infix evaluation machine.

    Uses the shunting-yard algorithm, so values and operators are pushed in
    the order they would be typed on an ordinary calculator: push 1, push +,
    push 1, evaluate, and the value stack holds 2.

    Failures are returned as ErrorCodes, never raised. Evaluation failures
    also set a sticky error state which blocks pushes and evaluation until
    clear_error().
    '''

    def __init__(self):
        '''
        Create empty machine.
        '''
        self.values = []
        self.operators = []
        self._error = ErrorCode.NO_ERROR
        # One instance of each operator per machine.
        self._operators = {code: cls() for code, cls in OPERATORS.items()}

    def is_operator(self, code):
        '''
        Return True if code names a stackable operator.
        '''
        return code in self._operators

    def precedence(self, code):
        return self._operators[code].precedence

    def push_value(self, value):
        '''
        Push a value onto the value stack.
        '''
        if self._error:
            return self._error
        self.values.append(float(value))
        return ErrorCode.NO_ERROR

    def pop_value(self):
        '''
        Pop the value on top of the value stack. Caller guards emptiness.
        '''
        return self.values.pop()

    def peek_value(self):
        return self.values[-1]

    def current_value(self):
        '''
        Top of the value stack, or 0 if empty. What a display would show.
        '''
        if not self.values:
            return 0.0
        return self.values[-1]

    def push_operator(self, code):
        '''
        Push an operator, first evaluating stacked operators that bind at
        least as tightly.

        Only a close paren may remove an open paren, so evaluation stops at
        one. The evaluate operator is not pushed at all; it evaluates the
        whole stack.
        '''
        if self._error:
            return self._error
        if code == EVALUATE:
            log.debug('%s: evaluating everything', code)
            return self.evaluate_all()
        if code not in self._operators:
            log.debug('%r: unknown operator', code)
            return ErrorCode.UNKNOWN_OPERATOR
        precedence = self.precedence(code)
        while True:
            top = self.peek_operator()
            if top not in self._operators or top == OPEN_PAREN:
                break
            if self.precedence(top) < precedence:
                break
            log.debug('%s: forcing %s', code, top)
            err = self.evaluate_one()
            if err:
                return err
        self.operators.append(code)
        return ErrorCode.NO_ERROR

    def pop_operator(self):
        '''
        Pop the operator on top of the operator stack, None if empty.
        '''
        if not self.operators:
            return None
        return self.operators.pop()

    def peek_operator(self):
        if not self.operators:
            return None
        return self.operators[-1]

    def evaluate_one(self):
        '''
        Evaluate the operator on top of the operator stack, if any.

        Any failure becomes the sticky error state.
        '''
        if self._error:
            return self._error
        if not self.operators:
            return ErrorCode.NO_ERROR
        log.debug('evaluate_one: %s', self)
        code = self.pop_operator()
        err = self._operate(code)
        if err:
            log.debug('%s failed: %s', code, err.name)
            self.set_error(err)
        return err

    @error_codes
    def _operate(self, code):
        operator = self._operators.get(code)
        if operator is None:
            raise CalcError(ErrorCode.UNKNOWN_OPERATOR)
        if not operator.enough_values(self):
            raise CalcError(ErrorCode.TOO_FEW_OPERANDS)
        operator.operate(self)

    def evaluate_all(self):
        '''
        Evaluate until the operator stack is empty. Stops on first failure.
        '''
        while self.operators:
            err = self.evaluate_one()
            if err:
                return err
        return ErrorCode.NO_ERROR

    def clear(self):
        '''
        Set the current value to zero, without growing a non-empty stack.
        '''
        if self.values:
            self.values.pop()
        self.values.append(0.0)
        return ErrorCode.NO_ERROR

    def set_error(self, err):
        '''
        Set the sticky error state and return the previous one.

        Refuses NO_ERROR; only clear_error() gets rid of an error.
        '''
        err = ErrorCode(err)
        if not err:
            return ErrorCode.CANNOT_CLEAR_TO_NO_ERROR
        previous, self._error = self._error, err
        log.debug('error state set to %s', err.name)
        return previous

    def get_error(self):
        return self._error

    def clear_error(self):
        '''
        Clear the error state, and both stacks with it.
        '''
        self._error = ErrorCode.NO_ERROR
        self.values.clear()
        self.operators.clear()

    def __str__(self):
        return 'operators: [{}]  values: [{}]'.format(
            ' '.join(self.operators) or 'EMPTY',
            ' '.join(map(repr, self.values)) or 'EMPTY')
