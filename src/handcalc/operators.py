'''
Operators the evaluation machine knows about.

Every operator is a small class with a code, a precedence and an operate()
that pops its own operands and pushes its result. Extending the calculator
means writing one more subclass and listing it in OPERATORS; the machine's
evaluation loop never changes.

Precedence (higher binds tighter):

    Grouping        250   ( )
    Unary sign      200   reserved, unused
    Powers, roots   150   s r
    Multiplicative  100   * / %
    Additive         50   + -
    Evaluate          0   = (not an operator, handled by the machine)
'''

import math

from .util import CalcError, ErrorCode


ADDITION = '+'
SUBTRACTION = '-'
MULTIPLICATION = '*'
DIVISION = '/'
PERCENT = '%'
OPEN_PAREN = '('
CLOSE_PAREN = ')'
SQUARE = 's'
SQUARE_ROOT = 'r'
# Not stored on the operator stack, the machine evaluates everything instead.
EVALUATE = '='

BINARY = frozenset({ADDITION, SUBTRACTION, MULTIPLICATION, DIVISION})


class Operator:
    '''
    Base for all operators.

    operate() must consume exactly arity operands and push exactly one
    result. Failures are raised as CalcError.
    '''
    code = None
    precedence = 0
    arity = 0

    def enough_values(self, machine):
        return len(machine.values) >= self.arity

    def operate(self, machine):
        raise NotImplementedError

    def __repr__(self):
        return '<{} {!r}>'.format(type(self).__name__, self.code)


class BinaryOperator(Operator):
    '''
    n OP n. Subclasses only compute.
    '''
    arity = 2

    def operate(self, machine):
        op1 = machine.pop_value()  # latest
        op2 = machine.pop_value()  # prior
        machine.push_value(self.compute(op2, op1))

    def compute(self, left, right):
        raise NotImplementedError


class Addition(BinaryOperator):
    code = ADDITION
    precedence = 50

    def compute(self, left, right):
        return left + right


class Subtraction(BinaryOperator):
    code = SUBTRACTION
    precedence = 50

    def compute(self, left, right):
        return left - right


class Multiplication(BinaryOperator):
    code = MULTIPLICATION
    precedence = 100

    def compute(self, left, right):
        return left * right


class Division(BinaryOperator):
    code = DIVISION
    precedence = 100

    def operate(self, machine):
        op1 = machine.pop_value()
        op2 = machine.pop_value()
        # Both operands are gone either way.
        if op1 == 0:
            raise CalcError(ErrorCode.DIVIDE_BY_ZERO, 'Divide by zero')
        machine.push_value(self.compute(op2, op1))

    def compute(self, left, right):
        return left / right


class OpenParen(Operator):
    '''
    Just a marker on the operator stack, removed by its CloseParen.
    '''
    code = OPEN_PAREN
    precedence = 250

    def operate(self, machine):
        pass


class CloseParen(Operator):
    '''
    Evaluate down to the matching OpenParen and discard it.

    The operand left behind is the value of the group.
    '''
    code = CLOSE_PAREN
    precedence = 250

    def operate(self, machine):
        while machine.peek_operator() != OPEN_PAREN:
            if not machine.operators:
                raise CalcError(ErrorCode.NO_MATCHING_PAREN,
                                'No matching (')
            err = machine.evaluate_one()
            if err:
                raise CalcError(err)
        machine.pop_operator()


class Percent(Operator):
    '''
    Calculator percent, which depends on what is pending.

    With nothing pending (or just an open paren), 30 % is 30 / 100.

    With a binary operator pending, the percentage is of the running left
    operand: 30 + 5 % leaves 30 + 1.5 on the stacks. The sequence pushed is
    L * V / 100 (L the left operand, V the percentage), evaluated back down
    to the pending operator, which is left for later.

    A pending * or / has already been evaluated by the time % is pushed, so
    30 / 6 % is (30 / 6) / 100.
    '''
    code = PERCENT
    precedence = 100
    arity = 1

    def operate(self, machine):
        depth = len(machine.operators)
        if depth and machine.peek_operator() != OPEN_PAREN:
            percentage = machine.pop_value()
            machine.push_value(machine.current_value())
            machine.push_operator(MULTIPLICATION)
            machine.push_value(percentage)
        machine.push_operator(DIVISION)
        machine.push_value(100.0)
        while len(machine.operators) > depth:
            err = machine.evaluate_one()
            if err:
                raise CalcError(err)


class Square(Operator):
    code = SQUARE
    precedence = 150
    arity = 1

    def operate(self, machine):
        value = machine.pop_value()
        machine.push_value(value * value)


class SquareRoot(Operator):
    '''
    Negative operands give NaN rather than an error.
    '''
    code = SQUARE_ROOT
    precedence = 150
    arity = 1

    def operate(self, machine):
        value = machine.pop_value()
        machine.push_value(math.sqrt(value) if value >= 0 else math.nan)


OPERATORS = {
    operator.code: operator
    for operator
    in (Addition, Subtraction, Multiplication, Division,
        OpenParen, CloseParen, Percent, Square, SquareRoot)
}
