'''
Hand calculator engine.

Infix arithmetic the way a pocket calculator does it, in layers:

- Machine: operand and operator stacks, shunting-yard evaluation, and a
  sticky error state.
- MemoryMachine: adds a simple memory, indexed memories and a memory stack.
- TextCalculator: statements like "12.5 + 3 * ( 2 - 1 ) =" in, display
  strings out.
- KeyCalculator: one key at a time, with chained =, operator
  substitution, and memory addressing.

Nothing raises out of the engine; operations return ErrorCodes (or
booleans, from the text and key layers).
'''

from .cli import CLI
from .keys import KeyCalculator, State, Display
from .lexer import Lexer
from .machine import Machine
from .memory import MemoryMachine
from .text import TextCalculator
from .util import ErrorCode, Serialized


__all__ = ('Machine', 'MemoryMachine', 'TextCalculator', 'KeyCalculator',
           'State', 'Display', 'ErrorCode', 'Serialized', 'Lexer', 'CLI')
