from pytest import Item, fixture

from handcalc.keys import KeyCalculator
from handcalc.machine import Machine
from handcalc.memory import MemoryMachine
from handcalc.text import TextCalculator


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def machine():
    return Machine()


@fixture
def memory_machine():
    return MemoryMachine()


@fixture
def calculator():
    return TextCalculator()


@fixture
def keys():
    return KeyCalculator()
