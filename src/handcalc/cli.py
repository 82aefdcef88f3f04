from os import isatty, path
import sys
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .keys import KeyCalculator, Display
from .lexer import Lexer
from .memory import MemoryMachine
from .text import TextCalculator
from .util import CalcError, ErrorCode


# What a calculator screen says for each error.
MESSAGES = {
    ErrorCode.TOO_FEW_OPERANDS: 'Too Few Operands',
    ErrorCode.UNKNOWN_OPERATOR: 'Unknown Operator',
    ErrorCode.DIVIDE_BY_ZERO: 'Divide by Zero',
    ErrorCode.CANNOT_CLEAR_TO_NO_ERROR: 'Cannot Clear to No Error',
    ErrorCode.NO_MATCHING_PAREN: 'No Matching (',
    ErrorCode.OVERFLOW: 'Overflow',
}


def describe(err):
    return MESSAGES.get(err, 'Unknown Error: {}'.format(int(err)))


class InteractiveInput:
    def __init__(self, prompt, history):
        self.prompt = prompt
        self.history = path.expanduser(history)

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    history=FileHistory(self.history),
                                    prompt_continuation=' ' * len(self.prompt),
                                    mouse_support=False,
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.

    Lines are statements for the text parser, or with -k, strings of keys
    for the keyboard state machine.
    '''

    DEFAULT_PROMPT = '> '
    HISTORY_FILE = '~/.handcalc_history'

    def _calculator(self):
        cls = KeyCalculator if self.args.keys else TextCalculator
        return cls(precision=self.args.precision,
                   memories=self.args.memories)

    def dumper(self):
        '''
        Dump all lexemes, and what they are.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>')
        for line in self.args.expressions:
            try:
                for match in lexer.lex(line):
                    print(*lexer.matchedgroups(match).keys(),
                          repr(match.group(0)),
                          sep='\t')
            except CalcError as e:
                print(e.args[-1], file=sys.stderr)

    def executor(self):
        '''
        Run statements through a TextCalculator, printing each result.

        The calculator carries over from line to line, like a real one.
        '''
        calculator = self._calculator()
        for line in self.args.expressions:
            if not line.strip():
                continue
            if not calculator.parse(line):
                err = calculator.get_error()
                if not err:
                    print("Couldn't parse {0}".format(line.strip()),
                          file=sys.stderr)
                    continue
                # Like a calculator showing an error, then AC.
                print(describe(err), file=sys.stderr)
                calculator.clear_error()
                calculator.enter_value('0')
                continue
            print(calculator.value())
            self._print_stacks(calculator)

    def keyer(self):
        '''
        Run keys through a KeyCalculator, printing the display after each.
        '''
        calculator = self._calculator()
        for line in self.args.expressions:
            for code in line.strip():
                accepted = calculator.key(code)
                print(code,
                      calculator.get_display(Display.VALUE),
                      calculator.state.name,
                      '' if accepted else 'rejected',
                      sep='\t')
                err = calculator.get_error()
                if err:
                    print(describe(err), file=sys.stderr)
                self._print_stacks(calculator)

    def _print_stacks(self, calculator):
        if not self.args.stacks:
            return
        if isinstance(calculator, KeyCalculator):
            for which in (Display.STATUS, Display.OPERATOR_STACK,
                          Display.VALUE_STACK):
                print('', which.value, calculator.get_display(which),
                      sep='\t')
        else:
            print('', calculator.machine, sep='\t')

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history=self.HISTORY_FILE)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='Hand calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log evaluation details')
        self.argument_parser.add_argument('-k', '--keys',
                                          action='store_true',
                                          help='lines are keystrokes')
        self.argument_parser.add_argument('-s', '--stacks',
                                          action='store_true',
                                          help='show stacks after each line')
        self.argument_parser.add_argument('--precision', type=int,
                                          default=TextCalculator.DEFAULT_PRECISION)
        self.argument_parser.add_argument('--memories', type=int,
                                          default=MemoryMachine.DEFAULT_MEMORY_SIZE)
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=None,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(
            level=logging.DEBUG if self.args.verbose else logging.WARNING,
            format='%(name)s: %(message)s')
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        action = self.args.action or \
            (self.keyer if self.args.keys else self.executor)
        try:
            action()
        except KeyboardInterrupt:
            exit(1)


def main():
    CLI().run()
