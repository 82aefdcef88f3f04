from functools import reduce
import operator

import regex

from .util import CalcError, ErrorCode
from .operators import OPERATORS, EVALUATE


class Lexer:
    '''
    Lexer for calculator statements, like "12.5 + 3 * ( 2 - 1 ) =".

    For consistency, needs to be instantiated, despite holding no internal
    state.
    '''
    # Greedy run of digits and decimal points. "1.2.3" is one lexeme; what
    # it is worth is the converter's business, see to_float().
    NUMBER = r'[0-9.]+'

    assert not [code
                for code
                in OPERATORS
                if len(code) != 1]
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      sorted(OPERATORS) + [EVALUATE])) + r')'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    # Leading part of a number that means something, like C's atof().
    PREFIX = r'[-+]?[0-9]*(?:\.[0-9]*)?'

    def lex(self, line):
        '''
        Take a line and yield all lexemes.

        Raises CalcError on the first character that isn't part of one.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                raise CalcError(ErrorCode.UNKNOWN_OPERATOR,
                                "Couldn't lex {0}".format(line.strip()))
            yield match
            line = line[len(match.group(0)):]

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to a calculator.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the groups that matched.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def to_float(self, text):
        '''
        Convert numeric text to a float; "" and "." are 0, "1.2.3" is 1.2.

        Unlike the lexer, accepts a sign, so display strings convert back.
        '''
        prefix = regex.match(type(self).PREFIX, text).group(0)
        if not prefix.lstrip('-+').strip('.'):
            return 0.0
        return float(prefix)
