'''
Calculator lexer tests
'''

import regex

from handcalc.util import CalcError, ErrorCode
from handcalc.lexer import Lexer

from pytest import mark, raises


def groups(line):
    l = Lexer()
    return [(*l.matchedgroups(m).keys(), m.group(0))
            for m in l.lex(line)
            if l.isfeedable(m)]


def test_statement():
    assert groups('12.5 + 3 * ( 2 - 1 ) =') == [
        ('number', '12.5'), ('operator', '+'), ('number', '3'),
        ('operator', '*'), ('operator', '('), ('number', '2'),
        ('operator', '-'), ('number', '1'), ('operator', ')'),
        ('operator', '='),
    ]


def test_no_spaces_needed():
    assert groups('2*3s') == [('number', '2'), ('operator', '*'),
                              ('number', '3'), ('operator', 's')]


def test_greedy_number():
    # What "1.2.3" means is the converter's problem, not the lexer's.
    assert groups('1.2.3+') == [('number', '1.2.3'), ('operator', '+')]


def test_space_not_feedable():
    l = Lexer()
    matches = list(l.lex(' 1 '))
    assert [l.isfeedable(m) for m in matches] == [False, True, False]


def test_unknown_character():
    l = Lexer()
    with raises(CalcError, match=regex.escape("Couldn't lex x 2")) as e:
        list(l.lex('1 + x 2'))
    assert e.value.code is ErrorCode.UNKNOWN_OPERATOR


def test_unary_minus_is_an_operator():
    # Signs inside text are plain operators; there is no unary minus.
    assert groups('-5') == [('operator', '-'), ('number', '5')]


@mark.parametrize('text,value', [
    ('', 0.0),
    ('.', 0.0),
    ('0', 0.0),
    ('42', 42.0),
    ('.5', 0.5),
    ('5.', 5.0),
    ('1.2.3', 1.2),
    ('-9.9', -9.9),
    ('+3', 3.0),
    ('-', 0.0),
    ('12abc', 12.0),
])
def test_to_float(text, value):
    assert Lexer().to_float(text) == value
