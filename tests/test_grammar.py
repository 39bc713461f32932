from pathlib import Path

import pytest
from lark import Tree

from bisaya.errors import ParseError
from bisaya.grammar import check_syntax, serialize
from bisaya.interpreter import parse_program
from bisaya.lexer import tokenize

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_serialize_folds_two_word_keywords():
    tokens = tokenize("KUNG (a) PUNDOK{ } KUNG DILI (b) PUNDOK{ } KUNG WALA PUNDOK{ }")
    text, origins, offsets = serialize(tokens)
    words = text.split(" ")
    assert "ELSE_IF" in words and "ELSE" in words
    assert "WALA" not in words
    assert len(words) == len(origins) == len(offsets)
    assert origins[words.index("ELSE_IF")].lexeme == "KUNG"


def test_accepts_every_statement_form():
    source = """
    SUGOD
        MUGNA NUMERO x, y = 2, z
        MUGNA TINUOD t = "OO";
        DAWAT: x, z
        x = y = -z++ * (3 + 4) % 2
        IPAKITA: x & " " & [&] & $ & 'c' & t
        KUNG (x > 1 UG DILI t O y <> 2) PUNDOK{ IPAKITA: 1 }
        KUNG DILI (x == 0) PUNDOK{ }
        KUNG WALA PUNDOK{ --y }
        ALANG SA (x = 0, x < 3, ++x) PUNDOK{ SAMTANG (y >= 0) PUNDOK{ y-- } }
    KATAPUSAN
    """
    tree = check_syntax(tokenize(source))
    assert isinstance(tree, Tree)
    assert tree.data == 'start'


@pytest.mark.parametrize("name", sorted(p.name for p in EXAMPLES.glob('*.bpp')))
def test_agrees_with_parser_on_examples(name):
    source = (EXAMPLES / name).read_text(encoding='utf-8')
    parse_program(source)
    assert isinstance(check_syntax(tokenize(source)), Tree)


@pytest.mark.parametrize("source", [
    "SUGOD IPAKITA 1 KATAPUSAN",
    "SUGOD KUNG WALA PUNDOK{ } KATAPUSAN",
    "SUGOD (x) = 1 KATAPUSAN",
    "SUGOD KATAPUSAN x",
])
def test_rejects_what_the_parser_rejects(source):
    tokens = tokenize(source)
    with pytest.raises(ParseError):
        parse_program(source)
    with pytest.raises(ParseError):
        check_syntax(tokens)


def test_error_points_at_offending_token():
    with pytest.raises(ParseError) as exc:
        check_syntax(tokenize("SUGOD\n  IPAKITA 1\nKATAPUSAN"))
    assert (exc.value.line, exc.value.column) == (2, 11)


def test_error_at_end_of_input():
    with pytest.raises(ParseError, match="Unexpected end of input"):
        check_syntax(tokenize("SUGOD IPAKITA: 1"))
