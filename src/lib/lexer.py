"""
Script tokenizer built on the Pygments JavaScript lexer

Produces ScriptTokens with 0-based line/column positions for the source
map generator. Pygments' RegexLexer.get_tokens_unprocessed() is used
directly so the input is not preprocessed (no newline stripping, no tab
expansion) and every reported index refers to the text as given.

Token kinds:
- Whitespace and comments are skipped
- Name.*, Keyword.* and Literal.* (strings, numbers, regexes) are named
- Punctuation and Operator tokens are structural (no name)
"""

from typing import Iterator

from pygments.lexers.javascript import JavascriptLexer
from pygments.token import Comment, Keyword, Literal, Name, String, Token

from ..models.section import ScriptToken
from .location import LineIndex


class ScriptLexer(JavascriptLexer):
    """
    JavaScript lexer used for source map tokenization

    Identical to Pygments' JavascriptLexer but with input preprocessing
    switched off, so token indexes line up with the component text.
    """

    name = 'Vuegister script'
    aliases = ['vuegister-script']
    filenames = []

    def __init__(self, **options) -> None:
        options.setdefault('stripnl', False)
        options.setdefault('ensurenl', False)
        super().__init__(**options)


def token_isNamed(ttype) -> bool:
    """Check if a Pygments token type carries an original name"""
    if ttype in String.Interpol:
        return False
    return ttype in Name or ttype in Keyword or ttype in Literal


def token_isSkipped(ttype, value: str) -> bool:
    """Whitespace and comments never produce mappings"""
    if not value.strip():
        return True
    return ttype in Comment or ttype in Token.Text.Whitespace


def tokens_scan(content: str) -> Iterator[ScriptToken]:
    """
    Tokenize script text with location tracking

    Args:
        content: Script source (JavaScript)

    Yields:
        ScriptToken per significant token, in source order

    Example:
        >>> [t.value for t in tokens_scan("var a = 1;")]
        ['var', 'a', '=', '1', ';']
    """
    if not isinstance(content, str):
        raise TypeError('Content must be a string.')

    lines = LineIndex(content)
    lexer = ScriptLexer()

    for index, ttype, value in lexer.get_tokens_unprocessed(content):
        if token_isSkipped(ttype, value):
            continue

        # Pygments may glue leading whitespace onto a token
        stripped = value.lstrip()
        index += len(value) - len(stripped)

        yield ScriptToken(
            value=stripped.rstrip(),
            line=lines.line_get(index),
            column=lines.column_get(index),
            named=token_isNamed(ttype),
        )
