import logtokenizer.version
from _logtokenizer.reading import tokenize_lines
from _logtokenizer.tokenizer import (
    Token,
    TokenKind,
    UnparseableInputError,
    UnparseableLineWarning,
    tokenize,
)

__author__ = """Equinor"""

__version__ = logtokenizer.version.version

__all__ = [
    "Token",
    "TokenKind",
    "UnparseableInputError",
    "UnparseableLineWarning",
    "tokenize",
    "tokenize_lines",
]
