"""
In this module, a tokenizer is a generator that takes a stream and generates
tokens. If an error occurs, the function winds back the stream to the position
to where it started generating and raises a TokenizationError.

Token combinator is any function which returns a tokenizer.

Log lines have no fixed format, so the grammar is an ordered choice between
the recognizable substructures of log lines (numbers, ip and mac addresses,
key=value pairs, bracketed groups etc.) with a catch-all literal as the last
alternative. The first alternative that matches wins, and since every
tokenizer winds back the stream on failure, the next alternative is tried
from the same position.

Each line is tokenized from its own stream, so tokenize holds no state
between calls and can be used from several threads at once.
"""

import io

from .errors import TokenizationError, UnparseableInputError, UnparseableLineWarning
from .line_tokenizer import LineTokenizer
from .token import Token
from .token_kind import TokenKind


def tokenize(line):
    """
    Tokenize a single log line.

    >>> tokenize("msg=audit(1364481363.243:24287)")
    [Token(kind=<TokenKind.KV_PAIR: 10>, value=(...))]

    :param line: A line of text without the trailing newline.
    :returns: The list of top level tokens in the line.
    :raises UnparseableInputError: If the entire line could not be tokenized,
        for instance if it is empty or contains an unmatched '}'. The offset
        of the error is the furthest character that could not be matched.
    """
    stream = io.StringIO(line)
    try:
        return list(LineTokenizer(stream))
    except TokenizationError as err:
        offset = stream.tell() if err.offset is None else err.offset
        raise UnparseableInputError(line, offset) from err


__all__ = [
    "LineTokenizer",
    "Token",
    "TokenKind",
    "TokenizationError",
    "UnparseableInputError",
    "UnparseableLineWarning",
    "tokenize",
]
