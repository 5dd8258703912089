import pathlib
import warnings
from contextlib import contextmanager

from _logtokenizer.tokenizer import (
    UnparseableInputError,
    UnparseableLineWarning,
    tokenize,
)

ERROR_POLICIES = ("raise", "skip", "warn")


@contextmanager
def open_lines(filelike):
    """
    Context manager giving the lines of filelike without their line
    terminators.

    :param filelike: Either a path to a text file, or a text stream
        such as sys.stdin. Streams are not closed on exit.
    """
    line_stream = filelike
    did_open = False
    if isinstance(filelike, (str, pathlib.Path)):
        did_open = True
        line_stream = open(filelike, "rt", encoding="utf-8", errors="replace")

    try:
        yield (line.rstrip("\r\n") for line in line_stream)
    finally:
        if did_open:
            line_stream.close()


def tokenize_lines(filelike, errors="raise"):
    """
    Tokenize each line of a log file, ie.

    >>> for line_number, tokens in tokenize_lines("/var/log/syslog"):
    ...     print(line_number, tokens)

    Blank lines are skipped.

    :param filelike: Either a path to a text file or a text stream.
    :param errors: What to do with lines that can not be tokenized. "raise"
        raises the UnparseableInputError, "skip" drops the line and "warn"
        drops the line after emitting an UnparseableLineWarning.
    :returns: Generator of line number (starting at 1) and list of tokens.
    """
    if errors not in ERROR_POLICIES:
        raise ValueError(f"errors has to be one of {ERROR_POLICIES}, got {errors}")

    with open_lines(filelike) as lines:
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                tokens = tokenize(line)
            except UnparseableInputError as err:
                if errors == "raise":
                    raise
                if errors == "warn":
                    warnings.warn(f"line {line_number}: {err}", UnparseableLineWarning)
                continue
            yield line_number, tokens
