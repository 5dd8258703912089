"""
Character level matchers shared by the tokenizers.

A matcher reads from the current position of the stream and returns the
text it matched. If the text at the current position does not match, the
matcher winds the stream back to where it started and raises
TokenizationError. Matchers never yield tokens, they are the building blocks
tokenizers use to recognize the span of a token.
"""

import os.path
from contextlib import contextmanager

from _logtokenizer.tokenizer.combinators import furthest_offset
from _logtokenizer.tokenizer.errors import TokenizationError

DIGITS = "0123456789"
HEX_DIGITS = DIGITS + "abcdefABCDEF"
KEY_CHARACTERS = (
    DIGITS + "abcdefghijklmnopqrstuvwxyz" + "ABCDEFGHIJKLMNOPQRSTUVWXYZ" + "_-"
)
SEPARATOR_PUNCTUATION = ";:,"
STRUCTURAL_CHARACTERS = "{}()[]="


@contextmanager
def rewind_on_error(stream):
    """
    Context manager that winds the stream back to the position
    it had when entering if a TokenizationError is raised.

    >>> with rewind_on_error(stream) as start:
    ...     match_word(stream, "audit(")
    ...     match_while(stream, DIGITS)

    """
    start = stream.tell()
    try:
        yield start
    except TokenizationError:
        stream.seek(start)
        raise


def read_span(stream, start):
    """
    :returns: The text between start and the current position of
        the stream, leaving the stream at the current position.
    """
    end = stream.tell()
    stream.seek(start)
    return stream.read(end - start)


def match_word(stream, word):
    """
    Match the exact given word, ie. match_word(stream, "0x"). On failure the
    offset is that of the first character that differs from word.
    """
    start = stream.tell()
    read = stream.read(len(word))
    if read != word:
        stream.seek(start)
        raise TokenizationError(
            f"Expected {word!r} at {start} got {read!r}",
            offset=start + len(os.path.commonprefix([read, word])),
        )
    return read


def match_one_of(stream, characters):
    """
    Match a single character that is in characters.
    """
    start = stream.tell()
    read_char = stream.read(1)
    if not read_char or read_char not in characters:
        stream.seek(start)
        raise TokenizationError(
            f"Expected one of {characters!r} at {start} got {read_char!r}",
            offset=start,
        )
    return read_char


def match_classes(stream, classes):
    """
    Match a fixed width sequence of characters where the i'th character
    is in classes[i], ie. match_classes(stream, ["2", "5", "012345"])
    matches "250" through "255".
    """
    with rewind_on_error(stream):
        return "".join(match_one_of(stream, c) for c in classes)


def match_first(stream, alternatives):
    """
    Match the first of the given alternatives (each a list of classes, see
    match_classes) that matches at the current position. As in a PEG, later
    alternatives are not tried once an earlier one has matched.
    """
    start = stream.tell()
    failures = []
    for classes in alternatives:
        try:
            return match_classes(stream, classes)
        except TokenizationError as err:
            failures.append(err)
    raise TokenizationError(
        f"No alternative matched at {start}",
        offset=furthest_offset(failures, default=start),
    )


def match_while(stream, accept, min_count=1):
    """
    Match the longest run of characters for which accept returns True.

    :param accept: Either a string of accepted characters or a predicate
        on a single character.
    :param min_count: Minimum length of the run, raises TokenizationError
        if the run is shorter.
    """
    if isinstance(accept, str):
        accept = accept.__contains__
    start = stream.tell()
    end = start
    count = 0
    read_char = stream.read(1)
    while read_char and accept(read_char):
        count += 1
        end = stream.tell()
        read_char = stream.read(1)
    stream.seek(end)
    if count < min_count:
        stream.seek(start)
        raise TokenizationError(
            f"Expected at least {min_count} characters at {start} got {count}",
            offset=start + count,
        )
    return read_span(stream, start)


def match_optional(stream, matcher, *args):
    """
    Apply matcher, returning the empty string instead of raising
    TokenizationError when it does not match.
    """
    try:
        return matcher(stream, *args)
    except TokenizationError:
        return ""


def is_separator_start(char):
    return char.isspace() or char in SEPARATOR_PUNCTUATION
