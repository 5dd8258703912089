class TokenizationError(Exception):
    """
    A tokenizer will throw a TokenizationError if the expected token
    is not found at the current position of the stream (however, it could be
    that another rule accepts the text at that position). Before raising, the
    tokenizer winds the stream back to where it started.

    :attr offset: Offset in the line of the character that did not match,
        which may be past the position the stream was wound back to.
    """

    def __init__(self, message, offset=None):
        super().__init__(message)
        self.offset = offset


class UnparseableInputError(ValueError):
    """
    Raised by tokenize when the grammar could not consume the entire line,
    for instance because of empty input, a stray '}' or an empty group '{}'.

    :attr line: The line that failed to tokenize.
    :attr offset: Character offset in line where matching stopped, that is,
        the furthest character any alternative tried and failed to match.
    """

    def __init__(self, line, offset):
        self.line = line
        self.offset = offset
        super().__init__(f"Could not tokenize line {line!r} at offset {offset}")


class UnparseableLineWarning(UserWarning):
    """
    Emitted by tokenize_lines(..., errors="warn") for each line that
    was dropped because it could not be tokenized.
    """

    pass
