"""
Combinators build tokenizers out of other tokenizers. Failures from the
alternatives of a choice are merged into one TokenizationError whose offset
is the furthest character any of the alternatives got to, so that an
unparseable line is reported where matching really stopped, not where the
failing token started.
"""

from _logtokenizer.tokenizer.errors import TokenizationError


def furthest_offset(errors, default=None):
    """
    :param errors: Iterable of TokenizationError.
    :returns: The largest offset of the given errors, or default if
        none of them has an offset.
    """
    return max(
        (err.offset for err in errors if err.offset is not None), default=default
    )


def bind(*tokenizers):
    """
    Combinator for tokenizers.

    :param tokenizers: List of tokenizers.
    :returns: A tokenizer that applies each of the tokenizers in sequence.
    """

    def bound_tokenizer():
        for tokenizer in tokenizers:
            yield from tokenizer()

    return bound_tokenizer


def one_of(*tokenizers):
    """
    Ordered choice between tokenizers.

    :param tokenizers: List of tokenizers, in order of priority.
    :returns: A tokenizer that yields the tokens of the first tokenizer in
        tokenizers that succeeds. Later alternatives are not tried once one
        has succeeded. If all fail, raises a TokenizationError listing each
        failure, with the offset of the failure that got furthest.
    """

    def one_of_tokenizer():
        failures = []
        for tokenizer in tokenizers:
            try:
                yield from tokenizer()
                return
            except TokenizationError as err:
                failures.append(err)

        raise TokenizationError(
            "Tokenization failed, due to one of\n*"
            + "\n*".join(str(err) for err in failures),
            offset=furthest_offset(failures),
        )

    return one_of_tokenizer


def repeated(tokenizer):
    """
    Combinator for tokenizer.
    :param tokenizer: Any tokenizer.
    :returns: Tokenizer that applies the tokenizer zero or more times, until it
        fails. The failure that ended the repetition is not an error.
    """

    def repeated_tokenizer():
        try:
            while True:
                yield from tokenizer()
        except TokenizationError:
            return

    return repeated_tokenizer


def one_or_more(tokenizer):
    """
    Combinator for tokenizer.
    :param tokenizer: Any tokenizer.
    :returns: Tokenizer that applies the tokenizer at least once, and then
        until it fails.
    """
    return bind(tokenizer, repeated(tokenizer))
