from functools import cached_property

from _logtokenizer.tokenizer.combinators import (
    bind,
    furthest_offset,
    one_of,
    one_or_more,
    repeated,
)
from _logtokenizer.tokenizer.common import (
    DIGITS,
    HEX_DIGITS,
    KEY_CHARACTERS,
    SEPARATOR_PUNCTUATION,
    STRUCTURAL_CHARACTERS,
    is_separator_start,
    match_first,
    match_one_of,
    match_optional,
    match_while,
    match_word,
    read_span,
    rewind_on_error,
)
from _logtokenizer.tokenizer.errors import TokenizationError
from _logtokenizer.tokenizer.token import Token
from _logtokenizer.tokenizer.token_kind import TokenKind

# Alternatives for one decimal octet of an ipv4 address, longest first
# so that a valid octet is never truncated.
OCTET = [
    ["2", "5", "012345"],
    ["2", "01234", DIGITS],
    ["1", DIGITS, DIGITS],
    ["123456789", DIGITS],
    [DIGITS],
]

MAC_COLON = ([HEX_DIGITS, HEX_DIGITS, ":"] * 6)[:-1]
MAC_CISCO = ([HEX_DIGITS] * 4 + ["."]) * 2 + [HEX_DIGITS] * 4

GROUP_OPENINGS = {
    opening: kind for kind, (opening, _) in TokenKind.groups().items()
}


def is_literal_character(char):
    return char not in STRUCTURAL_CHARACTERS and not is_separator_start(char)


class LineTokenizer:
    """
    The line tokenizer is an iterable of tokens for a stream containing a
    single log line, and raises TokenizationError as any other tokenizer if
    the entire line could not be tokenized.

    At each position the composite tokens (groups, key-value pairs and
    program[pid] markers) are tried before the atomic tokens, and the first
    alternative that matches is used. Nested groups are tokenized with a
    stack of open groups instead of recursion, so the nesting depth is only
    limited by the length of the line.

    >>> list(LineTokenizer(io.StringIO("bluetoothd[723]: Starting")))
    [Token(kind=<TokenKind.PROGRAM_PID: 9>, value=('bluetoothd', '723')),
     Token(kind=<TokenKind.LITERAL: 1>, value='Starting')]

    """

    def __init__(self, stream):
        """
        :param stream: A text stream containing one log line.
        """
        self._stream = stream
        self.furthest_failure = 0

    @property
    def stream(self):
        return self._stream

    def __iter__(self):
        return self.tokenize_line()

    def make_token(self, kind, start, value=None):
        """
        Create a token of the given kind spanning from start to
        the current position of the stream. If no value is given,
        the spanned text is used.
        """
        end = self.stream.tell()
        if value is None:
            value = read_span(self.stream, start)
        return Token(kind, value, start, end)

    def tokenize_line(self):
        """
        Tokenize an entire line, that is, one or more tokens optionally
        surrounded by separators followed by the end of the line.
        """
        yield from self.tokenize_token_sequence()
        yield from self.tokenize_end_of_line()

    @cached_property
    def tokenize_token_sequence(self):
        return one_or_more(self.tokenize_token_expression)

    def tokenize_token_expression(self):
        """
        Tokenize one token with optional leading and trailing
        separators, yields [Token(TokenKind.INT, "42")] for
        stream containing " 42, ".
        """
        try:
            with rewind_on_error(self.stream):
                tokens = list(
                    bind(
                        self.tokenize_separator,
                        self.tokenize_token,
                        self.tokenize_separator,
                    )()
                )
        except TokenizationError as err:
            if err.offset is not None:
                self.furthest_failure = max(self.furthest_failure, err.offset)
            raise
        yield from tokens

    @cached_property
    def tokenize_token(self):
        return one_of(
            self.tokenize_group[TokenKind.BRACE],
            self.tokenize_group[TokenKind.BRACKET],
            self.tokenize_group[TokenKind.PAREN],
            self.tokenize_group_member,
        )

    @cached_property
    def tokenize_group_member(self):
        """
        Tokenize any token that is not itself a group, composite tokens
        before atomic ones.
        """
        return one_of(
            self.tokenize_kv_pair,
            self.tokenize_program_pid,
            self.tokenize_atomic,
        )

    @cached_property
    def tokenize_atomic(self):
        return one_of(
            self.tokenize_hex,
            self.tokenize_ipv4,
            self.tokenize_mac,
            self.tokenize_float,
            self.tokenize_int,
            self.tokenize_quoted_literal,
            self.tokenize_literal,
        )

    @cached_property
    def tokenize_separator(self):
        """
        Tokenize zero or more separators. Separators are
        discarded, so no tokens are yielded.
        """
        return repeated(one_of(self.tokenize_space, self.tokenize_punctuation))

    def tokenize_space(self):
        match_while(self.stream, str.isspace)
        return iter([])

    def tokenize_punctuation(self):
        match_one_of(self.stream, SEPARATOR_PUNCTUATION)
        return iter([])

    @cached_property
    def tokenize_group(self):
        return {kind: self.group_tokenizer(kind) for kind in TokenKind.groups()}

    def group_tokenizer(self, kind):
        """
        Combinator for tokenizing a group of tokens between the delimiters of
        the given kind, ie. group_tokenizer(TokenKind.BRACE) yields
        Token(TokenKind.BRACE, (Token(TokenKind.INT, "42"),)) for
        stream containing "{ 42 }".

        :param kind: One of TokenKind.groups().
        """
        opening = TokenKind.groups()[kind][0]

        def tokenizer():
            with rewind_on_error(self.stream) as start:
                match_word(self.stream, opening)
                group = self.close_open_groups([(kind, start, [])])
            yield group

        return tokenizer

    def close_open_groups(self, open_groups):
        """
        Tokenize the contents of the open groups until all of them are
        closed. An opening delimiter pushes a new group onto open_groups,
        and the token of a closed group becomes a child of the group that
        encloses it. If the innermost group can not be closed, none of the
        groups enclosing it can be either, so the failure is raised as is.

        :param open_groups: List of (kind, start, children) for each group
            whose opening delimiter has been matched, innermost last.
        :returns: The token of the outermost group.
        """
        while True:
            list(self.tokenize_separator())
            start = self.stream.tell()
            opening = match_optional(self.stream, match_one_of, GROUP_OPENINGS)
            if opening:
                open_groups.append((GROUP_OPENINGS[opening], start, []))
                continue
            try:
                token = next(self.tokenize_group_member())
            except TokenizationError as err:
                token = self.close_group(*open_groups.pop(), err)
                if not open_groups:
                    return token
            open_groups[-1][2].append(token)

    def close_group(self, kind, start, children, failure):
        """
        Match the closing delimiter of a group once no more tokens
        can be tokenized inside of it.

        :param failure: The TokenizationError that ended the group contents.
        :returns: The token for the group.
        """
        closing = TokenKind.groups()[kind][1]
        if not children:
            raise TokenizationError(
                f"Expected tokens in group at {start}", offset=failure.offset
            ) from failure
        try:
            match_word(self.stream, closing)
        except TokenizationError as err:
            raise TokenizationError(
                f"Expected {closing!r} closing group at {start}",
                offset=furthest_offset([failure, err]),
            ) from err
        return self.make_token(kind, start, tuple(children))

    def tokenize_kv_pair(self):
        """
        Tokenize a key-value pair, yields
        Token(TokenKind.KV_PAIR, (Token(TokenKind.LITERAL, "dev"),
        Token(TokenKind.LITERAL, "fd:00")))
        for stream containing "dev=fd:00".
        """
        with rewind_on_error(self.stream) as start:
            match_while(self.stream, KEY_CHARACTERS)
            key = self.make_token(TokenKind.LITERAL, start)
            match_word(self.stream, "=")
            value = next(self.tokenize_kv_value())
        yield self.make_token(TokenKind.KV_PAIR, start, (key, value))

    @cached_property
    def tokenize_kv_value(self):
        return one_of(
            self.tokenize_audit,
            self.tokenize_quoted_literal,
            self.value_tokenizer(lambda c: c not in "}])" and not c.isspace()),
            self.value_tokenizer(lambda c: not c.isspace()),
        )

    def value_tokenizer(self, accept):
        """
        Combinator for tokenizing the greedy value of a key-value
        pair as a TokenKind.LITERAL.

        :param accept: Predicate for characters allowed in the value.
        """

        def tokenizer():
            start = self.stream.tell()
            match_while(self.stream, accept)
            yield self.make_token(TokenKind.LITERAL, start)

        return tokenizer

    def tokenize_audit(self):
        """
        Tokenize an audit record marker, yields
        Token(TokenKind.AUDIT, ("1364481363.243", "24287")) for stream
        containing "audit(1364481363.243:24287)".
        """
        with rewind_on_error(self.stream) as start:
            match_word(self.stream, "audit(")
            timestamp = next(self.tokenize_float())
            match_word(self.stream, ":")
            audit_id = next(self.tokenize_int())
            match_word(self.stream, ")")
        yield self.make_token(
            TokenKind.AUDIT, start, (timestamp.value, audit_id.value)
        )

    def tokenize_program_pid(self):
        """
        Tokenize a program name followed by its pid in brackets, yields
        Token(TokenKind.PROGRAM_PID, ("bluetoothd", "723")) for stream
        containing "bluetoothd[723]".
        """
        with rewind_on_error(self.stream) as start:
            name = match_while(self.stream, KEY_CHARACTERS)
            match_word(self.stream, "[")
            pid = match_while(self.stream, DIGITS)
            match_word(self.stream, "]")
        yield self.make_token(TokenKind.PROGRAM_PID, start, (name, pid))

    def tokenize_hex(self):
        with rewind_on_error(self.stream) as start:
            match_word(self.stream, "0")
            match_one_of(self.stream, "xX")
            match_while(self.stream, HEX_DIGITS)
        yield self.make_token(TokenKind.HEX_STRING, start)

    def tokenize_ipv4(self):
        with rewind_on_error(self.stream) as start:
            match_first(self.stream, OCTET)
            for _ in range(3):
                match_word(self.stream, ".")
                match_first(self.stream, OCTET)
        yield self.make_token(TokenKind.IPV4, start)

    def tokenize_mac(self):
        """
        Tokenize a mac address either in colon notation "56:84:7a:fe:97:99"
        or in cisco notation "0011.434A.B862".
        """
        start = self.stream.tell()
        match_first(self.stream, [MAC_COLON, MAC_CISCO])
        yield self.make_token(TokenKind.MAC, start)

    def tokenize_float(self):
        """
        Tokenize a floating point number, ie. "3.14", "-.5", "1e10" or
        "3.14e-2". Integers without fraction or exponent are not matched.
        """
        with rewind_on_error(self.stream) as start:
            match_optional(self.stream, match_one_of, "+-")
            integer_part = match_while(self.stream, DIGITS, min_count=0)
            if match_optional(self.stream, match_word, "."):
                match_while(self.stream, DIGITS)
                match_optional(self.stream, self.match_exponent)
            elif integer_part:
                self.match_exponent(self.stream)
            else:
                raise TokenizationError(
                    f"Expected float at {start}", offset=self.stream.tell()
                )
        yield self.make_token(TokenKind.FLOAT, start)

    @staticmethod
    def match_exponent(stream):
        with rewind_on_error(stream):
            return (
                match_one_of(stream, "eE")
                + match_optional(stream, match_one_of, "+-")
                + match_while(stream, DIGITS)
            )

    def tokenize_int(self):
        start = self.stream.tell()
        match_while(self.stream, DIGITS)
        yield self.make_token(TokenKind.INT, start)

    def tokenize_quoted_literal(self):
        """
        Tokenize a quoted string literal, yields
        Token(TokenKind.QUOTED_LITERAL, '"/bin/cat"') for stream
        containing '"/bin/cat"'. The quotes are kept in the value
        and no escape sequences are processed.
        """
        with rewind_on_error(self.stream) as start:
            quote = match_one_of(self.stream, "\"'")
            match_while(self.stream, lambda c: c != quote, min_count=0)
            if self.stream.read(1) != quote:
                raise TokenizationError(
                    "Reached end of line while reading quoted literal",
                    offset=self.stream.tell(),
                )
        yield self.make_token(TokenKind.QUOTED_LITERAL, start)

    def tokenize_literal(self):
        start = self.stream.tell()
        match_while(self.stream, is_literal_character)
        yield self.make_token(TokenKind.LITERAL, start)

    def tokenize_end_of_line(self):
        start = self.stream.tell()
        read_char = self.stream.read(1)
        if read_char:
            self.stream.seek(start)
            raise TokenizationError(
                f"Expected end of line at {start} got {read_char!r}",
                offset=max(start, self.furthest_failure),
            )
        return iter([])
