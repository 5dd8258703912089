import io

import hypothesis.strategies as st
import pytest
from hypothesis import given

from _logtokenizer.tokenizer.errors import TokenizationError
from _logtokenizer.tokenizer.line_tokenizer import LineTokenizer
from _logtokenizer.tokenizer.token_kind import TokenKind

from .generators.log_lines import ipv4_addresses, mac_addresses, separators


@pytest.fixture(params=["", " ", ";", "}"])
def followed_by(request):
    return request.param


@pytest.fixture
def line_tokenizer(followed_by):
    def make_line_tokenizer(contents):
        return LineTokenizer(io.StringIO(contents + followed_by))

    return make_line_tokenizer


def assert_single_token(tokenizer, rule, expected_kind, expected_text):
    token = next(rule())
    assert token.kind == expected_kind
    assert token.get_value(tokenizer.stream.getvalue()) == expected_text
    assert token.end == len(expected_text)
    assert tokenizer.stream.tell() == token.end
    return token


@pytest.mark.parametrize("text", ["0xff034", "0Xff034", "0x0", "0xDEADbeef"])
def test_tokenize_hex(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    token = assert_single_token(
        tokenizer, tokenizer.tokenize_hex, TokenKind.HEX_STRING, text
    )
    assert token.value == text


@pytest.mark.parametrize("text", ["0x", "0y12", "x12", "12"])
def test_tokenize_hex_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_hex())
    assert tokenizer.stream.tell() == 0


@pytest.mark.parametrize(
    "text", ["127.0.0.1", "192.168.0.1", "255.255.255.255", "0.0.0.0", "10.30.0.97"]
)
def test_tokenize_ipv4(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    assert_single_token(tokenizer, tokenizer.tokenize_ipv4, TokenKind.IPV4, text)


@given(ipv4_addresses())
def test_tokenize_any_ipv4(address):
    tokenizer = LineTokenizer(io.StringIO(address))
    assert next(tokenizer.tokenize_ipv4()).value == address


@pytest.mark.parametrize("text", ["1.2.3", "256.1.1.1", "1.2.3.", "a.b.c.d"])
def test_tokenize_ipv4_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_ipv4())
    assert tokenizer.stream.tell() == 0


def test_tokenize_ipv4_does_not_truncate_last_octet():
    tokenizer = LineTokenizer(io.StringIO("1.2.3.250"))
    assert next(tokenizer.tokenize_ipv4()).value == "1.2.3.250"


def test_tokenize_ipv4_stops_at_largest_valid_last_octet():
    tokenizer = LineTokenizer(io.StringIO("1.2.3.256"))
    assert next(tokenizer.tokenize_ipv4()).value == "1.2.3.25"
    assert tokenizer.stream.read() == "6"


@pytest.mark.parametrize(
    "text", ["56:84:7a:fe:97:99", "0011.434A.B862", "64:7c:34:ab:93:88"]
)
def test_tokenize_mac(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    assert_single_token(tokenizer, tokenizer.tokenize_mac, TokenKind.MAC, text)


@given(mac_addresses())
def test_tokenize_any_mac(address):
    tokenizer = LineTokenizer(io.StringIO(address))
    assert next(tokenizer.tokenize_mac()).value == address


@pytest.mark.parametrize(
    "text",
    ["56:84:7a:fe:97", "56:84:7a:fe:97:9", "011.434A.B862", "0011.434A", "00:00"],
)
def test_tokenize_partial_mac_consumes_nothing(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_mac())
    assert tokenizer.stream.tell() == 0


@pytest.mark.parametrize(
    "text", ["3.14", "3.14e0", ".5", "-1.0", "+2.5", "1e10", "1E-3", "0.000000"]
)
def test_tokenize_float(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    assert_single_token(tokenizer, tokenizer.tokenize_float, TokenKind.FLOAT, text)


@pytest.mark.parametrize("text", ["42", "-", ".", "3.", "e5", "-e5"])
def test_tokenize_float_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_float())
    assert tokenizer.stream.tell() == 0


def test_tokenize_float_without_exponent_digits():
    tokenizer = LineTokenizer(io.StringIO("1.5e"))
    assert next(tokenizer.tokenize_float()).value == "1.5"
    assert tokenizer.stream.read() == "e"


@pytest.mark.parametrize("text", ["42", "0", "0100600"])
def test_tokenize_int(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    assert_single_token(tokenizer, tokenizer.tokenize_int, TokenKind.INT, text)


@pytest.mark.parametrize("text", ['"/bin/cat"', "'/bin/cat'", '""', '"a b=c"'])
def test_tokenize_quoted_literal(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    assert_single_token(
        tokenizer, tokenizer.tokenize_quoted_literal, TokenKind.QUOTED_LITERAL, text
    )


@pytest.mark.parametrize("text", ['"unterminated', "'mixed\"", "noquote"])
def test_tokenize_quoted_literal_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_quoted_literal())
    assert tokenizer.stream.tell() == 0


@pytest.mark.parametrize("text", ["foo", "C-E", "/bin/cat", "a.b", '"half'])
def test_tokenize_literal(line_tokenizer, text):
    tokenizer = line_tokenizer(text)
    assert_single_token(tokenizer, tokenizer.tokenize_literal, TokenKind.LITERAL, text)


@pytest.mark.parametrize("text", ["}", "=", " ", ":", "[", ""])
def test_tokenize_literal_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_literal())


@given(st.lists(separators, min_size=1), st.sampled_from(["a", "1", "{"]))
def test_tokenize_separator(separator_list, character):
    stream = io.StringIO("".join(separator_list) + character)

    tokenizer = LineTokenizer(stream)

    assert list(tokenizer.tokenize_separator()) == []
    assert stream.read(1) == character


def test_tokenize_separator_consumes_nothing():
    stream = io.StringIO("a")
    assert list(LineTokenizer(stream).tokenize_separator()) == []
    assert stream.tell() == 0


def test_tokenize_audit():
    tokenizer = LineTokenizer(io.StringIO("audit(1364481363.243:24287):"))
    token = next(tokenizer.tokenize_audit())
    assert token.kind == TokenKind.AUDIT
    assert token.value == ("1364481363.243", "24287")
    assert tokenizer.stream.read() == ":"


@pytest.mark.parametrize(
    "text", ["audit(1364481363:24287)", "audit(1.5:x)", "audit(1.5:2", "audi(1.5:2)"]
)
def test_tokenize_audit_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_audit())
    assert tokenizer.stream.tell() == 0


def test_tokenize_program_pid(line_tokenizer):
    tokenizer = line_tokenizer("wpa_supplicant[1212]")
    token = next(tokenizer.tokenize_program_pid())
    assert token.kind == TokenKind.PROGRAM_PID
    assert token.value == ("wpa_supplicant", "1212")


@pytest.mark.parametrize("text", ["bluetoothd[x]", "bluetoothd [723]", "[723]"])
def test_tokenize_program_pid_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_program_pid())
    assert tokenizer.stream.tell() == 0


@pytest.mark.parametrize(
    "text, value_kind, value",
    [
        ("dev=fd:00", TokenKind.LITERAL, "fd:00"),
        ("item=0", TokenKind.LITERAL, "0"),
        ('exe="/bin/cat"', TokenKind.QUOTED_LITERAL, '"/bin/cat"'),
        ("msg=audit(1.5:2)", TokenKind.AUDIT, ("1.5", "2")),
        ("a=}}", TokenKind.LITERAL, "}}"),
    ],
)
def test_tokenize_kv_pair(text, value_kind, value):
    tokenizer = LineTokenizer(io.StringIO(text + " rest"))
    token = next(tokenizer.tokenize_kv_pair())
    key_token, value_token = token.value
    assert token.kind == TokenKind.KV_PAIR
    assert key_token.kind == TokenKind.LITERAL
    assert key_token.value == text.split("=")[0]
    assert value_token.kind == value_kind
    assert value_token.value == value
    assert token.get_value(tokenizer.stream.getvalue()) == text


def test_tokenize_kv_value_stops_at_closing_delimiter():
    tokenizer = LineTokenizer(io.StringIO("xid=0x37fe20e3)"))
    token = next(tokenizer.tokenize_kv_pair())
    assert token.value[1].value == "0x37fe20e3"
    assert tokenizer.stream.read() == ")"


@pytest.mark.parametrize("text", ["a=", "a= b", "=b", "a.b=c"])
def test_tokenize_kv_pair_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_kv_pair())
    assert tokenizer.stream.tell() == 0


@pytest.mark.parametrize("kind", list(TokenKind.groups()))
def test_tokenize_group(kind):
    opening, closing = TokenKind.groups()[kind]
    tokenizer = LineTokenizer(io.StringIO(f"{opening} 42 0x12 {closing}"))
    token = next(tokenizer.tokenize_group[kind]())
    assert token.kind == kind
    assert [child.kind for child in token.value] == [
        TokenKind.INT,
        TokenKind.HEX_STRING,
    ]


@pytest.mark.parametrize(
    "text", ["{}", "{ }", "{42", "{42]", "42}", "{[(1)]", "{a [b =] }"]
)
def test_tokenize_group_fails(text):
    tokenizer = LineTokenizer(io.StringIO(text))
    with pytest.raises(TokenizationError):
        next(tokenizer.tokenize_group[TokenKind.BRACE]())
    assert tokenizer.stream.tell() == 0


def test_tokenize_group_nested_deeper_than_recursion_limit():
    depth = 2000
    text = "{" + "[" * depth + "1" + "]" * depth + "}"
    tokenizer = LineTokenizer(io.StringIO(text))

    token = next(tokenizer.tokenize_group[TokenKind.BRACE]())

    assert token.end == len(text)
    (token,) = token.value
    for _ in range(depth):
        assert token.kind == TokenKind.BRACKET
        (token,) = token.value
    assert token.kind == TokenKind.INT


def test_tokenize_end_of_line():
    tokenizer = LineTokenizer(io.StringIO("x"))
    with pytest.raises(TokenizationError, match="Expected end of line at 0"):
        list(tokenizer.tokenize_end_of_line())


def test_iterating_line_tokenizer_tokenizes_line():
    tokens = list(LineTokenizer(io.StringIO("kernel: [    0.000000] Initializing")))
    assert [t.kind for t in tokens] == [
        TokenKind.LITERAL,
        TokenKind.BRACKET,
        TokenKind.LITERAL,
    ]
    assert [t.start for t in tokens] == [0, 8, 23]
