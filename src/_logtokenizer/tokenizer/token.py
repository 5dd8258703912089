from dataclasses import dataclass, field

from _logtokenizer.tokenizer.token_kind import TokenKind


@dataclass(frozen=True)
class Token:
    """
    A token in a log line.

    The value depends on the kind of token:

    * For atomic kinds (TokenKind.LITERAL, TokenKind.INT, TokenKind.MAC, etc.)
      it is the matched text, ie. "0xff034" for a TokenKind.HEX_STRING.
    * For TokenKind.AUDIT it is the tuple (timestamp, id) of text, and for
      TokenKind.PROGRAM_PID the tuple (name, pid).
    * For TokenKind.KV_PAIR it is the tuple (key, value) of tokens.
    * For group kinds (TokenKind.BRACE, TokenKind.BRACKET, TokenKind.PAREN)
      it is the tuple of child tokens.

    start and end are the offsets of the matched span in the line and are not
    part of token equality.
    """

    kind: TokenKind
    value: object
    start: int = field(default=0, compare=False, repr=False)
    end: int = field(default=0, compare=False, repr=False)

    def get_value(self, line):
        """
        :returns: The exact text that was matched for this token, ie.
            'msg=audit(1364481363.243:24287)' for the TokenKind.KV_PAIR
            token tokenized from that text.
        """
        return line[self.start : self.end]

    @property
    def children(self):
        if self.kind in TokenKind.composite_kinds():
            return self.value
        return ()

    def as_tree(self):
        """
        :returns: The token as nested lists and dictionaries of strings,
            suitable for json.dumps.
        """
        tree = {"kind": self.kind.name}
        pending = [(self, tree)]
        while pending:
            token, subtree = pending.pop()
            if token.kind in TokenKind.composite_kinds():
                subtree["value"] = []
                for child in token.value:
                    child_tree = {"kind": child.kind.name}
                    subtree["value"].append(child_tree)
                    pending.append((child, child_tree))
            elif isinstance(token.value, tuple):
                subtree["value"] = list(token.value)
            else:
                subtree["value"] = token.value
        return tree

    def __str__(self):
        # Nested tokens are rendered from a stack of pending tokens and
        # delimiters, so deeply nested groups do not hit the recursion limit.
        pieces = []
        pending = [self]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                pieces.append(item)
            elif item.kind in TokenKind.composite_kinds():
                opening, closing = "()" if item.kind == TokenKind.KV_PAIR else "[]"
                pending.append(closing)
                for i, child in reversed(list(enumerate(item.value))):
                    pending.append(child)
                    if i > 0:
                        pending.append(", ")
                pending.append(item.kind.name + opening)
            elif isinstance(item.value, tuple):
                values = ", ".join(repr(v) for v in item.value)
                pieces.append(f"{item.kind.name}({values})")
            else:
                pieces.append(f"{item.kind.name}({item.value!r})")
        return "".join(pieces)
