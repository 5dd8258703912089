from enum import Enum, auto, unique


@unique
class TokenKind(Enum):
    LITERAL = auto()
    QUOTED_LITERAL = auto()
    INT = auto()
    FLOAT = auto()
    HEX_STRING = auto()
    MAC = auto()
    IPV4 = auto()
    AUDIT = auto()
    PROGRAM_PID = auto()
    KV_PAIR = auto()
    BRACE = auto()
    BRACKET = auto()
    PAREN = auto()

    @classmethod
    def groups(cls):
        return {
            cls.BRACE: ("{", "}"),
            cls.BRACKET: ("[", "]"),
            cls.PAREN: ("(", ")"),
        }

    @classmethod
    def composite_kinds(cls):
        """
        Kinds whose value holds child tokens rather than text.
        """
        return (cls.KV_PAIR,) + tuple(cls.groups())
