"""Token types and the token value object shared by every lexer."""

from dataclasses import dataclass, replace
from enum import Enum

from ._sanitise import render_value
from .types import TokenValue


class TokenType(str, Enum):
    """
    Classification tags for tokens.

    ``OTHER`` is reserved for text a lexer does not recognise and defers to
    another lexer. ``EOF`` only ever tags the end-of-stream sentinel.
    """

    TEXT = "Text"
    WHITESPACE = "Text.Whitespace"
    ERROR = "Error"
    OTHER = "Other"

    KEYWORD = "Keyword"
    NAME = "Name"
    NAME_TAG = "Name.Tag"
    NAME_ATTRIBUTE = "Name.Attribute"
    NAME_ENTITY = "Name.Entity"
    NAME_VARIABLE = "Name.Variable"
    STRING = "Literal.String"
    NUMBER = "Literal.Number"
    OPERATOR = "Operator"
    PUNCTUATION = "Punctuation"
    COMMENT = "Comment"
    COMMENT_PREPROC = "Comment.Preproc"

    EOF = "EOF"

    @classmethod
    def get(cls, name: str) -> "TokenType":
        """Get token type by member name or dotted tag (case-insensitive)."""
        try:
            return cls[name.upper().replace(".", "_")]
        except KeyError:
            for member in cls:
                if member.value.lower() == name.lower():
                    return member
            raise ValueError(
                f"Unknown token type: {name!r}. "
                f"Valid types: {', '.join(t.name for t in cls)}"
            )


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token: its type and the exact text it covers."""

    type: TokenType
    value: TokenValue

    def clone(self, value: TokenValue | None = None) -> "Token":
        """Return an independent copy, optionally with a replacement value."""
        if value is None:
            return replace(self)
        return replace(self, value=value)

    def __str__(self) -> str:
        return f"{self.type.name}:\"{render_value(self.value, limit=None)}\""


# end-of-stream sentinel; never emitted by a lexer
EOF = Token(TokenType.EOF, "")


def stringify(tokens: list[Token]) -> str:
    """Concatenate token values back into text."""
    return "".join(tok.value for tok in tokens)


__all__ = ["TokenType", "Token", "EOF", "stringify"]
