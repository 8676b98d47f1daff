"""Plain text lexer: the whole input is one token."""

from ..config import LexerConfig
from .._models.regex import RegexLexer, Rule
from ..token import TokenType

CONFIG = LexerConfig(
    name="text",
    aliases=("plain", "txt"),
    filenames=("*.txt",),
    mime_types=("text/plain",),
    priority=0.01,
)


class TextLexer(RegexLexer):
    """Lexer emitting the input as a single ``TEXT`` token."""

    def __init__(self, config: LexerConfig = CONFIG) -> None:
        super().__init__(config, {"root": [Rule(r"[\s\S]+", TokenType.TEXT)]})
