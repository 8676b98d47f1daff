"""HTML-style markup lexer."""

import regex as re

from ..config import LexerConfig
from .._models.regex import POP, RegexLexer, Rule, RuleTable
from ..token import TokenType

CONFIG = LexerConfig(
    name="html",
    aliases=("xhtml", "markup"),
    filenames=("*.html", "*.htm", "*.xhtml"),
    mime_types=("text/html", "application/xhtml+xml"),
    priority=0.5,
    case_insensitive=True,
)

RULES: RuleTable = {
    "root": [
        Rule(r"<!--[\s\S]*?-->", TokenType.COMMENT),
        Rule(r"<!\[CDATA\[[\s\S]*?\]\]>", TokenType.COMMENT_PREPROC),
        Rule(r"<![^>]*>", TokenType.COMMENT_PREPROC),
        Rule(r"</?(?=[a-z])", TokenType.PUNCTUATION, new_state="tag"),
        Rule(r"&(?:#[0-9]+|#x[0-9a-f]+|\w+);", TokenType.NAME_ENTITY),
        Rule(r"[^<&]+", TokenType.TEXT),
        Rule(r"[<&]", TokenType.TEXT),
    ],
    "tag": [
        Rule(r"\s+", TokenType.WHITESPACE),
        Rule(r"[\w:.-]+(?=\s*=)", TokenType.NAME_ATTRIBUTE),
        Rule(r"[\w:.-]+", TokenType.NAME_TAG),
        Rule(r"=", TokenType.OPERATOR, new_state="value"),
        Rule(r"/?>", TokenType.PUNCTUATION, new_state=POP),
    ],
    "value": [
        Rule(r"\s+", TokenType.WHITESPACE),
        Rule(r"\"[^\"]*\"|'[^']*'", TokenType.STRING, new_state=POP),
        Rule(r"[^\s\"'>/]+", TokenType.STRING, new_state=POP),
        # missing value: let the tag state close the tag
        Rule(r"(?=/?>)", TokenType.STRING, new_state=POP),
    ],
}

_DOCTYPE = re.compile(r"<!DOCTYPE\s+html", re.IGNORECASE)
_TAG = re.compile(r"</?[a-z][\w-]*(?:\s[^>]*)?>", re.IGNORECASE)


def analyse_markup(text: str) -> float:
    """Score text by the presence of a doctype or tags."""
    if _DOCTYPE.search(text):
        return 0.9
    if _TAG.search(text):
        return 0.5
    return 0.0


class MarkupLexer(RegexLexer):
    """Lexer for HTML-like markup: tags, attributes, comments and entities."""

    def __init__(self, config: LexerConfig = CONFIG) -> None:
        super().__init__(config, RULES)
        self.set_analyser(analyse_markup)
