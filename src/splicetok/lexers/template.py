"""
Embedded-language lexers.

Both lexers here only recognise their own constructs and mark every other
character as ``OTHER``, so they are meant to be wrapped in a
``DelegatingLexer`` together with a root lexer for the host text.
"""

import regex as re

from ..config import LexerConfig
from .._models.regex import POP, RegexLexer, Rule, RuleTable
from ..token import TokenType

TEMPLATE_CONFIG = LexerConfig(
    name="template",
    aliases=("jinja", "django"),
    filenames=("*.j2", "*.jinja", "*.jinja2"),
    mime_types=("text/x-template",),
    priority=0.1,
)

PROCESSING_CONFIG = LexerConfig(
    name="lang",
    aliases=("processing",),
    filenames=("*.lang",),
    mime_types=("text/x-lang",),
    priority=0.1,
)

_STRINGS = r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'"

_TEMPLATE_CODE = [
    Rule(r"\s+", TokenType.WHITESPACE),
    Rule(_STRINGS, TokenType.STRING),
    Rule(r"\d+(?:\.\d+)?", TokenType.NUMBER),
    Rule(r"[A-Za-z_]\w*", TokenType.NAME_VARIABLE),
    Rule(r"==|!=|<=|>=|[-+*/%<>=|~]", TokenType.OPERATOR),
    Rule(r"[.,:()\[\]]", TokenType.PUNCTUATION),
]

TEMPLATE_RULES: RuleTable = {
    "root": [
        Rule(r"\{#[\s\S]*?#\}", TokenType.COMMENT),
        Rule(r"\{\{-?", TokenType.COMMENT_PREPROC, new_state="expression"),
        Rule(r"\{%-?", TokenType.COMMENT_PREPROC, new_state="statement"),
        Rule(r"[^{]+", TokenType.OTHER),
        Rule(r"\{", TokenType.OTHER),
    ],
    "expression": [
        Rule(r"-?\}\}", TokenType.COMMENT_PREPROC, new_state=POP),
        *_TEMPLATE_CODE,
    ],
    "statement": [
        Rule(r"-?%\}", TokenType.COMMENT_PREPROC, new_state=POP),
        Rule(
            r"\b(?:if|elif|else|endif|for|in|endfor|block|endblock|extends|"
            r"include|set|macro|endmacro|not|and|or|is)\b",
            TokenType.KEYWORD,
        ),
        *_TEMPLATE_CODE,
    ],
}

PROCESSING_RULES: RuleTable = {
    "root": [
        Rule(r"<\?lang\b", TokenType.COMMENT_PREPROC, new_state="code"),
        Rule(r"[^<]+", TokenType.OTHER),
        Rule(r"<", TokenType.OTHER),
    ],
    "code": [
        Rule(r"\?>", TokenType.COMMENT_PREPROC, new_state=POP),
        Rule(r"\s+", TokenType.WHITESPACE),
        Rule(r"(?://|#)(?:[^\n?]|\?(?!>))*", TokenType.COMMENT),
        Rule(
            r"\b(?:echo|if|else|elseif|endif|while|for|foreach|function|"
            r"return|true|false|null)\b",
            TokenType.KEYWORD,
        ),
        Rule(r"\$\w+", TokenType.NAME_VARIABLE),
        Rule(r"\d+(?:\.\d+)?", TokenType.NUMBER),
        Rule(_STRINGS, TokenType.STRING),
        Rule(r"\w+", TokenType.NAME),
        Rule(r"[-+*/%=<>!.&|?:]+", TokenType.OPERATOR),
        Rule(r"[;,(){}\[\]]", TokenType.PUNCTUATION),
    ],
}

_TEMPLATE_TAG = re.compile(r"\{%-?\s*(?:if|for|block|extends|set)\b")
_PROCESSING_TAG = re.compile(r"<\?lang\b")


def analyse_template(text: str) -> float:
    """Score text by the presence of template statements or expressions."""
    if _TEMPLATE_TAG.search(text):
        return 0.4
    if "{{" in text and "}}" in text:
        return 0.1
    return 0.0


def analyse_processing(text: str) -> float:
    """Score text by the presence of a ``<?lang`` block."""
    return 0.9 if _PROCESSING_TAG.search(text) else 0.0


class TemplateLexer(RegexLexer):
    """Lexer for ``{{ expression }}``, ``{% statement %}`` and ``{# comment #}``."""

    def __init__(self, config: LexerConfig = TEMPLATE_CONFIG) -> None:
        super().__init__(config, TEMPLATE_RULES)
        self.set_analyser(analyse_template)


class ProcessingLexer(RegexLexer):
    """Lexer for ``<?lang ... ?>`` processing blocks."""

    def __init__(self, config: LexerConfig = PROCESSING_CONFIG) -> None:
        super().__init__(config, PROCESSING_RULES)
        self.set_analyser(analyse_processing)
