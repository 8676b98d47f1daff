"""splicetok: lexing for languages embedded inside other languages."""

from ._models import (
    CoalescingLexer,
    DelegatingLexer,
    Insertion,
    Lexer,
    POP,
    PUSH,
    RegexLexer,
    Rule,
    SupportsOriginalLength,
    coalesce,
    coalesce_tokens,
    coalesce_tokens_with_lengths,
    extract_insertions,
    interleave,
    split_token,
    tokenize,
    tokenize_with_original_length,
)
from .config import LexerConfig, TokenizeOptions
from .errors import (
    LexerNotFoundError,
    PatternError,
    RegistryError,
    SpliceTokError,
    TokenizationError,
    UnsupportedCapabilityError,
)
from .factory import default_registry, delegate, get_lexer, list_lexers
from .lexers import MarkupLexer, ProcessingLexer, TemplateLexer, TextLexer
from .registry import LexerRegistry
from .token import EOF, Token, TokenType, stringify

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("splicetok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Lexer",
    "SupportsOriginalLength",
    "RegexLexer",
    "Rule",
    "PUSH",
    "POP",
    "CoalescingLexer",
    "DelegatingLexer",
    "Insertion",
    "TextLexer",
    "MarkupLexer",
    "TemplateLexer",
    "ProcessingLexer",
    "LexerRegistry",
    "LexerConfig",
    "TokenizeOptions",
    "Token",
    "TokenType",
    "EOF",
    "SpliceTokError",
    "TokenizationError",
    "UnsupportedCapabilityError",
    "PatternError",
    "LexerNotFoundError",
    "RegistryError",
    "tokenize",
    "tokenize_with_original_length",
    "coalesce",
    "coalesce_tokens",
    "coalesce_tokens_with_lengths",
    "extract_insertions",
    "interleave",
    "split_token",
    "stringify",
    "get_lexer",
    "delegate",
    "default_registry",
    "list_lexers",
]
