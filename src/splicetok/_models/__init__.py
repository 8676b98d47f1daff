"""Lexer implementations and the delegating merge."""

from .base import Lexer, SupportsOriginalLength, tokenize, tokenize_with_original_length
from .coalesce import CoalescingLexer, coalesce, coalesce_tokens, coalesce_tokens_with_lengths
from .regex import POP, PUSH, RegexLexer, Rule
from .delegating import DelegatingLexer, Insertion, extract_insertions, interleave, split_token


__all__ = [
    "Lexer",
    "SupportsOriginalLength",
    "tokenize",
    "tokenize_with_original_length",
    "CoalescingLexer",
    "coalesce",
    "coalesce_tokens",
    "coalesce_tokens_with_lengths",
    "RegexLexer",
    "Rule",
    "PUSH",
    "POP",
    "DelegatingLexer",
    "Insertion",
    "extract_insertions",
    "interleave",
    "split_token",
]
