"""Normalisation pass merging adjacent tokens of the same type."""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, override

from ..config import LexerConfig, TokenizeOptions
from ..token import Token
from ..types import Analyser, OriginalLength

from .base import Lexer, tokenize_with_original_length

if TYPE_CHECKING:
    from ..registry import LexerRegistry


def coalesce_tokens(tokens: Iterable[Token]) -> list[Token]:
    """Merge runs of same-type tokens into one token and drop empty tokens."""
    out: list[Token] = []
    for tok in tokens:
        if not tok.value:
            continue
        if out and out[-1].type is tok.type:
            out[-1] = out[-1].clone(out[-1].value + tok.value)
        else:
            out.append(tok)
    return out


def coalesce_tokens_with_lengths(
    tokens: Iterable[Token], lengths: Iterable[OriginalLength]
) -> tuple[list[Token], list[OriginalLength]]:
    """
    Coalesce ``tokens`` like ``coalesce_tokens`` and sum their original lengths.

    The original length of a dropped empty token is carried into the next
    kept token.
    """
    out: list[Token] = []
    out_lengths: list[OriginalLength] = []
    carry = 0
    for tok, length in zip(tokens, lengths, strict=True):
        if not tok.value:
            carry += length
            continue
        if out and out[-1].type is tok.type:
            out[-1] = out[-1].clone(out[-1].value + tok.value)
            out_lengths[-1] += length + carry
        else:
            out.append(tok)
            out_lengths.append(length + carry)
        carry = 0
    # trailing empty tokens still consumed original text
    if carry and out_lengths:
        out_lengths[-1] += carry
    return out, out_lengths


class CoalescingLexer(Lexer):
    """Lexer wrapper whose output has adjacent same-type tokens merged."""

    def __init__(self, lexer: Lexer) -> None:
        super().__init__(lexer.config)
        self.lexer = lexer

    @property
    @override
    def config(self) -> LexerConfig:
        return self.lexer.config

    @override
    def tokenize(self, options: TokenizeOptions | None, text: str) -> Iterator[Token]:
        return iter(coalesce_tokens(self.lexer.tokenize(options, text)))

    def tokenize_with_original_length(
        self, options: TokenizeOptions | None, text: str
    ) -> tuple[Iterator[Token], Iterator[OriginalLength]]:
        """
        Coalesce the wrapped lexer's length-preserving output.

        :raises UnsupportedCapabilityError: If the wrapped lexer lacks the capability.
        """
        tokens, lengths = tokenize_with_original_length(self.lexer, options, text)
        tokens, lengths = coalesce_tokens_with_lengths(tokens, lengths)
        return iter(tokens), iter(lengths)

    @override
    def supports_original_length(self) -> bool:
        return self.lexer.supports_original_length()

    @override
    def analyse_text(self, text: str) -> float:
        return self.lexer.analyse_text(text)

    @override
    def set_analyser(self, analyser: Analyser) -> Lexer:
        self.lexer.set_analyser(analyser)
        return self

    @override
    def set_registry(self, registry: "LexerRegistry") -> Lexer:
        self.lexer.set_registry(registry)
        return self

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.lexer!r})"


def coalesce(lexer: Lexer) -> CoalescingLexer:
    """Wrap ``lexer`` so its output is coalesced; already-wrapped lexers pass through."""
    if isinstance(lexer, CoalescingLexer):
        return lexer
    return CoalescingLexer(lexer)
