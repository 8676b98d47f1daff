"""
Lexer that embeds one language inside another.

The language lexer scans the whole text and marks everything it does not
recognise as ``OTHER``. The ``OTHER`` text is concatenated and lexed by the
root lexer, then the language tokens are spliced back into the root output
at their original positions.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, override

from .._decorators import measure_time
from .._sanitise import render_value
from ..config import LexerConfig, TokenizeOptions, resolve_options
from ..errors import TokenizationError, UnsupportedCapabilityError
from ..token import EOF, Token, TokenType
from ..types import Analyser, OriginalLength
from .base import (
    Lexer,
    tokenize,
    tokenize_with_original_length,
)
from .coalesce import coalesce

if TYPE_CHECKING:
    from ..registry import LexerRegistry


log = logging.getLogger(__name__)

type _Pass = Callable[
    [Lexer, TokenizeOptions, str], tuple[list[Token], list[OriginalLength]]
]


@dataclass
class Insertion:
    """A run of language tokens covering ``text[start:end]``."""

    start: int
    end: int = 0
    tokens: list[Token] = field(default_factory=list)


class DelegatingLexer(Lexer):
    """
    Combine a root lexer with a language lexer embedded in it.

    Text analysis and the analyser go to the root lexer, the registry goes to
    both, and the reported config is the language lexer's.
    """

    def __init__(self, root: Lexer, language: Lexer) -> None:
        super().__init__(language.config)
        self.root = root
        self.language = language

    @property
    @override
    def config(self) -> LexerConfig:
        return self.language.config

    @override
    def supports_original_length(self) -> bool:
        return self.root.supports_original_length()

    @override
    def analyse_text(self, text: str) -> float:
        return self.root.analyse_text(text)

    @override
    def set_analyser(self, analyser: Analyser) -> Lexer:
        self.root.set_analyser(analyser)
        return self

    @override
    def set_registry(self, registry: "LexerRegistry") -> Lexer:
        self.root.set_registry(registry)
        self.language.set_registry(registry)
        return self

    @override
    def tokenize(self, options: TokenizeOptions | None, text: str) -> Iterator[Token]:
        """Tokenize ``text`` and return the merged token stream."""
        tokens, _ = self._tokenize(options, text, _plain_pass, _plain_pass)
        return iter(tokens)

    def tokenize_with_original_length(
        self, options: TokenizeOptions | None, text: str
    ) -> tuple[Iterator[Token], Iterator[OriginalLength]]:
        """
        Tokenize ``text`` and report original lengths alongside the tokens.

        When the text contains language tokens the lengths describe the
        coalesced language pass: one entry per ``OTHER`` run or language
        token. Otherwise they are the root lexer's own per-token lengths.
        Only the root lexer needs the capability; a language lexer without it
        reports each token's own length.

        :raises UnsupportedCapabilityError: If the root lexer cannot report
            original lengths.
        """
        if not self.root.supports_original_length():
            raise UnsupportedCapabilityError(
                "root lexer does not support tokenizing with original lengths",
                lexer_name=self.root.config.name,
                capability="tokenize_with_original_length",
            )

        language_pass = (
            tokenize_with_original_length
            if self.language.supports_original_length()
            else _value_length_pass
        )
        tokens, lengths = self._tokenize(
            options, text, language_pass, tokenize_with_original_length
        )
        return iter(tokens), iter(lengths)

    @measure_time
    def _tokenize(
        self,
        options: TokenizeOptions | None,
        text: str,
        language_pass: _Pass,
        root_pass: _Pass,
    ) -> tuple[list[Token], list[OriginalLength]]:
        options = resolve_options(options)

        tokens, lengths = language_pass(coalesce(self.language), options, text)
        others, insertions = extract_insertions(tokens)

        if not insertions:
            log.debug(
                f"{self.config.name}: no language tokens, lexing whole text with {self.root!r}"
            )
            return root_pass(self.root, options, text)

        log.debug(
            f"{self.config.name}: {len(insertions)} insertions, "
            f"{len(others)} characters for {self.root!r}"
        )
        root_tokens = tokenize(coalesce(self.root), options, others)
        return interleave(root_tokens, insertions), lengths


def _plain_pass(
    lexer: Lexer, options: TokenizeOptions, text: str
) -> tuple[list[Token], list[OriginalLength]]:
    """Tokenize without tracking original lengths."""
    return tokenize(lexer, options, text), []


def _value_length_pass(
    lexer: Lexer, options: TokenizeOptions, text: str
) -> tuple[list[Token], list[OriginalLength]]:
    """Tokenize and report each token's own length as its original length."""
    tokens = tokenize(lexer, options, text)
    return tokens, [len(tok.value) for tok in tokens]


def extract_insertions(tokens: Iterable[Token]) -> tuple[str, list[Insertion]]:
    """
    Split language-pass tokens into ``OTHER`` text and language insertions.

    Returns the concatenated ``OTHER`` text and the insertions in text order.
    An empty insertion list means the language lexer recognised nothing.
    """
    others: list[str] = []
    insertions: list[Insertion] = []
    insert: Insertion | None = None
    offset = 0
    last = EOF

    for tok in tokens:
        if tok.type is TokenType.OTHER:
            # a language run just ended
            if last is not EOF and insert is not None and last.type is not TokenType.OTHER:
                insert.end = offset
            others.append(tok.value)
        else:
            if last is EOF or last.type is TokenType.OTHER:
                insert = Insertion(start=offset)
                insertions.append(insert)
            insert.tokens.append(tok)
        last = tok
        offset += len(tok.value)

    # a language run reaching the end of the text is still open
    if insert is not None and last.type is not TokenType.OTHER:
        insert.end = offset

    return "".join(others), insertions


def interleave(root_tokens: Iterable[Token], insertions: Iterable[Insertion]) -> list[Token]:
    """
    Splice insertions into root tokens lexed from the ``OTHER`` text.

    The ``OTHER`` text is the original text with every insertion removed, so
    counting root token lengths plus insertion spans tracks offsets in the
    original text. Root tokens straddling an insertion are split around it.
    """
    out: list[Token] = []
    offset = 0
    pending_tokens = iter(root_tokens)
    pending_insertions = iter(insertions)

    tok = next(pending_tokens, EOF)
    ins = next(pending_insertions, None)
    while tok is not EOF or ins is not None:
        if tok is EOF or (ins is not None and ins.start < offset + len(tok.value)):
            left, tok = split_token(tok, ins.start - offset)
            if left is not EOF:
                out.append(left)
                offset += len(left.value)
            out.extend(ins.tokens)
            offset += ins.end - ins.start
            if tok is EOF:
                tok = next(pending_tokens, EOF)
            ins = next(pending_insertions, None)
        else:
            out.append(tok)
            offset += len(tok.value)
            tok = next(pending_tokens, EOF)

    return out


def split_token(tok: Token, offset: int) -> tuple[Token, Token]:
    """
    Split ``tok`` at ``offset`` into left and right parts.

    An empty part is returned as ``EOF``.

    :raises TokenizationError: If ``offset`` falls outside the token.
    """
    if tok is EOF:
        return EOF, EOF
    if not 0 <= offset <= len(tok.value):
        raise TokenizationError(
            f"cannot split {render_value(tok.value)!r} at {offset}: "
            "root tokens do not cover the OTHER text",
            position=offset,
        )
    if offset == 0:
        return EOF, tok
    if offset == len(tok.value):
        return tok, EOF
    return tok.clone(tok.value[:offset]), tok.clone(tok.value[offset:])
