"""
Base lexer interface shared by every lexer implementation.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Protocol, TYPE_CHECKING, runtime_checkable

from ..config import LexerConfig, TokenizeOptions
from ..errors import UnsupportedCapabilityError
from ..token import Token
from ..types import Analyser, OriginalLength

if TYPE_CHECKING:
    from ..registry import LexerRegistry


log = logging.getLogger(__name__)


class Lexer(ABC):
    """
    Abstract base class for lexers.

    Holds the static config plus the analyser and registry injected by the
    caller. Injection methods return the lexer so calls can be chained.
    """

    def __init__(self, config: LexerConfig) -> None:
        super().__init__()
        self._config = config
        self.analyser: Analyser | None = None
        self.registry: "LexerRegistry | None" = None

    @property
    def config(self) -> LexerConfig:
        """Static descriptor: name, aliases and filename patterns."""
        return self._config

    @abstractmethod
    def tokenize(self, options: TokenizeOptions | None, text: str) -> Iterator[Token]:
        """Tokenize the full ``text``."""
        ...

    def analyse_text(self, text: str) -> float:
        """
        Score how likely ``text`` is written in this lexer's language.

        Returns the injected analyser's score clamped to [0.0, 1.0], or 0.0
        when no analyser is set.
        """
        if self.analyser is None:
            return 0.0
        score = float(self.analyser(text))
        if not 0.0 <= score <= 1.0:
            log.warning(
                f"analyser for {self.config.name} returned {score}, clamping to [0, 1]"
            )
            score = min(max(score, 0.0), 1.0)
        return score

    def set_analyser(self, analyser: Analyser) -> "Lexer":
        """Set the text analyser used by ``analyse_text``."""
        self.analyser = analyser
        return self

    def set_registry(self, registry: "LexerRegistry") -> "Lexer":
        """Set the registry used to resolve lexers by name."""
        self.registry = registry
        return self

    def supports_original_length(self) -> bool:
        """
        Whether tokenizing with original lengths is available.

        Wrapping lexers forward this to the lexer doing the work, so the
        answer holds through any number of wrappers.
        """
        return isinstance(self, SupportsOriginalLength)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config.name!r})"


@runtime_checkable
class SupportsOriginalLength(Protocol):
    """
    Optional capability: tokenize while reporting original lengths.

    Alongside the tokens, yields the number of characters of the caller's
    original text each token (or token group) consumed before any
    length-changing preprocessing such as newline normalisation.
    """

    def tokenize_with_original_length(
        self, options: TokenizeOptions | None, text: str
    ) -> tuple[Iterator[Token], Iterator[OriginalLength]]: ...


def tokenize(lexer: Lexer, options: TokenizeOptions | None, text: str) -> list[Token]:
    """Tokenize ``text`` with ``lexer`` and materialize the result."""
    return list(lexer.tokenize(options, text))


def tokenize_with_original_length(
    lexer: Lexer, options: TokenizeOptions | None, text: str
) -> tuple[list[Token], list[OriginalLength]]:
    """
    Tokenize ``text`` and materialize tokens with their original lengths.

    :raises UnsupportedCapabilityError: If ``lexer`` cannot report original
        lengths.
    """
    if not lexer.supports_original_length():
        raise UnsupportedCapabilityError(
            "lexer does not support tokenizing with original lengths",
            lexer_name=lexer.config.name,
            capability="tokenize_with_original_length",
        )
    tokens, lengths = lexer.tokenize_with_original_length(options, text)
    return list(tokens), list(lengths)
