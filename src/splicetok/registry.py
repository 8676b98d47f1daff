"""Name, filename and content based lookup of lexers."""

import fnmatch
import logging
from pathlib import PurePath
from typing import TYPE_CHECKING

from .errors import LexerNotFoundError

if TYPE_CHECKING:
    from ._models.base import Lexer

log = logging.getLogger(__name__)


class LexerRegistry:
    """
    A collection of lexers addressable by name, alias, filename or content.

    Registering a lexer injects this registry into it, so rules that delegate
    to other lexers by name resolve against the same collection.
    """

    def __init__(self) -> None:
        self._lexers: list["Lexer"] = []
        self._by_name: dict[str, "Lexer"] = {}

    def register(self, lexer: "Lexer") -> "Lexer":
        """Add ``lexer``, replacing any lexer registered under the same name."""
        name = lexer.config.name.lower()
        replaced = [lex for lex in self._lexers if lex.config.name.lower() == name]
        if replaced:
            log.warning(f"replacing registered lexer {name!r}")
            self._lexers = [lex for lex in self._lexers if lex not in replaced]
            self._by_name = {
                key: lex for key, lex in self._by_name.items() if lex not in replaced
            }

        self._lexers.append(lexer)
        for key in lexer.config.names():
            self._by_name[key] = lexer
        lexer.set_registry(self)
        log.debug(f"registered lexer {lexer!r}")
        return lexer

    def get(self, name: str) -> "Lexer":
        """
        Look up a lexer by name or alias (case-insensitive).

        :raises LexerNotFoundError: If no lexer has that name.
        """
        try:
            return self._by_name[name.lower()]
        except KeyError:
            raise LexerNotFoundError(
                "unknown lexer name", name=name, available=self.names()
            ) from None

    def match(self, filename: str) -> "Lexer | None":
        """Return the highest-priority lexer whose filename patterns match."""
        basename = PurePath(filename).name
        candidates = [
            lex
            for lex in self._lexers
            if any(fnmatch.fnmatch(basename, pat) for pat in lex.config.filenames)
        ]
        return max(candidates, key=lambda lex: lex.config.priority, default=None)

    def analyse(self, text: str) -> "Lexer | None":
        """Return the lexer scoring ``text`` highest, or ``None`` if none scores."""
        best: "Lexer | None" = None
        best_score = 0.0
        for lexer in self._lexers:
            score = lexer.analyse_text(text)
            if score > best_score:
                best, best_score = lexer, score
        return best

    def names(self) -> list[str]:
        """Return the names of all registered lexers."""
        return sorted(lex.config.name for lex in self._lexers)

    def __len__(self) -> int:
        return len(self._lexers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._by_name
