"""Static lexer descriptors and per-call tokenization options."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LexerConfig:
    """
    User-visible identity of a lexer.

    ``filenames`` holds glob patterns (``*.html``); ``priority`` breaks ties
    when several lexers match the same filename.
    """

    name: str
    aliases: tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()
    mime_types: tuple[str, ...] = ()
    priority: float = 0.0
    # regex compilation flags for rule-table lexers
    case_insensitive: bool = False
    dot_all: bool = False

    def names(self) -> list[str]:
        """Return the lowercased name followed by all aliases."""
        return [self.name.lower(), *(alias.lower() for alias in self.aliases)]


@dataclass(frozen=True)
class TokenizeOptions:
    """Options passed through to every lexer taking part in a tokenize call."""

    # state to start lexing in
    state: str = "root"
    # normalise \r\n and lone \r to \n before lexing
    ensure_lf: bool = False


DEFAULT_OPTIONS = TokenizeOptions()


def resolve_options(options: TokenizeOptions | None) -> TokenizeOptions:
    """Return ``options`` or the defaults when ``None``."""
    return DEFAULT_OPTIONS if options is None else options
