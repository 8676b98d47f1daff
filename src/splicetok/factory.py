"""Factory functions for creating lexers."""

from collections.abc import Callable
from typing import Final

from ._models.base import Lexer
from ._models.delegating import DelegatingLexer
from .config import LexerConfig
from .lexers import MarkupLexer, ProcessingLexer, TemplateLexer, TextLexer
from .registry import LexerRegistry


# Built-in lexers
# ===================================================================================

_BUILTIN_LEXERS: Final[dict[str, Callable[[], Lexer]]] = {
    "text": TextLexer,
    "html": MarkupLexer,
    "template": TemplateLexer,
    "lang": ProcessingLexer,
    # combined lexers take the embedded language's identity
    "html+template": lambda: DelegatingLexer(
        MarkupLexer(),
        TemplateLexer(
            LexerConfig(
                name="html+template",
                aliases=("html+jinja", "html+django"),
                filenames=("*.html.j2", "*.html.jinja", "*.jinja.html"),
                mime_types=("text/html+template",),
                priority=0.6,
            )
        ),
    ),
    "html+lang": lambda: DelegatingLexer(
        MarkupLexer(),
        ProcessingLexer(
            LexerConfig(
                name="html+lang",
                aliases=("lhtml",),
                filenames=("*.lhtml", "*.html.lang"),
                mime_types=("text/html+lang",),
                priority=0.6,
            )
        ),
    ),
}


def list_lexers() -> list[str]:
    """Return names of all built-in lexers."""
    return list(_BUILTIN_LEXERS.keys())


def default_registry() -> LexerRegistry:
    """Return a new registry holding a fresh instance of every built-in lexer."""
    registry = LexerRegistry()
    for build in _BUILTIN_LEXERS.values():
        registry.register(build())
    return registry


# ===================================================================================


# Lexer factory
# ===================================================================================


def get_lexer(name: str) -> Lexer:
    """
    Create a built-in lexer by name or alias.

    :param name: Lexer name or alias (case-insensitive), e.g. "html", "jinja".
    :return: Lexer with a default registry injected.
    :raises LexerNotFoundError: If no built-in lexer has that name.

    .. code-block:: python

        lexer = get_lexer("html+jinja")
        tokens = tokenize(lexer, None, "<p>{{ user.name }}</p>")
    """
    return default_registry().get(name)


def delegate(root: str | Lexer, language: str | Lexer) -> DelegatingLexer:
    """
    Combine a root lexer and an embedded language lexer.

    Either side may be a lexer instance or a built-in lexer name. Named
    lexers are resolved from a fresh default registry, which is then
    injected into both sides.

    :raises LexerNotFoundError: If a name is unknown.

    .. code-block:: python

        lexer = delegate("html", "lang")
        tokens = tokenize(lexer, None, "<p><?lang echo 1; ?></p>")
    """
    registry = default_registry()
    if isinstance(root, str):
        root = registry.get(root)
    if isinstance(language, str):
        language = registry.get(language)
    lexer = DelegatingLexer(root, language)
    lexer.set_registry(registry)
    return lexer


# ===================================================================================
