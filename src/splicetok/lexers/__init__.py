"""Built-in lexers."""

from .markup import MarkupLexer
from .template import ProcessingLexer, TemplateLexer
from .text import TextLexer


__all__ = ["MarkupLexer", "ProcessingLexer", "TemplateLexer", "TextLexer"]
