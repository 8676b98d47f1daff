"""Custom exception hierarchy for splicetok lexing errors."""

import regex as re


class SpliceTokError(Exception):
    """Base exception for all splicetok errors."""


class TokenizationError(SpliceTokError):
    """Raised when a lexer fails to tokenize its input."""

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        state: str | None = None,
        input_text: str | None = None,
    ) -> None:
        extra = " "
        if position is not None:
            extra += f"(position: {position}) "
        if state:
            extra += f"(state: {state}) "
        super().__init__(message + extra)
        self.position = position
        self.state = state
        self.input_text = input_text


class UnsupportedCapabilityError(SpliceTokError):
    """Raised when a lexer is asked for a capability it does not implement."""

    def __init__(
        self,
        message: str,
        *,
        lexer_name: str | None = None,
        capability: str | None = None,
    ) -> None:
        extra = " "
        if lexer_name:
            extra += f"(lexer: {lexer_name}) "
        if capability:
            extra += f"(capability: {capability}) "
        super().__init__(message + extra)
        self.lexer_name = lexer_name
        self.capability = capability


class PatternError(SpliceTokError):
    """Raised when compiling and/or validating lexer rule patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err


class LexerNotFoundError(SpliceTokError):
    """Raised when a registry lookup fails."""

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if name:
            extra += f"(available: {available}) (got {name}) "
        super().__init__(message + extra)
        self.name = name
        self.available = available


class RegistryError(SpliceTokError):
    """Raised when a lexer needs a registry that was never injected."""
