"""Rule-table lexer driven by compiled regex patterns."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Final, override

import regex as re

from .._newlines import ensure_lf, normalise_newlines
from ..config import LexerConfig, TokenizeOptions, resolve_options
from ..errors import PatternError, RegistryError, TokenizationError
from ..token import Token, TokenType
from ..types import OriginalLength
from .base import Lexer


log = logging.getLogger(__name__)

PUSH: Final[str] = "#push"
POP: Final[str] = "#pop"


@dataclass(frozen=True)
class Rule:
    """
    One lexing rule: a pattern and what to do when it matches.

    Exactly one of ``token_type`` and ``using`` must be set. ``using`` names a
    lexer in the injected registry that re-lexes the matched text.
    ``new_state`` is a state to push, ``PUSH`` to re-push the current state or
    ``POP`` to leave it.
    """

    pattern: str
    token_type: TokenType | None = None
    new_state: str | None = None
    using: str | None = None


type RuleTable = dict[str, list[Rule]]


class RegexLexer(Lexer):
    """Lexer that walks a state stack of regex rules over the input."""

    def __init__(self, config: LexerConfig, rules: RuleTable) -> None:
        """Compile ``rules`` with flags taken from ``config``."""
        super().__init__(config)
        if "root" not in rules:
            raise PatternError(f"{config.name}: rule table must define a root state")

        flags = re.MULTILINE
        if config.case_insensitive:
            flags |= re.IGNORECASE
        if config.dot_all:
            flags |= re.DOTALL

        self.rules = rules
        self._compiled: dict[str, list[tuple[re.Pattern[str], Rule]]] = {}
        for state, state_rules in rules.items():
            compiled = []
            for rule in state_rules:
                _validate_rule(rule, rules, state)
                compiled.append((_compile_pattern(rule.pattern, flags), rule))
            self._compiled[state] = compiled

        log.debug(
            f"compiled {sum(len(r) for r in rules.values())} rules "
            f"in {len(rules)} states for {config.name}"
        )

    @override
    def tokenize(self, options: TokenizeOptions | None, text: str) -> Iterator[Token]:
        """
        Tokenize ``text`` starting in ``options.state``.

        Unmatched characters become single-character ``ERROR`` tokens.

        :raises TokenizationError: If the initial state is unknown.
        :raises RegistryError: If a ``using`` rule fires without a registry.
        """
        options = resolve_options(options)
        if options.ensure_lf:
            text = ensure_lf(text)
        return iter(self._lex(options, text))

    def tokenize_with_original_length(
        self, options: TokenizeOptions | None, text: str
    ) -> tuple[Iterator[Token], Iterator[OriginalLength]]:
        """Tokenize ``text`` and report each token's length in the original input."""
        options = resolve_options(options)
        widths: list[int] | None = None
        if options.ensure_lf:
            text, widths = normalise_newlines(text)

        tokens = self._lex(options, text)

        lengths: list[OriginalLength] = []
        pos = 0
        for tok in tokens:
            end = pos + len(tok.value)
            lengths.append(end - pos if widths is None else sum(widths[pos:end]))
            pos = end
        return iter(tokens), iter(lengths)

    def _lex(self, options: TokenizeOptions, text: str) -> list[Token]:
        if options.state not in self._compiled:
            raise TokenizationError(
                f"{self.config.name}: unknown initial state",
                state=options.state,
                input_text=text,
            )

        stack = [options.state]
        out: list[Token] = []
        pos = 0
        # states already on top of the stack at pos
        seen = {stack[-1]}
        warned_empty = False

        while pos < len(text):
            for pattern, rule in self._compiled[stack[-1]]:
                m = pattern.match(text, pos)
                if m is None:
                    continue
                value = m.group(0)
                if value:
                    out.extend(self._emit(rule, value, options))
                    _transition(stack, rule.new_state)
                    pos = m.end()
                    seen = {stack[-1]}
                    break

                # an empty match must reach a state not yet tried at pos
                after = stack.copy()
                _transition(after, rule.new_state)
                if after[-1] in seen:
                    if not warned_empty:
                        log.warning(
                            f"{self.config.name}: rule {rule.pattern!r} matched "
                            f"the empty string in state {stack[-1]!r} without "
                            "reaching a new state, skipping"
                        )
                        warned_empty = True
                    continue
                stack[:] = after
                seen.add(stack[-1])
                break
            else:
                ch = text[pos]
                out.append(Token(TokenType.ERROR, ch))
                # recover at line boundaries
                if ch == "\n":
                    del stack[1:]
                pos += 1
                seen = {stack[-1]}

        return out

    def _emit(self, rule: Rule, value: str, options: TokenizeOptions) -> list[Token]:
        """Return the tokens produced by ``rule`` matching ``value``."""
        if rule.using is None:
            return [Token(rule.token_type, value)]

        if self.registry is None:
            raise RegistryError(
                f"{self.config.name}: rule {rule.pattern!r} delegates to "
                f"{rule.using!r} but no registry was set"
            )
        sub_lexer = self.registry.get(rule.using)
        sub_options = replace(options, state="root", ensure_lf=False)
        return list(sub_lexer.tokenize(sub_options, value))


def _transition(stack: list[str], new_state: str | None) -> None:
    """Apply a rule's state change to ``stack``."""
    if new_state is None:
        return
    if new_state == POP:
        # the initial state is never popped
        if len(stack) > 1:
            stack.pop()
    elif new_state == PUSH:
        stack.append(stack[-1])
    else:
        stack.append(new_state)


def _validate_rule(rule: Rule, rules: RuleTable, state: str) -> None:
    """Check a rule is internally consistent with its table."""
    if (rule.token_type is None) == (rule.using is None):
        raise PatternError(
            f"rule in state {state!r} needs exactly one of token_type or using",
            pattern=rule.pattern,
        )
    if rule.new_state not in (None, PUSH, POP) and rule.new_state not in rules:
        raise PatternError(
            f"rule in state {state!r} targets unknown state {rule.new_state!r}",
            pattern=rule.pattern,
        )


def _compile_pattern(pattern: str, flags: int = 0) -> re.Pattern[str]:
    """
    Compile and validate a regex pattern.

    :param pattern: Regex pattern string to compile.
    :param flags: Regex flags.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e) from e
