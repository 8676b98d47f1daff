"""Unit tests for the delegating lexer: extraction, interleaving and merging."""

import logging
from collections.abc import Iterator

import pytest

import splicetok as stok
from splicetok import Insertion, Token, TokenType
from splicetok.errors import TokenizationError, UnsupportedCapabilityError


T = TokenType


class WordLexer(stok.Lexer):
    """Root lexer without the original-length capability."""

    def __init__(self) -> None:
        super().__init__(stok.LexerConfig(name="words"))

    def tokenize(self, options, text: str) -> Iterator[Token]:
        return iter([Token(T.TEXT, text)] if text else [])


class FailingLexer(stok.Lexer):
    """Lexer that always raises the same error."""

    def __init__(self, error: Exception) -> None:
        super().__init__(stok.LexerConfig(name="failing"))
        self.error = error

    def tokenize(self, options, text: str) -> Iterator[Token]:
        raise self.error


class AtOperatorLexer(stok.Lexer):
    """Language lexer without the original-length capability: ``@@`` is an operator."""

    def __init__(self) -> None:
        super().__init__(stok.LexerConfig(name="at-operator"))

    def tokenize(self, options, text: str) -> Iterator[Token]:
        out = []
        for i, part in enumerate(text.split("@@")):
            if i:
                out.append(Token(T.OPERATOR, "@@"))
            if part:
                out.append(Token(T.OTHER, part))
        return iter(out)


def keyword_block_lexer() -> stok.RegexLexer:
    """Language lexer that tags whole ``<?lang ... ?>`` blocks as keywords."""
    return stok.RegexLexer(
        stok.LexerConfig(name="keyword-block"),
        {
            "root": [
                stok.Rule(r"<\?lang[\s\S]*?\?>", T.KEYWORD),
                stok.Rule(r"[^<]+", T.OTHER),
                stok.Rule(r"<", T.OTHER),
            ]
        },
    )


def pairs(tokens: list[Token]) -> list[tuple[TokenType, str]]:
    return [(tok.type, tok.value) for tok in tokens]


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def html_lang():
    """Return markup with embedded ``<?lang`` blocks."""
    return stok.DelegatingLexer(stok.MarkupLexer(), stok.ProcessingLexer())


@pytest.fixture
def text_keyword():
    """Return plain text with whole ``<?lang`` blocks as single keywords."""
    return stok.DelegatingLexer(stok.TextLexer(), keyword_block_lexer())


# Merged output
# ---------------------------------------------------------------------------


def test_keyword_block_inside_markup():
    """Markup around a keyword block is lexed by the root, the block kept verbatim."""
    lexer = stok.DelegatingLexer(stok.MarkupLexer(), keyword_block_lexer())
    tokens = stok.tokenize(lexer, None, "<p><?lang echo 1; ?></p>")
    assert pairs(tokens) == [
        (T.PUNCTUATION, "<"),
        (T.NAME_TAG, "p"),
        (T.PUNCTUATION, ">"),
        (T.KEYWORD, "<?lang echo 1; ?>"),
        (T.PUNCTUATION, "</"),
        (T.NAME_TAG, "p"),
        (T.PUNCTUATION, ">"),
    ]


def test_processing_block_inside_markup(html_lang):
    """Language tokens are spliced between root tokens in text order."""
    tokens = stok.tokenize(html_lang, None, "<p><?lang echo 1; ?></p>")
    assert pairs(tokens) == [
        (T.PUNCTUATION, "<"),
        (T.NAME_TAG, "p"),
        (T.PUNCTUATION, ">"),
        (T.COMMENT_PREPROC, "<?lang"),
        (T.WHITESPACE, " "),
        (T.KEYWORD, "echo"),
        (T.WHITESPACE, " "),
        (T.NUMBER, "1"),
        (T.PUNCTUATION, ";"),
        (T.WHITESPACE, " "),
        (T.COMMENT_PREPROC, "?>"),
        (T.PUNCTUATION, "</"),
        (T.NAME_TAG, "p"),
        (T.PUNCTUATION, ">"),
    ]


def test_root_token_split_at_insertion(text_keyword):
    """A root token straddling an insertion is split into same-type halves."""
    tokens = stok.tokenize(text_keyword, None, "ab<?lang x ?>cdef")
    assert pairs(tokens) == [
        (T.TEXT, "ab"),
        (T.KEYWORD, "<?lang x ?>"),
        (T.TEXT, "cdef"),
    ]


def test_split_inside_attribute_string():
    """Root string token spanning an insertion is split around it."""
    lexer = stok.delegate("html", "template")
    tokens = stok.tokenize(lexer, None, '<a href="{{ url }}">')
    values = [tok.value for tok in tokens]
    assert values[:5] == ["<", "a", " ", "href", "="]
    assert tokens[5] == Token(T.STRING, '"')
    assert tokens[-2] == Token(T.STRING, '"')
    assert tokens[-1] == Token(T.PUNCTUATION, ">")


def test_multiple_insertions_in_one_root_token(text_keyword):
    """One root token can be split by several insertions."""
    tokens = stok.tokenize(text_keyword, None, "a<?lang 1 ?>b<?lang 2 ?>c")
    assert pairs(tokens) == [
        (T.TEXT, "a"),
        (T.KEYWORD, "<?lang 1 ?>"),
        (T.TEXT, "b"),
        (T.KEYWORD, "<?lang 2 ?>"),
        (T.TEXT, "c"),
    ]


def test_language_at_start_and_end(text_keyword):
    """Insertions at the very start and end of the text are placed correctly."""
    tokens = stok.tokenize(text_keyword, None, "<?lang 1 ?>mid<?lang 2 ?>")
    assert pairs(tokens) == [
        (T.KEYWORD, "<?lang 1 ?>"),
        (T.TEXT, "mid"),
        (T.KEYWORD, "<?lang 2 ?>"),
    ]


def test_entirely_language(text_keyword):
    """Text made only of language tokens needs no root tokens."""
    tokens = stok.tokenize(text_keyword, None, "<?lang 1 ?>")
    assert pairs(tokens) == [(T.KEYWORD, "<?lang 1 ?>")]


def test_empty_input(html_lang):
    """Empty input yields no tokens."""
    assert stok.tokenize(html_lang, None, "") == []


def test_tokenize_returns_iterator(html_lang):
    """The lexer interface yields tokens lazily from an iterator."""
    result = html_lang.tokenize(None, "<p>x</p>")
    assert iter(result) is result


def test_root_other_tokens_are_opaque():
    """``OTHER`` tokens produced by the root lexer are not re-lexed."""
    root = stok.RegexLexer(
        stok.LexerConfig(name="opaque"), {"root": [stok.Rule(r"[\s\S]+", T.OTHER)]}
    )
    lexer = stok.DelegatingLexer(root, keyword_block_lexer())
    tokens = stok.tokenize(lexer, None, "a<?lang 1 ?>b")
    assert pairs(tokens) == [
        (T.OTHER, "a"),
        (T.KEYWORD, "<?lang 1 ?>"),
        (T.OTHER, "b"),
    ]


# Properties
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "language, text",
    [
        ("template", "<ul>{% for x in items %}<li>{{ x.name }}</li>{% endfor %}</ul>"),
        ("template", "{# comment #}<br/>"),
        ("template", "plain { text } with braces"),
        ("template", '<a href="{{ url }}" class=x>{{ label|upper }}</a>\n'),
        ("template", "{{ unterminated <b>x</b>"),
        ("lang", "<p><?lang echo 1; ?></p>"),
        ("lang", "<?lang $x = 'a'; // note ?>"),
        ("lang", "no code here"),
        ("lang", '<b>a</b><?lang if (true) { echo "x"; } ?>\n'),
        ("lang", ""),
    ],
)
def test_merged_stream_properties(language, text):
    """Output reconstructs the input with no OTHER, EOF or empty tokens."""
    lexer = stok.delegate("html", language)
    tokens = stok.tokenize(lexer, None, text)

    assert stok.stringify(tokens) == text
    assert all(tok.type is not T.OTHER for tok in tokens)
    assert all(tok.type is not T.EOF for tok in tokens)
    assert all(tok.value for tok in tokens)


def test_fast_path_matches_root(html_lang):
    """Without language tokens the result equals the root lexer's own output."""
    text = "<p class='x'>hello &amp; bye</p>"
    assert stok.tokenize(html_lang, None, text) == stok.tokenize(
        stok.MarkupLexer(), None, text
    )


def test_fast_path_logged(html_lang, caplog):
    """Taking the fast path is logged at debug level."""
    with caplog.at_level(logging.DEBUG, logger="splicetok"):
        stok.tokenize(html_lang, None, "<p>hello</p>")
    assert "no language tokens" in caplog.text


def test_ensure_lf_applies_to_both_passes(html_lang):
    """Newline normalisation reaches the language and the root lexer."""
    options = stok.TokenizeOptions(ensure_lf=True)
    tokens = stok.tokenize(html_lang, options, "<p>\r\n<?lang echo 1;\r\n?></p>\r\n")
    assert stok.stringify(tokens) == "<p>\n<?lang echo 1;\n?></p>\n"


# Original lengths
# ---------------------------------------------------------------------------


def test_original_lengths_with_insertions(html_lang):
    """Lengths describe the coalesced language pass in original characters."""
    text = "<p>\r\n<?lang echo 1;\r\n?></p>\r\n"
    options = stok.TokenizeOptions(ensure_lf=True)
    tokens, lengths = html_lang.tokenize_with_original_length(options, text)
    tokens, lengths = list(tokens), list(lengths)

    assert stok.stringify(tokens) == text.replace("\r\n", "\n")
    assert lengths == [5, 6, 1, 4, 1, 1, 1, 2, 2, 6]
    assert sum(lengths) == len(text)


def test_original_lengths_fast_path(html_lang):
    """Without language tokens the root lexer's own lengths are returned."""
    options = stok.TokenizeOptions(ensure_lf=True)
    tokens, lengths = stok.tokenize_with_original_length(
        html_lang, options, "<p>a\r\nb</p>"
    )
    assert [tok.value for tok in tokens] == ["<", "p", ">", "a\nb", "</", "p", ">"]
    assert lengths == [1, 1, 1, 4, 2, 1, 1]


def test_original_lengths_same_tokens_as_plain(html_lang):
    """Both entry points produce the same merged tokens."""
    text = "<div><?lang echo $x; ?></div>"
    tokens, _ = stok.tokenize_with_original_length(html_lang, None, text)
    assert tokens == stok.tokenize(html_lang, None, text)


def test_original_lengths_unsupported_root():
    """A root lexer without the capability raises UnsupportedCapabilityError."""
    lexer = stok.DelegatingLexer(WordLexer(), stok.ProcessingLexer())
    with pytest.raises(UnsupportedCapabilityError) as exc:
        lexer.tokenize_with_original_length(None, "no code")
    assert exc.value.lexer_name == "words"
    # the plain entry point still works
    assert stok.tokenize(lexer, None, "no code") == [Token(T.TEXT, "no code")]


def test_original_lengths_language_without_capability():
    """Only the root lexer needs the capability; language tokens report their own length."""
    lexer = stok.DelegatingLexer(stok.TextLexer(), AtOperatorLexer())
    tokens, lengths = lexer.tokenize_with_original_length(None, "ab@@cd")
    assert pairs(list(tokens)) == [(T.TEXT, "ab"), (T.OPERATOR, "@@"), (T.TEXT, "cd")]
    assert list(lengths) == [2, 2, 2]

    tokens, lengths = stok.tokenize_with_original_length(lexer, None, "abcd")
    assert pairs(tokens) == [(T.TEXT, "abcd")]
    assert lengths == [4]


def test_original_lengths_coalesced_root_without_capability():
    """Wrapping a root lexer in coalesce does not hide a missing capability."""
    root = stok.coalesce(WordLexer())
    assert not root.supports_original_length()
    # the language lexer would raise if it ran, so the check comes first
    lexer = stok.DelegatingLexer(root, FailingLexer(RuntimeError("lexed")))
    with pytest.raises(UnsupportedCapabilityError) as exc:
        lexer.tokenize_with_original_length(None, "a<?lang 1 ?>b")
    assert exc.value.lexer_name == "words"

    lexer = stok.DelegatingLexer(root, keyword_block_lexer())
    with pytest.raises(UnsupportedCapabilityError):
        stok.tokenize_with_original_length(lexer, None, "a<?lang 1 ?>b")


def test_original_lengths_nested_root_without_capability():
    """A delegating root lexer has the capability only if its own root does."""
    inner = stok.DelegatingLexer(WordLexer(), keyword_block_lexer())
    assert not inner.supports_original_length()
    lexer = stok.DelegatingLexer(inner, AtOperatorLexer())
    with pytest.raises(UnsupportedCapabilityError) as exc:
        lexer.tokenize_with_original_length(None, "x@@y")
    assert exc.value.lexer_name == "keyword-block"


def test_supports_original_length_resolves_wrappers(html_lang):
    """Wrappers report the capability of the lexer doing the work."""
    assert stok.TextLexer().supports_original_length()
    assert not WordLexer().supports_original_length()
    assert stok.coalesce(stok.TextLexer()).supports_original_length()
    assert html_lang.supports_original_length()
    assert stok.DelegatingLexer(stok.TextLexer(), AtOperatorLexer()).supports_original_length()


def test_unsupported_capability_is_not_tokenization_error():
    """Callers can tell a missing capability from a lexing failure."""
    assert not issubclass(UnsupportedCapabilityError, TokenizationError)
    assert issubclass(UnsupportedCapabilityError, stok.SpliceTokError)


# Error propagation
# ---------------------------------------------------------------------------


def test_root_error_propagates_unchanged():
    """Errors raised by the root lexer reach the caller as-is."""
    error = TokenizationError("boom", position=3)
    lexer = stok.DelegatingLexer(FailingLexer(error), keyword_block_lexer())
    with pytest.raises(TokenizationError) as exc:
        stok.tokenize(lexer, None, "a<?lang 1 ?>b")
    assert exc.value is error


def test_language_error_propagates_unchanged():
    """Errors raised by the language lexer reach the caller as-is."""
    error = TokenizationError("boom")
    lexer = stok.DelegatingLexer(stok.TextLexer(), FailingLexer(error))
    with pytest.raises(TokenizationError) as exc:
        stok.tokenize(lexer, None, "text")
    assert exc.value is error


# Capability forwarding
# ---------------------------------------------------------------------------


def test_analyse_text_uses_root(html_lang):
    """Scoring comes from the root lexer, not the embedded language."""
    assert html_lang.analyse_text("<!DOCTYPE html><p>") == 0.9
    assert html_lang.analyse_text("<?lang echo 1; ?>") == 0.0


def test_set_analyser_reaches_root_only(html_lang):
    """The analyser is injected into the root lexer only."""
    language_analyser = html_lang.language.analyser
    assert html_lang.set_analyser(lambda text: 0.3) is html_lang
    assert html_lang.root.analyse_text("anything") == 0.3
    assert html_lang.language.analyser is language_analyser


def test_set_registry_reaches_both(html_lang):
    """The registry is injected into both sub-lexers."""
    registry = stok.LexerRegistry()
    assert html_lang.set_registry(registry) is html_lang
    assert html_lang.root.registry is registry
    assert html_lang.language.registry is registry


def test_config_is_language_config(html_lang):
    """The combined lexer reports the embedded language's identity."""
    assert html_lang.config is html_lang.language.config
    assert html_lang.config.name == "lang"


# Building blocks
# ---------------------------------------------------------------------------


def test_extract_insertions():
    """OTHER text is concatenated and language runs become insertions."""
    tokens = [
        Token(T.OTHER, "ab"),
        Token(T.KEYWORD, "x"),
        Token(T.NAME, "y"),
        Token(T.OTHER, "cd"),
        Token(T.NAME, "z"),
    ]
    others, insertions = stok.extract_insertions(tokens)
    assert others == "abcd"
    assert insertions == [
        Insertion(2, 4, [Token(T.KEYWORD, "x"), Token(T.NAME, "y")]),
        Insertion(6, 7, [Token(T.NAME, "z")]),
    ]


def test_extract_insertions_language_first():
    """A language run at offset 0 opens the first insertion."""
    others, insertions = stok.extract_insertions(
        [Token(T.KEYWORD, "kw"), Token(T.OTHER, "a")]
    )
    assert others == "a"
    assert insertions == [Insertion(0, 2, [Token(T.KEYWORD, "kw")])]


@pytest.mark.parametrize("tokens", [[], [Token(T.OTHER, "abc")]])
def test_extract_insertions_none(tokens):
    """No language tokens means no insertions."""
    others, insertions = stok.extract_insertions(tokens)
    assert others == "".join(tok.value for tok in tokens)
    assert insertions == []


def test_interleave_insertion_after_last_root_token():
    """An insertion past the last root token is emitted after it."""
    out = stok.interleave([Token(T.TEXT, "ab")], [Insertion(2, 3, [Token(T.NAME, "X")])])
    assert pairs(out) == [(T.TEXT, "ab"), (T.NAME, "X")]


def test_split_token_interior():
    """Interior splits clone the token with each half's value."""
    tok = Token(T.STRING, "abcdef")
    left, right = stok.split_token(tok, 2)
    assert left == Token(T.STRING, "ab")
    assert right == Token(T.STRING, "cdef")


def test_split_token_edges():
    """Splitting at either edge leaves the other side as EOF."""
    tok = Token(T.STRING, "abcdef")
    assert stok.split_token(tok, 0) == (stok.EOF, tok)
    assert stok.split_token(tok, 6) == (tok, stok.EOF)
    assert stok.split_token(stok.EOF, 3) == (stok.EOF, stok.EOF)


def test_split_token_out_of_range():
    """Offsets outside the token mean the root output did not cover its input."""
    with pytest.raises(TokenizationError):
        stok.split_token(Token(T.TEXT, "abc"), 4)
