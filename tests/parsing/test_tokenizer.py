"""
Tests for the escape tokenizer.

Focus Areas:
1. Splitting text and backtick-delimited hashtags
2. Escaped and unterminated backticks
3. Lossless reconstruction from token raw text
4. Code-point scanning with non-ASCII input
"""

import pytest

from hashpath.parsing.tokenizer import Token, TokenKind, tokenize


class TestTokenize:
    """Test splitting strings into tokens."""

    def test_plain_text_is_single_token(self):
        """Text without backticks stays one text token."""
        assert tokenize("/data/a + 1") == [Token(TokenKind.TEXT, "/data/a + 1")]

    def test_empty_string(self):
        """Empty input produces no tokens."""
        assert tokenize("") == []

    def test_hashtag_between_text(self):
        """A closed pair becomes a hashtag token between text tokens."""
        assert tokenize("(`#form/a`)") == [
            Token(TokenKind.TEXT, "("),
            Token(TokenKind.HASHTAG, "#form/a"),
            Token(TokenKind.TEXT, ")"),
        ]

    def test_empty_pair_is_escaped_backtick(self):
        """An empty pair is an escaped literal backtick."""
        assert tokenize("``") == [Token(TokenKind.ESCAPED_BACKTICK)]

    def test_unterminated_runs_to_end(self):
        """An opening backtick without a close captures the rest of the string."""
        assert tokenize("(`#case/type/prop") == [
            Token(TokenKind.TEXT, "("),
            Token(TokenKind.UNTERMINATED, "#case/type/prop"),
        ]

    def test_adjacent_hashtags_stay_separate(self):
        """Hashtags with nothing between them are independent tokens."""
        assert tokenize("`#case/prop1``#case/prop2`") == [
            Token(TokenKind.HASHTAG, "#case/prop1"),
            Token(TokenKind.HASHTAG, "#case/prop2"),
        ]

    def test_doubled_backticks_around_text(self):
        """Doubled backticks around plain text are escapes, not hashtags."""
        assert tokenize("``#case/type/``prop` = ``") == [
            Token(TokenKind.ESCAPED_BACKTICK),
            Token(TokenKind.TEXT, "#case/type/"),
            Token(TokenKind.ESCAPED_BACKTICK),
            Token(TokenKind.TEXT, "prop"),
            Token(TokenKind.HASHTAG, " = "),
            Token(TokenKind.UNTERMINATED, ""),
        ]


class TestTokenRoundTrip:
    """Test that tokens reproduce their source exactly."""

    @pytest.mark.parametrize(
        "text",
        [
            "`#case/type/prop`- 1",
            "(`#case/type/prop`",
            "``",
            "`",
            "🍊you glad I didn't use 🍌`",
            "`🍠",
            "`#case/prop1``#case/prop2` = ``",
            "``#case/type/``prop` = ``",
            "no hashtags here",
        ],
    )
    def test_raw_text_reassembles_input(self, text):
        """Joining raw token text gives back the input."""
        assert "".join(token.raw for token in tokenize(text)) == text


class TestCodePointScanning:
    """Test that only U+0060 acts as a delimiter."""

    def test_astral_symbols_are_not_delimiters(self):
        """Symbols outside the BMP never open or close a hashtag."""
        text = "🍠🍊🍌 are fruit-ish"
        assert tokenize(text) == [Token(TokenKind.TEXT, text)]

    def test_lookalike_characters_are_text(self):
        """Characters that render like a backtick are ordinary text."""
        text = "ˋ#form/aˋ ｀#form/b｀ ‵x"
        assert tokenize(text) == [Token(TokenKind.TEXT, text)]

    def test_multi_code_point_content_inside_hashtag(self):
        """Non-ASCII content inside a pair is captured whole."""
        assert tokenize("`#form/ñandú_🍠`") == [
            Token(TokenKind.HASHTAG, "#form/ñandú_🍠")
        ]


class TestTokenIsHashtag:
    """Test which tokens are handed to transforms."""

    def test_closed_pair_is_hashtag(self):
        assert Token(TokenKind.HASHTAG, " = ").is_hashtag

    def test_unterminated_with_sigil_is_hashtag(self):
        assert Token(TokenKind.UNTERMINATED, "#case/x").is_hashtag

    def test_unterminated_without_sigil_is_not(self):
        assert not Token(TokenKind.UNTERMINATED, "🍠").is_hashtag

    def test_text_is_not_hashtag(self):
        assert not Token(TokenKind.TEXT, "#form/a").is_hashtag
