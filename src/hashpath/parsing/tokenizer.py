"""
Escape tokenizer for backtick-delimited hashtags.

This module splits a raw attribute string into literal text and hashtag
tokens. A backtick opens a hashtag and the next backtick closes it; an empty
pair is an escaped literal backtick and an opening backtick with no close
runs to the end of the string. Scanning walks the string one code point at a
time and only U+0060 is ever treated as a delimiter.
"""

from dataclasses import dataclass
from enum import Enum

BACKTICK = "`"
HASHTAG_SIGIL = "#"


class TokenKind(Enum):
    """Kind of span produced by the tokenizer."""

    TEXT = "text"
    HASHTAG = "hashtag"  # closed pair with content
    ESCAPED_BACKTICK = "escaped_backtick"  # empty pair
    UNTERMINATED = "unterminated"  # opening backtick to end of string


@dataclass(frozen=True)
class Token:
    """
    One span of a tokenized string.

    Params:
        kind: What kind of span this is
        content: Text of the span without its delimiters
    """

    kind: TokenKind
    content: str = ""

    @property
    def raw(self) -> str:
        """Return the exact source text of this token, delimiters included."""
        if self.kind is TokenKind.HASHTAG:
            return f"{BACKTICK}{self.content}{BACKTICK}"
        if self.kind is TokenKind.ESCAPED_BACKTICK:
            return BACKTICK * 2
        if self.kind is TokenKind.UNTERMINATED:
            return f"{BACKTICK}{self.content}"
        return self.content

    @property
    def is_hashtag(self) -> bool:
        """
        Check whether this token should be handed to a hashtag transform.

        Closed pairs always are. An unterminated span only is when its
        content carries the hashtag sigil; anything else is passed through
        verbatim.
        """
        if self.kind is TokenKind.HASHTAG:
            return True
        return self.kind is TokenKind.UNTERMINATED and self.content.startswith(
            HASHTAG_SIGIL
        )


def tokenize(text: str) -> list[Token]:
    """
    Split a string into text and hashtag tokens.

    Never raises: malformed input degrades to tokens that render back to the
    original text. Joining ``token.raw`` over the result reproduces ``text``
    exactly.

    Params:
        text: Raw string that may contain backtick-delimited hashtags

    Returns:
        Tokens in source order

    Examples:
        "(`#form/a`)" -> [TEXT "(", HASHTAG "#form/a", TEXT ")"]
        "``" -> [ESCAPED_BACKTICK]
        "`#a``#b`" -> [HASHTAG "#a", HASHTAG "#b"]
    """
    tokens: list[Token] = []
    buffer: list[str] = []
    capturing = False

    for char in text:
        if char != BACKTICK:
            buffer.append(char)
            continue

        content = "".join(buffer)
        if capturing:
            if content:
                tokens.append(Token(TokenKind.HASHTAG, content))
            else:
                tokens.append(Token(TokenKind.ESCAPED_BACKTICK))
        elif content:
            tokens.append(Token(TokenKind.TEXT, content))
        buffer = []
        capturing = not capturing

    content = "".join(buffer)
    if capturing:
        tokens.append(Token(TokenKind.UNTERMINATED, content))
    elif content:
        tokens.append(Token(TokenKind.TEXT, content))

    return tokens
