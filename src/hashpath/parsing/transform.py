"""
Generic hashtag rewriting.

``transform`` is the single primitive every hashtag-aware rewrite goes
through: converting to paths, to canonical escaped hashtags, or to display
labels is just a different ``map_fn``.
"""

from collections.abc import Callable, Iterable

from hashpath.parsing.tokenizer import BACKTICK, Token, TokenKind, tokenize

HashtagMapFn = Callable[[str], str]


def identity(hashtag: str) -> str:
    return hashtag


def is_name_char(char: str) -> bool:
    """Check whether a character would continue a path step name."""
    return char.isalnum() or char == "_"


def separate_suffix(text: str) -> str:
    """
    Keep text that directly follows a rewritten hashtag visually separate.

    A leading minus becomes a spaced binary operator and a leading name
    character gets one space, so ``-1`` reads as `` - 1`` instead of being
    glued onto the previous step name. Other operators such as ``+`` or
    ``=`` are left unspaced on purpose, and other text is returned unchanged.
    The result is stable when fed back in.

    Params:
        text: Literal text that immediately follows a hashtag

    Returns:
        The text with the separating whitespace applied

    Examples:
        "- 1" -> " - 1"
        " -1" -> " - 1"
        "and x" -> " and x"
        ")" -> ")"
    """
    stripped = text.lstrip()
    if stripped.startswith("-"):
        return " - " + stripped[1:].lstrip()
    if text and is_name_char(text[0]):
        return " " + text
    return text


def render_tokens(tokens: Iterable[Token], map_fn: HashtagMapFn = identity) -> str:
    """
    Reassemble tokens, rewriting every hashtag token with ``map_fn``.

    Params:
        tokens: Tokens as produced by ``tokenize``
        map_fn: Rewrite applied to each hashtag's content

    Returns:
        The reassembled string with delimiters stripped from hashtags
    """
    parts = []
    after_hashtag = False

    for token in tokens:
        if token.is_hashtag:
            parts.append(map_fn(token.content))
            after_hashtag = True
            continue

        if token.kind is TokenKind.TEXT:
            parts.append(
                separate_suffix(token.content) if after_hashtag else token.content
            )
        elif token.kind is TokenKind.ESCAPED_BACKTICK:
            parts.append(BACKTICK)
        else:
            parts.append(token.raw)
        after_hashtag = False

    return "".join(parts)


def transform(text: str, map_fn: HashtagMapFn | None = None) -> str:
    """
    Rewrite every backtick-delimited hashtag in a string.

    Params:
        text: Raw string containing zero or more escaped hashtags
        map_fn: Rewrite for each hashtag; identity when omitted

    Returns:
        The rewritten string

    Examples:
        "`#case/type/prop`- 1" -> "#case/type/prop - 1"
        "`#case/type/prop`" with last-segment map_fn -> "prop"
    """
    return render_tokens(tokenize(text), map_fn or identity)
