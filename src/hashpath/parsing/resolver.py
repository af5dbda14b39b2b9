"""
Hashtag/path resolution for whole expressions.

``HashtagParser`` turns raw attribute strings into ``ParsedExpression``
objects that can be rendered as path expressions, as canonical escaped
hashtags, or as display hashtags. Known references are recognized in three
forms: escaped hashtags (`` `#form/q` ``), escaped paths (`` `/data/q` ``),
and bare hashtags or paths written without backticks.
"""

import re
from dataclasses import dataclass, field
from functools import cached_property

from hashpath.core.hashtag_info import HashtagInfo
from hashpath.parsing.tokenizer import (
    BACKTICK,
    HASHTAG_SIGIL,
    Token,
    TokenKind,
    tokenize,
)
from hashpath.parsing.transform import separate_suffix, transform

# Bare hashtag as written without backticks, e.g. #case/parent/name
BARE_HASHTAG_PATTERN = r"#[\w\-]+(?:/[\w\-@.]+)*"


def _can_precede(char: str) -> bool:
    """Check whether a bare reference may start right after ``char``."""
    return not (char.isalnum() or char in "_-./@#:$)]'\"")


def _can_follow(char: str) -> bool:
    """Check whether a bare reference may end right before ``char``."""
    return not (char.isalnum() or char in "_-./@#:[")


@dataclass(frozen=True)
class ExpressionPart:
    """
    One piece of a parsed expression.

    Params:
        text: Literal text, or the hashtag for a reference
        path: Resolved path when this part is a reference, else None
        token: Source token for escaped-backtick and unterminated spans
    """

    text: str
    path: str | None = None
    token: Token | None = None

    @property
    def is_reference(self) -> bool:
        return self.path is not None


@dataclass
class ParsedExpression:
    """Result of parsing one raw string against a hashtag bundle."""

    source: str
    parts: list[ExpressionPart] = field(default_factory=list)
    unknown_hashtags: list[str] = field(default_factory=list)
    parser: "HashtagParser | None" = field(default=None, repr=False)

    @property
    def references(self) -> list[tuple[str, str]]:
        """Return the ``(hashtag, path)`` pairs found, in source order."""
        return [(part.text, part.path) for part in self.parts if part.is_reference]

    def to_escaped_hashtag(self) -> str:
        """
        Render the canonical escaped form.

        Every known reference is written as `` `#hashtag` ``. Text that
        directly follows a reference is spaced apart, so ``-1`` after a
        reference becomes `` - 1`` even when the input was already escaped.
        """
        rendered = []
        after_reference = False
        for part in self.parts:
            if part.is_reference:
                rendered.append(f"{BACKTICK}{part.text}{BACKTICK}")
                after_reference = True
                continue
            if part.token is not None:
                rendered.append(part.token.raw)
            elif after_reference:
                rendered.append(separate_suffix(part.text))
            else:
                rendered.append(part.text)
            after_reference = False
        return "".join(rendered)

    def to_xpath(self) -> str:
        """Render the expression with every known hashtag replaced by its path."""
        to_path = self.parser.to_path if self.parser else None
        return transform(self.to_escaped_hashtag(), to_path)

    def to_hashtag(self) -> str:
        """Render the expression with hashtags shown bare, for display."""
        return transform(self.to_escaped_hashtag())


class HashtagParser:
    """
    Parser bound to one ``HashtagInfo`` bundle.

    Parsing is pure: a parser holds no per-call state and can be shared
    between callers for as long as its bundle is current.
    """

    def __init__(self, info: HashtagInfo):
        """
        Initialize the parser.

        Params:
            info: Hashtag bundle to resolve against
        """
        self.info = info

    @cached_property
    def _bare_reference_pattern(self) -> re.Pattern:
        # Longest paths first so a path is never shadowed by its own prefix
        paths = sorted(self.info.inverted_hashtag_map, key=len, reverse=True)
        alternatives = [re.escape(path) for path in paths]
        alternatives.append(BARE_HASHTAG_PATTERN)
        return re.compile("|".join(alternatives))

    def to_path(self, hashtag: str) -> str:
        """Return the path for a hashtag, or the hashtag itself if unknown."""
        path = self.info.resolve(hashtag)
        return hashtag if path is None else path

    def parse(self, text: str) -> ParsedExpression:
        """
        Parse a raw string into a ``ParsedExpression``.

        Never raises. Unknown hashtags are kept as literal text with their
        backticks stripped and listed in ``unknown_hashtags``.

        Params:
            text: Raw attribute value

        Returns:
            The parsed expression
        """
        expression = ParsedExpression(source=text, parser=self)
        for token in tokenize(text):
            if token.kind is TokenKind.TEXT:
                self._parse_text(token.content, expression)
            elif token.is_hashtag:
                self._parse_escaped(token.content, expression)
            else:
                expression.parts.append(ExpressionPart(token.raw, token=token))
        return expression

    def _reference(self, content: str) -> ExpressionPart | None:
        if content.startswith(HASHTAG_SIGIL):
            path = self.info.resolve(content)
            return None if path is None else ExpressionPart(content, path=path)
        hashtag = self.info.inverted_hashtag_map.get(content)
        if hashtag is not None:
            return ExpressionPart(hashtag, path=content)
        return None

    def _parse_escaped(self, content: str, expression: ParsedExpression) -> None:
        part = self._reference(content)
        if part is None:
            if content.startswith(HASHTAG_SIGIL):
                expression.unknown_hashtags.append(content)
            part = ExpressionPart(content)
        expression.parts.append(part)

    def _parse_text(self, text: str, expression: ParsedExpression) -> None:
        position = 0
        for match in self._bare_reference_pattern.finditer(text):
            start, end = match.span()
            if start > 0 and not _can_precede(text[start - 1]):
                continue
            if end < len(text) and not _can_follow(text[end]):
                continue

            candidate = match.group()
            part = self._reference(candidate)
            if part is None:
                if candidate.startswith(HASHTAG_SIGIL):
                    expression.unknown_hashtags.append(candidate)
                continue

            if start > position:
                expression.parts.append(ExpressionPart(text[position:start]))
            expression.parts.append(part)
            position = end

        if position < len(text):
            expression.parts.append(ExpressionPart(text[position:]))
