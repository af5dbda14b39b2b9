"""
hashpath parsing components.

This package provides the escape tokenizer, the generic hashtag transformer,
and the hashtag/path resolver for whole expressions.
"""

from hashpath.parsing.resolver import ExpressionPart, HashtagParser, ParsedExpression
from hashpath.parsing.tokenizer import Token, TokenKind, tokenize
from hashpath.parsing.transform import render_tokens, separate_suffix, transform

__all__ = [
    "ExpressionPart",
    "HashtagParser",
    "ParsedExpression",
    "Token",
    "TokenKind",
    "tokenize",
    "render_tokens",
    "separate_suffix",
    "transform",
]
