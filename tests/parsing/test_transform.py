"""
Tests for the generic hashtag transformer.

The fixture table mirrors the regression cases the escaped-hashtag format
has to keep producing, for both the default (identity) transform and a
transform keeping only the last path segment.
"""

import pytest

from hashpath.parsing.transform import separate_suffix, transform


def to_property(hashtag: str) -> str:
    """Keep only the last path segment of a hashtag."""
    return hashtag.split("/")[-1]


TRANSFORM_CASES = [
    ("`#case/type/prop`", "#case/type/prop", "prop"),
    ("`#case/type/prop`- 1", "#case/type/prop - 1", "prop - 1"),
    ("(`#case/type/prop`)", "(#case/type/prop)", "(prop)"),
    ("(`#case/type/prop`", "(#case/type/prop", "(prop"),
    (
        "`#case/type/prop` = `#case/type/prop2`",
        "#case/type/prop = #case/type/prop2",
        "prop = prop2",
    ),
    ("``", "`", "`"),
    (
        "🍊you glad I didn't use 🍌`",
        "🍊you glad I didn't use 🍌`",
        "🍊you glad I didn't use 🍌`",
    ),
    ("`🍠", "`🍠", "`🍠"),
    ("`#case/type/prop` = `", "#case/type/prop = `", "prop = `"),
    ("`#case/type/prop` = ``", "#case/type/prop = `", "prop = `"),
    ("`#case/prop1``#case/prop2` = ``", "#case/prop1#case/prop2 = `", "prop1prop2 = `"),
    ("``#case/type/``prop` = ``", "`#case/type/`prop = `", "`#case/type/`prop = `"),
]


class TestTransform:
    """Test transform with the default and a custom map function."""

    @pytest.mark.parametrize("text,expected,_", TRANSFORM_CASES)
    def test_default_transform(self, text, expected, _):
        """Default transform strips delimiters and keeps hashtags verbatim."""
        assert transform(text) == expected

    @pytest.mark.parametrize("text,_,expected", TRANSFORM_CASES)
    def test_custom_transform(self, text, _, expected):
        """Custom transform rewrites each hashtag's content."""
        assert transform(text, to_property) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "plain text",
            "🍊🍌🍠 and ñ",
            "instance('casedb')/cases/case[@case_id = 1]",
            "",
        ],
    )
    def test_text_without_backticks_is_unchanged(self, text):
        """Strings with no backtick come back byte-for-byte identical."""
        assert transform(text, to_property) == text

    def test_map_fn_sees_each_hashtag_once(self):
        """The map function is called once per hashtag in source order."""
        seen = []

        def record(hashtag):
            seen.append(hashtag)
            return hashtag.upper()

        result = transform("`#a/b` + `#c/d` + ``", record)

        assert seen == ["#a/b", "#c/d"]
        assert result == "#A/B + #C/D + `"

    def test_composition_matches_two_passes(self):
        """Rewriting with g∘f equals rewriting with f (re-escaped) then g."""
        text = "(`#case/type/prop`- 1) = `#case/x``#case/y`and `#case/z`"

        def f(hashtag):
            return hashtag.replace("#case", "#c")

        def g(hashtag):
            return hashtag.split("/")[-1]

        composed = transform(text, lambda hashtag: g(f(hashtag)))
        two_passes = transform(transform(text, lambda hashtag: f"`{f(hashtag)}`"), g)

        assert composed == two_passes


class TestSeparateSuffix:
    """Test the spacing applied after a rewritten hashtag."""

    @pytest.mark.parametrize(
        "suffix,expected",
        [
            ("- 1", " - 1"),
            ("-1", " - 1"),
            (" -1", " - 1"),
            (" - 1", " - 1"),
            ("and x", " and x"),
            (")", ")"),
            (" = 2", " = 2"),
            ("/child", "/child"),
            ("+1", "+1"),
            ("=2", "=2"),
            ("", ""),
        ],
    )
    def test_suffix_spacing(self, suffix, expected):
        assert separate_suffix(suffix) == expected

    @pytest.mark.parametrize("suffix", ["-1", "x", " - 1", ")"])
    def test_suffix_spacing_is_stable(self, suffix):
        """Applying the spacing twice changes nothing more."""
        once = separate_suffix(suffix)
        assert separate_suffix(once) == once
