"""
Tests for search pattern compilation.
"""

import re

import pytest

from findmark.errors import EmptySearchTermError, InvalidPatternError
from findmark.services.pattern_compiler import (
    SearchOptions,
    compile_search_pattern,
    pattern_source,
    validate_search_term,
)


class TestPatternSource:
    def test_literal_term_is_escaped(self):
        assert pattern_source("a.b(c)", SearchOptions()) == re.escape("a.b(c)")

    def test_whole_word_wraps_escaped_term(self):
        assert pattern_source("cat", SearchOptions(whole_word=True)) == r"\bcat\b"

    def test_regex_term_used_verbatim_even_with_whole_word(self):
        opts = SearchOptions(use_regex=True, whole_word=True)
        assert pattern_source(r"def \w+", opts) == r"def \w+"


class TestCompileSearchPattern:
    def test_case_insensitive_by_default(self):
        compiled = compile_search_pattern("Foo")
        assert compiled.regex.flags & re.IGNORECASE
        assert compiled.regex.search("xx fOO yy")

    def test_match_case_disables_ignorecase(self):
        compiled = compile_search_pattern("Foo", SearchOptions(match_case=True))
        assert not compiled.regex.flags & re.IGNORECASE
        assert compiled.regex.search("foo") is None
        assert compiled.regex.search("Foo")

    def test_metacharacters_match_literally(self):
        compiled = compile_search_pattern("1+1=2?")
        assert compiled.regex.search("is 1+1=2? yes")
        assert compiled.regex.search("11=2") is None

    def test_whole_word_rejects_embedded_substrings(self):
        compiled = compile_search_pattern("cat", SearchOptions(whole_word=True))
        assert compiled.regex.search("category") is None
        assert compiled.regex.search("a cat sat")

    def test_regex_mode(self):
        compiled = compile_search_pattern(r"b.r", SearchOptions(use_regex=True))
        assert compiled.regex.search("foo bar")
        assert compiled.source == r"b.r"

    def test_invalid_regex_raises(self):
        with pytest.raises(InvalidPatternError) as info:
            compile_search_pattern("(unclosed", SearchOptions(use_regex=True))
        assert info.value.term == "(unclosed"
        assert info.value.reason
        assert "Invalid pattern" in str(info.value)

    def test_unbalanced_paren_is_fine_as_literal(self):
        compiled = compile_search_pattern("(unclosed")
        assert compiled.regex.search("x (unclosed y")

    @pytest.mark.parametrize("term", ["", "   ", "\t\n", None])
    def test_blank_terms_rejected(self, term):
        with pytest.raises(EmptySearchTermError):
            compile_search_pattern(term)

    def test_validate_keeps_surrounding_whitespace(self):
        assert validate_search_term(" foo ") == " foo "


class TestSearchOptions:
    def test_from_dict_defaults(self):
        assert SearchOptions.from_dict(None) == SearchOptions()

    def test_dict_round_trip(self):
        opts = SearchOptions(match_case=True, use_regex=True)
        assert SearchOptions.from_dict(opts.to_dict()) == opts

    def test_labels(self):
        opts = SearchOptions(match_case=True, whole_word=True, use_regex=True)
        assert opts.labels() == ["Match Case", "Whole Word", "Regex"]
        assert SearchOptions().labels() == []
