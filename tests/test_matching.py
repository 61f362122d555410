"""
Tests for the match predicate library.
"""

import re

from chatroute.middleware.matching import contains_pattern, match_pattern, parse_link


class TestMatchPattern:
    def test_string_is_exact(self):
        assert match_pattern("abc", "abc")
        assert not match_pattern("abcd", "abc")
        assert match_pattern("abc", "abc").groups is None

    def test_regex_first_match(self):
        m = match_pattern("id_1 id_2", re.compile(r"id_(\d)"))
        assert m.matched
        assert m.groups == ("id_1", "1")

    def test_none_value(self):
        assert not match_pattern(None, "x")
        assert not match_pattern(None, re.compile("x"))


class TestContainsPattern:
    def test_substring(self):
        assert contains_pattern("has foo in it", "foo")
        assert not contains_pattern("no match here", "foo")

    def test_regex(self):
        assert contains_pattern("a foo b", re.compile(r"f(oo)")).groups == ("foo", "oo")


class TestParseLink:
    def test_user_mention_with_label(self):
        link = parse_link("<@U123|display name> hi")

        assert link.type == "@"
        assert link.link == "U123"
        assert link.label == "display name"
        assert link.start == 0

    def test_channel_and_special(self):
        assert parse_link("<#C1>").type == "#"
        assert parse_link("<!here>").link == "here"

    def test_plain_url_has_no_sigil(self):
        link = parse_link("see <https://example.com|docs>")

        assert link.type is None
        assert link.link == "https://example.com"
        assert link.start == 4

    def test_no_link(self):
        assert parse_link("nothing here") is None
