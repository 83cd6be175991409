"""Tests for case-style helpers."""

from codeplug.analysis.casing import convert, matches_style, split_words, style_in_rule


class TestStyleInRule:
    def test_first_named_style_wins(self):
        assert style_in_rule("Constants use SCREAMING_SNAKE_CASE") == "screaming_snake"
        assert style_in_rule('Hooks use "use" prefix with camelCase') == "camel"
        assert style_in_rule("Class/service files use PascalCase") == "pascal"

    def test_no_style(self):
        assert style_in_rule("Functional components") is None


class TestConvert:
    def test_snake_to_camel(self):
        assert convert("auth_helper", "camel") == "authHelper"

    def test_kebab_to_pascal(self):
        assert convert("user-card", "pascal") == "UserCard"

    def test_other_styles_unchanged(self):
        assert convert("auth_helper", "snake") == "auth_helper"

    def test_acronyms(self):
        assert split_words("APIClient") == ["API", "Client"]


def test_matches_style():
    assert matches_style("userName", "camel")
    assert not matches_style("user_name", "camel")
    assert matches_style("MAX_RETRIES", "screaming_snake")
