"""Unit tests for the placeholder-aware Translation model."""

import time

import pytest

from locdict import Literal, ParseError, Placeholder, Translation, TranslationMismatchError


class TestParse:
    """Tests for splitting raw text into segments."""

    def test_plain_text_is_one_literal(self):
        assert Translation.parse("Open").segments == (Literal("Open"),)

    def test_empty_text_has_no_segments(self):
        translation = Translation.parse("")
        assert translation.segments == ()
        assert translation.to_text() == ""

    def test_markers_become_placeholders_in_order(self):
        translation = Translation.parse("Move {:1} to {:0}!")
        assert translation.segments == (
            Literal("Move "),
            Placeholder(1),
            Literal(" to "),
            Placeholder(0),
            Literal("!"),
        )
        assert translation.placeholders == [1, 0]

    def test_adjacent_and_repeated_markers_are_kept(self):
        translation = Translation.parse("{:0}{:0}{:12}")
        assert translation.segments == (Placeholder(0), Placeholder(0), Placeholder(12))

    def test_braces_outside_markers_are_literal(self):
        translation = Translation.parse("{a} {{:0}} }")
        assert translation.segments == (
            Literal("{a} {"),
            Placeholder(0),
            Literal("} }"),
        )

    @pytest.mark.parametrize(
        "raw",
        ["Hello {:0", "{:", "Value {:x}", "{:}", "{:-1}", "{:01}", "{: 1}", "{:1.5}"],
    )
    def test_malformed_markers_fail(self, raw):
        with pytest.raises(ParseError):
            Translation.parse(raw)

    def test_error_reports_offset(self):
        with pytest.raises(ParseError) as excinfo:
            Translation.parse("abc {:z}")
        assert excinfo.value.position == 4

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Open",
            "Hello {:0}",
            "{:3} of {:10} files",
            "{:0}{:0}",
            "Tab\tand\nnew line {:2}",
            "Unicode {:0} éè 中文",
            "{ } {} }{",
        ],
    )
    def test_round_trip(self, text):
        assert Translation.parse(text).to_text() == text
        assert str(Translation.parse(text)) == text


class TestStructure:
    """Tests for equality, hashing and ordering."""

    def test_equal_texts_are_equal_keys(self):
        first = Translation.parse("Hello {:0}")
        second = Translation([Literal("Hel"), Literal("lo "), Placeholder(0)])
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_indices_are_not_renumbered(self):
        assert Translation.parse("{:1}") != Translation.parse("{:0}")

    def test_literal_sorts_before_placeholder(self):
        assert Translation.parse("zzz") < Translation.parse("{:0}")

    def test_literals_compare_by_text(self):
        assert Translation.parse("Close") < Translation.parse("Open")

    def test_placeholders_compare_by_index(self):
        assert Translation.parse("A {:1}") < Translation.parse("A {:2}")

    def test_prefix_sorts_first(self):
        assert Translation.parse("A {:1}") < Translation.parse("A {:1} B")

    def test_sorting_is_deterministic(self):
        texts = ["{:0}", "b", "a {:1}", "a {:0}", "a", ""]
        ordered = sorted(Translation.parse(text) for text in texts)
        assert [t.to_text() for t in ordered] == ["", "a", "a {:0}", "a {:1}", "b", "{:0}"]

    def test_is_template(self):
        assert Translation.parse("x {:0}").is_template
        assert not Translation.parse("x").is_template


class TestMatch:
    """Tests for capturing runtime values with a source skeleton."""

    def test_captures_by_index(self):
        skeleton = Translation.parse("Move {:0} to {:1}")
        assert skeleton.match("Move file.txt to /tmp") == {0: "file.txt", 1: "/tmp"}

    def test_literal_mismatch_returns_none(self):
        assert Translation.parse("Hello {:0}").match("Goodbye Bob") is None

    def test_repeated_index_must_capture_same_value(self):
        skeleton = Translation.parse("{:0} and {:0}")
        assert skeleton.match("cats and cats") == {0: "cats"}
        assert skeleton.match("cats and dogs") is None

    def test_plain_text_matches_itself_only(self):
        skeleton = Translation.parse("Open")
        assert skeleton.match("Open") == {}
        assert skeleton.match("Open now") is None

    def test_regex_characters_are_literal(self):
        skeleton = Translation.parse("Cost (.*) {:0}$")
        assert skeleton.match("Cost (.*) 12$") == {0: "12"}

    def test_placeholders_capture_up_to_the_leftmost_literal(self):
        skeleton = Translation.parse("{:0}-{:1}")
        assert skeleton.match("a-b-c") == {0: "a", 1: "b-c"}

    def test_adjacent_placeholders(self):
        assert Translation.parse("{:0}{:1}").match("ab") == {0: "", 1: "ab"}

    def test_trailing_literal_must_close_the_text(self):
        skeleton = Translation.parse("Hello {:0}!")
        assert skeleton.match("Hello Bob!") == {0: "Bob"}
        assert skeleton.match("Hello Bob") is None
        assert skeleton.match("Hello!") is None

    def test_prefix_and_suffix_may_not_overlap(self):
        assert Translation.parse("ab{:0}ba").match("aba") is None
        assert Translation.parse("ab{:0}ba").match("abba") == {0: ""}

    def test_many_placeholders_against_a_long_sentence(self):
        skeleton = Translation.parse("{:0} {:1} {:2} {:3} {:4} {:5}.")
        sentence = " ".join(f"word{number}" for number in range(60))

        started = time.perf_counter()
        assert skeleton.match(sentence) is None
        assert skeleton.match(sentence + ".")[5].endswith("word59")
        assert time.perf_counter() - started < 1.0

    def test_skeleton_counts_literal_text(self):
        assert Translation.parse("Hello {:0}!").skeleton().literal_length == 7
        assert Translation.parse("{:0}{:1}").skeleton().literal_length == 0


class TestTranslate:
    """Tests for rendering destination templates."""

    def test_substitutes_runtime_value(self):
        source = Translation.parse("Hello {:0}")
        template = Translation.parse("Bonjour {:0}")
        assert template.translate("Hello Bob", source=source) == "Bonjour Bob"

    def test_reordered_placeholders(self):
        source = Translation.parse("{:0} of {:1}")
        template = Translation.parse("{:1} : {:0}")
        assert template.translate("3 of 10", source=source) == "10 : 3"

    def test_values_come_from_runtime_not_template(self):
        source = Translation.parse("Page {:0}")
        template = Translation.parse("Seite {:0}")
        assert template.translate("Page 7", source=source) == "Seite 7"
        assert template.translate("Page {:0}", source=source) == "Seite {:0}"

    def test_runtime_not_fitting_source_fails(self):
        source = Translation.parse("Hello {:0}")
        template = Translation.parse("Bonjour {:0}")
        with pytest.raises(TranslationMismatchError):
            template.translate("Bye Bob", source=source)

    def test_template_index_unknown_to_source_fails(self):
        source = Translation.parse("Hello {:0}")
        template = Translation.parse("Bonjour {:1}")
        with pytest.raises(TranslationMismatchError):
            template.translate("Hello Bob", source=source)

    def test_without_source_uses_runtime_markers_by_position(self):
        template = Translation.parse("{:0} fichiers sur {:1}")
        assert template.translate("{:4} of {:7} files") == "{:4} fichiers sur {:7}"

    def test_without_source_count_mismatch_fails(self):
        template = Translation.parse("Bonjour {:0}")
        with pytest.raises(TranslationMismatchError):
            template.translate("Hello")

    def test_literal_template(self):
        assert Translation.parse("Ouvrir").translate("Open", source=Translation.parse("Open")) == "Ouvrir"
