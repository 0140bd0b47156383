import re

from data_model.documents import HtmlRange
from html_parser.detector import detect_local, find_candidates, is_likely_separator
from html_parser.separator_patterns import SEPARATOR_PATTERNS
from splitter.config import SplitterConfig

_FILE_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*\.md$")


def _anchored(*titles: str) -> str:
    return "".join(
        f'<p><a id="t{i}"></a>{t}</p><p>Body {i} text.</p>' for i, t in enumerate(titles)
    )


class TestIsLikelySeparator:
    def test_accepts_short_titles(self):
        assert is_likely_separator("Getting Started")
        assert is_likely_separator("00-intro")
        assert is_likely_separator("ab")

    def test_length_bounds_inclusive(self):
        assert not is_likely_separator("A")
        assert is_likely_separator("x" * 50)
        assert not is_likely_separator("x" * 51)

    def test_rejects_sentences(self):
        assert not is_likely_separator("This is a sentence.")
        assert not is_likely_separator("Step one. Step two")

    def test_rejects_list_markers_and_numbers(self):
        assert not is_likely_separator("- item")
        assert not is_likely_separator("• item")
        assert not is_likely_separator("42")

    def test_custom_bounds(self):
        assert not is_likely_separator("abc", min_length=4, max_length=10)


class TestDetectLocal:
    def test_one_boundary_per_anchor_in_order(self):
        markup = _anchored("Intro", "Setup Guide", "FAQ")
        result = detect_local(markup)

        assert [b.title for b in result] == ["Intro", "Setup Guide", "FAQ"]
        assert [b.ordinal for b in result] == [1, 2, 3]
        assert [b.suggested_file_name for b in result] == ["intro.md", "setup-guide.md", "faq.md"]

    def test_ranges_are_contiguous_and_cover_to_end(self):
        markup = "<h1>Cover</h1>" + _anchored("One", "Two", "Three")
        result = detect_local(markup)

        assert result[0].html_range.start == markup.index("<p>")
        for prev, nxt in zip(result, result[1:]):
            assert prev.html_range.end == nxt.html_range.start
        assert result[-1].html_range.end == len(markup)

    def test_range_slices_hold_own_content(self):
        markup = _anchored("One", "Two")
        first, second = detect_local(markup)

        assert "Body 0" in first.html_range.slice(markup)
        assert "Body 1" not in first.html_range.slice(markup)
        assert second.html_range.slice(markup).startswith('<p><a id="t1"></a>Two</p>')

    def test_page_numbers_are_ordinals(self):
        result = detect_local(_anchored("One", "Two"))
        assert [(b.page_start, b.page_end) for b in result] == [(1, 1), (2, 2)]

    def test_file_names_are_kebab_case(self):
        result = detect_local(_anchored("Getting Started!", "API: Reference", "v2 Notes"))
        for b in result:
            assert _FILE_NAME_RE.match(b.suggested_file_name), b.suggested_file_name

    def test_idempotent(self):
        markup = _anchored("Intro", "Details")
        assert detect_local(markup) == detect_local(markup)

    def test_entities_are_decoded(self):
        result = detect_local(_anchored("Q&amp;A", "Next"))
        assert result[0].title == "Q&A"
        assert result[0].suggested_file_name == "q-a.md"

    def test_colliding_titles_get_suffix(self):
        result = detect_local(_anchored("Notes", "Notes", "notes!"))
        assert [b.suggested_file_name for b in result] == ["notes.md", "notes-2.md", "notes-3.md"]

    def test_filtered_candidates_are_skipped(self):
        result = detect_local(_anchored("Intro", "This is a sentence.", "42", "Outro"))
        assert [b.title for b in result] == ["Intro", "Outro"]

    def test_token_layer_used_without_anchors(self):
        markup = (
            "<p>system-prompt</p><p>Some body text here.</p>"
            "<p>user_guide</p><p>More body.</p>"
        )
        result = detect_local(markup)

        assert [b.title for b in result] == ["system-prompt", "user_guide"]
        assert result[1].suggested_file_name == "user-guide.md"
        assert result[0].html_range == HtmlRange(0, markup.index("<p>user_guide"))

    def test_anchor_layer_wins_over_tokens(self):
        markup = '<p>system-prompt</p><p><a id="a"></a>Intro</p><p>text</p>'
        result = detect_local(markup)
        assert [b.title for b in result] == ["Intro"]

    def test_plain_prose_gives_nothing(self):
        assert detect_local("<p>Just a paragraph of text.</p><p>Another one</p>") == []

    def test_empty_markup(self):
        assert detect_local("") == []

    def test_config_length_limits(self):
        cfg = SplitterConfig(separator_min_length=6)
        result = detect_local(_anchored("Intro", "Details"), cfg)
        assert [b.title for b in result] == ["Details"]


def test_find_candidates_returns_offsets():
    markup = _anchored("One", "Two")
    found = find_candidates(markup, SEPARATOR_PATTERNS[0])
    assert found == [("One", 0), ("Two", markup.index('<p><a id="t1"'))]
