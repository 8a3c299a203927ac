"""
Test suite for context optimization helpers.

Tests sentence selection, token-budgeted packing, keyword extraction
and token estimation.

System role: Verification of the context optimizer
"""

from kb_assistant.core.text_processing import (
    estimate_token_count,
    extract_keywords,
    optimize_context,
    select_relevant_sentences,
)

LONG_TEXT = (
    "The weather today is cloudy with some wind. "
    "Python is a programming language used widely. "
    "Many people enjoy hiking in the mountains. "
    "The language python has dynamic typing and garbage collection. "
    "Cooking pasta requires boiling salted water first."
)


class TestSelectRelevantSentences:
    """Test suite for select_relevant_sentences."""

    def test_short_text_should_be_returned_unchanged(self) -> None:
        """Test texts with few usable sentences are kept whole."""
        text = "Only one sentence here that is long enough. Tiny. Short."

        assert select_relevant_sentences(text, "anything", max_sentences=3) == text

    def test_should_rank_sentences_by_query_term_matches(self) -> None:
        """Test sentences mentioning more query terms come first."""
        result = select_relevant_sentences(LONG_TEXT, "python language", max_sentences=2)

        assert result == (
            "Python is a programming language used widely. "
            "The language python has dynamic typing and garbage collection."
        )

    def test_ties_should_keep_document_order(self) -> None:
        """Test stable ordering among equal scores."""
        result = select_relevant_sentences(LONG_TEXT, "zzzz", max_sentences=2)

        assert result == (
            "The weather today is cloudy with some wind. "
            "Python is a programming language used widely."
        )

    def test_short_query_terms_should_be_ignored(self) -> None:
        """Test terms of three characters or fewer do not count."""
        result = select_relevant_sentences(LONG_TEXT, "the and has", max_sentences=1)

        assert result == "The weather today is cloudy with some wind."

    def test_sentences_of_twenty_chars_or_less_should_be_dropped(self) -> None:
        """Test short fragments never count toward or appear in the selection."""
        text = "Python python python. " + LONG_TEXT

        result = select_relevant_sentences(text, "python", max_sentences=4)

        assert "Python python python" not in result


class TestOptimizeContext:
    """Test suite for optimize_context packing."""

    def test_should_stop_at_first_overflow(self, make_chunk) -> None:
        """Test costs [500, 800, 900] with budget 1200 pack only the first."""
        chunks = [
            make_chunk("a" * 2000, title="A"),
            make_chunk("b" * 3200, title="B"),
            make_chunk("c" * 3600, title="C"),
        ]

        context = optimize_context(chunks, "query", max_tokens=1200)

        assert context == "[Source: A]\n" + "a" * 2000

    def test_should_not_skip_ahead_after_overflow(self, make_chunk) -> None:
        """Test a small later chunk is not packed once a chunk overflowed."""
        chunks = [
            make_chunk("a" * 2000, title="A"),
            make_chunk("b" * 3200, title="B"),
            make_chunk("c" * 40, title="C"),
        ]

        context = optimize_context(chunks, "query", max_tokens=1200)

        assert "[Source: C]" not in context

    def test_should_pack_up_to_exact_budget(self, make_chunk) -> None:
        """Test 500 + 700 tokens fit a budget of exactly 1200."""
        chunks = [
            make_chunk("a" * 2000, title="A"),
            make_chunk("b" * 2800, title="B"),
        ]

        context = optimize_context(chunks, "query", max_tokens=1200)

        assert context == "[Source: A]\n" + "a" * 2000 + "\n\n[Source: B]\n" + "b" * 2800

    def test_empty_input_should_give_empty_context(self) -> None:
        assert optimize_context([], "query") == ""

    def test_untitled_chunk_should_use_placeholder(self, make_chunk) -> None:
        context = optimize_context([make_chunk("Some content here.", title="")], "query")

        assert context.startswith("[Source: Unknown Source]")


class TestExtractKeywords:
    """Test suite for extract_keywords."""

    def test_should_rank_by_frequency(self) -> None:
        text = "Python python PYTHON data, data! code"

        assert extract_keywords(text) == ["python", "data", "code"]

    def test_ties_should_keep_first_appearance(self) -> None:
        assert extract_keywords("gamma alpha beta alpha gamma beta", 3) == [
            "gamma",
            "alpha",
            "beta",
        ]

    def test_should_drop_stopwords_and_short_tokens(self) -> None:
        text = "this that which would should could have been from with the cat dog"

        assert extract_keywords(text) == []

    def test_should_cap_result_length(self) -> None:
        text = "one1 two2 three3 four4 five5 six6 seven7"

        assert len(extract_keywords(text, max_keywords=5)) == 5


class TestEstimateTokenCount:
    """Test suite for estimate_token_count."""

    def test_should_blend_chars_and_words(self) -> None:
        # (11 / 4 + 2) / 2 = 2.375 -> 3
        assert estimate_token_count("hello world") == 3

    def test_empty_text_should_be_zero(self) -> None:
        assert estimate_token_count("") == 0
