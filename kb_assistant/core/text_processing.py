"""
Text heuristics for context assembly.

Sentence selection, token-budgeted context packing, keyword extraction
and token estimation. All functions are pure.

Dependencies: kb_assistant.models.chunk
System role: Context optimizer for the RAG pipeline
"""

import math
import re
from collections import Counter
from collections.abc import Iterable

from kb_assistant.models.chunk import DocumentChunk

STOPWORDS = frozenset(
    {
        "the", "is", "at", "which", "on", "a", "an", "and", "or", "but",
        "in", "with", "to", "for", "of", "as", "by", "that", "this", "it",
        "from", "are", "was", "were", "been", "be", "have", "has", "had",
        "do", "does", "did", "will", "would", "should", "could", "can",
        "may", "might", "must", "shall",
    }
)

SENTENCE_SPLIT = re.compile(r"[.!?]+")
NON_WORD = re.compile(r"[^\w\s]")

MIN_SENTENCE_CHARS = 20
MIN_QUERY_TERM_CHARS = 3
SENTENCES_PER_CHUNK = 4
CHARS_PER_TOKEN = 4


def _split_sentences(text: str) -> list[str]:
    sentences = (part.strip() for part in SENTENCE_SPLIT.split(text))
    return [s for s in sentences if len(s) > MIN_SENTENCE_CHARS]


def select_relevant_sentences(text: str, query: str, max_sentences: int = 3) -> str:
    """
    Keep the sentences of text that mention the most query terms.

    Text with no more than max_sentences usable sentences is returned
    unchanged.

    Args:
        text: Chunk text
        query: User question
        max_sentences: Number of sentences to keep

    Returns:
        str: Selected sentences joined with ". " and a closing period
    """
    sentences = _split_sentences(text)
    if len(sentences) <= max_sentences:
        return text

    terms = [t for t in query.lower().split() if len(t) > MIN_QUERY_TERM_CHARS]

    def relevance(sentence: str) -> int:
        lowered = sentence.lower()
        return sum(1 for term in terms if term in lowered)

    # sorted() is stable, so equal scores keep document order
    ranked = sorted(sentences, key=relevance, reverse=True)
    return ". ".join(ranked[:max_sentences]) + "."


def estimate_chars_as_tokens(text: str) -> int:
    """Token cost used for context budgeting: ceil(chars / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def optimize_context(
    chunks: Iterable[DocumentChunk],
    query: str,
    max_tokens: int = 2000,
) -> str:
    """
    Pack relevant text from ranked chunks into a token budget.

    Chunks are consumed in the order given. Packing stops at the first
    chunk whose text would push the total over max_tokens.

    Args:
        chunks: Chunks ordered by relevance
        query: User question
        max_tokens: Token budget for the whole context

    Returns:
        str: Context blocks tagged with their source title, stripped
    """
    parts: list[str] = []
    used_tokens = 0

    for chunk in chunks:
        relevant = select_relevant_sentences(chunk.text, query, SENTENCES_PER_CHUNK)
        cost = estimate_chars_as_tokens(relevant)
        if used_tokens + cost > max_tokens:
            break
        title = chunk.metadata.title or "Unknown Source"
        parts.append(f"\n\n[Source: {title}]\n{relevant}")
        used_tokens += cost

    return "".join(parts).strip()


def extract_keywords(text: str, max_keywords: int = 5) -> list[str]:
    """
    Most frequent content words in text.

    Tokens of three characters or fewer and stopwords are ignored. Ties
    keep the order in which the words first appear.
    """
    tokens = NON_WORD.sub(" ", text.lower()).split()
    counts = Counter(t for t in tokens if len(t) > 3 and t not in STOPWORDS)
    # Counter preserves first-seen order and most_common() sorts stably
    return [word for word, _ in counts.most_common(max_keywords)]


def estimate_token_count(text: str) -> int:
    """Rough token estimate blending character and word counts."""
    chars = len(text)
    words = len(text.split())
    return math.ceil((chars / CHARS_PER_TOKEN + words) / 2)
