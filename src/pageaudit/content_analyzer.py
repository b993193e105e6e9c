"""Word statistics, n-grams, sentiment and reading time for page text."""

import logging
import math
import re
from collections import Counter
from typing import Callable, Iterable, Optional

from textblob import TextBlob

from pageaudit.config import default_thresholds
from pageaudit.constants import NGRAM_SIZES, STOP_WORDS
from pageaudit.models import ContentAnalysis, SentimentResult

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\b[a-z]+\b")

# (summed polarity, subjectivity) for a text
SentimentScorer = Callable[[str], tuple[float, float]]
ReadingTimeEstimator = Callable[[str], str]


def tokenize(text: str) -> list[str]:
    """Lowercase the text and return its alphabetic words."""
    return _WORD_RE.findall((text or "").lower())


def generate_ngrams(tokens: list[str], n: int) -> list[str]:
    """Return every contiguous n-word phrase of ``tokens``."""
    if n <= 0:
        return []
    return [" ".join(tokens[i:i + n]) for i in range(len(tokens) - n + 1)]


def textblob_sentiment(text: str) -> tuple[float, float]:
    """Score text with TextBlob's pattern lexicon.

    The score is the summed polarity of every scored word or phrase, not the
    mean TextBlob reports, so dividing it by the token count gives a
    per-word comparative value.

    Returns:
        Tuple of (summed polarity, subjectivity)
    """
    sentiment = TextBlob(text).sentiment_assessments
    score = sum(assessment[1] for assessment in sentiment.assessments)
    return float(score), float(sentiment.subjectivity)


def estimate_reading_time(text: str, wpm: Optional[int] = None) -> str:
    """Estimate reading time as "N min read" (at least one minute)."""
    wpm = wpm or default_thresholds.words_per_minute
    word_count = len((text or "").split())
    minutes = max(1, math.ceil(word_count / wpm))
    return f"{minutes} min read"


class ContentAnalyzer:
    """Analyzes body text for keywords, phrases, sentiment and reading time."""

    def __init__(
        self,
        stop_words: Optional[Iterable[str]] = None,
        sentiment_scorer: Optional[SentimentScorer] = None,
        reading_time_estimator: Optional[ReadingTimeEstimator] = None,
    ):
        """Initialize the analyzer.

        Args:
            stop_words: Words excluded from frequencies and n-grams
            sentiment_scorer: Callable returning (polarity, subjectivity)
            reading_time_estimator: Callable returning a reading time label
        """
        self.stop_words = frozenset(stop_words) if stop_words is not None else STOP_WORDS
        self.sentiment_scorer = sentiment_scorer or textblob_sentiment
        self.reading_time_estimator = reading_time_estimator or estimate_reading_time

    def word_frequencies(self, tokens: list[str]) -> dict[str, int]:
        return dict(Counter(t for t in tokens if t not in self.stop_words))

    def ngram_counts(self, tokens: list[str]) -> dict[str, dict[str, int]]:
        """Count n-grams for each configured size, skipping any containing a stopword."""
        counts = {}
        for n in NGRAM_SIZES:
            phrases = Counter(
                phrase
                for phrase in generate_ngrams(tokens, n)
                if not any(word in self.stop_words for word in phrase.split(" "))
            )
            counts[f"{n}-word"] = dict(phrases)
        return counts

    @staticmethod
    def keyword_density(frequencies: dict[str, int], word_count: int) -> dict[str, str]:
        if word_count == 0:
            return {}
        return {
            word: f"{count / word_count * 100:.2f}%"
            for word, count in frequencies.items()
        }

    def sentiment(self, text: str, word_count: int) -> SentimentResult:
        if not text or not text.strip():
            return SentimentResult()
        score, subjectivity = self.sentiment_scorer(text)
        comparative = score / word_count if word_count else 0.0
        return SentimentResult(
            score=score, comparative=comparative, subjectivity=subjectivity
        )

    def analyze(self, text: Optional[str]) -> ContentAnalysis:
        """Analyze a block of text.

        Args:
            text: Plain body text

        Returns:
            ContentAnalysis with frequencies, n-grams, density, sentiment
            and reading time
        """
        text = text or ""
        tokens = tokenize(text)
        word_count = len(tokens)
        frequencies = self.word_frequencies(tokens)

        logger.debug(f"Analyzing {word_count} words ({len(frequencies)} distinct keywords)")
        return ContentAnalysis(
            word_count=word_count,
            word_frequencies=frequencies,
            ngram_counts=self.ngram_counts(tokens),
            keyword_density=self.keyword_density(frequencies, word_count),
            sentiment=self.sentiment(text, word_count),
            reading_time=self.reading_time_estimator(text),
        )


def analyze_content(text: Optional[str]) -> ContentAnalysis:
    """Analyze text with the default stopwords and scorers."""
    return ContentAnalyzer().analyze(text)
