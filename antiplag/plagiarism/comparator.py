"""
Character n-gram similarity between documents.

Texts are normalized to lower-cased letters and digits, shingled into
contiguous character n-grams, and scored with Jaccard similarity on a
0-100 scale.
"""

from dataclasses import dataclass
from typing import Set, Union

# -------------------------------
# Configuration
# -------------------------------

DEFAULT_NGRAM_SIZE = 3
DEFAULT_PLAGIARISM_THRESHOLD = 50.0


@dataclass(frozen=True)
class SimilarityConfig:
    """Immutable tuning shared by the comparator and the orchestrator."""

    ngram_size: int = DEFAULT_NGRAM_SIZE
    plagiarism_threshold: float = DEFAULT_PLAGIARISM_THRESHOLD

    def __post_init__(self):
        if self.ngram_size < 1:
            raise ValueError("ngram_size must be at least 1")
        if not 0.0 <= self.plagiarism_threshold <= 100.0:
            raise ValueError("plagiarism_threshold must be between 0.0 and 100.0")

    @classmethod
    def from_settings(cls, settings) -> "SimilarityConfig":
        return cls(
            ngram_size=settings.ngram_size,
            plagiarism_threshold=settings.plagiarism_threshold,
        )


# -------------------------------
# Normalization
# -------------------------------

def normalize_text(content: Union[bytes, str]) -> str:
    """Keep only letters and decimal digits, lower-cased, in original order."""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    # lower() may expand a letter into letter + combining mark, so filter afterwards
    return "".join(ch for ch in content.lower() if ch.isalpha() or ch.isdecimal())


# -------------------------------
# Shingling and scoring
# -------------------------------

def create_ngrams(text: str, n: int = DEFAULT_NGRAM_SIZE) -> Set[str]:
    """All contiguous substrings of length n; empty when the text is shorter than n."""
    return {text[i:i + n] for i in range(len(text) - n + 1)}


def jaccard_percentage(ngrams_a: Set[str], ngrams_b: Set[str]) -> float:
    union = len(ngrams_a | ngrams_b)
    if union == 0:
        return 0.0
    return len(ngrams_a & ngrams_b) / union * 100.0


class TextComparator:
    """Scores textual overlap between two documents in [0, 100]."""

    def __init__(self, config: SimilarityConfig = SimilarityConfig()):
        self.config = config

    def compare(self, content_a: Union[bytes, str], content_b: Union[bytes, str]) -> float:
        text_a = normalize_text(content_a)
        text_b = normalize_text(content_b)

        if not text_a and not text_b:
            return 100.0
        if not text_a or not text_b:
            return 0.0

        n = self.config.ngram_size
        ngrams_a = create_ngrams(text_a, n)
        ngrams_b = create_ngrams(text_b, n)
        if not ngrams_a and not ngrams_b:
            # both shorter than n
            return 100.0 if text_a == text_b else 0.0
        return jaccard_percentage(ngrams_a, ngrams_b)
