"""Article categorization and relevance scoring."""

from .interfaces import Category, ClassificationResult, ClassifierInterface
from .classifier import (
    CATEGORY_KEYWORDS, CATEGORY_PRIORITY, RELEVANCE_SCORES,
    KeywordClassifier, categorize, relevance_score
)

__all__ = [
    "Category", "ClassificationResult", "ClassifierInterface",
    "CATEGORY_KEYWORDS", "CATEGORY_PRIORITY", "RELEVANCE_SCORES",
    "KeywordClassifier", "categorize", "relevance_score"
]
