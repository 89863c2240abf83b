"""Interface definitions for article classification."""

from dataclasses import dataclass, field
from typing import List
from enum import Enum


class Category(Enum):
    """Topical taxonomy every article is filed under."""
    CAPITAL_STRATEGY = "Capital Strategy"
    PRIVATE_MARKETS = "Private Markets & M&A"
    OPERATIONAL_EXCELLENCE = "Operational Excellence"
    LEADERSHIP = "Leadership & Conscious CFO"
    AFRICA_FINANCE = "Africa Finance"
    UNCATEGORIZED = "Uncategorized"


@dataclass
class ClassificationResult:
    """Result of classifying an article."""
    category: Category
    relevance_score: int  # 1 to 5
    matched_keywords: List[str] = field(default_factory=list)


class ClassifierInterface:
    """Interface for article classification."""

    def classify(self, title: str, description: str) -> ClassificationResult:
        """Classify a single article."""
        raise NotImplementedError
