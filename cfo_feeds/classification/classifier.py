"""Keyword-based classifier and relevance scoring."""

from typing import Dict, List, Tuple, Union

from .interfaces import ClassifierInterface, ClassificationResult, Category


# Categories are tested in this order; the first one with a keyword hit wins.
CATEGORY_PRIORITY: Tuple[Category, ...] = (
    Category.CAPITAL_STRATEGY,
    Category.PRIVATE_MARKETS,
    Category.OPERATIONAL_EXCELLENCE,
    Category.LEADERSHIP,
    Category.AFRICA_FINANCE,
)

CATEGORY_KEYWORDS: Dict[Category, List[str]] = {
    Category.CAPITAL_STRATEGY: [
        "rate", "inflation", "capital", "market", "macro", "liquidity", "monetary", "fiscal"
    ],
    Category.PRIVATE_MARKETS: [
        "deal", "acquisition", "valuation", "lbo", "private equity", "funding",
        "term sheet", "merger", "buyout"
    ],
    Category.OPERATIONAL_EXCELLENCE: [
        "productivity", "cost", "efficiency", "automation", "forecast",
        "transformation", "fp&a", "operations"
    ],
    Category.LEADERSHIP: [
        "leadership", "culture", "behavior", "influence", "team", "decision",
        "mindset", "conscious"
    ],
    Category.AFRICA_FINANCE: [
        "africa", "african", "sub-saharan", "nigeria", "kenya", "south africa"
    ],
}

RELEVANCE_SCORES: Dict[Category, int] = {
    Category.PRIVATE_MARKETS: 5,
    Category.AFRICA_FINANCE: 5,
    Category.CAPITAL_STRATEGY: 4,
    Category.OPERATIONAL_EXCELLENCE: 4,
    Category.LEADERSHIP: 3,
    Category.UNCATEGORIZED: 1,
}

DEFAULT_RELEVANCE = 2


def _text(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def categorize(title: str, description: str) -> Category:
    """Map an article's text to the first category whose keywords it contains."""
    text = _text(title, description)
    for category in CATEGORY_PRIORITY:
        if any(keyword in text for keyword in CATEGORY_KEYWORDS[category]):
            return category
    return Category.UNCATEGORIZED


def relevance_score(category: Union[Category, str]) -> int:
    """Static 1-5 weight for a category. Unknown categories score 2."""
    if isinstance(category, str):
        try:
            category = Category(category)
        except ValueError:
            return DEFAULT_RELEVANCE
    return RELEVANCE_SCORES.get(category, DEFAULT_RELEVANCE)


class KeywordClassifier(ClassifierInterface):
    """Deterministic substring classifier over title and description."""

    def classify(self, title: str, description: str) -> ClassificationResult:
        """Classify article and report which keywords decided it."""
        text = _text(title, description)

        for category in CATEGORY_PRIORITY:
            matches = [k for k in CATEGORY_KEYWORDS[category] if k in text]
            if matches:
                return ClassificationResult(
                    category=category,
                    relevance_score=relevance_score(category),
                    matched_keywords=matches,
                )

        return ClassificationResult(
            category=Category.UNCATEGORIZED,
            relevance_score=relevance_score(Category.UNCATEGORIZED),
        )
