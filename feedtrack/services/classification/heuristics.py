"""
Offline keyword heuristics.

Pure, deterministic fallbacks used whenever the remote path is
unavailable. Keyword groups are matched as lower-case substrings and
tested in a fixed priority order; the first matching group wins.
Output is marked "[Offline]" so consumers can tell it apart from
AI-derived labels.
"""

import re
from typing import Iterable, List

from feedtrack.models.feedback import Category, FeedbackAnalysis, FeedbackRecord, InsightResult, Sentiment

OFFLINE_MARKER = "[Offline]"
HEURISTIC_CONFIDENCE = 60

SENTIMENT_RULES = [
    (Sentiment.POSITIVE, ("good", "great", "excellent", "love", "best", "improved")),
    (Sentiment.NEGATIVE, ("bad", "worst", "slow", "poor", "fail", "issue", "problem")),
]

CATEGORY_RULES = [
    (Category.LABS, ("lab", "computer", "pc")),
    (Category.TEACHING, ("class", "lecture", "teaching", "sir", "mam")),
    (Category.HOSTEL, ("food", "mess", "canteen")),
    (Category.EXAMS, ("exam", "paper", "test")),
    (Category.FACILITIES, ("fan", "light", "water", "clean")),
]

# Batch trend counting
POSITIVE_TREND_WORDS = ("good", "great", "excellent", "love")
NEGATIVE_TREND_WORDS = ("bad", "worst", "poor", "fail")
TREND_MARGIN = 2

ISSUE_RULES = [
    ("Lab Infrastructure", ("lab", "computer")),
    ("Canteen Quality", ("mess", "food")),
    ("Facility Maintenance", ("clean", "water")),
]
GENERIC_ISSUE = "General Improvements needed"


def _first_match(text: str, rules, default):
    for label, keywords in rules:
        if any(keyword in text for keyword in keywords):
            return label
    return default


def classify(text: str) -> FeedbackAnalysis:
    """Label a single feedback text without any I/O."""
    lowered = text.lower()
    sentiment = _first_match(lowered, SENTIMENT_RULES, Sentiment.NEUTRAL)
    category = _first_match(lowered, CATEGORY_RULES, Category.OTHERS)
    label = sentiment.value.capitalize()

    return FeedbackAnalysis(
        sentiment=sentiment,
        category=category,
        confidence=HEURISTIC_CONFIDENCE,
        highlights=["Offline Analysis", f"{label} feedback detected"],
        summary=f"{OFFLINE_MARKER} This appears to be {label.lower()} feedback regarding {category.value}.",
    )


def _count_occurrences(text: str, words: Iterable[str]) -> int:
    pattern = "|".join(re.escape(word) for word in words)
    return len(re.findall(pattern, text))


def trend_label(positive: int, negative: int) -> str:
    if positive > negative + TREND_MARGIN:
        return "Mostly Positive"
    if negative > positive + TREND_MARGIN:
        return "Needs Attention"
    return "Mixed Feedback"


def summarize(records: List[FeedbackRecord]) -> InsightResult:
    """Batch trend summary over the concatenated, lower-cased feedback texts."""
    texts = " ".join(record.text.lower() for record in records)
    positive = _count_occurrences(texts, POSITIVE_TREND_WORDS)
    negative = _count_occurrences(texts, NEGATIVE_TREND_WORDS)

    issues = [
        issue for issue, keywords in ISSUE_RULES
        if any(keyword in texts for keyword in keywords)
    ]

    return InsightResult(
        common_issues=issues or [GENERIC_ISSUE],
        trends=(
            f"{OFFLINE_MARKER} Detected {negative} complaints vs {positive} compliments. "
            f"Trend: {trend_label(positive, negative)}"
        ),
        corrective_actions=["Investigate reported issues", "Conduct survey"],
        suggested_response="We are reviewing all feedback.",
    )
