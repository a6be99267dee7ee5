"""
Tests for the offline keyword heuristics (single item and batch).
"""

import uuid
from datetime import datetime, timezone

import pytest

from feedtrack.models.feedback import Category, FeedbackAnalysis, FeedbackRecord, Sentiment
from feedtrack.services.classification import heuristics


def _record(text: str, sentiment: Sentiment = Sentiment.NEUTRAL) -> FeedbackRecord:
    return FeedbackRecord(
        id=uuid.uuid4().hex,
        text=text,
        created_at=datetime.now(timezone.utc),
        analysis=FeedbackAnalysis(sentiment=sentiment, category=Category.OTHERS, confidence=60),
    )


class TestClassify:

    @pytest.mark.parametrize("text,expected", [
        ("The new syllabus is great", Sentiment.POSITIVE),
        ("Wifi has improved a lot", Sentiment.POSITIVE),
        ("Worst semester so far", Sentiment.NEGATIVE),
        ("There is a problem with the projector", Sentiment.NEGATIVE),
        ("Timetable was published on Monday", Sentiment.NEUTRAL),
    ])
    def test_sentiment(self, text, expected):
        assert heuristics.classify(text).sentiment == expected

    @pytest.mark.parametrize("text,expected", [
        ("The computer in room 4 is broken", Category.LABS),
        ("Lecture notes are never uploaded", Category.TEACHING),
        ("Canteen closes too early", Category.HOSTEL),
        ("The exam schedule clashes", Category.EXAMS),
        ("Please fix the fan in block B", Category.FACILITIES),
        ("Library timings should change", Category.OTHERS),
    ])
    def test_category(self, text, expected):
        assert heuristics.classify(text).category == expected

    def test_positive_group_checked_before_negative(self):
        result = heuristics.classify("the food was good but the lab was bad")
        assert result.sentiment == Sentiment.POSITIVE

    def test_labs_checked_before_exams(self):
        result = heuristics.classify("The lab exam was scheduled at 8am")
        assert result.category == Category.LABS

    def test_case_insensitive(self):
        result = heuristics.classify("GREAT LECTURE TODAY")
        assert result.sentiment == Sentiment.POSITIVE
        assert result.category == Category.TEACHING

    def test_deterministic(self):
        text = "Mess food is bad and the water cooler leaks"
        assert heuristics.classify(text) == heuristics.classify(text)

    def test_offline_markers_and_confidence(self):
        result = heuristics.classify("The lab computers are slow")
        assert result.confidence == 60
        assert result.highlights == ["Offline Analysis", "Negative feedback detected"]
        assert result.summary == "[Offline] This appears to be negative feedback regarding Labs."

    def test_empty_text_is_neutral_others(self):
        result = heuristics.classify("")
        assert result.sentiment == Sentiment.NEUTRAL
        assert result.category == Category.OTHERS


class TestSummarize:

    def test_mostly_positive(self):
        records = [_record("good teaching, great notes"), _record("excellent labs, love it")]
        result = heuristics.summarize(records)
        assert "Trend: Mostly Positive" in result.trends
        assert "Detected 0 complaints vs 4 compliments" in result.trends

    def test_mixed_when_difference_within_margin(self):
        records = [_record("good lectures"), _record("bad wifi")]
        result = heuristics.summarize(records)
        assert "Trend: Mixed Feedback" in result.trends

    def test_needs_attention(self):
        records = [_record("bad fan, worst room"), _record("poor notes"), _record("fail rate is high")]
        result = heuristics.summarize(records)
        assert "Trend: Needs Attention" in result.trends

    def test_counts_repeated_words(self):
        result = heuristics.summarize([_record("good good good good")])
        assert "vs 4 compliments" in result.trends

    def test_issue_tags(self):
        records = [
            _record("the computer lab is crowded"),
            _record("mess food is cold"),
            _record("washrooms are not clean"),
        ]
        result = heuristics.summarize(records)
        assert result.common_issues == ["Lab Infrastructure", "Canteen Quality", "Facility Maintenance"]

    def test_generic_issue_when_nothing_matches(self):
        result = heuristics.summarize([_record("timetable changes too often")])
        assert result.common_issues == ["General Improvements needed"]
        assert result.trends.startswith("[Offline]")
        assert result.corrective_actions == ["Investigate reported issues", "Conduct survey"]
        assert result.suggested_response == "We are reviewing all feedback."
