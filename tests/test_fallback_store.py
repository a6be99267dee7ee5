"""
Tests for the in-memory fallback store.
"""

import pytest

from feedtrack.models.feedback import Category, FeedbackAnalysis, Sentiment
from feedtrack.services.fallback_store import FallbackStore


def _analysis(sentiment=Sentiment.NEUTRAL, category=Category.OTHERS) -> FeedbackAnalysis:
    return FeedbackAnalysis(sentiment=sentiment, category=category, confidence=60)


@pytest.fixture
def store():
    return FallbackStore()


class TestCreate:

    @pytest.mark.asyncio
    async def test_ids_unique_and_timestamped(self, store):
        records = [await store.create(f"feedback {i}", _analysis()) for i in range(20)]

        assert len({r.id for r in records}) == 20
        assert all(r.created_at.tzinfo is not None for r in records)
        assert len(store) == 20

    @pytest.mark.asyncio
    async def test_fields_kept(self, store):
        record = await store.create(
            "Fan is broken", _analysis(Sentiment.NEGATIVE, Category.FACILITIES),
            student_id="S1", student_name="Asha", is_critical=True,
        )

        assert record.student_id == "S1"
        assert record.student_name == "Asha"
        assert record.is_critical is True
        assert record.analysis.category == Category.FACILITIES


class TestList:

    @pytest.mark.asyncio
    async def test_newest_first(self, store):
        created = [await store.create(f"feedback {i}", _analysis()) for i in range(5)]

        listed = await store.list()

        assert [r.id for r in listed] == [r.id for r in reversed(created)]

    @pytest.mark.asyncio
    async def test_filter_by_student_keeps_order(self, store):
        a1 = await store.create("first from A", _analysis(), student_id="A")
        await store.create("first from B", _analysis(), student_id="B")
        a2 = await store.create("second from A", _analysis(), student_id="A")

        listed = await store.list({"student_id": "A"})

        assert [r.id for r in listed] == [a2.id, a1.id]

    @pytest.mark.asyncio
    async def test_filter_by_enum_or_plain_value(self, store):
        await store.create("good", _analysis(Sentiment.POSITIVE))
        await store.create("bad", _analysis(Sentiment.NEGATIVE))

        assert len(await store.list({"sentiment": Sentiment.POSITIVE})) == 1
        assert len(await store.list({"sentiment": "POSITIVE"})) == 1

    @pytest.mark.asyncio
    async def test_limit(self, store):
        for i in range(5):
            await store.create(f"feedback {i}", _analysis())

        listed = await store.list(limit=2)

        assert [r.text for r in listed] == ["feedback 4", "feedback 3"]

    @pytest.mark.asyncio
    async def test_empty(self, store):
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, store):
        with pytest.raises(ValueError):
            await store.list({"mood": "happy"})


class TestAggregates:

    @pytest.mark.asyncio
    async def test_count_and_distinct(self, store):
        await store.create("a", _analysis(Sentiment.POSITIVE, Category.LABS), student_id="S1")
        await store.create("b", _analysis(Sentiment.NEGATIVE, Category.LABS), student_id="S2", is_critical=True)
        await store.create("c", _analysis(Sentiment.POSITIVE, Category.EXAMS), student_id="S1")

        assert await store.count() == 3
        assert await store.count({"is_critical": True}) == 1
        assert await store.count({"category": Category.LABS, "sentiment": "POSITIVE"}) == 1
        assert await store.distinct("student_id") == {"S1", "S2"}
        assert await store.distinct("category") == {"Labs", "Exams"}

    @pytest.mark.asyncio
    async def test_distinct_unknown_field_rejected(self, store):
        with pytest.raises(ValueError):
            await store.distinct("text")
