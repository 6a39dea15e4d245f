"""Tests for the bounded cache and the question/analysis caches."""

from unittest.mock import patch

import pytest

from reparai.funnel.models import GenerationResponse
from reparai.infrastructure.cache.bounded_cache import BoundedCache
from reparai.infrastructure.cache.question_cache import QuestionCache, make_cache_key
from reparai.services.diagnostics.service import DiagnosticService


class TestBoundedCache:
    def test_evicts_least_recently_used(self):
        cache: BoundedCache[int] = BoundedCache(max_size=2, ttl_seconds=60)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.get("a") == 1
        cache.set("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert len(cache) == 2
        assert cache.get_stats()["evictions"] == 1

    def test_expired_entries_are_misses(self):
        cache: BoundedCache[int] = BoundedCache(max_size=10, ttl_seconds=50)
        with patch("reparai.infrastructure.cache.bounded_cache.time.monotonic") as clock:
            clock.return_value = 100.0
            cache.set("a", 1)
            clock.return_value = 140.0
            assert cache.get("a") == 1
            clock.return_value = 200.0
            assert cache.get("a") is None
        assert len(cache) == 0

    def test_stats_track_hits_and_misses(self):
        cache: BoundedCache[str] = BoundedCache(max_size=5, ttl_seconds=60)
        cache.set("k", "v")
        cache.get("k")
        cache.get("missing")

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 50.0
        assert stats["size"] == 1

        cache.clear()
        assert cache.get_stats()["hits"] == 0

    def test_rejects_zero_size(self):
        with pytest.raises(ValueError):
            BoundedCache(max_size=0)


def test_cache_key_ignores_answer_order():
    a = make_cache_key("casa", {"q1": "sim", "q2": "nao"}, "pia")
    b = make_cache_key("casa", {"q2": "nao", "q1": "sim"}, "pia")
    assert a == b


def test_cache_key_treats_missing_text_as_empty():
    assert make_cache_key("casa", {}, None) == make_cache_key("casa", {}, "")


def test_cache_key_distinguishes_inputs():
    base = make_cache_key("casa", {"q1": "sim"}, None)
    assert base != make_cache_key("mobilidade", {"q1": "sim"}, None)
    assert base != make_cache_key("casa", {"q1": "nao"}, None)
    assert base != make_cache_key("casa", {"q1": "sim"}, "vazando")


def test_question_cache_lookup_and_store():
    cache = QuestionCache(max_size=10, ttl_seconds=60)
    result = GenerationResponse(questions=[], confidence=0.4)
    cache.store(make_cache_key("casa", {"q1": "sim"}, None), result)

    assert cache.lookup("casa", {"q1": "sim"}, "") is result
    assert cache.lookup("casa", {"q1": "nao"}, None) is None


@pytest.mark.asyncio
async def test_identical_inputs_reach_generator_once(scripted_generator, fake_analyzer, make_question):
    generator = scripted_generator(
        [{"questions": [make_question("q1", "Qual equipamento?")], "confidence": 0.1}]
    )
    service = DiagnosticService(
        generator=generator,
        analyzer=fake_analyzer(),
        question_cache=QuestionCache(max_size=10, ttl_seconds=60),
    )

    first = await service.generate_questions("casa", {"q1": "sim", "q2": "nao"}, "pia")
    second = await service.generate_questions("casa", {"q2": "nao", "q1": "sim"}, "pia")

    assert len(generator.calls) == 1
    assert first == second
