"""
Tests for the query engine.
"""

import asyncio

import pytest
import numpy as np
from unittest.mock import AsyncMock, MagicMock

from noveltymap.agents.assessor import RuleBasedAssessor, TieredAssessor
from noveltymap.core.errors import AssessmentUnavailable, EmbeddingFailure, IndexNotReady, InvalidInput
from noveltymap.core.ingestion import IndexBuilder
from noveltymap.core.query_engine import QueryEngine
from noveltymap.vector.index import CorpusIndex
from noveltymap.vector.types import CorpusEntry, Point2D
from tests.conftest import ScriptedEmbedding

DOG_QUERY = "A ride-sharing app for walking dogs in cities"


def build(texts, embedder):
    return asyncio.run(IndexBuilder(embedder).build(texts))


def test_short_query_is_rejected_without_embedding(scripted_embedder):
    index = build(["Uber for dog walking"], scripted_embedder)
    scripted_embedder.calls.clear()
    engine = QueryEngine(index, scripted_embedder)

    with pytest.raises(InvalidInput) as exc_info:
        asyncio.run(engine.query("too short"))

    assert scripted_embedder.calls == []
    assert exc_info.value.min_length == 15


def test_whitespace_padding_does_not_count_toward_length(scripted_embedder):
    engine = QueryEngine(CorpusIndex([]), scripted_embedder)
    with pytest.raises(InvalidInput):
        asyncio.run(engine.query("   short   " + " " * 20))


def test_query_before_ready_fails_fast(scripted_embedder):
    engine = QueryEngine(CorpusIndex.pending(), scripted_embedder)

    with pytest.raises(IndexNotReady):
        asyncio.run(engine.query(DOG_QUERY))
    assert scripted_embedder.calls == []


def test_query_without_index_fails_fast(scripted_embedder):
    with pytest.raises(IndexNotReady):
        asyncio.run(QueryEngine(None, scripted_embedder).query(DOG_QUERY))


def test_identical_text_is_a_perfect_match(hash_embedder):
    pitch = "On-demand drone delivery for medical supplies in rural areas"
    engine = QueryEngine(build([pitch], hash_embedder), hash_embedder)

    result = asyncio.run(engine.query(pitch))

    assert result.best_similarity == pytest.approx(1.0, abs=1e-5)
    assert result.novelty_score == 1
    assert result.title == "Highly Saturated"


def test_empty_corpus_is_fully_novel(hash_embedder):
    engine = QueryEngine(CorpusIndex([]), hash_embedder)

    result = asyncio.run(engine.query(DOG_QUERY))

    assert result.best_similarity == 0.0
    assert result.novelty_score == 10
    assert result.title == "High Innovation Area"


def test_dog_walking_scenario(scripted_embedder):
    index = build(["Uber for dog walking", "Airbnb for photography studios"], scripted_embedder)
    engine = QueryEngine(index, scripted_embedder)

    result = asyncio.run(engine.query(DOG_QUERY))
    similarity, entry = index.best_match(asyncio.run(scripted_embedder.embed(DOG_QUERY)))

    assert entry.text == "Uber for dog walking"
    assert result.best_similarity == pytest.approx(similarity)
    assert result.best_similarity > 0.4
    assert result.title != "High Innovation Area"
    assert 1 <= result.novelty_score <= 6


def test_numeric_fields_are_repeatable(hash_embedder):
    index = build(["Uber for dog walking in urban areas", "Social network for vintage car collectors"], hash_embedder)
    engine = QueryEngine(index, hash_embedder)

    first = asyncio.run(engine.query(DOG_QUERY))
    second = asyncio.run(engine.query(DOG_QUERY))

    assert first.position == second.position
    assert first.novelty_score == second.novelty_score
    assert first.best_similarity == second.best_similarity


def test_position_is_independent_of_corpus(hash_embedder):
    small = QueryEngine(build(["Uber for dog walking"], hash_embedder), hash_embedder)
    large = QueryEngine(build([
        "Uber for dog walking",
        "Airbnb for photography studios",
        "Blockchain-based voting system for corporate governance",
    ], hash_embedder), hash_embedder)

    assert asyncio.run(small.query(DOG_QUERY)).position == asyncio.run(large.query(DOG_QUERY)).position


def test_ties_keep_first_entry():
    vector = np.array([1.0, 0.0], dtype=np.float32)
    first = CorpusEntry("first", vector.copy(), Point2D(0.0, 0.0))
    second = CorpusEntry("second", vector.copy(), Point2D(0.0, 0.0))

    similarity, entry = CorpusIndex([first, second]).best_match(vector)

    assert similarity == pytest.approx(1.0)
    assert entry is first


def test_negative_similarities_count_as_no_match():
    entry = CorpusEntry("opposite", np.array([-1.0, 0.0], dtype=np.float32), Point2D(0.0, 0.0))
    similarity, match = CorpusIndex([entry]).best_match(np.array([1.0, 0.0]))

    assert similarity == 0.0
    assert match is None


def test_query_embedding_failure_is_surfaced(scripted_embedder):
    index = build(["Uber for dog walking"], scripted_embedder)
    scripted_embedder.fail_on.add(DOG_QUERY)
    engine = QueryEngine(index, scripted_embedder)

    with pytest.raises(EmbeddingFailure):
        asyncio.run(engine.query(DOG_QUERY))


def test_unexpected_embedder_error_is_wrapped():
    embedder = MagicMock()
    embedder.embed = AsyncMock(side_effect=OSError("model file vanished"))
    engine = QueryEngine(CorpusIndex([]), embedder)

    with pytest.raises(EmbeddingFailure):
        asyncio.run(engine.query(DOG_QUERY))


def test_remote_assessment_failure_uses_rule_table(scripted_embedder):
    primary = MagicMock()
    primary.name = "remote"
    primary.is_available = AsyncMock(return_value=True)
    primary.summarize = AsyncMock(side_effect=AssessmentUnavailable("quota exceeded"))

    index = build(["Uber for dog walking", "Airbnb for photography studios"], scripted_embedder)
    engine = QueryEngine(index, scripted_embedder, TieredAssessor(primary, RuleBasedAssessor()))

    result = asyncio.run(engine.query(DOG_QUERY))

    primary.summarize.assert_awaited_once()
    assert result.title == "Highly Saturated"


def test_result_dict_contract(scripted_embedder):
    index = build(["Uber for dog walking"], scripted_embedder)
    result = asyncio.run(QueryEngine(index, scripted_embedder).query(DOG_QUERY))

    data = result.to_dict()
    assert set(data) == {
        "x", "y", "noveltyScore", "localSimilarityScore",
        "assessmentTitle", "assessmentDescription",
    }
    assert -100 <= data["x"] <= 100
    assert -100 <= data["y"] <= 100
