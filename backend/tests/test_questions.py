import random

import pytest

from app.interview.questions import (
    CATEGORIES,
    DEFAULT_TIME_LIMITS_SEC,
    DIFFICULTIES,
    QUESTION_BANK,
    get_question,
    list_categories,
    select_questions,
)


def test_every_category_has_every_difficulty():
    overview = {item["key"]: item for item in list_categories()}
    assert set(overview) == set(CATEGORIES)
    for item in overview.values():
        assert all(item["question_counts"][level] >= 3 for level in DIFFICULTIES)
        assert item["total_questions"] == sum(item["question_counts"].values())


def test_question_ids_unique_and_time_limits_set():
    ids = [q.id for q in QUESTION_BANK]
    assert len(ids) == len(set(ids))
    assert get_question("tech-e-1").time_limit_sec == DEFAULT_TIME_LIMITS_SEC["easy"]
    assert get_question("tech-h-3").time_limit_sec == 150
    assert get_question("nope") is None


def test_select_questions_matches_filters_and_is_distinct():
    picked = select_questions("Behavioral", "MEDIUM", 3, rng=random.Random(1))
    assert len(picked) == 3
    assert len({q.id for q in picked}) == 3
    assert all(q.category == "behavioral" and q.difficulty == "medium" for q in picked)


def test_select_questions_caps_at_pool_size():
    picked = select_questions("technical", "easy", 50, rng=random.Random(1))
    assert len(picked) == 4


def test_select_questions_seeded_rng_is_repeatable():
    first = select_questions("hr", "hard", 2, rng=random.Random(42))
    second = select_questions("hr", "hard", 2, rng=random.Random(42))
    assert first == second


@pytest.mark.parametrize("category,difficulty", [("astrology", "easy"), ("technical", "impossible")])
def test_select_questions_rejects_unknown_filters(category, difficulty):
    with pytest.raises(ValueError):
        select_questions(category, difficulty, 1)
