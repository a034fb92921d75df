import random

from flopmap.core.models import Candidate, EnrichedPlace, PlaceDetails
from flopmap.core.ranking import rank_worst_rated


def make_place(place_id, rating, review_count):
    return EnrichedPlace(
        candidate=Candidate(place_id=place_id, name=place_id, category="restaurant"),
        details=PlaceDetails(place_id=place_id, name=place_id, rating=rating, review_count=review_count),
    )


def test_filters_missing_ratings_and_review_counts():
    places = [
        make_place("no-rating", None, 10),
        make_place("no-reviews", 1.0, 0),
        make_place("ok", 3.0, 1),
    ]

    assert [p.place_id for p in rank_worst_rated(places, 10)] == ["ok"]
    assert rank_worst_rated(places, 10, min_review_count=3) == []


def test_sorts_ascending_with_review_count_tie_break():
    places = [
        make_place("a", 2.5, 10),
        make_place("b", 1.2, 4),
        make_place("c", 1.2, 40),
        make_place("d", 4.8, 100),
        make_place("e", 1.0, 2),
    ]

    ranked = rank_worst_rated(places, 10)

    assert [p.place_id for p in ranked] == ["e", "c", "b", "a", "d"]


def test_near_equal_ratings_prefer_more_reviews():
    places = [make_place("few", 2.0, 3), make_place("many", 2.04, 300)]

    assert [p.place_id for p in rank_worst_rated(places, 10)] == ["many", "few"]


def test_empty_input():
    assert rank_worst_rated([], 5) == []


def test_twenty_places_five_bad_keeps_three_lowest():
    places = [make_place(f"good-{i}", 3.5 + (i % 15) / 10, 20 + i) for i in range(15)]
    places += [
        make_place("bad-1.8", 1.8, 12),
        make_place("bad-1.1", 1.1, 3),
        make_place("bad-2.0", 2.0, 1),
        make_place("bad-1.5", 1.5, 30),
        make_place("bad-1.3", 1.3, 8),
    ]
    random.Random(7).shuffle(places)

    ranked = rank_worst_rated(places, 3)

    assert [p.place_id for p in ranked] == ["bad-1.1", "bad-1.3", "bad-1.5"]


def test_ordering_properties_hold_for_random_inputs():
    rng = random.Random(42)
    for _ in range(50):
        places = [
            make_place(str(i), round(rng.uniform(1, 5), 1), rng.randint(0, 200))
            for i in range(rng.randint(0, 30))
        ]
        ranked = rank_worst_rated(places, 50)

        for first, second in zip(ranked, ranked[1:]):
            assert first.rating <= second.rating
            if abs(first.rating - second.rating) < 0.1 - 1e-9:
                assert first.review_count >= second.review_count
