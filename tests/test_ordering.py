import datetime as dt

import pytest

from rating_api.ordering import day_key, hash_str, mulberry32, parse_day_key, rating_order


@pytest.mark.parametrize(
    "value,expected",
    [
        ("", 0x811C9DC5),
        ("a", 0xE40C292C),
        ("foobar", 0xBF9CF968),
    ],
)
def test_hash_str_matches_fnv1a_vectors(value, expected):
    assert hash_str(value) == expected


def test_hash_str_stays_32_bit():
    assert 0 <= hash_str("20250101Christian" * 50) <= 0xFFFFFFFF


def test_mulberry32_is_deterministic_and_in_range():
    a = mulberry32(12345)
    b = mulberry32(12345)
    first = [a() for _ in range(100)]
    assert first == [b() for _ in range(100)]
    assert all(0.0 <= x < 1.0 for x in first)
    assert len(set(first)) > 90


def test_mulberry32_seeds_diverge():
    assert mulberry32(1)() != mulberry32(2)()


def test_rating_order_is_permutation_without_self():
    players = ["Bader", "Charbel", "Christian", "Edmond", "Edwin", "Justin", "Marc", "Rayan"]
    order = rating_order(players, "Marc", "20250314")
    assert sorted(order) == sorted(p for p in players if p != "Marc")


def test_rating_order_stable_for_same_day():
    players = ["Bader", "Charbel", "Christian", "Edmond", "Edwin"]
    assert rating_order(players, "Edwin", "20250314") == rating_order(players, "Edwin", "20250314")


def test_rating_order_does_not_mutate_input():
    players = ["Bader", "Charbel", "Christian"]
    rating_order(players, "Bader", "20250314")
    assert players == ["Bader", "Charbel", "Christian"]


def test_rating_order_small_rosters():
    assert rating_order(["Bader"], "Bader", "20250314") == []
    assert rating_order(["Bader", "Marc"], "Bader", "20250314") == ["Marc"]


def test_day_key_format():
    assert day_key(dt.date(2025, 3, 4)) == "20250304"
    assert len(day_key()) == 8


@pytest.mark.parametrize("bad", ["2025-03-04", "2025034", "20251399", "abcdefgh"])
def test_parse_day_key_rejects_garbage(bad):
    with pytest.raises(ValueError):
        parse_day_key(bad)


# Reference values produced by the browser client's hashStr/mulberry32/shuffle.
CLIENT_ROSTER = ["Bader", "Charbel", "Christian", "Edmond", "Edwin", "Justin", "Marc", "Rayan"]


def test_hash_str_matches_client():
    assert hash_str("20250101Bader") == 3244823914


def test_mulberry32_matches_client():
    rng = mulberry32(hash_str("20250101Bader"))
    assert [rng() for _ in range(3)] == [
        0.6628924417309463,
        0.9782997414004058,
        0.38393983454443514,
    ]


def test_rating_order_matches_client():
    assert rating_order(CLIENT_ROSTER, "Bader", "20250101") == [
        "Charbel", "Edwin", "Rayan", "Edmond", "Christian", "Marc", "Justin",
    ]
