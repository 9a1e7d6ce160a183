import pytest

from anbykv.rng import Random


def test_first_value_from_seed_one():
    assert Random(1).next() == 16807


def test_same_seed_same_sequence():
    a = Random(301)
    b = Random(301)
    assert [a.next() for _ in range(100)] == [b.next() for _ in range(100)]


def test_different_seeds_differ():
    a = Random(301)
    b = Random(1000)
    assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]


@pytest.mark.parametrize("bad_seed", [0, 2147483647])
def test_bad_seeds_fall_back_to_one(bad_seed):
    bad = Random(bad_seed)
    good = Random(1)
    assert [bad.next() for _ in range(20)] == [good.next() for _ in range(20)]


def test_seed_is_masked_to_31_bits():
    a = Random(0xDEADBEEF)
    b = Random(0xDEADBEEF & 0x7FFFFFFF)
    assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]


def test_next_stays_in_range():
    rnd = Random(12345)
    for _ in range(10000):
        value = rnd.next()
        assert 1 <= value <= 2147483646


def test_uniform_range():
    rnd = Random(7)
    values = [rnd.uniform(10) for _ in range(2000)]
    assert all(0 <= v < 10 for v in values)
    assert set(values) == set(range(10))


def test_one_in_one_always_true():
    rnd = Random(99)
    assert all(rnd.one_in(1) for _ in range(100))


def test_one_in_frequency():
    rnd = Random(42)
    hits = sum(rnd.one_in(4) for _ in range(8000))
    assert 1500 < hits < 2500


def test_skewed_range():
    rnd = Random(5)
    values = [rnd.skewed(6) for _ in range(3000)]
    assert all(0 <= v < 64 for v in values)
    small = sum(1 for v in values if v < 8)
    assert small > len(values) // 2


@pytest.mark.parametrize("n", [0, -3])
def test_uniform_rejects_non_positive(n):
    with pytest.raises(ValueError):
        Random(1).uniform(n)


def test_one_in_rejects_zero():
    with pytest.raises(ValueError):
        Random(1).one_in(0)


def test_skewed_rejects_negative():
    with pytest.raises(ValueError):
        Random(1).skewed(-1)