import pytest

from delve.dungeon.rng import SEED_MAX, SEED_MODULUS, SeededRandom, coerce_seed


def test_coerce_digit_string_and_int():
    assert coerce_seed("123") == 123
    assert coerce_seed(" 42 ") == 42
    assert coerce_seed(5) == 5
    assert coerce_seed(0) == 0


def test_coerce_text_is_hashed_deterministically():
    a = coerce_seed("tavern")
    assert a == coerce_seed("tavern")
    assert a != coerce_seed("cellar")
    assert 0 <= a < 2**63


@pytest.mark.parametrize("value", [None, "", "   ", True])
def test_coerce_blank_generates(value):
    seed = coerce_seed(value)
    assert 1 <= seed <= SEED_MAX


def test_coerce_rejects_other_types():
    with pytest.raises(TypeError):
        coerce_seed(1.5)


def test_same_seed_same_sequence():
    a, b = SeededRandom(7), SeededRandom(7)
    assert [a.randrange(0, 100) for _ in range(10)] == [b.randrange(0, 100) for _ in range(10)]
    items_a, items_b = list(range(20)), list(range(20))
    a.shuffle(items_a)
    b.shuffle(items_b)
    assert items_a == items_b
    assert sorted(items_a) == list(range(20))


def test_zero_seed_is_kept_and_none_generates():
    assert SeededRandom(0).seed == 0
    assert 1 <= SeededRandom().seed <= SEED_MAX


def test_draw_counter():
    r = SeededRandom(1)
    r.random()
    r.chance(0.5)
    r.choice([1, 2, 3])
    r.shuffled([1, 2, 3, 4])
    assert r.draws == 6


def test_chance_bounds():
    r = SeededRandom(3)
    assert not any(r.chance(0.0) for _ in range(50))
    assert all(r.chance(1.0) for _ in range(50))


def test_large_seeds_wrap_into_range():
    assert coerce_seed(SEED_MODULUS + 5) == 5
    assert coerce_seed(str(SEED_MODULUS + 9)) == 9
