import pytest

from dice import Dice, parse_notation
from prng import PRNG, UnseededGeneratorError


def test_same_seed_produces_identical_sequences():
    first = PRNG(1234)
    second = PRNG(1234)

    assert [first.next_uint32() for _ in range(50)] == [second.next_uint32() for _ in range(50)]


def test_different_seeds_diverge():
    first = PRNG(1)
    second = PRNG(2)

    assert [first.next_uint32() for _ in range(5)] != [second.next_uint32() for _ in range(5)]


def test_first_output_for_known_seed():
    # a=42: rotl32(42 * 5, 7) * 9
    assert PRNG(42).next_uint32() == 241920


def test_seed_zero_is_a_fixed_point():
    rng = PRNG(0)

    assert [rng.next_uint32() for _ in range(10)] == [0] * 10
    assert rng.next() == 0.0


def test_reseeding_restarts_the_sequence():
    rng = PRNG(99)
    expected = [rng.next_uint32() for _ in range(3)]

    rng.seed(99)

    assert [rng.next_uint32() for _ in range(3)] == expected


def test_unseeded_generator_raises():
    rng = PRNG()

    assert not rng.seeded
    with pytest.raises(UnseededGeneratorError):
        rng.next()
    with pytest.raises(UnseededGeneratorError):
        rng.state


def test_next_stays_in_unit_interval_and_next_int_in_range():
    rng = PRNG(7)

    for _ in range(500):
        assert 0.0 <= rng.next() < 1.0
        assert -3 <= rng.next_int(-3, 4) <= 4


def test_next_int_degenerate_and_empty_ranges():
    rng = PRNG(7)

    assert rng.next_int(5, 5) == 5
    with pytest.raises(ValueError):
        rng.next_int(5, 4)


def test_state_words_stay_unsigned_32_bit():
    rng = PRNG(2**40 + 17)

    for _ in range(100):
        rng.next_uint32()
        assert all(0 <= word <= 0xFFFFFFFF for word in rng.state)


@pytest.mark.parametrize(
    "notation,expected",
    [
        ("2d6+3", (2, 6, 3)),
        ("d8", (1, 8, 0)),
        ("3d4-1", (3, 4, -1)),
        (" 1D20 ", (1, 20, 0)),
    ],
)
def test_parse_notation(notation, expected):
    assert parse_notation(notation) == expected


@pytest.mark.parametrize("notation", ["", "abc", "2d", "0d6", "2d0", "1d6+"])
def test_parse_notation_rejects_invalid_text(notation):
    with pytest.raises(ValueError):
        parse_notation(notation)


def test_dice_roll_validates_arguments():
    dice = Dice(PRNG(3))

    with pytest.raises(ValueError):
        dice.roll(0)
    with pytest.raises(ValueError):
        dice.roll(6, quantity=0)


def test_roll_notation_applies_modifier_to_total_only():
    dice = Dice(PRNG(11))

    for _ in range(50):
        result = dice.roll_notation("3d6+2")
        assert len(result.rolls) == 3
        assert all(1 <= face <= 6 for face in result.rolls)
        assert result.total == sum(result.rolls) + 2


def test_single_sided_die_always_rolls_one():
    dice = Dice(PRNG(5))

    assert {dice.d(1) for _ in range(20)} == {1}
