import pytest

from textfractal import DEFAULT_MAPPER, DensityMapper, map_to_glyph
from textfractal.density import map_rows


@pytest.mark.parametrize(
    "count, glyph",
    [
        (200, " "),
        (41, " "),
        (40, "."),
        (7, "."),
        (6, "+"),
        (5, "+"),
        (4, "*"),
        (3, "*"),
        (2, "#"),
        (1, "#"),
        (0, "#"),
    ],
)
def test_reference_buckets(count, glyph):
    assert map_to_glyph(count) == glyph
    assert DEFAULT_MAPPER(count) == glyph


def test_alphabet():
    assert DEFAULT_MAPPER.alphabet == " .+*#"


def test_density_grows_as_count_drops():
    alphabet = DEFAULT_MAPPER.alphabet
    ranks = [alphabet.index(DEFAULT_MAPPER.map_to_glyph(count)) for count in range(200, -1, -1)]
    assert ranks == sorted(ranks)
    assert len(set(ranks)) == len(alphabet)


def test_buckets_are_sorted_on_construction():
    shuffled = DensityMapper(buckets=((2, "*"), (40, " "), (6, "."), (4, "+")))
    assert shuffled == DEFAULT_MAPPER


def test_custom_table():
    mapper = DensityMapper.from_strings("10,1", "ab#")
    assert [mapper(n) for n in (11, 10, 2, 1, 0)] == ["a", "b", "b", "#", "#"]


def test_from_strings_matches_default():
    assert DensityMapper.from_strings("40,6,4,2", " .+*#") == DEFAULT_MAPPER


@pytest.mark.parametrize(
    "thresholds, glyphs",
    [
        ("40,6", " ."),
        ("2,4", "ab#"),
        ("4,x", "ab#"),
    ],
)
def test_from_strings_rejects_bad_tables(thresholds, glyphs):
    with pytest.raises(ValueError):
        DensityMapper.from_strings(thresholds, glyphs)


def test_rejects_duplicate_thresholds():
    with pytest.raises(ValueError, match="Duplicate"):
        DensityMapper(buckets=((2, "a"), (2, "b")))


def test_rejects_multi_character_glyphs():
    with pytest.raises(ValueError, match="single characters"):
        DensityMapper(buckets=((2, "ab"),))
    with pytest.raises(ValueError, match="single characters"):
        DensityMapper(floor="")


def test_map_row_and_rows():
    assert DEFAULT_MAPPER.map_row([0, 3, 5, 7, 41]) == "#*+. "
    assert map_rows([[0, 41], [5, 5]]) == ("# ", "++")
