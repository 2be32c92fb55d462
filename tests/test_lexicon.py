import pytest

from chatpulse.exceptions import LexiconLoadError
from chatpulse.lexicon import Lexicon, default_lexicon, load_lexicon


def test_default_lexicon_is_loaded_once_and_shared():
    lexicon = default_lexicon()

    assert lexicon is default_lexicon()
    assert len(lexicon) > 200
    assert lexicon.lookup("LOVE") == 3.2
    assert lexicon.lookup("terrible") < 0
    assert lexicon.lookup("spreadsheet") is None


def test_modifier_sets_are_disjoint_and_carry_no_valence():
    lexicon = default_lexicon()

    assert not lexicon.boosters & lexicon.dampeners
    assert not lexicon.boosters & lexicon.negations
    assert not lexicon.dampeners & lexicon.negations
    for word in lexicon.boosters | lexicon.dampeners | lexicon.negations:
        assert lexicon.lookup(word) is None, word


def test_negation_detection_covers_contractions():
    lexicon = default_lexicon()

    assert lexicon.is_negation("never")
    assert lexicon.is_negation("Doesn't")
    assert lexicon.is_negation("mayn't")
    assert not lexicon.is_negation("nothingness")


def test_match_idiom_prefers_longest_phrase():
    lexicon = Lexicon({}, idioms={"in the": 1.0, "in the red": -2.0})

    assert lexicon.match_idiom(["In", "the", "red"], 0) == (3, -2.0)
    assert lexicon.match_idiom(["in", "the", "black"], 0) == (2, 1.0)
    assert lexicon.match_idiom(["the", "red"], 0) is None


def test_load_lexicon_reads_words_idioms_and_comments(tmp_path):
    path = tmp_path / "lexicon.txt"
    path.write_text(
        "# comment\n"
        "\n"
        "Stellar\t3.0\t0.5\t[3, 3, 3]\n"
        "meh\t-0.4\n"
        "over the moon\t3.1\n",
        encoding="utf-8",
    )

    lexicon = load_lexicon(path)

    assert len(lexicon) == 2
    assert lexicon.lookup("stellar") == 3.0
    assert lexicon.match_idiom(["over", "the", "moon"], 0) == (3, 3.1)
    assert lexicon.match_idiom(["yeah", "right"], 0) == (2, -2.0)


def test_load_lexicon_rejects_malformed_lines(tmp_path):
    path = tmp_path / "broken.txt"
    path.write_text("good\t1.9\nbad -2.5\n", encoding="utf-8")

    with pytest.raises(LexiconLoadError) as excinfo:
        load_lexicon(path)

    assert excinfo.value.line_number == 2


def test_load_lexicon_rejects_out_of_range_valence(tmp_path):
    path = tmp_path / "range.txt"
    path.write_text("ecstatic\t4.5\n", encoding="utf-8")

    with pytest.raises(LexiconLoadError, match="outside"):
        load_lexicon(path)
