from abcanon import constants
from abcanon.loops import LOOPS


def test_loop_ids_match_boundaries():
    assert tuple(b[0] for b in constants.LOOP_BOUNDARIES) == constants.LOOP_IDS
    assert [b.name for b in LOOPS] == list(constants.LOOP_IDS)


def test_boundaries_stay_on_their_chain():
    for loop_id, start, stop in constants.LOOP_BOUNDARIES:
        assert start[0] == stop[0] == loop_id[0]


def test_cdr1_regions_cover_their_loops():
    for chain, loop_id in constants.CDR1_FOR_CHAIN.items():
        assert loop_id[0] == chain
        region = constants.CDR1_REGIONS[loop_id]
        assert region["first"] <= region["kabat"] <= region["last"]
        assert region["first"] <= region["chothia"] <= region["last"]


def test_numbering_scheme_labels():
    assert constants.NumberingScheme("kabat").label == "Kabat"
    assert constants.NumberingScheme.CHOTHIA.label == "Chothia"


def test_aa_3to1_has_20_amino_acids():
    assert len(constants.AA_3TO1) == 20
    assert len(set(constants.AA_3TO1.values())) == 20


def test_aa_3to1_three_letter_codes():
    for three_letter, single_letter in constants.AA_3TO1.items():
        assert len(three_letter) == 3 and three_letter.isupper()
        assert len(single_letter) == 1 and single_letter.isupper()


def test_not_applicable_exceeds_key_position_limit():
    assert constants.NOT_APPLICABLE > constants.MAX_KEY_POSITIONS
