from proposal_engine.utils.rounding import round_half_up, round_to_total


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.5) == 3
    assert round_half_up(12.5) == 13
    assert round_half_up(-2.5) == -3
    assert round_half_up(1.005, 2) == 1.01
    assert isinstance(round_half_up(4.4), int)


def test_round_to_total_hits_target_exactly():
    out = round_to_total({"PMS": 25, "Large Cap": 14, "Mid Cap": 11, "Small Cap": 11}, 60)
    assert sum(out.values()) == 60
    assert out["PMS"] == 24


def test_round_to_total_leaves_zero_weights_alone():
    assert round_to_total({"a": 0, "b": 0}, 40) == {"a": 0, "b": 0}
    assert round_to_total({}, 40) == {}
