import numpy as np
import pytest

from conftest import CASUAL, ScriptedRandom
from linus_law_ca.model.agent import BehaviorProfile
from linus_law_ca.model.edit import EditModel, gamma_parameters
from linus_law_ca.model.grid import GridMap
from linus_law_ca.model.rng import RandomSource


def test_gamma_parameters():
    shape, rate = gamma_parameters(15.0, 60.0)
    assert shape == pytest.approx(3.75)
    assert rate == pytest.approx(0.25)
    with pytest.raises(ValueError):
        gamma_parameters(15.0, 0.0)


def test_single_resample_over_cap():
    model = EditModel(error_cap=45.0)
    rng = ScriptedRandom(gammas=[50.0, 3.0, 99.0])
    assert model.propose(CASUAL, rng) == 3.0
    assert rng.gammas == [99.0]

    # second over-cap draw is kept
    rng = ScriptedRandom(gammas=[50.0, 47.0, 1.0])
    assert model.propose(CASUAL, rng) == 47.0
    assert rng.gammas == [1.0]

    rng = ScriptedRandom(gammas=[45.0, 1.0])
    assert model.propose(CASUAL, rng) == 45.0
    assert rng.gammas == [1.0]


def test_accepted_edit_improves_and_bumps_version():
    g = GridMap(2, 2, 40.0)
    outcome = EditModel().attempt(g, (1, 0), CASUAL,
                                  ScriptedRandom(gammas=[12.0]))
    assert outcome.accepted
    assert outcome.previous == 40.0 and outcome.proposed == 12.0
    assert g.quality[0, 1] == 12.0
    assert g.version[0, 1] == 1
    assert g.version.sum() == 1


def test_rejected_edit_leaves_cell_alone():
    g = GridMap(2, 2, 40.0)
    g.apply_edit(0, 0, 10.0)
    model = EditModel()
    for value in (10.0, 10.5, 44.0):
        outcome = model.attempt(g, (0, 0), CASUAL,
                                ScriptedRandom(gammas=[value]))
        assert not outcome.accepted
        assert g.quality[0, 0] == 10.0
        assert g.version[0, 0] == 1


def test_zero_mean_class_always_proposes_zero():
    perfect = BehaviorProfile("surveyor", mean_error=0.0, var_error=1.0)
    assert EditModel().propose(perfect, RandomSource(3)) == 0.0
    assert EditModel().expected_proposal_mean(perfect) == 0.0


def test_proposals_follow_configured_gamma():
    model = EditModel(error_cap=45.0)
    rng = RandomSource(2024)
    values = np.array([model.propose(CASUAL, rng) for _ in range(20000)])
    assert values.mean() == pytest.approx(model.expected_proposal_mean(CASUAL),
                                          abs=0.3)
    assert values.var() == pytest.approx(CASUAL.var_error, rel=0.1)
    assert np.mean(values > 45.0) < 0.001


def test_expected_mean_reflects_cap_when_binding():
    heavy = BehaviorProfile("heavy", mean_error=40.0, var_error=400.0)
    model = EditModel(error_cap=45.0)
    expected = model.expected_proposal_mean(heavy)
    assert expected < 40.0
    rng = RandomSource(99)
    values = np.array([model.propose(heavy, rng) for _ in range(20000)])
    assert values.mean() == pytest.approx(expected, abs=0.6)
