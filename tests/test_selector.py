import numpy as np
import pytest

from conftest import CASUAL, SENIOR, ScriptedRandom
from linus_law_ca.model.agent import Agent
from linus_law_ca.model.grid import GridMap
from linus_law_ca.model.rng import RandomSource
from linus_law_ca.model.selector import (
    NeighborhoodSelector, Selection, attractiveness, draw_threshold,
    normalize, select_weighted,
)


def test_attractiveness_curve():
    g = GridMap(4, 1, 40.0)
    g.apply_edit(1, 0, 40.0)
    g.apply_edit(2, 0, 20.0)
    g.apply_edit(3, 0, 0.0)
    w = attractiveness(g, [(0, 0), (1, 0), (2, 0), (3, 0)], 0.3)
    assert w == pytest.approx([0.3, 1.0, 0.1, 0.01])


def test_attractiveness_worse_quality_is_more_attractive():
    g = GridMap(2, 1, 40.0)
    g.apply_edit(0, 0, 8.0)
    g.apply_edit(1, 0, 30.0)
    w = attractiveness(g, [(0, 0), (1, 0)], 0.5)
    assert w[1] > w[0]


def test_normalize_sums_to_100():
    w = normalize(np.array([0.2, 0.01, 1.0, 0.5]))
    assert w.sum() == pytest.approx(100.0)
    assert list(np.argsort(w)) == [1, 0, 3, 2]


def test_normalize_all_zero_untouched():
    w = normalize(np.zeros(4))
    assert np.all(w == 0)


def test_threshold_redrawn_once_on_zero():
    rng = ScriptedRandom(integers=[0, 30])
    assert draw_threshold(rng) == 30
    assert rng.integers == []
    # a second zero is kept
    assert draw_threshold(ScriptedRandom(integers=[0, 0])) == 0
    rng = ScriptedRandom(integers=[17, 99])
    assert draw_threshold(rng) == 17
    assert rng.integers == [99]


def test_cumulative_walk_over_sorted_weights():
    weights = np.array([10.0, 60.0, 30.0])
    # sorted: idx0 (10), idx2 (30), idx1 (60); running totals 10, 40, 100
    assert select_weighted(weights, ScriptedRandom(integers=[10])) == 0
    assert select_weighted(weights, ScriptedRandom(integers=[11])) == 2
    assert select_weighted(weights, ScriptedRandom(integers=[40])) == 2
    assert select_weighted(weights, ScriptedRandom(integers=[41])) == 1
    assert select_weighted(weights, ScriptedRandom(integers=[99])) == 1


def test_equal_weights_keep_enumeration_order():
    weights = np.full(4, 25.0)
    assert select_weighted(weights, ScriptedRandom(integers=[25])) == 0
    assert select_weighted(weights, ScriptedRandom(integers=[26])) == 1
    assert select_weighted(weights, ScriptedRandom(integers=[76])) == 3


def test_all_zero_weights_pick_last():
    weights = np.zeros(5)
    assert select_weighted(weights, ScriptedRandom(integers=[42])) == 4
    # k == 0 twice: first running total already reaches it
    assert select_weighted(weights, ScriptedRandom(integers=[0, 0])) == 0


def test_select_returns_none_without_candidates():
    g = GridMap(3, 3, 40.0)
    g.exists[:, :] = False
    sel = NeighborhoodSelector(1, True, 0.5)
    agent = Agent(1, (1, 1), CASUAL, 1, RandomSource(0))
    assert sel.select(agent, g, agent.rng) is None
    assert NeighborhoodSelector(1, False, 0.5).select(agent, g, agent.rng) is None


def test_uniform_mode_ignores_weights():
    g = GridMap(3, 3, 40.0)
    sel = NeighborhoodSelector(1, False, 0.0)
    agent = Agent(1, (1, 1), CASUAL, 1, RandomSource(0))
    choice = sel.select(agent, g, ScriptedRandom(integers=[8]))
    assert choice == Selection((2, 2), None)


def test_prioritized_selection_reports_weight():
    g = GridMap(3, 1, 40.0)
    g.apply_edit(0, 0, 40.0)  # weight 1
    g.apply_edit(2, 0, 0.0)   # weight 0.01
    sel = NeighborhoodSelector(1, True, 0.0)
    agent = Agent(1, (1, 0), SENIOR, 1, RandomSource(0))
    choice = sel.select(agent, g, ScriptedRandom(integers=[99]))
    assert choice.position == (0, 0)
    assert choice.weight == pytest.approx(100.0 / 1.01)


def test_senior_holds_on_zero_weight_casual_moves():
    g = GridMap(5, 5, 40.0)
    sel = NeighborhoodSelector(1, True, 0.0)  # every candidate weighs 0
    senior = Agent(1, (2, 2), SENIOR, 1, RandomSource(0))
    casual = Agent(2, (2, 2), CASUAL, 1, RandomSource(0))

    choice = sel.select(senior, g, ScriptedRandom(integers=[50]))
    assert choice.weight == 0
    assert choice.position == (3, 3)
    assert not sel.should_move(senior, choice)
    assert sel.should_move(casual, choice)
    assert sel.should_move(senior, Selection((3, 3), None))
    assert sel.should_move(senior, Selection((3, 3), 12.5))
