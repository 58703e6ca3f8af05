"""
Tests for burn-in detection, walker screening and Gelman-Rubin.
"""

import numpy as np
import pytest

from walkerstore import Chain, ProbStore
from walkerstore.diagnostics import burnin_index, good_walkers, gelman_rubin, summary


# ---------------------------------------------------------------------------
# Burn-in
# ---------------------------------------------------------------------------
def test_burnin_rising_log_prob():
    # every walker climbs steadily: median is 99.5, last step below it is 99
    lp = np.repeat(np.arange(200, dtype=float)[:, None], 4, axis=1)
    assert burnin_index(ProbStore.from_array(lp)) == 100


def test_burnin_keeps_a_quarter_of_the_chain():
    lp = np.zeros((200, 3))
    lp[-1, 0] = -1.0      # one walker dips below the median on the last step
    assert burnin_index(ProbStore.from_array(lp)) == 150


def test_burnin_short_or_flat_stores():
    assert burnin_index(ProbStore(4, 1)) == 0
    assert burnin_index(ProbStore(0, 100)) == 0
    assert burnin_index(ProbStore(4, 30)) == 0
    assert burnin_index(ProbStore(4, 200)) == 1


# ---------------------------------------------------------------------------
# Walker screening
# ---------------------------------------------------------------------------
def test_good_walkers_drops_stuck_walker():
    lp = np.tile(-0.1 * np.arange(7, dtype=float), (20, 1))
    lp[:, 6] = -1000.0
    good = good_walkers(ProbStore.from_array(lp))
    np.testing.assert_array_equal(good, np.arange(6))


def test_good_walkers_everything_discarded():
    good = good_walkers(ProbStore(3, 10), discard=10)
    np.testing.assert_array_equal(good, [0, 1, 2])


# ---------------------------------------------------------------------------
# Gelman-Rubin
# ---------------------------------------------------------------------------
def test_gelman_rubin_well_mixed():
    rng = np.random.default_rng(3)
    chain = Chain.from_array(rng.normal(size=(500, 8, 2)))
    Rhat, Tz = gelman_rubin(chain)
    assert Rhat.shape == (2,)
    assert np.all(Rhat < 1.05)
    assert np.all(Tz > 0)


def test_gelman_rubin_separated_walkers():
    rng = np.random.default_rng(4)
    arr = rng.normal(size=(300, 4, 1))
    arr[:, :2] += 50.0
    Rhat, _ = gelman_rubin(Chain.from_array(arr))
    assert Rhat[0] > 2.0


def test_gelman_rubin_walker_subset_and_discard():
    rng = np.random.default_rng(5)
    arr = rng.normal(size=(300, 4, 1))
    arr[:, 3] += 50.0
    Rhat, _ = gelman_rubin(Chain.from_array(arr), discard=100, walkers=[0, 1, 2])
    assert Rhat[0] < 1.05


def test_gelman_rubin_needs_two_iterations_and_walkers():
    with pytest.raises(ValueError):
        gelman_rubin(Chain(2, 4, 1))
    with pytest.raises(ValueError):
        gelman_rubin(Chain(2, 1, 10))


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------
def test_summary(capsys):
    rng = np.random.default_rng(6)
    chain = Chain.from_array(rng.normal(size=(400, 6, 2)))
    probs = ProbStore.from_array(-0.5 * np.sum(chain.get_chain() ** 2, axis=2))

    info = summary(chain, probs, param_names=["a", "b"])

    assert set(info) == {"Rhat", "Tz", "burnin", "good_walkers", "n_bad"}
    assert info["burnin"] == burnin_index(probs)
    assert len(info["good_walkers"]) + info["n_bad"] == 6
    out = capsys.readouterr().out
    assert "Rhat" in out
    assert " a " in out
