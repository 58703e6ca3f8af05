"""
diagnostics.py

Convergence and burn-in diagnostics on filled stores.

    burnin_index(probs)            first iteration to keep
    good_walkers(probs)            walkers not stuck in a local minimum
    gelman_rubin(chain)            Rhat and independent draws (Ford 2006)
    summary(chain, probs)          logs a per-parameter table

Usage
-----
    from walkerstore.diagnostics import burnin_index, summary

    burn = burnin_index(probs)
    flat = chain.get_chain(flat=True, discard=burn)
    info = summary(chain, probs, param_names=['a', 'b'])
"""

import numpy as np
from numba import njit

from .general_output import logprint


# ---------------------------------------------------------------------------
#  JIT-compiled kernel
# ---------------------------------------------------------------------------

@njit(cache=True)
def _gelman_rubin(chains):
    """
    Gelman-Rubin statistic (Rhat) and independent draws (Tz)
    following Ford 2006, equations 21-26.

    Parameters
    ----------
    chains : ndarray, shape (niterations, nwalkers, nparams)

    Returns
    -------
    Rhat : ndarray (nparams,)   eq 25: sqrt(V+ / W)
    Tz   : ndarray (nparams,)   eq 26: m*n * min(V+ / B, 1)
    """
    niterations, nwalkers, nparams = chains.shape
    Rhat = np.empty(nparams)
    Tz = np.empty(nparams)

    for d in range(nparams):
        walker_means = np.empty(nwalkers)
        walker_vars = np.empty(nwalkers)
        for w in range(nwalkers):
            s = 0.0
            for t in range(niterations):
                s += chains[t, w, d]
            mu = s / niterations
            walker_means[w] = mu
            v = 0.0
            for t in range(niterations):
                diff = chains[t, w, d] - mu
                v += diff * diff
            walker_vars[w] = v / (niterations - 1)

        W = 0.0
        grand = 0.0
        for w in range(nwalkers):
            W += walker_vars[w]
            grand += walker_means[w]
        W /= nwalkers
        grand /= nwalkers

        var_of_means = 0.0
        for w in range(nwalkers):
            diff = walker_means[w] - grand
            var_of_means += diff * diff
        var_of_means /= (nwalkers - 1)

        B = niterations * var_of_means
        Vplus = (niterations - 1.0) / niterations * W + var_of_means

        Rhat[d] = np.sqrt(Vplus / W) if W > 0 else np.inf

        if B > 0:
            Tz[d] = nwalkers * niterations * min(Vplus / B, 1.0)
        else:
            Tz[d] = 0.0

    return Rhat, Tz


# ---------------------------------------------------------------------------
#  Public API
# ---------------------------------------------------------------------------

def burnin_index(probs):
    """
    Determine the burn-in index from a ProbStore.

    Burn-in ends one iteration after the last one at which any walker is
    still below the median log-probability.  At least max(50, niterations//4)
    iterations are always kept, so a short or unconverged run is never
    discarded entirely.

    Returns
    -------
    burnin : int
        Discard iterations 0..burnin-1.
    """
    log_prob = probs.as_array()
    niterations, nwalkers = log_prob.shape
    if niterations < 2 or nwalkers == 0:
        return 0

    median_lp = np.median(log_prob)
    last_below = np.zeros(nwalkers, dtype=int)
    for w in range(nwalkers):
        below = np.where(log_prob[:, w] < median_lp)[0]
        last_below[w] = below[-1] if len(below) else 0

    burnin = int(np.max(last_below)) + 1
    min_eval = max(50, niterations // 4)
    return max(0, min(burnin, niterations - min_eval))


def good_walkers(probs, discard=0):
    """
    Indices of walkers not stuck in a local minimum.

    A walker is bad if its median -2*logprob exceeds the median of all walker
    medians by more than 5 * 1.4826 * MAD.
    """
    neg2logp = -2.0 * probs.get_log_prob(discard=discard)
    if neg2logp.shape[0] == 0:
        return np.arange(probs.nwalkers)
    medians = np.median(neg2logp, axis=0)
    overall = np.median(medians)
    mad = np.median(np.abs(medians - overall))
    threshold = overall + 5.0 * 1.4826 * mad
    return np.where(medians <= threshold)[0]


def gelman_rubin(chain, discard=0, walkers=None):
    """
    Gelman-Rubin Rhat and number of independent draws Tz per parameter.

    Parameters
    ----------
    chain : Chain
    discard : int
        Leading iterations to skip.
    walkers : array of int or None
        Restrict to these walkers (e.g. the output of good_walkers).

    Returns
    -------
    Rhat, Tz : ndarray (nparams,)
    """
    samples = chain.get_chain(discard=discard)
    if walkers is not None:
        samples = samples[:, walkers]
    if samples.shape[0] < 2 or samples.shape[1] < 2:
        raise ValueError(f"Gelman-Rubin needs at least 2 iterations and 2 walkers, "
                         f"got {samples.shape[0]} and {samples.shape[1]}")
    return _gelman_rubin(np.ascontiguousarray(samples))


def summary(chain, probs, param_names=None, maxgr=1.01, mintz=1000):
    """Log a convergence summary and return the diagnostics dict."""
    burnin = burnin_index(probs)
    good = good_walkers(probs, discard=burnin)
    n_bad = probs.nwalkers - len(good)
    Rhat, Tz = gelman_rubin(chain, discard=burnin, walkers=good)

    logprint(f"Iterations: {chain.niterations}  Burn-in: {burnin}  "
             f"Good walkers: {len(good)}/{chain.nwalkers}")
    if n_bad:
        logprint(f"  WARNING: {n_bad} bad walker(s) discarded")
    logprint(f"{'#':>4s}  {'Parameter':<16s} {'Rhat':>8s} {'Tz':>10s}  Status")
    logprint("-" * 52)
    for d in range(chain.nparams):
        name = param_names[d] if param_names is not None and d < len(param_names) else str(d)
        mark = "OK" if (Rhat[d] < maxgr and Tz[d] > mintz) else "**BAD**"
        logprint(f"{d:4d}  {name:<16s} {Rhat[d]:8.4f} {Tz[d]:10.1f}  {mark}")

    return {"Rhat": Rhat, "Tz": Tz, "burnin": burnin,
            "good_walkers": good, "n_bad": n_bad}
