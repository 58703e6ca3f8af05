"""
sampler_io.py

Moving ensemble states between a sampler and the stores.

Usage
-----
    import emcee
    from walkerstore import Chain, ProbStore
    from walkerstore.sampler_io import record_state, stores_from_sampler

    # write every iteration as it is produced
    for i, state in enumerate(sampler.sample(p0, iterations=niterations)):
        record_state(chain, probs, i, state.coords, state.log_prob)

    # or copy a finished run
    chain, probs = stores_from_sampler(sampler, discard=100)
"""

import numpy as np

from .errors import LengthMismatch
from .general_output import logprint
from .stores import Chain, ProbStore


def record_state(chain, probs, iteration_idx, coords, log_prob):
    """
    Write one iteration of an ensemble state into both stores.

    Parameters
    ----------
    chain : Chain
    probs : ProbStore
    iteration_idx : int
    coords : array (nwalkers, nparams)
    log_prob : array (nwalkers,)

    Both inputs are checked before either store is touched.
    """
    if chain.nwalkers != probs.nwalkers or chain.niterations != probs.niterations:
        raise LengthMismatch(f"store shapes disagree: {chain.shape} vs {probs.shape}")
    coords = np.asarray(coords, dtype=np.float64)
    log_prob = np.asarray(log_prob, dtype=np.float64)
    if coords.shape != (chain.nwalkers, chain.nparams):
        raise LengthMismatch(
            f"expected coords of shape {(chain.nwalkers, chain.nparams)}, got {coords.shape}")
    if log_prob.shape != (probs.nwalkers,):
        raise LengthMismatch(
            f"expected log_prob of shape {(probs.nwalkers,)}, got {log_prob.shape}")

    probs.set_probs(iteration_idx, log_prob)
    chain.set_walkers(iteration_idx, coords)


def stores_from_sampler(sampler, discard=0, thin=1):
    """
    Copy a finished run out of an emcee-compatible sampler.

    Parameters
    ----------
    sampler : object with get_chain() and get_log_prob()
        e.g. emcee.EnsembleSampler or an emcee backend.
    discard : int
        Leading steps to drop.
    thin : int
        Keep every thin-th step.

    Returns
    -------
    chain : Chain
    probs : ProbStore
    """
    chain = Chain.from_array(sampler.get_chain(discard=discard, thin=thin))
    probs = ProbStore.from_array(sampler.get_log_prob(discard=discard, thin=thin))
    if chain.shape[:2] != probs.shape:
        raise LengthMismatch(f"sampler chain {chain.shape} and log_prob {probs.shape} disagree")
    logprint(f'Copied {chain.niterations} iterations x {chain.nwalkers} walkers '
             f'x {chain.nparams} params from {type(sampler).__name__}')
    return chain, probs
