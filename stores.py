"""
stores.py

Fixed-shape storage for the state of an ensemble sampler.

    Chain      one value per (parameter, walker, iteration)
    ProbStore  one log-probability per (walker, iteration)

Both keep a single contiguous float64 buffer that is allocated once, at its
full size, and never resized.  Cells are addressed through an explicit
linearisation:

    Chain.index(p, w, i)   = i * nwalkers * nparams + w * nparams + p
    ProbStore.index(w, i)  = i * nwalkers + w

so all parameters of one walker at one iteration sit next to each other, then
walkers, then iterations.  This is exactly C order for an array of shape
(niterations, nwalkers, nparams) / (niterations, nwalkers), which is what the
emcee-style accessors (get_chain, get_log_prob) hand out.

Usage
-----
    from walkerstore import Chain, ProbStore

    chain = Chain(nparams=2, nwalkers=10, niterations=1000)
    probs = ProbStore(nwalkers=10, niterations=1000)

    chain.set_params(walker_idx, iteration_idx, theta)
    probs.set_probs(iteration_idx, lnprob_of_all_walkers)

    flat = chain.flatchain()        # list of Guess, iteration-major
    logp = probs.flatprob()         # ndarray, same order
"""

import operator

import numpy as np

from .errors import IndexOutOfRange, LengthMismatch
from .guess import Guess


# ---------------------------------------------------------------------------
#  Helpers
# ---------------------------------------------------------------------------

def _check_dim(name, n):
    n = operator.index(n)
    if n < 0:
        raise ValueError(f"{name} must be >= 0, got {n}")
    return n


def _check_index(name, idx, size, message=None):
    """Return idx as a plain int, or raise if it is outside [0, size)."""
    try:
        idx = operator.index(idx)
    except TypeError:
        raise TypeError(f"{name} must be an integer, got {type(idx).__name__}") from None
    if not 0 <= idx < size:
        raise IndexOutOfRange(message or f"{name} {idx} out of range [0, {size})")
    return idx


def _as_vector(values, expected, what):
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 1 or values.shape[0] != expected:
        raise LengthMismatch(f"expected {expected} {what}, got shape {values.shape}")
    return values


def _readonly(view):
    view.flags.writeable = False
    return view


# ---------------------------------------------------------------------------
#  Chain
# ---------------------------------------------------------------------------

class Chain:
    """
    Parameter history of every walker across iterations.

    Parameters
    ----------
    nparams : int
    nwalkers : int
    niterations : int
        Any of them may be 0, which gives an empty store.
    """

    def __init__(self, nparams, nwalkers, niterations):
        self.nparams = _check_dim("nparams", nparams)
        self.nwalkers = _check_dim("nwalkers", nwalkers)
        self.niterations = _check_dim("niterations", niterations)
        self._data = np.zeros(self.nparams * self.nwalkers * self.niterations,
                              dtype=np.float64)

    def __repr__(self):
        return (f"Chain(nparams={self.nparams}, nwalkers={self.nwalkers}, "
                f"niterations={self.niterations})")

    @property
    def shape(self):
        """(niterations, nwalkers, nparams)"""
        return (self.niterations, self.nwalkers, self.nparams)

    def index(self, param_idx, walker_idx, iteration_idx):
        return (iteration_idx * self.nwalkers * self.nparams
                + walker_idx * self.nparams + param_idx)

    def _checked_index(self, param_idx, walker_idx, iteration_idx):
        p = _check_index("param index", param_idx, self.nparams)
        w = _check_index("walker index", walker_idx, self.nwalkers)
        i = _check_index("iteration index", iteration_idx, self.niterations)
        return self.index(p, w, i)

    # ----- cell access -------------------------------------------------------

    def set(self, param_idx, walker_idx, iteration_idx, value):
        self._data[self._checked_index(param_idx, walker_idx, iteration_idx)] = value

    def get(self, param_idx, walker_idx, iteration_idx):
        return float(self._data[self._checked_index(param_idx, walker_idx, iteration_idx)])

    # ----- bulk writes -------------------------------------------------------

    def set_params(self, walker_idx, iteration_idx, values):
        """
        Write the full parameter vector of one walker at one iteration.
        values[k] goes to parameter k.  Length and indices are validated
        before anything is written.
        """
        values = _as_vector(values, self.nparams, "parameter values")
        w = _check_index("walker index", walker_idx, self.nwalkers)
        i = _check_index("iteration index", iteration_idx, self.niterations)
        start = self.index(0, w, i)
        self._data[start:start + self.nparams] = values

    def set_walkers(self, iteration_idx, coords):
        """Write the (nwalkers, nparams) ensemble position of one iteration."""
        coords = np.asarray(coords, dtype=np.float64)
        if coords.shape != (self.nwalkers, self.nparams):
            raise LengthMismatch(
                f"expected coords of shape {(self.nwalkers, self.nparams)}, "
                f"got {coords.shape}")
        i = _check_index("iteration index", iteration_idx, self.niterations)
        start = self.index(0, 0, i)
        self._data[start:start + self.nwalkers * self.nparams] = coords.ravel()

    # ----- flattened / array views -------------------------------------------

    def flatchain(self):
        """
        One Guess per (iteration, walker), iterations outer, walkers inner.

        Returns
        -------
        list of Guess, length niterations * nwalkers.
        result[k] belongs to iteration k // nwalkers, walker k % nwalkers.
        """
        rows = self._data.reshape(self.niterations * self.nwalkers, self.nparams)
        return [Guess(tuple(row)) for row in rows.tolist()]

    def as_array(self):
        """Read-only (niterations, nwalkers, nparams) view of the buffer."""
        return _readonly(self._data.reshape(self.shape))

    def get_chain(self, flat=False, discard=0, thin=1):
        """
        Return a copy of the chain, emcee style.

        Parameters
        ----------
        flat : bool
            If True, merge iterations and walkers into one axis
            (same order as flatchain).
        discard : int
            Number of leading iterations to drop (burn-in).
        thin : int
            Keep every thin-th iteration.

        Returns
        -------
        ndarray : (n, nwalkers, nparams)  or  (n*nwalkers, nparams) if flat
        """
        chain = self.as_array()[discard::thin]
        if flat:
            chain = chain.reshape(chain.shape[0] * self.nwalkers, self.nparams)
        return np.array(chain)

    @classmethod
    def from_array(cls, arr):
        """Build a Chain from an array of shape (niterations, nwalkers, nparams)."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.ndim != 3:
            raise LengthMismatch(
                f"expected a 3-d (niterations, nwalkers, nparams) array, got shape {arr.shape}")
        niterations, nwalkers, nparams = arr.shape
        chain = cls(nparams, nwalkers, niterations)
        chain._data[:] = arr.ravel()
        return chain


# ---------------------------------------------------------------------------
#  ProbStore
# ---------------------------------------------------------------------------

class ProbStore:
    """
    Log-probability history of every walker across iterations.

    Parameters
    ----------
    nwalkers : int
    niterations : int
    """

    def __init__(self, nwalkers, niterations):
        self.nwalkers = _check_dim("nwalkers", nwalkers)
        self.niterations = _check_dim("niterations", niterations)
        self._data = np.zeros(self.nwalkers * self.niterations, dtype=np.float64)

    def __repr__(self):
        return f"ProbStore(nwalkers={self.nwalkers}, niterations={self.niterations})"

    @property
    def shape(self):
        """(niterations, nwalkers)"""
        return (self.niterations, self.nwalkers)

    def index(self, walker_idx, iteration_idx):
        return iteration_idx * self.nwalkers + walker_idx

    def _check_iteration(self, iteration_idx):
        return _check_index(
            "iteration index", iteration_idx, self.niterations,
            message=(f"iteration index {iteration_idx}, "
                     f"number of iterations required: {self.niterations}"))

    def _checked_index(self, walker_idx, iteration_idx):
        w = _check_index("walker index", walker_idx, self.nwalkers)
        i = self._check_iteration(iteration_idx)
        return self.index(w, i)

    # ----- cell access -------------------------------------------------------

    def set(self, walker_idx, iteration_idx, value):
        self._data[self._checked_index(walker_idx, iteration_idx)] = value

    def get(self, walker_idx, iteration_idx):
        return float(self._data[self._checked_index(walker_idx, iteration_idx)])

    # ----- bulk writes -------------------------------------------------------

    def set_probs(self, iteration_idx, values):
        """Write one value per walker for one iteration; values[w] goes to walker w."""
        values = _as_vector(values, self.nwalkers, "walker probabilities")
        i = self._check_iteration(iteration_idx)
        start = self.index(0, i)
        self._data[start:start + self.nwalkers] = values

    # ----- flattened / array views -------------------------------------------

    def flatprob(self):
        """1-d copy, iterations outer, walkers inner (same order as Chain.flatchain)."""
        return self._data.copy()

    def as_array(self):
        """Read-only (niterations, nwalkers) view of the buffer."""
        return _readonly(self._data.reshape(self.shape))

    def get_log_prob(self, flat=False, discard=0, thin=1):
        """
        Return a copy of the log-probabilities, emcee style.

        Returns
        -------
        ndarray : (n, nwalkers)  or  (n*nwalkers,) if flat
        """
        lp = np.array(self.as_array()[discard::thin])
        if flat:
            return lp.ravel()
        return lp

    @classmethod
    def from_array(cls, arr):
        """Build a ProbStore from an array of shape (niterations, nwalkers)."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.ndim != 2:
            raise LengthMismatch(
                f"expected a 2-d (niterations, nwalkers) array, got shape {arr.shape}")
        niterations, nwalkers = arr.shape
        store = cls(nwalkers, niterations)
        store._data[:] = arr.ravel()
        return store
