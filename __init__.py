"""
walkerstore

Pre-allocated storage for ensemble MCMC samplers: the parameter history of
every walker (Chain) and its log-probability history (ProbStore).
"""

from . import config
from .errors import PreconditionViolation, IndexOutOfRange, LengthMismatch
from .guess import Guess
from .stores import Chain, ProbStore
from .sampler_io import record_state, stores_from_sampler
from .diagnostics import burnin_index, good_walkers, gelman_rubin, summary

__all__ = [
    "config",
    "PreconditionViolation",
    "IndexOutOfRange",
    "LengthMismatch",
    "Guess",
    "Chain",
    "ProbStore",
    "record_state",
    "stores_from_sampler",
    "burnin_index",
    "good_walkers",
    "gelman_rubin",
    "summary",
]
