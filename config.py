"""
config.py

Run configuration, read from a data directory:

    <datadir>/settings.csv   '#name,value' rows
    <datadir>/params.csv     (optional) used to count the fitted parameters

Recognised settings
-------------------
    mcmc_nwalkers      number of walkers (required)
    mcmc_total_steps   total sampler steps (required)
    mcmc_thin_by       thinning factor; stored iterations =
                       mcmc_total_steps // mcmc_thin_by   (default 1)
    n_params           number of fitted parameters; if absent it is
                       counted from params.csv (rows with fit == 1)
    outdir             output directory for the logfile
                       (default <datadir>/results)
    print_progress     echo log lines to stdout (default True)

Usage
-----
    from walkerstore import config

    config.init(datadir)
    chain, probs = config.SETTINGS.allocate()
"""

import os
from dataclasses import dataclass, field
from datetime import datetime

from .general_output import logprint
from .stores import Chain, ProbStore


SETTINGS = None


@dataclass
class Settings:
    datadir: str
    outdir: str
    nparams: int
    mcmc_nwalkers: int
    mcmc_total_steps: int
    mcmc_thin_by: int = 1
    print_progress: bool = True
    now: str = field(default_factory=lambda: datetime.now().strftime('%Y-%m-%d_%H-%M-%S'))

    @property
    def niterations(self):
        return self.mcmc_total_steps // self.mcmc_thin_by

    def allocate(self):
        """Return a zeroed (Chain, ProbStore) pair sized for this run."""
        chain = Chain(self.nparams, self.mcmc_nwalkers, self.niterations)
        probs = ProbStore(self.mcmc_nwalkers, self.niterations)
        logprint(f'Allocated stores: nparams={self.nparams}  '
                 f'nwalkers={self.mcmc_nwalkers}  niterations={self.niterations}')
        return chain, probs


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

def _read_settings_csv(filepath):
    """Parse a '#name,value' settings.csv into a dict of stripped strings."""
    result = {}
    with open(filepath) as f:
        for raw in f:
            line = raw.split('#')[0].strip()
            if not line or ',' not in line:
                continue
            key, _, val = line.partition(',')
            result[key.strip()] = val.strip()
    return result


def _count_free_params(params_csv):
    """
    Count the number of fitted parameters (fit column == '1') in params.csv.
    Returns None if the file does not exist or fits nothing.
    """
    if not os.path.isfile(params_csv):
        return None
    count = 0
    with open(params_csv) as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith('#'):
                continue
            cols = line.split(',')
            if len(cols) >= 3 and cols[2].strip() == '1':
                count += 1
    return count if count > 0 else None


def _to_bool(val):
    return str(val).strip().lower() in ('true', '1', 'yes')


def _required_int(s, key):
    if key not in s:
        raise ValueError(f'settings.csv is missing required key "{key}".')
    return int(s[key])


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def init(datadir):
    """Read <datadir>/settings.csv and set the module-level SETTINGS."""
    global SETTINGS

    settings_csv = os.path.join(datadir, 'settings.csv')
    if not os.path.isfile(settings_csv):
        raise ValueError(f'No settings.csv found in {datadir}')
    s = _read_settings_csv(settings_csv)

    nwalkers = _required_int(s, 'mcmc_nwalkers')
    total_steps = _required_int(s, 'mcmc_total_steps')
    thin_by = int(s.get('mcmc_thin_by', 1))
    if thin_by < 1:
        raise ValueError(f'mcmc_thin_by must be >= 1, got {thin_by}')

    if 'n_params' in s:
        nparams = int(s['n_params'])
    else:
        nparams = _count_free_params(os.path.join(datadir, 'params.csv'))
        if nparams is None:
            raise ValueError('Cannot determine the number of parameters: set "n_params" '
                             'in settings.csv or provide params.csv with fitted rows.')

    outdir = s.get('outdir') or os.path.join(datadir, 'results')
    os.makedirs(outdir, exist_ok=True)

    SETTINGS = Settings(
        datadir=datadir,
        outdir=outdir,
        nparams=nparams,
        mcmc_nwalkers=nwalkers,
        mcmc_total_steps=total_steps,
        mcmc_thin_by=thin_by,
        print_progress=_to_bool(s.get('print_progress', True)),
    )
    logprint(f'\nLoaded settings from {settings_csv}')
    return SETTINGS
