"""
Tests for settings.csv parsing and store allocation.
"""

import os

import pytest

from walkerstore import config, Chain, ProbStore
from walkerstore.general_output import logprint


SETTINGS_CSV = """#name,value
###############################################################################,
# MCMC settings,
###############################################################################,
mcmc_nwalkers,6  # 2 x 3 free params
mcmc_total_steps,1000
mcmc_thin_by,10
print_progress,False
"""

PARAMS_CSV = """#name,value,fit,bounds,label,unit
b_rr,0.1,1,uniform 0 1,$R_b / R_\\star$,
b_rsuma,0.2,1,uniform 0 1,$(R_\\star + R_b) / a_b$,
b_cosi,0.0,0,uniform 0 1,$\\cos{i_b}$,
b_epoch,1.0,1,uniform 0 2,$T_{0;b}$,$\\mathrm{BJD}$
"""


@pytest.fixture(autouse=True)
def _reset_settings(monkeypatch):
    monkeypatch.setattr(config, "SETTINGS", None)


def _write(path, text):
    with open(path, "w") as f:
        f.write(text)


def test_init_counts_params_and_allocates(tmp_path):
    _write(tmp_path / "settings.csv", SETTINGS_CSV)
    _write(tmp_path / "params.csv", PARAMS_CSV)

    s = config.init(str(tmp_path))

    assert s is config.SETTINGS
    assert s.nparams == 3
    assert s.mcmc_nwalkers == 6
    assert s.niterations == 100
    assert s.print_progress is False
    assert s.outdir == os.path.join(str(tmp_path), "results")

    chain, probs = s.allocate()
    assert isinstance(chain, Chain)
    assert isinstance(probs, ProbStore)
    assert chain.shape == (100, 6, 3)
    assert probs.shape == (100, 6)


def test_explicit_n_params_and_outdir(tmp_path):
    outdir = tmp_path / "out"
    _write(tmp_path / "settings.csv",
           f"#name,value\nmcmc_nwalkers,4\nmcmc_total_steps,50\nn_params,2\noutdir,{outdir}\n")

    s = config.init(str(tmp_path))

    assert s.nparams == 2
    assert s.mcmc_thin_by == 1
    assert s.niterations == 50
    assert os.path.isdir(outdir)


def test_logprint_writes_logfile(tmp_path, capsys):
    _write(tmp_path / "settings.csv", SETTINGS_CSV)
    _write(tmp_path / "params.csv", PARAMS_CSV)
    s = config.init(str(tmp_path))

    logprint("hello", 42)

    assert capsys.readouterr().out == ""
    with open(os.path.join(s.outdir, "logfile_" + s.now + ".log")) as f:
        assert "hello 42\n" in f.read()


def test_missing_settings(tmp_path):
    with pytest.raises(ValueError, match="settings.csv"):
        config.init(str(tmp_path))


def test_missing_required_key(tmp_path):
    _write(tmp_path / "settings.csv", "#name,value\nmcmc_nwalkers,4\nn_params,2\n")
    with pytest.raises(ValueError, match="mcmc_total_steps"):
        config.init(str(tmp_path))


def test_unknown_parameter_count(tmp_path):
    _write(tmp_path / "settings.csv", "#name,value\nmcmc_nwalkers,4\nmcmc_total_steps,10\n")
    with pytest.raises(ValueError, match="n_params"):
        config.init(str(tmp_path))


def test_bad_thinning(tmp_path):
    _write(tmp_path / "settings.csv",
           "#name,value\nmcmc_nwalkers,4\nmcmc_total_steps,10\nmcmc_thin_by,0\nn_params,1\n")
    with pytest.raises(ValueError, match="mcmc_thin_by"):
        config.init(str(tmp_path))
