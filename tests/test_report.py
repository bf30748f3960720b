import json

import numpy as np

from stein_shrinkage.config import SimulationSpec
from stein_shrinkage.logger import ExperimentLogger
from stein_shrinkage.monte_carlo import run_monte_carlo
from stein_shrinkage.plots import plot_estimates, plot_monte_carlo, plot_ridge_demo
from stein_shrinkage.report import build_report, estimates_table, write_report
from stein_shrinkage.ridge import run_ridge_demo
from stein_shrinkage.simulation import run_simulation


def test_estimates_table():
    res = run_simulation()
    tab = estimates_table(res)
    assert len(tab) == 10
    assert np.allclose(tab["sq_err_sample"].mean(), res.mse_sample)
    assert np.allclose(tab["sq_err_shrunken"].mean(), res.mse_shrunken)


def test_report_round_trips_through_json(tmp_path):
    res = run_simulation(SimulationSpec(rule="james_stein"))
    mc = run_monte_carlo(res.spec, n_replicates=20)
    ridge = run_ridge_demo(n_repeats=5)
    rep = build_report(res, monte_carlo=mc, ridge=ridge)
    assert rep.verdict["rule"] == "james_stein"
    assert "mean_shrunken_wins" in rep.verdict
    assert rep.ridge["best_alpha"] in set(ridge["alpha"])

    out = tmp_path / "sub" / "report.json"
    write_report(rep, out)
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["spec"]["rule"] == "james_stein"
    assert len(payload["results"]["shrunken_estimates"]) == 10
    assert payload["monte_carlo"]["n_replicates"] == 20
    assert len(payload["ridge"]["table"]) == len(ridge)


def test_report_without_optional_parts(tmp_path):
    rep = build_report(run_simulation())
    assert rep.monte_carlo is None and rep.ridge is None
    write_report(rep, tmp_path / "r.json")
    payload = json.loads((tmp_path / "r.json").read_text(encoding="utf-8"))
    assert payload["monte_carlo"] is None


def test_experiment_logger_appends(tmp_path):
    log = ExperimentLogger(tmp_path)
    res = run_simulation()
    log.log("simulation", res.to_dict())
    log.log("note", {"value": np.float64(1.5)})
    recs = log.read()
    assert [r["event"] for r in recs] == ["simulation", "note"]
    assert recs[1]["payload"]["value"] == 1.5
    assert recs[0]["ts_utc"]


def test_figures_are_written(tmp_path):
    res = run_simulation()
    mc = run_monte_carlo(n_replicates=20)
    ridge = run_ridge_demo(n_repeats=5)
    for path in (
        plot_estimates(res, tmp_path / "est.png"),
        plot_monte_carlo(mc, tmp_path / "mc.png"),
        plot_ridge_demo(ridge, tmp_path / "ridge.png"),
    ):
        assert path.exists() and path.stat().st_size > 0
