# tests/test_run.py

import logging

import pandas as pd
import pytest

from energyhub.__main__ import main
from energyhub.exceptions import InfeasibleModelError
from energyhub.input.reader import HubInputReader
from energyhub.interfaces.containers import HubInputs, SiteConditions
from energyhub.interfaces.parameters import ParameterTable
from energyhub.interfaces.technologies import Technology as T, Component as C
from energyhub.run import run_hub, run_location, run_from_config, _run_task


class TestRunHub:
    """Tests for single hub runs."""

    def test_optimal(self, inputs, params):
        result = run_hub(inputs, params, location='coast', scenario='Full')
        assert result.succeeded
        assert result.name == 'coast_Full'
        assert result.objective > 0
        assert result.report.system_cost == pytest.approx(result.objective * 1e-3)
        assert len(result.dispatch) == 24
        assert result.violations == []
        assert result.error is None

    def test_infeasible_raises(self, profiles, demand, settings, params):
        inputs = HubInputs(profiles=profiles, demand=demand,
                           site=SiteConditions(), settings=settings)
        with pytest.raises(InfeasibleModelError):
            run_hub(inputs, params)


class TestRunTask:
    """Tests for failure recording of batch tasks."""

    def test_infeasible_recorded(self, profiles, demand, settings, params):
        inputs = HubInputs(profiles=profiles, demand=demand,
                           site=SiteConditions(), settings=settings)
        result = _run_task(('barren', 'Wave', inputs, params, {}))
        assert result.status == 'infeasible'
        assert not result.succeeded
        assert result.objective is None
        assert result.report is None
        assert result.error

    def test_missing_parameter_recorded(self, inputs, records):
        del records[(T.BATTERY, C.EP_RATIO)]
        params = ParameterTable.from_records(records, 2050)
        result = _run_task(('coast', 'Full', inputs, params, {}))
        assert result.status == 'error'
        assert 'Battery' in result.error


class TestBatchRuns:
    """End-to-end tests of configured batch runs."""

    def test_run_location(self, run_files):
        path = run_files()
        config = HubInputReader.from_config(str(path))
        reader = HubInputReader(str(path.parent))
        params = reader.read_assumptions(config.assumptions_path, config.year)
        results = run_location(config.locations[0], params, settings=config.settings, reader=reader)
        assert [r.scenario for r in results] == ['Wave', 'Wave-PV-Wind']
        assert all(r.succeeded for r in results)
        # more siting options can only lower the cost
        assert results[1].objective <= results[0].objective * (1 + 1e-6)

    def test_run_from_config(self, run_files, tmp_path):
        path = run_files(barren=True)
        out = tmp_path / 'out'
        results = run_from_config(str(path), output_dir=str(out))

        assert [(r.location, r.scenario, r.status) for r in results] == [
            ('coast', 'Wave', 'optimal'),
            ('coast', 'Wave-PV-Wind', 'optimal'),
            ('barren', 'Wave', 'infeasible'),
        ]
        assert (out / 'coast_Wave_report.csv').exists()
        assert (out / 'coast_Wave-PV-Wind_dispatch.csv').exists()
        assert not list(out.glob('barren_*.csv'))

        report = pd.read_csv(out / 'coast_Wave_report.csv')
        assert report['SECTION'].iloc[0] == 'System Cost'
        assert report['VALUE'].iloc[0] == pytest.approx(results[0].objective * 1e-3)
        log = (out / 'logs' / 'config_barren_Wave.log').read_text()
        assert 'infeasible' in log

    def test_run_logs_are_closed(self, run_files, tmp_path):
        path = run_files()
        results = run_from_config(str(path), output_dir=str(tmp_path / 'out'))
        for result in results:
            assert logging.getLogger(f"energyhub.runs.config.{result.name}").handlers == []

    def test_parallel_matches_sequential(self, run_files):
        path = run_files()
        sequential = run_from_config(str(path))
        parallel = run_from_config(str(path), processes=2)
        for a, b in zip(sequential, parallel):
            assert a.scenario == b.scenario
            assert b.objective == pytest.approx(a.objective, rel=1e-6)

    def test_cli_reports_failure(self, run_files, tmp_path, capsys):
        path = run_files(barren=True)
        code = main(['--config', str(path), '--output', str(tmp_path / 'cli')])
        assert code == 1
        printed = capsys.readouterr().out
        assert '[INFEASIBLE] barren / Wave: objective=-' in printed
        assert '[OPTIMAL] coast / Wave:' in printed

    def test_cli_success(self, run_files):
        path = run_files()
        assert main(['--config', str(path), '--loglevel', 'warning']) == 0
