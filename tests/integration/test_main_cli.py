import json
import shutil
import sys

import pytest

import arcroute.cli.main as main_mod


@pytest.fixture(autouse=True)
def _isolate_logging(restore_root_logging):
    yield


def test_main_solves_single_instance(mini_dat, tmp_results_dir, monkeypatch):
    monkeypatch.setattr(sys, 'argv', [
        'arcroute',
        '--instance', str(mini_dat),
        '--results-dir', str(tmp_results_dir),
    ])

    assert main_mod.main() == 0

    solution = (tmp_results_dir / 'solutions' / 'sol-mini.dat').read_text().splitlines()
    assert solution[0] != 'infeasible'
    assert (tmp_results_dir / 'statistics' / 'statistics_mini.txt').exists()
    assert (tmp_results_dir / 'graphs' / 'graph_mini.dot').exists()


def test_main_json_with_overrides(mini_dat, tmp_results_dir, monkeypatch):
    monkeypatch.setattr(sys, 'argv', [
        'arcroute',
        '--instance', str(mini_dat),
        '--mode', 'solve',
        '--construction', 'one_per_route',
        '--neighborhoods', 'merge',
        '--solution-format', 'json',
        '--results-dir', str(tmp_results_dir),
    ])

    assert main_mod.main() == 0

    data = json.loads((tmp_results_dir / 'solutions' / 'sol-mini.json').read_text())
    assert data['status'] == 'feasible'
    assert not (tmp_results_dir / 'graphs').exists()


def test_main_directory_with_failure_exits_nonzero(tmp_path, mini_dat, tmp_results_dir, monkeypatch):
    folder = tmp_path / 'instances'
    folder.mkdir()
    shutil.copy(mini_dat, folder / 'mini.dat')
    (folder / 'empty.dat').write_text('')
    monkeypatch.setattr(sys, 'argv', [
        'arcroute',
        '--input-dir', str(folder),
        '--mode', 'stats',
        '--results-dir', str(tmp_results_dir),
    ])

    assert main_mod.main() == 1
    assert (tmp_results_dir / 'statistics' / 'statistics_mini.txt').exists()


def test_main_missing_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, 'argv', ['arcroute', '--input-dir', str(tmp_path / 'absent')])
    assert main_mod.main() == 1


def test_main_bad_config(tmp_path, mini_dat, monkeypatch):
    config = tmp_path / 'bad.yaml'
    config.write_text('construction: savings\n')
    monkeypatch.setattr(sys, 'argv', ['arcroute', '--instance', str(mini_dat), '--config', str(config)])
    assert main_mod.main() == 1


def test_main_requires_an_input(monkeypatch):
    monkeypatch.setattr(sys, 'argv', ['arcroute'])
    with pytest.raises(SystemExit) as exc:
        main_mod.main()
    assert exc.value.code == 2


def test_help_params(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['arcroute', '--help-params'])
    with pytest.raises(SystemExit) as exc:
        main_mod.main()
    assert exc.value.code == 0
    assert 'Arc Routing Solver Parameters' in capsys.readouterr().out
