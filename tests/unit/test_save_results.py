import json

import pandas as pd
import pytest

from arcroute.exceptions import OverCapacityServiceError
from arcroute.models import Route, Solution
from arcroute.utils.save_results import (
    format_solution,
    save_solution,
    save_statistics,
)


@pytest.fixture
def square_solution(square_case, square_evaluator):
    _, catalog, _, _ = square_case
    a, b = catalog.services
    solution = Solution(routes=[Route([a, b])], construction_time=0.001, search_time=0.002,
                        time_to_best=0.0015)
    return square_evaluator.refresh(solution)


def test_format_solution_text(square_case, square_solution):
    _, catalog, depot, _ = square_case
    lines = format_solution(square_solution, depot, catalog).splitlines()

    assert lines[0] == '24'
    assert lines[1] == '1'
    assert lines[2] == '3000'
    assert lines[3] == '1500'
    assert lines[4] == ' 0 1 1 4 24 4 (D 0,1,1) (S 1,2,3) (S 2,3,4) (D 0,1,1)'
    assert len(lines) == 5


def test_fractional_costs_keep_two_decimals(square_case, square_solution):
    _, catalog, depot, _ = square_case
    square_solution.total_cost = 24.5
    assert format_solution(square_solution, depot, catalog).splitlines()[0] == '24.50'


def test_infeasible_solution_text(square_case):
    _, catalog, depot, _ = square_case
    error = OverCapacityServiceError(catalog.services[0], 1)
    assert format_solution(Solution.infeasible(error), depot, catalog) == 'infeasible\n'


def test_partial_solution_is_not_reported(square_case, square_evaluator):
    _, catalog, depot, _ = square_case
    partial = square_evaluator.refresh(Solution(routes=[Route([catalog.services[0]])]))
    assert format_solution(partial, depot, catalog) == 'infeasible\n'


def test_save_solution_json_includes_walks(tmp_path, square_case, square_solution, square_evaluator):
    _, catalog, depot, _ = square_case
    path = save_solution(square_solution, depot, catalog, tmp_path / 'sol.json',
                         format='json', evaluator=square_evaluator)
    data = json.loads(path.read_text())

    assert data['status'] == 'feasible'
    assert data['total_cost'] == 24
    assert data['route_count'] == 1
    route = data['routes'][0]
    assert route['route_id'] == 1
    assert [s['id'] for s in route['services']] == [1, 2]
    assert route['walk'] == [1, 2, 3, 4, 1]


def test_save_infeasible_solution_json(tmp_path, square_case):
    _, catalog, depot, _ = square_case
    error = OverCapacityServiceError(catalog.services[1], 1)
    path = save_solution(Solution.infeasible(error), depot, catalog, tmp_path / 'sol.json', format='json')
    data = json.loads(path.read_text())
    assert data['status'] == 'infeasible'
    assert data['service'] == 2


def test_save_solution_dat_creates_directories(tmp_path, square_case, square_solution):
    _, catalog, depot, _ = square_case
    path = save_solution(square_solution, depot, catalog, tmp_path / 'solutions' / 'sol-x.dat')
    assert path.read_text().startswith('24\n1\n')


def test_save_statistics_txt_and_json(tmp_path, line_network):
    stats = pd.Series({'Vertices': 3, 'Density': 2 / 3}, name='value', dtype=object)
    between = pd.Series([0, 2, 0], index=pd.RangeIndex(1, 4, name='node'), name='betweenness')

    txt = save_statistics(stats, between, tmp_path / 'stats.txt').read_text()
    assert 'Vertices' in txt
    assert 'Betweenness' in txt

    data = json.loads(save_statistics(stats, between, tmp_path / 'stats.json', format='json').read_text())
    assert data['statistics']['Vertices'] == 3
    assert data['betweenness'] == {'1': 0, '2': 2, '3': 0}
