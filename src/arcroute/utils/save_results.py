import json
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from arcroute.models import ServiceCatalog, Solution
from arcroute.routing.cost import CostEvaluator

logger = logging.getLogger(__name__)

INFEASIBLE_MARKER = 'infeasible'


class NumpyEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def _fmt(value: float) -> str:
    """Costs are printed as integers whenever they are integral."""
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:.2f}"


def _microseconds(seconds: float) -> int:
    return int(round(seconds * 1_000_000))


def is_reportable(solution: Solution, catalog: ServiceCatalog) -> bool:
    """A solution is written out only when feasible and covering every service."""
    return solution.is_feasible and solution.covers(catalog)


def format_solution(solution: Solution, depot: int, catalog: ServiceCatalog) -> str:
    """
    Render a solution in the plain-text solution format.

    Lines: total cost, route count, total execution time and time to best
    (both in microseconds), then one line per route::

        0 1 <route id> <demand> <cost> <visits> (D 0,d,d) (S id,u,v) ... (D 0,d,d)

    Node ids are 1-based. Unreportable solutions become the single line
    ``infeasible``.
    """
    if not is_reportable(solution, catalog):
        return INFEASIBLE_MARKER + '\n'

    depot_visit = f"(D 0,{depot + 1},{depot + 1})"
    lines = [
        _fmt(solution.total_cost),
        str(solution.route_count),
        str(_microseconds(solution.execution_time)),
        str(_microseconds(solution.time_to_best)),
    ]
    for route in solution.routes:
        visits = [depot_visit]
        visits += [f"(S {s.id},{s.source + 1},{s.target + 1})" for s in route.services]
        visits.append(depot_visit)
        lines.append(
            f" 0 1 {route.route_id} {route.total_demand} {_fmt(route.total_cost)} "
            f"{len(visits)} " + ' '.join(visits)
        )
    return '\n'.join(lines) + '\n'


def routes_dataframe(solution: Solution, evaluator: Optional[CostEvaluator] = None) -> pd.DataFrame:
    """One row per route; adds the full node walk when an evaluator is given."""
    rows = []
    for route in solution.routes:
        row = {
            'route_id': route.route_id,
            'total_demand': route.total_demand,
            'total_cost': route.total_cost,
            'services': [
                {'id': s.id, 'kind': s.kind.value, 'from': s.source + 1, 'to': s.target + 1}
                for s in route.services
            ],
        }
        if evaluator is not None:
            row['walk'] = [node + 1 for node in evaluator.route_walk(route.services)]
        rows.append(row)
    return pd.DataFrame(rows, columns=['route_id', 'total_demand', 'total_cost', 'services']
                        + (['walk'] if evaluator is not None else []))


def solution_to_dict(
    solution: Solution,
    depot: int,
    catalog: ServiceCatalog,
    evaluator: Optional[CostEvaluator] = None
) -> dict:
    if not is_reportable(solution, catalog):
        data = {'status': INFEASIBLE_MARKER}
        if solution.infeasibility is not None:
            data['reason'] = str(solution.infeasibility)
            data['service'] = solution.infeasibility.service.id
        return data

    return {
        'status': 'feasible',
        'total_cost': solution.total_cost,
        'route_count': solution.route_count,
        'depot': depot + 1,
        'execution_time_us': _microseconds(solution.execution_time),
        'time_to_best_us': _microseconds(solution.time_to_best),
        'moves': solution.moves,
        'routes': routes_dataframe(solution, evaluator).to_dict(orient='records'),
    }


def save_solution(
    solution: Solution,
    depot: int,
    catalog: ServiceCatalog,
    filename: str | Path,
    format: str = 'dat',
    evaluator: Optional[CostEvaluator] = None
) -> Path:
    """Write a solution file ('dat' text format or 'json')."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    if format == 'json':
        with open(path, 'w') as f:
            json.dump(solution_to_dict(solution, depot, catalog, evaluator), f, indent=2, cls=NumpyEncoder)
    else:
        path.write_text(format_solution(solution, depot, catalog))

    if is_reportable(solution, catalog):
        logger.info(
            f"Solution saved to {path} (cost {_fmt(solution.total_cost)}, {solution.route_count} routes)"
        )
    else:
        logger.warning(f"Infeasible solution written to {path}")
    return path


def save_statistics(
    statistics: pd.Series,
    betweenness: pd.Series,
    filename: str | Path,
    format: str = 'txt'
) -> Path:
    """Write graph statistics as a text report or JSON."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    if format == 'json':
        data = {
            'statistics': statistics.to_dict(),
            'betweenness': {int(node): int(count) for node, count in betweenness.items()},
        }
        with open(path, 'w') as f:
            json.dump(data, f, indent=2, cls=NumpyEncoder)
    else:
        report: List[str] = [statistics.to_string(float_format=lambda v: f"{v:.4f}"), '', 'Betweenness']
        report.append(betweenness.to_string())
        path.write_text('\n'.join(report) + '\n')

    logger.info(f"Statistics saved to {path}")
    return path
