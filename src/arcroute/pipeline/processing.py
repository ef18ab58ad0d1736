"""
Per-instance processing and the batch driver.

Each instance file is parsed, analysed and/or solved inside an
:func:`instance_session`, so the solver and its shortest-path index are
released before the next file is read. A failing instance is logged and
counted; it never aborts the batch.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Tuple

from arcroute.config.parameters import Parameters
from arcroute.exceptions import CARPError
from arcroute.network.statistics import betweenness, graph_statistics
from arcroute.parsers import CARPInstance, CARPParser
from arcroute.solver import Solver
from arcroute.utils.graph_export import export_dot
from arcroute.utils.logging import Colors, ProgressTracker
from arcroute.utils.save_results import save_solution, save_statistics

logger = logging.getLogger(__name__)

INSTANCE_SUFFIXES = ('.dat', '.txt')


class ProcessingMode(Enum):
    STATS = 'stats'
    SOLVE = 'solve'
    ALL = 'all'

    @property
    def computes_statistics(self) -> bool:
        return self in (ProcessingMode.STATS, ProcessingMode.ALL)

    @property
    def solves(self) -> bool:
        return self in (ProcessingMode.SOLVE, ProcessingMode.ALL)


@dataclass
class BatchSummary:
    """Outcome of a directory run."""
    succeeded: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def success_rate(self) -> float:
        return 100.0 * len(self.succeeded) / self.total if self.total else 0.0


@contextmanager
def instance_session(path: Path | str, parameters: Parameters) -> Iterator[Tuple[CARPInstance, Solver]]:
    """Parse ``path`` and yield the instance with a solver scoped to it."""
    instance = CARPParser(path).parse()
    solver = Solver(instance.network, instance.catalog, parameters, name=instance.name)
    try:
        yield instance, solver
    finally:
        solver.release()


def output_paths(path: Path, parameters: Parameters) -> dict:
    """Output files for one instance under ``parameters.results_dir``."""
    results_dir = Path(parameters.results_dir)
    base = path.stem
    if parameters.solution_format == 'json':
        solution_name = f"sol-{base}.json"
    else:
        solution_name = f"sol-{path.name}"
    return {
        'solution': results_dir / 'solutions' / solution_name,
        'statistics': results_dir / 'statistics' / f"statistics_{base}.{parameters.statistics_format}",
        'graph': results_dir / 'graphs' / f"graph_{base}.dot",
    }


def _write_statistics(instance: CARPInstance, solver: Solver, paths: dict, parameters: Parameters) -> None:
    stats = graph_statistics(instance.network, solver.index)
    save_statistics(
        stats,
        betweenness(solver.index),
        paths['statistics'],
        format=parameters.statistics_format
    )
    export_dot(instance.network, paths['graph'], name=instance.name)


def _write_solution(instance: CARPInstance, solver: Solver, paths: dict, parameters: Parameters) -> bool:
    solution = solver.solve(instance.depot, instance.capacity)
    save_solution(
        solution,
        instance.depot,
        instance.catalog,
        paths['solution'],
        format=parameters.solution_format,
        evaluator=solver.evaluator(instance.depot)
    )
    if solution.is_feasible and instance.optimal_value and instance.optimal_value > 0:
        gap = 100.0 * (solution.total_cost - instance.optimal_value) / instance.optimal_value
        logger.info(
            f"[{instance.name}] Cost {solution.total_cost:g} vs best known "
            f"{instance.optimal_value} (gap {gap:.2f}%)"
        )
    return solution.is_feasible


def process_instance(path: Path | str, mode: ProcessingMode, parameters: Parameters) -> bool:
    """Run ``mode`` on one instance file. Returns whether it succeeded."""
    path = Path(path)
    paths = output_paths(path, parameters)
    try:
        with instance_session(path, parameters) as (instance, solver):
            if mode.computes_statistics:
                _write_statistics(instance, solver, paths, parameters)
            if mode.solves:
                return _write_solution(instance, solver, paths, parameters)
        return True
    except (CARPError, OSError) as e:
        logger.error(f"Failed to process {path.name}: {e}")
        return False


def find_instance_files(folder: Path | str) -> List[Path]:
    folder = Path(folder)
    if not folder.is_dir():
        raise NotADirectoryError(f"Instance directory not found: {folder}")
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix in INSTANCE_SUFFIXES)


def process_directory(folder: Path | str, mode: ProcessingMode, parameters: Parameters) -> BatchSummary:
    """Process every instance file of ``folder`` in name order."""
    files = find_instance_files(folder)
    summary = BatchSummary()
    if not files:
        logger.warning(f"No instance files found in {folder}")
        return summary

    start = time.perf_counter()
    progress = ProgressTracker(files, description=f"Processing {len(files)} instances")
    for path in files:
        if process_instance(path, mode, parameters):
            summary.succeeded.append(path)
            progress.advance(f"{path.name}", status='success')
        else:
            summary.failed.append(path)
            progress.advance(f"{path.name}", status='error')
    summary.elapsed = time.perf_counter() - start

    progress.close(
        f"Processed {summary.total} instances: {Colors.BOLD}{len(summary.succeeded)}{Colors.RESET}"
        f"{Colors.GREEN} succeeded, {len(summary.failed)} failed "
        f"({summary.success_rate:.1f}% success, {summary.elapsed:.1f}s)"
    )
    return summary
