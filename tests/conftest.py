import logging

import pytest
from pathlib import Path

from arcroute.config.parameters import Parameters
from arcroute.models import ServiceCatalog, ServiceKind
from arcroute.network.graph import Network
from arcroute.network.index import NetworkIndex
from arcroute.routing.cost import CostEvaluator

# Define project root for path fixtures
repo_root = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def mini_dat():
    """Path to the small mixed instance used by component and integration tests"""
    return repo_root / "tests" / "_assets" / "mini.dat"


@pytest.fixture
def tmp_results_dir(tmp_path):
    """Results directory inside the test's temp folder"""
    results = tmp_path / "results"
    results.mkdir()
    return results


@pytest.fixture
def params(tmp_results_dir):
    """Default parameters writing into the temp results directory"""
    return Parameters(results_dir=str(tmp_results_dir))


@pytest.fixture
def restore_root_logging():
    """Undo the handler/level changes made by setup_logging"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ─────────────────────────────────────────────────────────────────────────────
# Small networks. Node ids are 0-based; the depot is node 0 unless noted.
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def single_edge_case():
    """4 nodes, one required edge 0-1 (travel 5, service 5, demand 3), capacity 10"""
    network = Network(4)
    network.add_connection(0, 1, 5, required=True)
    network.add_connection(1, 2, 4)
    network.add_connection(2, 3, 4)
    catalog = ServiceCatalog()
    catalog.add_service(1, ServiceKind.EDGE, 0, 1, demand=3, service_cost=5, travel_cost=5)
    return network, catalog, 0, 10


@pytest.fixture
def square_case():
    """Square 0-1-2-3-0 with expensive depot links and two cheap required edges.

    Served apart each edge costs 23; served together in one route they cost 24.
    """
    network = Network(4)
    network.add_connection(0, 1, 10)
    network.add_connection(1, 2, 1, required=True)
    network.add_connection(2, 3, 1, required=True)
    network.add_connection(3, 0, 10)
    catalog = ServiceCatalog()
    catalog.add_service(1, ServiceKind.EDGE, 1, 2, demand=2, service_cost=1, travel_cost=1)
    catalog.add_service(2, ServiceKind.EDGE, 2, 3, demand=2, service_cost=1, travel_cost=1)
    return network, catalog, 0, 10


@pytest.fixture
def two_branch_case():
    """Depot 0 with branches to nodes 1 and 2 (cost 10 each), two node services on each.

    Capacity 2 means every route holds exactly two services.
    """
    network = Network(3)
    network.add_connection(0, 1, 10)
    network.add_connection(0, 2, 10)
    catalog = ServiceCatalog()
    for service_id, node in [(1, 1), (2, 2), (3, 2), (4, 1)]:
        catalog.add_service(service_id, ServiceKind.NODE, node, node, demand=1, service_cost=0)
    return network, catalog, 0, 2


@pytest.fixture
def line_network():
    """Path 0-1-2 with unit costs"""
    network = Network(3)
    network.add_connection(0, 1, 1)
    network.add_connection(1, 2, 1)
    return network


@pytest.fixture
def square_evaluator(square_case):
    network, _, depot, _ = square_case
    return CostEvaluator(NetworkIndex.build(network), depot)
