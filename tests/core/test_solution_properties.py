import hypothesis.strategies as st
from hypothesis import assume, given, settings
import pytest

from arcroute.config.parameters import Parameters
from arcroute.models import ServiceCatalog, ServiceKind
from arcroute.network.graph import Network
from arcroute.routing.local_search import LocalSearchEngine
from arcroute.solver import Solver


@st.composite
def carp_instances(draw):
    """Ring networks (always strongly connected) with random chords and services."""
    n = draw(st.integers(min_value=3, max_value=7))
    capacity = draw(st.integers(min_value=3, max_value=10))
    network = Network(n)
    catalog = ServiceCatalog()
    service_id = 1

    for u in range(n):
        v = (u + 1) % n
        cost = draw(st.integers(min_value=1, max_value=20))
        required = draw(st.booleans())
        network.add_connection(u, v, cost, required=required)
        if required:
            catalog.add_service(
                service_id, ServiceKind.EDGE, u, v,
                demand=draw(st.integers(min_value=1, max_value=capacity)),
                service_cost=draw(st.integers(min_value=0, max_value=10)),
                travel_cost=cost
            )
            service_id += 1

    chords = draw(st.lists(
        st.tuples(
            st.integers(min_value=0, max_value=n - 1),
            st.integers(min_value=0, max_value=n - 1),
            st.integers(min_value=1, max_value=20),
            st.booleans(),
        ),
        max_size=4
    ))
    for u, v, cost, required in chords:
        network.add_connection(u, v, cost, directed=True, required=required)
        if required:
            catalog.add_service(
                service_id, ServiceKind.ARC, u, v,
                demand=draw(st.integers(min_value=1, max_value=capacity)),
                service_cost=draw(st.integers(min_value=0, max_value=10)),
                travel_cost=cost
            )
            service_id += 1

    for node in draw(st.sets(st.integers(min_value=0, max_value=n - 1), max_size=3)):
        network.set_required_node(node)
        catalog.add_service(
            service_id, ServiceKind.NODE, node, node,
            demand=draw(st.integers(min_value=1, max_value=capacity)),
            service_cost=draw(st.integers(min_value=0, max_value=10))
        )
        service_id += 1

    assume(len(catalog) > 0)
    depot = draw(st.integers(min_value=0, max_value=n - 1))
    return network, catalog, depot, capacity


@settings(max_examples=20, deadline=None)
@given(
    case=carp_instances(),
    construction=st.sampled_from(['cheapest_insertion', 'one_per_route']),
    seed=st.integers(min_value=0, max_value=1000)
)
def test_solutions_are_consistent_feasible_and_complete(case, construction, seed):
    network, catalog, depot, capacity = case
    params = Parameters(construction=construction, seed=seed, shuffle_services=True)
    solver = Solver(network, catalog, params)
    solution = solver.solve(depot, capacity)
    evaluator = solver.evaluator(depot)

    assert solution.is_feasible
    # Cost consistency
    for route in solution.routes:
        assert route.total_cost == pytest.approx(evaluator.route_cost(route.services))
        assert route.total_demand == sum(s.demand for s in route.services)
        # Capacity
        assert route.total_demand <= capacity
        assert route.services
    assert solution.total_cost == pytest.approx(sum(r.total_cost for r in solution.routes))
    # Exact coverage
    assert solution.covers(catalog)
    assert [r.route_id for r in solution.routes] == list(range(1, solution.route_count + 1))

    # Strictly decreasing cost history
    history = solver.last_search.cost_history
    assert all(later < earlier for earlier, later in zip(history, history[1:]))

    # Local optimum is stable
    before = solution.signature()
    again = LocalSearchEngine(evaluator, capacity, neighborhoods=params.neighborhoods).run(solution)
    assert again.moves == 0
    assert solution.signature() == before


@settings(max_examples=20, deadline=None)
@given(case=carp_instances())
def test_local_search_never_worsens_one_per_route(case):
    network, catalog, depot, capacity = case
    solver = Solver(network, catalog, Parameters(construction='one_per_route'))
    solution = solver.solve(depot, capacity)
    initial = solver.last_search.cost_history[0]
    assert solution.total_cost <= initial
    assert solution.route_count <= len(catalog)
