"""Route costing. Every cost figure in a solve comes from :meth:`CostEvaluator.route_cost`."""

from typing import List, Sequence

from arcroute.models import INF, Service, Solution
from arcroute.network.index import NetworkIndex


class CostEvaluator:
    """Exact route cost on top of a shortest-path index for a fixed depot."""

    def __init__(self, index: NetworkIndex, depot: int):
        self.index = index
        self.depot = depot

    def route_cost(self, services: Sequence[Service]) -> float:
        """Deadheading + traversal + service cost of ``depot -> services -> depot``.

        Returns ``INF`` as soon as any leg is unreachable. An empty route costs 0.
        """
        if not services:
            return 0
        cost = 0
        last_node = self.depot
        for service in services:
            leg = self.index.distance(last_node, service.source)
            if leg == INF:
                return INF
            cost += leg + service.service_cost
            if not service.is_node:
                cost += service.travel_cost
            last_node = service.target
        back = self.index.distance(last_node, self.depot)
        if back == INF:
            return INF
        return cost + back

    @staticmethod
    def route_demand(services: Sequence[Service]) -> int:
        return sum(s.demand for s in services)

    def refresh(self, solution: Solution) -> Solution:
        """Recompute every cached figure of ``solution`` from its services.

        Empty routes are dropped and route ids renumbered from 1.
        """
        solution.routes = [route for route in solution.routes if route.services]
        total = 0
        for route_id, route in enumerate(solution.routes, start=1):
            route.route_id = route_id
            route.total_demand = self.route_demand(route.services)
            route.total_cost = self.route_cost(route.services)
            total += route.total_cost
        solution.total_cost = total
        return solution

    def route_walk(self, services: Sequence[Service]) -> List[int]:
        """Every node visited by the route, depot to depot.

        Empty if any leg is unreachable.
        """
        walk = [self.depot]
        for service in services:
            leg = self.index.reconstruct_path(walk[-1], service.source)
            if not leg:
                return []
            walk.extend(leg[1:])
            if service.target != service.source:
                walk.append(service.target)
        leg = self.index.reconstruct_path(walk[-1], self.depot)
        if not leg:
            return []
        walk.extend(leg[1:])
        return walk
