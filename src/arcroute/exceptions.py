"""Error taxonomy for instance validation and solving."""


class CARPError(Exception):
    """Base class for every error raised by arcroute."""


class InvalidInstanceError(CARPError, ValueError):
    """The instance itself is malformed (bad sizes, capacity, depot or service data)."""


class InfeasibleServiceError(CARPError):
    """A single service can never be part of a feasible route."""

    def __init__(self, service, message: str):
        super().__init__(message)
        self.service = service


class UnreachableServiceError(InfeasibleServiceError):
    """The service cannot be reached from the depot, or the depot from it."""

    def __init__(self, service, depot: int):
        self.depot = depot
        if service.source == service.target:
            where = f"node {service.source + 1}"
        else:
            where = f"link {service.source + 1}-{service.target + 1}"
        super().__init__(
            service,
            f"Service {service.id} on {where} is unreachable from depot {depot + 1}",
        )


class OverCapacityServiceError(InfeasibleServiceError):
    """The demand of a single service exceeds the vehicle capacity."""

    def __init__(self, service, capacity: int):
        self.capacity = capacity
        super().__init__(
            service,
            f"Service {service.id} has demand {service.demand} "
            f"greater than vehicle capacity {capacity}",
        )


class PathReconstructionError(CARPError, RuntimeError):
    """The predecessor matrix is inconsistent (cycle or dangling entry)."""
