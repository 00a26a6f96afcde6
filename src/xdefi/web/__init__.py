"""Web boundary layer: contracts, services and controllers for the HTTP API."""

__all__ = [
    "contracts",
    "services",
    "controllers",
]
