"""sparsecol math - solvers built on top of the sparse storages."""

from .linalg import solve, is_symmetric

__all__ = [
    "solve",
    "is_symmetric",
]
