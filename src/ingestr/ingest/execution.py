"""Execution strategies for per-site adapter fan-out.

Sequential() calls the adapter for one site after the other.
WorkerPool(n_workers) spreads the calls over a fixed-size thread pool;
results are collected in site order once every call has finished, and
the first failure aborts the whole run.
"""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar, Union

from ingestr.errors import ExecutionConfigError

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Sequential:
    """Run per-site calls one after the other."""

    def map(self, func: Callable[[T], R], items: Sequence[T]) -> list[R]:
        return [func(item) for item in items]


@dataclass(frozen=True)
class WorkerPool:
    """Run per-site calls on `n_workers` threads.

    Attributes:
        n_workers: Pool size, must be positive
    """

    n_workers: int

    def __post_init__(self) -> None:
        if self.n_workers is None:
            raise ExecutionConfigError(
                "Aborting. Please provide number of workers for parallel jobs."
            )
        if int(self.n_workers) < 1:
            raise ExecutionConfigError(
                f"n_workers must be positive, got {self.n_workers}"
            )

    def map(self, func: Callable[[T], R], items: Sequence[T]) -> list[R]:
        with concurrent.futures.ThreadPoolExecutor(max_workers=int(self.n_workers)) as executor:
            # executor.map yields in input order and re-raises the first error
            return list(executor.map(func, items))


Execution = Union[Sequential, WorkerPool]


def execution_from_flags(parallel: bool = False, ncores: int | None = None) -> Execution:
    """Translate a parallel flag and core count into an execution strategy.

    Raises:
        ExecutionConfigError: If parallel is requested without ncores
    """
    if not parallel:
        return Sequential()
    if ncores is None:
        raise ExecutionConfigError(
            "Aborting. Please provide number of cores for parallel jobs."
        )
    return WorkerPool(n_workers=ncores)
