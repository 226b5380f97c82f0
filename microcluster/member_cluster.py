"""A group of clients, one for each member of a cluster."""

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Generic, TypeVar

C = TypeVar("C")


class Cluster(list, Generic[C]):
    """A list of clients belonging to a cluster."""

    def select_random(self) -> C:
        """Return a randomly selected client."""
        if not self:
            raise IndexError("Cannot select a client from an empty cluster")
        return random.choice(self)

    def query(self, query: Callable[[C], Any], concurrent: bool = False) -> None:
        """Run ``query`` against every client.

        Sequentially, the first failure stops the run and is raised. Concurrently,
        every query runs to completion and the first failure is raised.
        """
        if not concurrent:
            for client in self:
                query(client)
            return

        if not self:
            return

        errors: list[BaseException] = []
        with ThreadPoolExecutor(max_workers=len(self)) as pool:
            futures = [pool.submit(query, client) for client in self]
            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    errors.append(error)

        if errors:
            raise errors[0]