import asyncio
import concurrent.futures
import threading

from cassandra.cluster import Session
from cassandra.query import PreparedStatement


class StatementCache:
    """
    Prepared statements of a single cluster and keyspace, keyed by the exact CQL text.
    ClusterHandle keeps one cache per keyspace, so a statement is never bound on another cluster or keyspace.

    Lookups of already prepared statements don't lock. Concurrent first uses of the same CQL share a single
    preparation, also when they come from different threads and event loops; if that preparation fails
    nothing is cached and the next call tries again.
    """

    def __init__(self):
        self._prepared: dict[str, PreparedStatement] = {}
        self._pending: dict[str, concurrent.futures.Future] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._prepared)

    def __contains__(self, cql: str) -> bool:
        return cql in self._prepared

    async def get_or_prepare(self, session: Session, cql: str) -> PreparedStatement:
        prepared = self._prepared.get(cql)
        if prepared is not None:
            return prepared
        with self._lock:
            prepared = self._prepared.get(cql)
            if prepared is not None:
                return prepared
            pending = self._pending.get(cql)
            first = pending is None
            if pending is None:
                pending = concurrent.futures.Future()
                self._pending[cql] = pending
        loop = asyncio.get_running_loop()
        if first:
            loop.run_in_executor(None, self._prepare, session, cql, pending)
        # shield, so a cancelled caller doesn't cancel the preparation the others are waiting for
        return await asyncio.shield(asyncio.wrap_future(pending, loop=loop))

    def _prepare(self, session: Session, cql: str, pending: concurrent.futures.Future) -> None:
        """Runs in a worker thread; the outcome is handed to every waiter through the pending future"""
        try:
            prepared = session.prepare(cql)
        except Exception as e:
            self._done(cql)
            pending.set_exception(e)
        else:
            self._prepared[cql] = prepared
            self._done(cql)
            pending.set_result(prepared)

    def _done(self, cql: str) -> None:
        with self._lock:
            self._pending.pop(cql, None)
