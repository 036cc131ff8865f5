"""
Helpers to run CQL on a CqlSession from async code.

All statements except DDL are prepared through the statement cache of the session's cluster
and bound with positional (?) parameters.
"""

import asyncio
from typing import Any, Iterable

from cassandra import OperationTimedOut
from cassandra.cluster import NoHostAvailable, ResponseFuture
from cassandra.query import BatchStatement, BatchType

from cqlfs.connections import ConnectivityError, CqlSession


async def records(session: CqlSession, cql: str, *args: Any) -> list:
    """
    Execute the cql with the given parameters and return all rows
    """
    prepared = await session.prepare(cql)
    rows = await _wait(session.raw.execute_async(prepared, args))
    return list(rows) if rows else []


async def single(session: CqlSession, cql: str, *args: Any) -> Any | None:
    """
    Execute the cql with the given parameters and return the first row, or None if there are no rows
    """
    rows = await records(session, cql, *args)
    return rows[0] if rows else None


async def execute(session: CqlSession, cql: str, *args: Any) -> None:
    prepared = await session.prepare(cql)
    await _wait(session.raw.execute_async(prepared, args))


async def execute_batch(session: CqlSession, statements: Iterable[tuple[str, tuple]]) -> None:
    """
    Execute (cql, parameters) pairs as a single logged batch, which the cluster applies either completely or not at all
    """
    batch = BatchStatement(batch_type=BatchType.LOGGED)
    for cql, args in statements:
        batch.add(await session.prepare(cql), args)
    await _wait(session.raw.execute_async(batch))


async def execute_ddl(session: CqlSession, cql: str) -> None:
    """
    Execute a schema statement. These are not prepared.
    """
    await _wait(session.raw.execute_async(cql))


async def _wait(response_future: ResponseFuture):
    """
    Wait for a driver response on the running event loop.
    The driver calls back from its own IO thread, so results are handed over with call_soon_threadsafe.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def on_success(result):
        loop.call_soon_threadsafe(_set_result, future, result)

    def on_error(error):
        loop.call_soon_threadsafe(_set_exception, future, error)

    response_future.add_callbacks(on_success, on_error)
    try:
        return await future
    except (NoHostAvailable, OperationTimedOut) as e:
        raise ConnectivityError(f"Query could not be executed: {e}") from e


def _set_result(future: asyncio.Future, result) -> None:
    if not future.done():
        future.set_result(result)


def _set_exception(future: asyncio.Future, error: BaseException) -> None:
    if not future.done():
        future.set_exception(error)
