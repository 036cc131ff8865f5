"""
Sets up the connections to the CQL cluster.

A ConnectionRegistry is created once by the host and handed to everything that talks to the cluster.
It caches one driver Cluster per set of contact points for the lifetime of the process,
and hands out a keyspace bound session for every unit of work (see ConnectionRegistry.session).
"""

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable

from cassandra import OperationTimedOut
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, NoHostAvailable, Session
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra.query import PreparedStatement

from cqlfs.config import Settings
from cqlfs.statements import StatementCache


class ConnectivityError(ConnectionError):
    pass


@dataclass
class ClusterHandle:
    key: str
    contact_points: list[str]
    cluster: Cluster
    caches: dict[str, StatementCache] = field(default_factory=dict)

    def statements(self, keyspace: str) -> StatementCache:
        """Statements are prepared against a keyspace, so every keyspace gets its own cache"""
        cache = self.caches.get(keyspace)
        if cache is None:
            cache = self.caches.setdefault(keyspace, StatementCache())
        return cache


@dataclass
class CqlSession:
    """A live session on one keyspace, together with the statement cache of the cluster it belongs to."""

    raw: Session
    statements: StatementCache
    keyspace: str

    async def prepare(self, cql: str) -> PreparedStatement:
        try:
            return await self.statements.get_or_prepare(self.raw, cql)
        except (NoHostAvailable, OperationTimedOut) as e:
            raise ConnectivityError(f"Statement could not be prepared: {e}") from e


ClusterFactory = Callable[[Settings], Cluster]


def build_cluster(settings: Settings) -> Cluster:
    """
    Create (but don't connect) a driver cluster for the given settings
    """
    profile = ExecutionProfile(
        load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
        consistency_level=settings.cql_consistency.level,
        request_timeout=settings.cql_request_timeout,
    )
    auth_provider = None
    if settings.cql_username:
        auth_provider = PlainTextAuthProvider(username=settings.cql_username, password=settings.cql_password)
    return Cluster(
        contact_points=settings.contact_points,
        port=settings.cql_port,
        auth_provider=auth_provider,
        execution_profiles={EXEC_PROFILE_DEFAULT: profile},
    )


def cluster_key(settings: Settings) -> str:
    key = ",".join(settings.contact_points)
    if settings.cql_username:
        key = f"{settings.cql_username}@{key}"
    return key


class ConnectionRegistry:
    def __init__(self, cluster_factory: ClusterFactory = build_cluster):
        self.cluster_factory = cluster_factory
        self._clusters: dict[str, ClusterHandle] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._clusters)

    def cluster_handle(self, settings: Settings) -> ClusterHandle:
        """
        Get the cluster handle for the contact points (and username) in the settings, creating it on first use.
        """
        key = cluster_key(settings)
        handle = self._clusters.get(key)
        if handle is not None:
            return handle
        with self._lock:
            handle = self._clusters.get(key)
            if handle is None:
                credentials = "yes" if settings.cql_username else "no"
                logging.debug(f"Creating CQL cluster for {settings.contact_points}, credentials? {credentials}")
                handle = ClusterHandle(key, settings.contact_points, self.cluster_factory(settings))
                self._clusters[key] = handle
            return handle

    @asynccontextmanager
    async def session(self, settings: Settings, keyspace: str | None = None) -> AsyncIterator[CqlSession]:
        """
        Connect a session to the keyspace (default: the configured keyspace) for the duration of the block.
        The session is always shut down when the block exits, including on errors.
        """
        keyspace = keyspace or settings.cql_keyspace
        handle = self.cluster_handle(settings)
        loop = asyncio.get_running_loop()
        logging.debug(f"Connecting to keyspace {keyspace} at {handle.contact_points}")
        try:
            raw = await loop.run_in_executor(None, handle.cluster.connect, keyspace)
        except NoHostAvailable as e:
            # the driver shuts down a cluster that fails its first connect, so it cannot be reused
            self._evict(handle)
            raise ConnectivityError(f"Cannot connect to CQL cluster at {','.join(handle.contact_points)}") from e
        # listings are returned in a single response
        raw.default_fetch_size = None
        try:
            yield CqlSession(raw, handle.statements(keyspace), keyspace)
        finally:
            await loop.run_in_executor(None, raw.shutdown)

    async def close(self) -> None:
        """
        Shut down all clusters. Only needed at host shutdown (and in tests), clusters otherwise live for the process.
        """
        with self._lock:
            handles = list(self._clusters.values())
            self._clusters.clear()
        loop = asyncio.get_running_loop()
        for handle in handles:
            await loop.run_in_executor(None, handle.cluster.shutdown)

    def _evict(self, handle: ClusterHandle) -> None:
        with self._lock:
            if self._clusters.get(handle.key) is handle:
                del self._clusters[handle.key]
