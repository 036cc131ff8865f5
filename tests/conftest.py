import pytest

from cqlfs import execution
from cqlfs.config import Settings
from cqlfs.connections import ConnectionRegistry
from cqlfs.files import FileStore
from cqlfs.paths import StaticRootResolver
from tests.tools import FakeBatch, FakeCluster

ROOT = "/acme/app1/"
SCOPE = "acme/app1"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="function")
def settings():
    return Settings(cql_host="10.0.0.1, 10.0.0.2", cql_keyspace="cqlfs_unittest")


@pytest.fixture(scope="function")
def cluster():
    return FakeCluster()


@pytest.fixture(scope="function")
async def connections(cluster, monkeypatch):
    monkeypatch.setattr(execution, "BatchStatement", FakeBatch)
    registry = ConnectionRegistry(cluster_factory=lambda settings: cluster)
    yield registry
    await registry.close()


@pytest.fixture(scope="function")
def root():
    return StaticRootResolver(ROOT)


@pytest.fixture(scope="function")
def store(connections, root, settings):
    return FileStore(connections, root, settings=settings)


@pytest.fixture(scope="function")
def docs(cluster):
    """The /acme/app1/docs/ folder, containing a.txt and b.md"""
    cluster.add_folder(SCOPE, "/docs/")
    cluster.add_row(SCOPE, "/docs/", "a.txt", "text a")
    cluster.add_row(SCOPE, "/docs/", "b.md", "# markdown b")
    return ROOT + "docs/"
