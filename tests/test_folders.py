import pytest

from cqlfs.folders import CqlFolderService
from tests.conftest import ROOT, SCOPE


@pytest.mark.anyio
async def test_folder_exists(connections, settings, cluster):
    folders = CqlFolderService()
    async with connections.session(settings) as session:
        assert await folders.folder_exists(session, SCOPE, "/")
        assert not await folders.folder_exists(session, SCOPE, "/docs/")
        await folders.create_folder(session, SCOPE, "/docs/")
        assert await folders.folder_exists(session, SCOPE, "/docs/")
        assert not await folders.folder_exists(session, "acme/app2", "/docs/")
        # creating the root is a no-op
        await folders.create_folder(session, SCOPE, "/")
        with pytest.raises(ValueError):
            await folders.create_folder(session, SCOPE, "docs")
    assert cluster.content(SCOPE, "/docs/", "") == ""
    assert (SCOPE, "/", "") not in cluster.rows


@pytest.mark.anyio
async def test_created_folder_is_usable(store, connections, settings):
    async with connections.session(settings) as session:
        await CqlFolderService().create_folder(session, SCOPE, "/reports/")
    await store.save(ROOT + "reports/q1.csv", "a,b\n1,2\n")
    assert await store.list_files(ROOT + "reports/") == [ROOT + "reports/q1.csv"]
