import sys

import pytest

from cqlfs import __main__ as cli
from cqlfs.config import Settings
from cqlfs.connections import ConnectionRegistry


@pytest.fixture(scope="function")
def cli_settings(monkeypatch, settings):
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return settings


@pytest.fixture(scope="function")
def cli_cluster(monkeypatch, cluster):
    monkeypatch.setattr(cli, "ConnectionRegistry", lambda: ConnectionRegistry(cluster_factory=lambda settings: cluster))
    return cluster


def test_show_config(cli_settings, capsys):
    cli.show_config(None)
    out = capsys.readouterr().out
    assert "CQLFS_CQL_HOST=10.0.0.1, 10.0.0.2" in out
    assert "CQLFS_CQL_KEYSPACE=cqlfs_unittest" in out
    assert "CQLFS_CQL_CONSISTENCY=local_quorum" in out
    # unset values are shown commented out
    assert "#CQLFS_CQL_USERNAME=" in out
    assert "# Keyspace containing the files table" in out


def test_main_config(cli_settings, capsys, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["cqlfs", "config"])
    cli.main()
    assert "CQLFS_CQL_PORT=9042" in capsys.readouterr().out


def test_main_requires_action(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["cqlfs"])
    with pytest.raises(SystemExit):
        cli.main()


def test_main_create_schema(cli_settings, cli_cluster, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["cqlfs", "-v", "create-schema"])
    cli.main()
    assert len(cli_cluster.ddl) == 2
    assert cli_cluster.open_sessions == []
    # the registry is closed when done
    assert cli_cluster.is_shutdown


def test_create_schema_unreachable(cli_settings, cli_cluster, monkeypatch):
    cli_cluster.fail_connect = True
    monkeypatch.setattr(sys, "argv", ["cqlfs", "create-schema"])
    with pytest.raises(SystemExit) as e:
        cli.main()
    assert e.value.code == 1
    assert cli_cluster.ddl == []


@pytest.mark.anyio
async def test_create_schema_other_keyspace(monkeypatch, cli_cluster):
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(cql_keyspace="other_files"))
    await cli.run_create_schema(None)
    assert "create table if not exists other_files.files" in cli_cluster.ddl[1]
