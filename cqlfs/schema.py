import logging

from cqlfs.config import Settings
from cqlfs.connections import ConnectionRegistry
from cqlfs.execution import execute_ddl

CREATE_KEYSPACE = (
    "create keyspace if not exists {keyspace} "
    "with replication = {{'class': 'SimpleStrategy', 'replication_factor': {replication_factor}}}"
)

CREATE_FILES_TABLE = """
create table if not exists {keyspace}.files (
    cloudlet text,
    folder text,
    filename text,
    content text,
    primary key ((cloudlet), folder, filename)
)
"""


async def create_schema(connections: ConnectionRegistry, settings: Settings) -> None:
    """
    Create the keyspace and files table if they don't exist yet.
    Connects to the system keyspace, because the configured keyspace may not exist yet.
    Existing keyspaces are left alone, so the replication factor is only used for new keyspaces.
    """
    keyspace = settings.cql_keyspace
    if not keyspace.isidentifier():
        raise ValueError(f"Invalid keyspace name {keyspace!r}")
    async with connections.session(settings, keyspace="system") as session:
        logging.info(f"Creating keyspace {keyspace} (if needed)")
        await execute_ddl(
            session, CREATE_KEYSPACE.format(keyspace=keyspace, replication_factor=settings.cql_replication_factor)
        )
        logging.info(f"Creating table {keyspace}.files (if needed)")
        await execute_ddl(session, CREATE_FILES_TABLE.format(keyspace=keyspace))
