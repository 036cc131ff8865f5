"""
cqlfs Configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the CQLFS_ENV_FILE environment variable

Hosts normally construct a Settings object themselves and pass it to the ConnectionRegistry and FileStore;
get_settings() is only the default.
"""

import functools
from enum import Enum
from pathlib import Path
from typing import Annotated

from cassandra import ConsistencyLevel
from class_doc import extract_docs_from_cls_obj
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "cqlfs_"


class ConsistencyOptions(str, Enum):
    #: a single replica has to answer
    one = "one"

    #: a single replica in the local datacenter has to answer
    local_one = "local_one"

    #: a majority of all replicas has to answer
    quorum = "quorum"

    #: a majority of the replicas in the local datacenter has to answer
    local_quorum = "local_quorum"

    #: all replicas have to answer
    all = "all"

    @property
    def level(self) -> int:
        return ConsistencyLevel.name_to_value[self.name.upper()]


for field, doc in extract_docs_from_cls_obj(ConsistencyOptions).items():
    ConsistencyOptions[field].__doc__ = "\n".join(doc)


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")

    cql_host: Annotated[
        str,
        Field(
            description="Contact points of the CQL cluster (ScyllaDB or Cassandra), separated by commas",
        ),
    ] = "127.0.0.1"

    cql_port: Annotated[int, Field(description="Native protocol port of the contact points")] = 9042

    cql_username: Annotated[
        str | None,
        Field(description="Username for the cluster. Credentials are only used if a username is given"),
    ] = None

    cql_password: Annotated[str | None, Field(description="Password for the cluster")] = None

    cql_keyspace: Annotated[
        str,
        Field(description="Keyspace containing the files table"),
    ] = "magic"

    cql_consistency: Annotated[
        ConsistencyOptions, Field(description="Consistency level for all file operations")
    ] = ConsistencyOptions.local_quorum

    cql_request_timeout: Annotated[
        float,
        Field(description="Seconds before the driver gives up on a single request"),
    ] = 10.0

    cql_replication_factor: Annotated[
        int,
        Field(description="Replication factor used when creating the keyspace (create-schema only)"),
    ] = 1

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    @property
    def contact_points(self) -> list[str]:
        hosts = [host.strip() for host in self.cql_host.split(",") if host.strip()]
        if not hosts:
            raise ValueError(f"No contact points in cql_host {self.cql_host!r}")
        return hosts


@functools.lru_cache()
def get_settings() -> Settings:
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


if __name__ == "__main__":
    # Echo the settings
    for k, v in get_settings().model_dump(mode="json").items():
        print(f"{ENV_PREFIX.upper()}{k.upper()}={v}")
