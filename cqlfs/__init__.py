"""
A virtual file system on top of a single CQL (ScyllaDB or Cassandra) table.

Typical host wiring:

    connections = ConnectionRegistry()  # once per process
    store = FileStore(connections, StaticRootResolver("/acme/app1/"), settings=get_settings())
    await store.save("/acme/app1/docs/readme.txt", "hello")
"""

from cqlfs.config import Settings, get_settings
from cqlfs.connections import ConnectionRegistry, ConnectivityError
from cqlfs.files import DecodeError, FileNotFound, FileStore, FolderNotFound, NotAFile
from cqlfs.folders import CqlFolderService, FolderService
from cqlfs.paths import RootResolver, StaticRootResolver

__all__ = [
    "ConnectionRegistry",
    "ConnectivityError",
    "CqlFolderService",
    "DecodeError",
    "FileNotFound",
    "FileStore",
    "FolderNotFound",
    "FolderService",
    "NotAFile",
    "RootResolver",
    "Settings",
    "StaticRootResolver",
    "get_settings",
]
