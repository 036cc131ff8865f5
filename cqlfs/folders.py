"""
Folder existence, as consulted by the FileStore before anything is written.

Hosts with their own folder management plug in their own FolderService. CqlFolderService is the default,
and keeps folders as marker rows (empty filename) in the same files table.
"""

from typing import Protocol

from cqlfs.connections import CqlSession
from cqlfs.execution import execute, single
from cqlfs.models import FOLDER_MARKER

MARKER_SELECT = "select folder from files where cloudlet = ? and folder = ? and filename = ?"
MARKER_INSERT = "insert into files (cloudlet, folder, filename, content) values (?, ?, ?, ?)"


class FolderService(Protocol):
    async def folder_exists(self, session: CqlSession, owner_scope: str, folder: str) -> bool: ...


class CqlFolderService:
    async def folder_exists(self, session: CqlSession, owner_scope: str, folder: str) -> bool:
        if folder == "/":
            return True
        row = await single(session, MARKER_SELECT, owner_scope, folder, FOLDER_MARKER)
        return row is not None

    async def create_folder(self, session: CqlSession, owner_scope: str, folder: str) -> None:
        """
        Write the marker row of a folder. Parent folders are not created.
        """
        if not (folder.startswith("/") and folder.endswith("/")):
            raise ValueError(f"Folder {folder!r} should start and end with a slash")
        if folder != "/":
            await execute(session, MARKER_INSERT, owner_scope, folder, FOLDER_MARKER, "")
