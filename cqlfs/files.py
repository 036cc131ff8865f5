"""
Files stored in the files table of a CQL cluster (ScyllaDB or Cassandra).

Every file is a row keyed by (cloudlet, folder, filename), where cloudlet is the owner scope (tenant/cloudlet)
derived from the root folder. There are no directories in the table: whether a folder exists is decided by the
FolderService, which is consulted before anything is written.

All operations connect their own session and close it again when done. Nothing is retried: connectivity errors
propagate as ConnectivityError, and concurrent writes to the same file simply race (last write wins).
"""

import base64
import binascii
from typing import Any

from cqlfs.config import Settings, get_settings
from cqlfs.connections import ConnectionRegistry, CqlSession
from cqlfs.execution import execute, execute_batch, records, single
from cqlfs.folders import CqlFolderService, FolderService
from cqlfs.models import StoredFile, parse_row
from cqlfs.paths import RootResolver, break_down, full_path, owner_scope

SELECT_EXISTS = "select filename from files where cloudlet = ? and folder = ? and filename = ?"
SELECT_CONTENT = "select content from files where cloudlet = ? and folder = ? and filename = ?"
SELECT_FOLDER = "select folder, filename from files where cloudlet = ? and folder = ?"
INSERT_FILE = "insert into files (cloudlet, folder, filename, content) values (?, ?, ?, ?)"
DELETE_FILE = "delete from files where cloudlet = ? and folder = ? and filename = ?"


class FolderNotFound(FileNotFoundError):
    pass


class FileNotFound(FileNotFoundError):
    pass


class DecodeError(ValueError):
    pass


class NotAFile(ValueError):
    pass


class FileStore:
    def __init__(
        self,
        connections: ConnectionRegistry,
        root: RootResolver,
        folders: FolderService | None = None,
        settings: Settings | None = None,
    ):
        self.connections = connections
        self.root = root
        self.folders = folders or CqlFolderService()
        self.settings = settings or get_settings()

    async def exists(self, path: str) -> bool:
        folder, filename = self._key(path)
        async with self._session() as session:
            row = await single(session, SELECT_EXISTS, self._owner_scope(), folder, filename)
            return row is not None

    async def load(self, path: str) -> str:
        async with self._session() as session:
            return await self._get_file_content(session, path)

    async def load_binary(self, path: str) -> bytes:
        """
        Load a file that was saved as bytes. Raises DecodeError if the file was not saved as binary.
        """
        content = await self.load(path)
        try:
            return base64.b64decode(content, validate=True)
        except binascii.Error as e:
            raise DecodeError(f"File {path} does not contain base64 encoded binary content") from e

    async def save(self, path: str, content: str | bytes) -> None:
        """
        Create or overwrite a file. Binary content is stored base64 encoded.
        Raises FolderNotFound (before writing anything) if the folder of the file doesn't exist.
        """
        if isinstance(content, bytes):
            content = base64.b64encode(content).decode("ascii")
        folder, filename = self._key(path)
        async with self._session() as session:
            await self._check_folder(session, folder, path)
            await execute(session, INSERT_FILE, self._owner_scope(), folder, filename, content)

    async def delete(self, path: str) -> None:
        """
        Delete a file. Deleting a file that doesn't exist is not an error.
        """
        folder, filename = self._key(path)
        async with self._session() as session:
            await execute(session, DELETE_FILE, self._owner_scope(), folder, filename)

    async def copy(self, source: str, destination: str) -> None:
        dest_folder, dest_filename = self._key(destination)
        async with self._session() as session:
            await self._check_folder(session, dest_folder, destination)
            content = await self._get_file_content(session, source)
            await execute(session, INSERT_FILE, self._owner_scope(), dest_folder, dest_filename, content)

    async def move(self, source: str, destination: str) -> None:
        """
        Move (rename) a file. The source is read first, then the destination is written and the source deleted
        in a single logged batch, so the cluster never ends up with only one of the two applied.
        The source is not locked: a write to it between the read and the batch is lost.
        """
        source_key = self._key(source)
        dest_folder, dest_filename = self._key(destination)
        scope = self._owner_scope()
        async with self._session() as session:
            await self._check_folder(session, dest_folder, destination)
            content = await self._get_file_content(session, source)
            if source_key == (dest_folder, dest_filename):
                # insert and delete of one key in a batch share a timestamp, and the delete would win
                return
            await execute_batch(
                session,
                [
                    (INSERT_FILE, (scope, dest_folder, dest_filename, content)),
                    (DELETE_FILE, (scope, *source_key)),
                ],
            )

    async def list_files(self, folder: str, extension: str | None = None) -> list[str]:
        """
        List the full paths of the files directly in the folder, optionally only those ending with extension.
        The order of the files is not defined.
        """
        root_folder = self.root.root_folder
        rel_folder, _ = break_down(root_folder, folder if folder.endswith("/") else folder + "/")
        scope = self._owner_scope()
        async with self._session() as session:
            await self._check_folder(session, rel_folder, folder)
            rows = await records(session, SELECT_FOLDER, scope, rel_folder)
        result = []
        for row in rows:
            stored = parse_row(scope, row)
            if not isinstance(stored, StoredFile):
                continue
            if extension is None or stored.filename.endswith(extension):
                result.append(full_path(root_folder, rel_folder, stored.filename))
        return result

    async def _get_file_content(self, session: CqlSession, path: str) -> str:
        folder, filename = self._key(path)
        row: Any = await single(session, SELECT_CONTENT, self._owner_scope(), folder, filename)
        if row is None:
            raise FileNotFound(f"File {path} does not exist")
        return row.content

    async def _check_folder(self, session: CqlSession, folder: str, path: str) -> None:
        if not await self.folders.folder_exists(session, self._owner_scope(), folder):
            raise FolderNotFound(f"Folder {folder} of {path} does not exist")

    def _session(self):
        return self.connections.session(self.settings)

    def _key(self, path: str) -> tuple[str, str]:
        folder, filename = break_down(self.root.root_folder, path)
        # an empty filename is the marker row of the folder, not a file
        if not filename:
            raise NotAFile(f"{path} is a folder, not a file")
        return folder, filename

    def _owner_scope(self) -> str:
        return owner_scope(self.root.root_folder)
