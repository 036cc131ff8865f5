from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

# Filename of the row that marks an (otherwise empty) folder
FOLDER_MARKER = ""

Folder = Annotated[str, Field(pattern=r"^/(.*/)?$", title="Folder, starting and ending with a slash")]


class StoredFile(BaseModel):
    """A file in the files table. Content is None if the query that read the row didn't select it."""

    kind: Literal["file"] = "file"
    cloudlet: str
    folder: Folder
    filename: Annotated[str, Field(min_length=1)]
    content: str | None = None


class FolderMarker(BaseModel):
    kind: Literal["folder"] = "folder"
    cloudlet: str
    folder: Folder


StoredRow = Annotated[Union[StoredFile, FolderMarker], Field(discriminator="kind")]


def parse_row(cloudlet: str, row: Any) -> StoredFile | FolderMarker:
    """
    Convert a driver row (with at least folder and filename selected) into a StoredFile or FolderMarker
    """
    if row.filename == FOLDER_MARKER:
        return FolderMarker(cloudlet=cloudlet, folder=row.folder)
    return StoredFile(cloudlet=cloudlet, folder=row.folder, filename=row.filename, content=getattr(row, "content", None))
