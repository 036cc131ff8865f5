"""
Translate absolute virtual paths (/tenant/cloudlet/folder/file.ext) into the (folder, filename) part of a row key.

A root folder always starts and ends with a slash, e.g. /acme/app1/. A path relative to the root keeps its leading
slash, so the root folder itself is "/".
"""

from typing import Protocol, Tuple


class RootResolver(Protocol):
    """Resolves the root folder of the current tenant and cloudlet"""

    @property
    def root_folder(self) -> str: ...

    def relative_path(self, path: str) -> str: ...


class StaticRootResolver:
    def __init__(self, root_folder: str):
        if not (root_folder.startswith("/") and root_folder.endswith("/")):
            raise ValueError(f"Root folder {root_folder!r} should start and end with a slash")
        self._root_folder = root_folder

    def __repr__(self):
        return f"StaticRootResolver({self._root_folder!r})"

    @property
    def root_folder(self) -> str:
        return self._root_folder

    @property
    def owner_scope(self) -> str:
        return owner_scope(self._root_folder)

    def relative_path(self, path: str) -> str:
        return relativize(self._root_folder, path)


def relativize(root_folder: str, path: str) -> str:
    """
    Strip the root folder from the path, keeping the leading slash.
    The root folder itself may be given without its trailing slash.
    """
    if not (path.startswith(root_folder) or path == root_folder[:-1]):
        raise ValueError(f"Path {path!r} is not inside root folder {root_folder!r}")
    return path[len(root_folder) - 1 :] or "/"


def break_down(root_folder: str, path: str) -> Tuple[str, str]:
    """
    Break an absolute path into its folder and filename.
    The folder always starts and ends with a slash, files directly in the root are in folder "/".
    For a folder path (ending with a slash) the filename is empty.
    """
    folder, _, filename = relativize(root_folder, path).rpartition("/")
    folder = folder.strip("/")
    return (f"/{folder}/" if folder else "/"), filename


def resolve_owner_scope(root_folder: str) -> Tuple[str, str]:
    """
    Get the tenant and cloudlet from a root folder: the first segment is the tenant, the rest is the cloudlet
    """
    segments = [s for s in root_folder.split("/") if s]
    if not segments:
        raise ValueError(f"Cannot resolve tenant from root folder {root_folder!r}")
    return segments[0], "/".join(segments[1:])


def owner_scope(root_folder: str) -> str:
    """
    The value of the cloudlet column for all files below this root folder
    """
    tenant, cloudlet = resolve_owner_scope(root_folder)
    return f"{tenant}/{cloudlet}" if cloudlet else tenant


def full_path(root_folder: str, folder: str, filename: str) -> str:
    return root_folder + folder[1:] + filename
