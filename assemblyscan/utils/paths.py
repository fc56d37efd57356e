import pathlib
from typing import Optional, Union


def normalize_path(*path_parts: Union[str, pathlib.PurePath]) -> str:
    """
    Normalize one or more path parts into a single POSIX-style path string.

    Windows separators are converted so that paths from either platform can be
    compared against file names reported by the helper tool.

    Args:
        *path_parts: One or more path components, strings or PurePath objects.

    Returns:
        str: POSIX-style normalized path (e.g., 'C:/Program Files/App')
    """
    cleaned_parts = [str(p).replace("\\", "/") for p in path_parts]
    return pathlib.PurePosixPath(*cleaned_parts).as_posix()


def basename_posix(path: Union[str, pathlib.PurePath]) -> str:
    """
    Return the POSIX-style basename of a path. Never raises for string inputs.
    Trailing slashes are stripped for non-root paths so 'dir/' -> 'dir'.
    """
    s = normalize_path(path)
    if s and s != "/":
        s = s.rstrip("/")
    return pathlib.PurePosixPath(s).name


def get_file_extension(filename: str) -> Optional[str]:
    """
    Get the lowercased extension of a file name, or None if it has none.

    Only the text after the last '.' counts, so "MyLib.Core.dll" -> "dll" and
    "MyLib.Core" -> "core". A name ending in '.' has no extension.
    """
    base = basename_posix(filename) if filename else ""
    pos = base.rfind(".")
    if pos == -1 or pos == len(base) - 1:
        return None
    return base[pos + 1 :].lower()


def strip_file_extension(filename: str) -> str:
    """Remove a trailing extension (as detected by `get_file_extension`) from filename."""
    ext = get_file_extension(filename)
    if ext is None:
        return filename
    return filename[: len(filename) - len(ext) - 1]
