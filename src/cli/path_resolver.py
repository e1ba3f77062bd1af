"""Expansion of command-line paths into package files."""

import logging
import os
from typing import List

from .errors import PathNotFoundError
from .models import ResolvedPaths

logger = logging.getLogger(__name__)


def list_directory(directory: str, extension: str) -> List[str]:
    """Files directly inside a directory with the given extension.

    Sub-directories are not searched. The extension match is
    case-insensitive so "Diagram.VSDX" is picked up as well.
    """
    wanted = extension.lower()
    files = []
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        if os.path.isfile(path) and name.lower().endswith(wanted):
            files.append(path)
    return files


def expand_path(path: str, extension: str) -> List[str]:
    """Package files named by one command-line argument.

    Raises:
        PathNotFoundError: If the path is neither a file nor a folder
    """
    if os.path.isdir(path):
        folder_files = list_directory(path, extension)
        logger.info(f"Folder: {path} ({len(folder_files)} files)")
        return folder_files
    if os.path.isfile(path):
        logger.info(f"File: {path}")
        return [path]
    raise PathNotFoundError(path)


def resolve_paths(paths: List[str], extension: str = ".vsdx") -> ResolvedPaths:
    """Turn file and folder arguments into a list of package files.

    Files are taken as given (whatever their extension). Folders expand to
    their matching files. Missing paths are logged and collected in
    ResolvedPaths.missing; a file named twice is only processed once.
    """
    resolved = ResolvedPaths()
    seen = set()

    for path in paths:
        try:
            candidates = expand_path(path, extension)
        except PathNotFoundError as e:
            logger.warning(str(e))
            resolved.missing.append(e.path)
            continue

        for candidate in candidates:
            key = os.path.normcase(os.path.abspath(candidate))
            if key in seen:
                continue
            seen.add(key)
            resolved.files.append(candidate)

    return resolved
