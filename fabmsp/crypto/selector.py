import os
import logging
from collections import namedtuple

from fabmsp.common.errors import ArtifactNotFoundError


logger = logging.getLogger(__name__)


Artifact = namedtuple("Artifact", ["name", "path", "mtime_ns"])


def list_dir(folder):
    """Entry names of folder, sorted; an absent folder lists as empty."""
    try:
        return sorted(os.listdir(folder))
    except FileNotFoundError:
        return []


def candidates(folder):
    artifacts = []
    for name in list_dir(folder):
        path = os.path.join(folder, name)
        if not os.path.isfile(path):
            continue
        stats = os.stat(path)
        artifacts.append(Artifact(name, path, stats.st_mtime_ns))
    return artifacts


def find_newest(folder):
    """Returns the most recently modified file in folder, or None.

    Ties on modification time go to the lexicographically smallest name.
    """
    newest = None
    for artifact in candidates(folder):
        if newest is None or artifact.mtime_ns > newest.mtime_ns:
            newest = artifact

    if newest:
        logger.debug(f"Newest artifact in {folder}: {newest.name}")
    return newest


def newest_artifact(folder):
    newest = find_newest(folder)
    if newest is None:
        raise ArtifactNotFoundError(folder)
    return newest
