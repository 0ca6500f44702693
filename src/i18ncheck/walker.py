import logging
import os
from collections.abc import Iterable

from i18ncheck.errors import DiscoveryError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".ts", ".html")


def list_source_files(
    root: str,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Iterable[str] = (),
) -> list[str]:
    """Recursively list files under ``root`` ending with one of ``extensions``.

    Any path containing one of ``exclude_dirs`` below ``root`` is skipped,
    files and directories alike.
    """
    if not os.path.isdir(root):
        raise DiscoveryError(f"Source path is not a readable directory: {root}", root)

    extensions = tuple(extensions)
    exclude_dirs = tuple(exclude_dirs)

    def excluded(path: str) -> bool:
        relative = os.path.relpath(path, root)
        return any(name in relative for name in exclude_dirs)

    def on_error(ex: OSError) -> None:
        logger.warning(f"Could not read directory {ex.filename}: {ex.strerror}")

    files = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = [d for d in dirnames if not excluded(os.path.join(dirpath, d))]
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            if filename.endswith(extensions) and not excluded(path):
                files.append(path)

    logger.debug(f"Found {len(files)} source files in {root}")
    return sorted(files)
