"""Directory traversal for a single watch."""

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional, Set, Tuple

from ..config.models import WatchSpec
from ..utils.metrics import EPOCH, WalkResult


class WalkError(Exception):
    """A walk failed as a whole and produced no result."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class NotADirectory(WalkError):
    """The watch root does not exist or is not a directory."""

    def __init__(self, path: str):
        super().__init__(path, "Path is not a directory or doesn't exist")


class DirectoryUnreadable(WalkError):
    """The watch root exists but could not be listed."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, f"Failed to read directory ({reason})")
        self.reason = reason


class DirectoryWalker:
    """
    Walk a watch root and fold matching files into a WalkResult.

    Traversal is depth-first using an explicit stack, so tree depth is not
    limited by the interpreter's recursion limit. Symlinked directories are
    followed, but each directory (by device and inode) is entered at most
    once per walk. Symlinked files are counted when their target is a file,
    using the modification time of the link itself.

    Failure policy:
    - root missing or not a directory: NotADirectory
    - root cannot be listed: DirectoryUnreadable
    - a subdirectory cannot be listed: logged, subtree contributes nothing
    - a single entry cannot be classified: logged, entry skipped
    - a matching file's metadata cannot be read: logged, file still counted
      but does not affect the latest modification time
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        logger = logger or logging.getLogger(__name__)
        self.logger = logger.getChild(self.__class__.__name__)

    def walk(self, spec: WatchSpec) -> WalkResult:
        """
        Walk one watch root.

        Args:
            spec: Watch to traverse

        Returns:
            WalkResult: Count of matching files and their latest mtime

        Raises:
            NotADirectory: If the root is missing or not a directory
            DirectoryUnreadable: If the root cannot be listed
        """
        root = os.path.normpath(os.fspath(spec.path))

        if not os.path.isdir(root):
            self.logger.warning(f"[{spec.name}] Path is not a directory or doesn't exist: {root}")
            raise NotADirectory(root)

        try:
            root_entries = self._list_dir(root)
            visited = {self._identity(root)}
        except OSError as e:
            self.logger.warning(f"[{spec.name}] Failed to read dir {root}: {e}")
            raise DirectoryUnreadable(root, e.strerror or str(e)) from e

        files_visited = 0
        max_time = EPOCH
        stack: List[List[os.DirEntry]] = [root_entries]

        while stack:
            for entry in stack.pop():
                try:
                    is_dir = entry.is_dir()
                    is_file = not is_dir and entry.is_file()
                except OSError as e:
                    self.logger.warning(f"[{spec.name}] Got io error: {e}")
                    continue

                if is_dir:
                    if spec.recursive:
                        sub_entries = self._enter(spec, entry.path, visited)
                        if sub_entries is not None:
                            stack.append(sub_entries)
                    continue

                if not is_file or not spec.matches(entry.path):
                    continue

                files_visited += 1
                try:
                    modified = self._modification_time(entry)
                except OSError as e:
                    self.logger.warning(f"[{spec.name}] Failed to read metadata of {entry.path}: {e}")
                    continue
                if modified > max_time:
                    max_time = modified

        self.logger.debug(
            f"[{spec.name}] Walked {root}: {files_visited} file(s), latest {max_time.isoformat()}"
        )
        return WalkResult(files_visited=files_visited, max_modification_time=max_time)

    def _enter(
        self,
        spec: WatchSpec,
        path: str,
        visited: Set[Tuple[int, int]]
    ) -> Optional[List[os.DirEntry]]:
        """
        List a subdirectory unless it was already visited.

        Returns:
            The directory's entries, or None if it is skipped
        """
        try:
            identity = self._identity(path)
            if identity in visited:
                self.logger.debug(f"[{spec.name}] Skipping already visited directory {path}")
                return None
            visited.add(identity)
            return self._list_dir(path)
        except OSError as e:
            self.logger.warning(f"[{spec.name}] Failed to read dir {path}: {e}")
            return None

    @staticmethod
    def _list_dir(path: str) -> List[os.DirEntry]:
        with os.scandir(path) as it:
            return list(it)

    @staticmethod
    def _identity(path: str) -> Tuple[int, int]:
        st = os.stat(path)
        return st.st_dev, st.st_ino

    @staticmethod
    def _modification_time(entry: os.DirEntry) -> datetime:
        st = entry.stat(follow_symlinks=False)
        return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
