"""Flat-file page storage: one file per page in a single directory."""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, List

from wiki.models.page import Page

logger = logging.getLogger(__name__)

FILE_MODE = 0o600


class PageNotFound(Exception):
    """Raised when a page has no readable file in the store."""

    def __init__(self, name: str) -> None:
        super().__init__(f"page not found: {name}")
        self.name = name


class PageStoreError(Exception):
    """Raised when the page directory cannot be written or enumerated.

    ``str(exc)`` is the underlying OS error text.
    """


class PageStore:
    """Reads, writes and lists pages stored as ``<name><extension>`` files.

    Page names are not validated here; callers are expected to pass names that
    already satisfy the routing grammar.
    """

    def __init__(self, directory: Path, extension: str = ".txt", strict_extension: bool = False):
        self.directory = Path(directory)
        self.extension = extension
        self.strict_extension = strict_extension
        # One lock per page name ever saved; bounded by the number of pages.
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}{self.extension}"

    def ensure_directory(self) -> None:
        """Create the page directory if missing."""
        if self.directory.exists() and not self.directory.is_dir():
            raise NotADirectoryError(f"Page path exists but is not a directory: {self.directory}")
        if not self.directory.exists():
            logger.info("Creating page directory at %s", self.directory)
            self.directory.mkdir(parents=True)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> Page:
        """Return the page called *name* together with the current page list.

        Raises:
            PageNotFound: if the page file is missing or unreadable.
            PageStoreError: if the page directory cannot be enumerated.
        """
        try:
            body = self.path_for(name).read_bytes()
        except OSError as exc:
            logger.debug("Page %s not loaded: %s", name, exc)
            raise PageNotFound(name) from exc

        return Page(name=name, body=body, page_list=self.list_page_names())

    def save(self, page: Page) -> None:
        """Write *page* to disk, replacing any previous content.

        Saves to the same name are serialized; the write itself is not atomic.

        Raises:
            PageStoreError: on any I/O failure.
        """
        with self._lock_for(page.name):
            try:
                fd = os.open(self.path_for(page.name), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
                with os.fdopen(fd, "wb") as fh:
                    fh.write(page.body)
            except OSError as exc:
                logger.error("Failed to save page %s: %s", page.name, exc)
                raise PageStoreError(str(exc)) from exc

        logger.info("Saved page %s (%d bytes)", page.name, len(page.body))

    def list_page_names(self) -> List[str]:
        """Return page names in directory order (unsorted).

        Raises:
            PageStoreError: if the directory cannot be read.
        """
        try:
            entries = os.listdir(self.directory)
        except OSError as exc:
            logger.error("Failed to list pages in %s: %s", self.directory, exc)
            raise PageStoreError(str(exc)) from exc

        if self.strict_extension and self.extension:
            return [
                entry[: -len(self.extension)]
                for entry in entries
                if entry.endswith(self.extension) and len(entry) > len(self.extension)
            ]
        return [entry.split(".")[0] for entry in entries]

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock
