from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Union

from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

DOCUMENT_KEYS = (
    "users",
    "menus",
    "attendance",
    "cookTransactions",
    "billItems",
    "notifications",
    "history",
    "tenants",
    "registrationRequests",
)

Document = Dict[str, Any]


def empty_document() -> Document:
    return {key: [] for key in DOCUMENT_KEYS}


class JsonDocumentStore:
    """Whole-deployment state kept as one JSON document.

    The document is loaded once, mutated only inside ``transaction()`` and
    rewritten wholesale after every committed transaction.

    Note: ``transaction()`` works on a deep copy and swaps it in on success,
    so a failed command leaves no partial state behind. Nested transactions
    on the same thread share the outer working copy; only the outermost one
    commits.
    """

    _instances: Dict[str, "JsonDocumentStore"] = {}

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        *,
        defaults: Callable[[], Document] = empty_document,
    ):
        self._path = Path(path) if path else None
        self._defaults = defaults
        self._lock = threading.RLock()
        self._local = threading.local()
        self._data = self._load()

    @classmethod
    def get_instance(
        cls,
        path: Optional[Union[str, Path]],
        *,
        defaults: Callable[[], Document] = empty_document,
    ) -> "JsonDocumentStore":
        if not path:
            # In-memory stores are never shared.
            return JsonDocumentStore(None, defaults=defaults)
        key = str(Path(path).resolve())
        if key not in cls._instances:
            cls._instances[key] = JsonDocumentStore(path, defaults=defaults)
        return cls._instances[key]

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def _load(self) -> Document:
        if self._path is None or not self._path.exists():
            data = self._defaults()
            for key in DOCUMENT_KEYS:
                data.setdefault(key, [])
            if self._path is not None:
                self._write(data)
            return data

        try:
            with self._path.open("r", encoding="utf-8") as fh:
                stored = json.load(fh)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read store {self._path}: {e}") from e
        if not isinstance(stored, dict):
            raise PersistenceError(f"Store {self._path} does not hold a JSON object")

        # Forward-compatible load: keys added since the file was written come from defaults.
        return {**self._defaults(), **stored}

    @contextmanager
    def read(self) -> Iterator[Document]:
        """Yield the committed document (or the open working copy on this thread).

        Callers must not mutate what they get here.
        """
        with self._lock:
            working = getattr(self._local, "working", None)
            yield working if working is not None else self._data

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        with self._lock:
            working = getattr(self._local, "working", None)
            if working is not None:
                yield working
                return

            working = copy.deepcopy(self._data)
            self._local.working = working
            self._local.pending = []
            try:
                yield working
            except BaseException:
                self._local.working = None
                self._local.pending = []
                raise
            self._local.working = None
            pending, self._local.pending = self._local.pending, []
            self._data = working
            try:
                self._write(working)
            finally:
                for callback in pending:
                    callback()

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the open transaction on this thread commits.

        Outside a transaction it runs immediately; a rolled back transaction drops it.
        """
        if getattr(self._local, "working", None) is None:
            callback()
            return
        self._local.pending.append(callback)

    def snapshot(self) -> Document:
        with self.read() as doc:
            return copy.deepcopy(doc)

    def _write(self, data: Document) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".store-", suffix=".json", dir=str(self._path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Failed to write store snapshot to %s", self._path)
            raise PersistenceError(f"Cannot write store {self._path}: {e}") from e
