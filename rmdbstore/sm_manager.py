"""System manager: database directories and catalogue persistence."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from typing import Any

from .buffer_pool_manager import BufferPoolManager
from .config import DB_META_NAME, LOG_FILE_NAME
from .defs import ColType
from .disk_manager import DiskManager
from .errors import DatabaseExistsError, DatabaseNotFoundError, UnixError
from .sm_meta import DbMeta


@dataclass
class ColDef:
    """A column as given in a table definition."""

    name: str
    type: ColType
    len: int


@dataclass
class SmManager:
    """Creates and drops databases and writes the catalogue of the open one."""

    disk_manager: DiskManager
    buffer_pool_manager: BufferPoolManager
    db: DbMeta = field(default_factory=DbMeta)
    fhs: dict[str, Any] = field(default_factory=dict)
    ihs: dict[str, Any] = field(default_factory=dict)

    def is_dir(self, db_name: str) -> bool:
        """Return True if a directory named ``db_name`` exists."""
        return os.path.isdir(db_name)

    def create_db(self, db_name: str) -> None:
        """Create the database directory with an empty catalogue and log file."""
        if self.is_dir(db_name):
            raise DatabaseExistsError(db_name)
        try:
            os.mkdir(db_name)
            with open(os.path.join(db_name, DB_META_NAME), "w", encoding="utf-8") as meta:
                meta.write(DbMeta(db_name).dumps())
        except OSError as exc:
            raise UnixError(exc) from exc
        self.disk_manager.create_file(os.path.join(db_name, LOG_FILE_NAME))

    def drop_db(self, db_name: str) -> None:
        """Remove the database directory and everything in it."""
        if not self.is_dir(db_name):
            raise DatabaseNotFoundError(db_name)
        try:
            shutil.rmtree(db_name)
        except OSError as exc:
            raise UnixError(exc) from exc

    def flush_meta(self) -> None:
        """Overwrite the catalogue file in the current directory with the open database."""
        try:
            with open(DB_META_NAME, "w", encoding="utf-8") as meta:
                meta.write(self.db.dumps())
        except OSError as exc:
            raise UnixError(exc) from exc