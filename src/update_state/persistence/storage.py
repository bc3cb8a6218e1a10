# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
JSON file persistence for the update state.

The file holds a single record tagged with a stable key and an integer
schema version:

    {"key": "chat-update", "version": 1, "state": {...}}

A record with a different key or version is ignored and the store starts
from defaults.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.constants import STATE_SCHEMA_VERSION, STORE_KEY

lib_logger = logging.getLogger("update_state")


class StateStorage:
    """Saves and restores the update state snapshot."""

    def __init__(
        self,
        path: Union[str, Path],
        key: str = STORE_KEY,
        version: int = STATE_SCHEMA_VERSION,
    ):
        self.path = Path(path)
        self.key = key
        self.version = version

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Read the persisted snapshot.

        Returns:
            The stored field dict, or None if missing, unreadable or
            written under another key or schema version.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                record = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            lib_logger.warning(f"Could not read update state from {self.path}: {e}")
            return None

        if not isinstance(record, dict) or record.get("key") != self.key:
            lib_logger.warning(
                f"Ignoring {self.path}: not a '{self.key}' state record"
            )
            return None

        stored_version = record.get("version")
        if stored_version != self.version:
            lib_logger.info(
                f"Discarding persisted update state: schema version "
                f"{stored_version} != {self.version}"
            )
            return None

        state = record.get("state")
        if not isinstance(state, dict):
            return None
        return state

    def save(self, state: Dict[str, Any]) -> None:
        """Write the snapshot atomically. Errors are logged, not raised."""
        record = {"key": self.key, "version": self.version, "state": state}
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            lib_logger.error(f"Failed to persist update state to {self.path}: {e}")
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
