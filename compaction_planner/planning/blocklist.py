"""
Block catalog providers.

This module defines the protocol the planner uses to obtain a catalog
snapshot and a JSON file backed implementation used by the CLI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from compaction_planner.core.domain.types import BlockMeta, sort_blocklist

LOGGER = logging.getLogger(__name__)


class BlocklistProvider(Protocol):
    """
    Protocol describing a block catalog source.
    """

    def fetch(self, *, tenant_id: str | None = None) -> list[BlockMeta]:
        """
        Return a catalog snapshot sorted by tenant, then start time.
        """


class JsonFileBlocklist:
    """
    Catalog snapshot stored as a JSON document.

    Accepted layouts:
    - a top-level array of block objects
    - an object with a "blocks" array
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load_raw(self) -> list[Any]:
        if not self._path.exists():
            raise FileNotFoundError(self._path)

        data = json.loads(self._path.read_text(encoding="utf-8"))

        if isinstance(data, dict):
            data = data.get("blocks")

        if not isinstance(data, list):
            raise ValueError(
                f"{self._path}: expected a JSON array of blocks or an object with a 'blocks' array"
            )
        return data

    def fetch(self, *, tenant_id: str | None = None) -> list[BlockMeta]:
        blocks = [BlockMeta.model_validate(item) for item in self._load_raw()]

        if tenant_id is not None:
            blocks = [meta for meta in blocks if meta.tenant_id == tenant_id]

        LOGGER.info(
            "Loaded block catalog",
            extra={
                "path": str(self._path),
                "tenant_id": tenant_id,
                "blocks": len(blocks),
            },
        )
        return sort_blocklist(blocks)
