from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Union

from shared.protocol import AssetCacheError

logger = logging.getLogger(__name__)


class AssetCache:
    """
    Files of one static directory, read fully into memory at construction.

    Only regular files directly inside the directory become entries, keyed by
    file name. The cache is read-only afterwards; there is no reload.
    """

    def __init__(self, static_dir: Union[str, Path]) -> None:
        self.static_dir = Path(static_dir)
        self._files = MappingProxyType(self._load(self.static_dir))
        logger.info("Cached %s static files from %s", len(self._files), self.static_dir)

    @staticmethod
    def _load(static_dir: Path) -> Dict[str, bytes]:
        try:
            entries = sorted(static_dir.iterdir())
        except OSError as exc:
            raise AssetCacheError(f"Cannot list static directory {static_dir}: {exc}") from exc

        files: Dict[str, bytes] = {}
        for entry in entries:
            if entry.is_dir():
                continue
            try:
                files[entry.name] = entry.read_bytes()
            except OSError as exc:
                raise AssetCacheError(f"Cannot read static file {entry}: {exc}") from exc
        return files

    def get(self, name: str) -> Optional[bytes]:
        return self._files.get(name)

    def names(self) -> List[str]:
        return list(self._files)

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)
