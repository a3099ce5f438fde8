from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from settings import get_settings

logger = logging.getLogger(__name__)


class StationDataDirectory:
    """Local directory holding the station list, inventory, and per-station CSVs.

    Per-station files are named ``<station_id>_<snapshot-date><csv_extension>``.
    """

    def __init__(
        self,
        root_path: Path,
        station_file: str = "ghcnd-stations.txt",
        inventory_file: Optional[str] = "ghcnd-inventory.txt",
        csv_extension: str = ".csv",
    ) -> None:
        self.root_path = root_path
        self.station_file = station_file
        self.inventory_file = inventory_file
        self.csv_extension = csv_extension if csv_extension.startswith(".") else f".{csv_extension}"

    @property
    def station_file_path(self) -> Path:
        return self.root_path / self.station_file

    @property
    def inventory_file_path(self) -> Optional[Path]:
        if not self.inventory_file:
            return None
        return self.root_path / self.inventory_file

    def list_csv_stems(self, station_id: str) -> List[str]:
        """Sorted stems of CSV files whose name starts with ``station_id``."""
        if not self.root_path.is_dir():
            logger.warning(
                "Data directory does not exist",
                extra={"path": str(self.root_path)},
            )
            return []

        stems = [
            path.stem
            for path in self.root_path.iterdir()
            if not path.is_dir()
            and path.suffix == self.csv_extension
            and path.stem.startswith(station_id)
        ]
        return sorted(stems)

    def resolve_csv_path(self, station_id: str) -> Optional[Path]:
        """Newest snapshot file for a station, or ``None`` when there is none."""
        stems = self.list_csv_stems(station_id)
        if not stems:
            return None
        return self.root_path / f"{stems[-1]}{self.csv_extension}"

    @contextmanager
    def open_text(
        self, path: Path, encoding: str = "utf-8", errors: str = "strict"
    ) -> Iterator[TextIO]:
        """Yield a text handle that is closed on every exit path."""
        with path.open("r", encoding=encoding, errors=errors, newline="") as handle:
            yield handle


@lru_cache
def build_default_directory(root_path: Optional[str] = None) -> StationDataDirectory:
    settings = get_settings()
    root = settings.data_dir if root_path is None else root_path
    return StationDataDirectory(
        root_path=Path(root),
        station_file=settings.station_file,
        inventory_file=settings.inventory_file,
        csv_extension=settings.csv_extension,
    )
