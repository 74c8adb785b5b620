"""
In-memory price dataset service.
Loads the CSV dataset into an immutable snapshot and answers per-region aggregate queries.
"""

import asyncio
import math
import statistics
from dataclasses import dataclass, field
from datetime import datetime
from io import StringIO
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from electricity_api.config import Settings
from electricity_api.exceptions import (
    ConfigurationError,
    DatasetLoadError,
    DatasetMalformedError,
    DatasetNotFoundError,
)
from electricity_api.logging_config import get_logger
from electricity_api.models.price import PriceRecord, RegionPriceResponse

logger = get_logger(__name__)

EXPECTED_COLUMNS = ['state', 'price', 'timestamp']

Source = Union[str, Path]


@dataclass(frozen=True)
class DatasetSnapshot:
    """
    Records and derived region index produced by one successful load.

    Every region in `regions` has at least one record in `by_region`, and every
    record's region appears in `regions`.
    """
    records: Tuple[PriceRecord, ...] = ()
    regions: Tuple[str, ...] = ()
    by_region: Dict[str, Tuple[PriceRecord, ...]] = field(default_factory=dict)
    source: Optional[str] = None
    loaded_at: Optional[datetime] = None

    @classmethod
    def from_records(cls, records: List[PriceRecord], source: Optional[str] = None) -> "DatasetSnapshot":
        """Build a snapshot, indexing regions in first-seen order."""
        grouped: Dict[str, List[PriceRecord]] = {}
        for record in records:
            grouped.setdefault(record.region, []).append(record)

        return cls(
            records=tuple(records),
            regions=tuple(grouped),
            by_region={region: tuple(rows) for region, rows in grouped.items()},
            source=source,
            loaded_at=datetime.now(),
        )


def _is_absent(value) -> bool:
    """Cells past the end of a short row come back as NaN rather than strings."""
    return not isinstance(value, str)


def _is_blank_line(values) -> bool:
    first, rest = values[0], values[1:]
    return (_is_absent(first) or first == "") and all(_is_absent(value) for value in rest)


def parse_price_csv(csv_content: str) -> List[PriceRecord]:
    """
    Parse 'state,price,timestamp' CSV content into PriceRecord objects.

    Any invalid row rejects the whole content, including rows with more or
    fewer fields than the header. Line numbers in errors count every line of
    the file, blank ones included.

    Raises:
        DatasetMalformedError: On a missing column, wrong field count, bad price or blank field
    """
    try:
        df = pd.read_csv(
            StringIO(csv_content),
            sep=',',
            header=None,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError:
        raise DatasetMalformedError("Failed to parse CSV data: file has no header row")
    except (pd.errors.ParserError, ValueError) as e:
        raise DatasetMalformedError(f"Failed to parse CSV data: {e}")

    # Blank lines are kept as empty rows so positions still match file lines
    rows = [
        (line_number, list(values))
        for line_number, values in enumerate(df.itertuples(index=False, name=None), start=1)
        if not _is_blank_line(values)
    ]
    if not rows:
        raise DatasetMalformedError("Failed to parse CSV data: file has no header row")

    _, header = rows[0]
    width = sum(not _is_absent(value) for value in header)
    header = header[:width]

    missing = [col for col in EXPECTED_COLUMNS if col not in header]
    if missing:
        raise DatasetMalformedError(f"Failed to parse CSV data: missing columns {missing}")

    positions = [header.index(col) for col in EXPECTED_COLUMNS]

    records = []
    for line_number, values in rows[1:]:
        field_count = sum(not _is_absent(value) for value in values)
        if field_count != width:
            raise DatasetMalformedError(
                f"Failed to parse CSV data: expected {width} fields on line {line_number}, saw {field_count}"
            )

        region, raw_price, timestamp = (values[position] for position in positions)

        try:
            price = float(raw_price)
        except ValueError:
            price = math.nan

        if not math.isfinite(price) or not region.strip() or not timestamp.strip():
            raise DatasetMalformedError(
                f"Failed to parse CSV data: invalid data format on line {line_number}: "
                f"state={region!r}, price={raw_price!r}, timestamp={timestamp!r}"
            )

        records.append(PriceRecord(region=region, price=price, timestamp=timestamp))

    return records


class PriceDataService:
    """Holds the current dataset snapshot and answers aggregate queries."""

    def __init__(self, csv_path: Optional[Source] = None):
        if not csv_path:
            raise ConfigurationError(
                "CSV_DATA_PATH environment variable is required or provide csv_path in constructor"
            )

        self.csv_path = Path(csv_path)
        self._snapshot = DatasetSnapshot()
        self._load_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "PriceDataService":
        """Build the service from application settings."""
        return cls(settings.csv_data_path)

    async def load(self, source: Optional[Source] = None) -> DatasetSnapshot:
        """
        Load the dataset and swap it in as the current snapshot.

        Concurrent calls are serialized. On failure the previous snapshot is kept.

        Args:
            source: File to read, defaults to the configured csv_path

        Raises:
            DatasetNotFoundError: The file does not exist
            DatasetMalformedError: Content failed parsing or validation
            DatasetLoadError: Any other I/O failure
        """
        path = Path(source) if source is not None else self.csv_path

        async with self._load_lock:
            return await self._load_locked(path)

    async def ensure_loaded(self) -> DatasetSnapshot:
        """Load the configured dataset unless a snapshot is already live."""
        if self.is_loaded:
            return self._snapshot

        async with self._load_lock:
            if self.is_loaded:
                return self._snapshot
            return await self._load_locked(self.csv_path)

    async def _load_locked(self, path: Path) -> DatasetSnapshot:
        """Read, validate and swap in a snapshot. Caller holds the load lock."""
        try:
            snapshot = await asyncio.to_thread(self._read_snapshot, path)
        except DatasetMalformedError as e:
            logger.error("Dataset rejected", path=str(path), error=str(e))
            raise

        self._snapshot = snapshot

        logger.info("Dataset loaded",
                    path=str(path),
                    records=len(snapshot.records),
                    regions=len(snapshot.regions))
        return snapshot

    def _read_snapshot(self, path: Path) -> DatasetSnapshot:
        """Read and parse the file. Runs in a worker thread."""
        try:
            csv_content = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.error("Dataset file not found", path=str(path))
            raise DatasetNotFoundError()
        except UnicodeDecodeError as e:
            raise DatasetMalformedError(f"Failed to parse CSV data: {e.reason}")
        except OSError as e:
            logger.error("Dataset file could not be read", path=str(path), error=str(e))
            raise DatasetLoadError()

        return DatasetSnapshot.from_records(parse_price_csv(csv_content), source=str(path))

    @property
    def is_loaded(self) -> bool:
        return self._snapshot.loaded_at is not None

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._snapshot.loaded_at

    @property
    def record_count(self) -> int:
        return len(self._snapshot.records)

    def get_all_records(self) -> List[PriceRecord]:
        return list(self._snapshot.records)

    def get_records_for_region(self, region: Optional[str]) -> List[PriceRecord]:
        """Records whose region matches exactly (case-sensitive)."""
        if not region:
            return []

        return list(self._snapshot.by_region.get(region, ()))

    def get_mean_price(self, region: Optional[str]) -> Optional[float]:
        """Mean price for the region, or None when it has no records."""
        records = self.get_records_for_region(region)
        if not records:
            return None

        return statistics.fmean(record.price for record in records)

    def get_distinct_regions(self) -> List[str]:
        """Regions in the order they first appear in the dataset."""
        return list(self._snapshot.regions)

    def get_region_summary(self, region: Optional[str]) -> Optional[RegionPriceResponse]:
        """Mean price and record count for the region, or None when absent."""
        # Read one snapshot so mean and count agree during a concurrent reload
        snapshot = self._snapshot
        records = snapshot.by_region.get(region, ()) if region else ()
        if not records:
            return None

        return RegionPriceResponse(
            state=region,
            mean_price=statistics.fmean(record.price for record in records),
            record_count=len(records),
        )
