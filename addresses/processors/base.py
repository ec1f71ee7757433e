"""Base processor for batched address imports."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, List, Tuple
import logging
import time
import pandas as pd

from ..db.store import AddressStore
from .error_tracker import ErrorTracker


class ProcessingStats:
    """Statistics for processing operations.

    Unknown counters read as 0 and spring into existence on first use, so
    processors can add their own with ``stats.some_counter += 1``.
    """

    def __init__(self):
        self._stats = {
            'total_processed': 0,
            'successful_batches': 0,
            'failed_batches': 0,
            'total_errors': 0,
            'processing_time': 0.0,
            'started_at': datetime.utcnow(),
            'completed_at': None
        }

    def __getitem__(self, key: str) -> Any:
        return self._stats[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._stats[key] = value

    def __getattr__(self, name: str) -> Any:
        if name.startswith('__'):
            raise AttributeError(name)
        try:
            return self._stats[name]
        except KeyError:
            self._stats[name] = 0
            return 0

    def __setattr__(self, name: str, value: Any) -> None:
        if name == '_stats':
            super().__setattr__(name, value)
        else:
            self._stats[name] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to plain values, datetimes as ISO strings."""
        result = {}
        for key, value in self._stats.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, float):
                result[key] = round(value, 3)
            else:
                result[key] = value
        return result


class BaseProcessor(ABC):
    """Validates a DataFrame up front, then processes it batch by batch.

    Each batch runs inside one store transaction: an unexpected error rolls
    the whole batch back and processing moves on to the next one.
    """

    def __init__(
        self,
        store: AddressStore,
        batch_size: int = 100,
        error_limit: int = 1000,
        debug: bool = False
    ):
        """Initialize processor.

        Args:
            store: Address store the batches are written to
            batch_size: Number of records to process in each batch
            error_limit: Maximum number of errors before stopping
            debug: Enable debug logging
        """
        self.store = store
        self.batch_size = batch_size
        self.error_limit = error_limit
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = ProcessingStats()
        self.error_tracker = ErrorTracker()

        if self.debug:
            self.logger.debug(f"Initialized {self.__class__.__name__} with batch_size={batch_size}")

    @abstractmethod
    def validate_data(self, df: pd.DataFrame) -> Tuple[List[str], List[str]]:
        """Validate data before processing.

        Returns:
            Tuple of (critical_issues, warnings)
        """

    @abstractmethod
    def _process_batch(self, batch_df: pd.DataFrame) -> pd.DataFrame:
        """Process a single batch of data and return it with any added columns."""

    def process(self, data: pd.DataFrame) -> pd.DataFrame:
        """Process the data in batches with error handling and progress tracking.

        Returns:
            The processed rows, or an empty DataFrame when validation finds
            critical issues
        """
        start_time = time.time()
        if self.debug:
            self.logger.debug(f"Starting processing of {len(data)} rows")

        critical_issues, warnings = self.validate_data(data)

        if warnings:
            self.logger.warning("Validation warnings:")
            for warning in warnings:
                self.logger.warning(f"  - {warning}")

        if critical_issues:
            self.logger.error("Data validation failed:")
            for issue in critical_issues:
                self.logger.error(f"  - {issue}")
                self.error_tracker.add_error('CRITICAL_ISSUE', issue)
            self.stats.total_errors += len(critical_issues)
            self.stats.completed_at = datetime.utcnow()
            return pd.DataFrame()

        total_rows = len(data)
        total_batches = (total_rows + self.batch_size - 1) // self.batch_size
        result_dfs = []

        for batch_num, start_idx in enumerate(range(0, total_rows, self.batch_size), 1):
            if self.debug:
                self.logger.debug(f"Starting batch {batch_num}/{total_batches}")

            batch_df = data.iloc[start_idx:start_idx + self.batch_size].copy()

            try:
                with self.store.transaction():
                    processed_batch = self._process_batch(batch_df)
                result_dfs.append(processed_batch)
                self.stats.successful_batches += 1
                self.stats.total_processed += len(batch_df)
            except Exception as e:
                self.logger.error(f"Error in batch {batch_num} (rows {start_idx}-{start_idx + len(batch_df) - 1}): {e}")
                if self.debug:
                    self.logger.debug("Batch failure details:", exc_info=True)
                self.error_tracker.add_error('BATCH_ERROR', str(e), {'batch': batch_num})
                self.stats.failed_batches += 1
                self.stats.total_errors += 1

            if self.stats.total_errors >= self.error_limit:
                self.logger.error(f"Stopping: Error limit ({self.error_limit}) reached")
                break

        self.stats.processing_time = time.time() - start_time
        self.stats.completed_at = datetime.utcnow()
        if self.debug:
            self.logger.debug(f"Processing finished in {self.stats.processing_time:.3f}s")

        return pd.concat(result_dfs) if result_dfs else pd.DataFrame()

    def get_stats(self) -> Dict[str, Any]:
        """Get processing statistics."""
        return self.stats.to_dict()
