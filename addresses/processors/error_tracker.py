"""Error tracking and aggregation for address imports and commands."""

from collections import Counter, defaultdict
from typing import Dict, List, Optional
import logging


class ErrorTracker:
    """Counts errors per type and keeps a few distinct samples of each."""

    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.

        Args:
            max_samples: Maximum number of distinct messages kept per error type
        """
        self.error_counts: Counter = Counter()
        self.error_samples: Dict[str, List[Dict]] = defaultdict(list)
        self.max_samples = max_samples

    def add_error(self, error_type: str, message: str, context: Optional[Dict] = None) -> None:
        """Record one occurrence of an error.

        Every occurrence is counted; a message already sampled for this type
        is not sampled again.

        Args:
            error_type: Category of error, e.g. ``VALIDATION_ERROR``
            message: Error message
            context: Optional details such as the row number
        """
        self.error_counts[error_type] += 1

        samples = self.error_samples[error_type]
        if len(samples) >= self.max_samples:
            return
        if any(sample['message'] == message for sample in samples):
            return
        samples.append({'message': message, 'context': context or {}})

    @property
    def total(self) -> int:
        return sum(self.error_counts.values())

    def has_errors(self) -> bool:
        return self.total > 0

    def get_summary(self) -> Dict:
        """Counts and samples per error type."""
        return {
            'counts': dict(self.error_counts),
            'samples': {key: list(value) for key, value in self.error_samples.items()}
        }

    def log_summary(self, logger: logging.Logger) -> None:
        """Log error summary.

        Args:
            logger: Logger to use for output
        """
        if not self.error_counts:
            return

        logger.warning("\nError Summary:")
        for error_type, count in self.error_counts.most_common():
            logger.warning(f"\n{error_type} ({count} occurrences):")
            for i, sample in enumerate(self.error_samples[error_type], 1):
                logger.warning(f"  Sample {i}: {sample['message']}")
                for key, value in sample['context'].items():
                    logger.warning(f"    {key}: {value}")
