"""Processor for bulk importing addresses from CSV data."""
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd

from ..association import OwnerAssociation, OwnerRef
from ..db.store import AddressStore
from ..exceptions import ValidationError
from ..utils.normalization import clean_field
from ..validation import AddressValidator
from .base import BaseProcessor

REQUIRED_COLUMNS = ['owner_type', 'owner_id', 'label']


class AddressImportProcessor(BaseProcessor):
    """Imports one address per row, each linked to the row's owner.

    Rows that fail validation are counted and skipped; they never abort the
    batch they are in.
    """

    def __init__(
        self,
        store: AddressStore,
        validator: Optional[AddressValidator] = None,
        batch_size: int = 100,
        error_limit: int = 1000,
        debug: bool = False
    ):
        super().__init__(store, batch_size, error_limit, debug)
        self.validator = validator or AddressValidator(store.schema.rules)

        self.stats.addresses_created = 0
        self.stats.invalid_rows = 0
        self.stats.owners_seen = 0
        self._owners = set()

    def validate_data(self, df: pd.DataFrame) -> Tuple[List[str], List[str]]:
        """Check the columns before any row is imported.

        Returns:
            Tuple of (critical_issues, warnings)
        """
        critical_issues = []
        warnings = []

        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            critical_issues.append(f"Missing required columns: {', '.join(missing)}")
            return critical_issues, warnings

        unknown = [
            column for column in df.columns
            if column not in self.validator.rules and column not in REQUIRED_COLUMNS
        ]
        if unknown:
            warnings.append(f"Ignoring unknown columns: {', '.join(map(str, unknown))}")

        empty_labels = df[df['label'].isna() | (df['label'].astype(str).str.strip() == '')]
        if not empty_labels.empty:
            warnings.append(
                f"Found {len(empty_labels)} rows without a label that will be rejected. "
                f"First few row numbers: {', '.join(map(str, empty_labels.index[:3]))}"
            )

        return critical_issues, warnings

    def _extract_fields(self, row: pd.Series) -> Dict[str, Any]:
        """Pick the rule-table columns that hold a value in this row."""
        fields = {}
        for name in self.validator.rules:
            if name not in row.index:
                continue
            value = clean_field(row[name])
            if value is not None:
                fields[name] = value
        return fields

    def _owner_for(self, row: pd.Series) -> OwnerRef:
        owner_type = clean_field(row['owner_type'])
        owner_id = clean_field(row['owner_id'])
        if not owner_type or owner_id is None:
            raise ValidationError('Row has no owner.')
        try:
            owner = OwnerRef(str(owner_type), int(float(owner_id)))
        except ValueError:
            raise ValidationError(f"Owner id '{owner_id}' is not a number.")
        if owner not in self._owners:
            self._owners.add(owner)
            self.stats.owners_seen += 1
        return owner

    def _process_batch(self, batch_df: pd.DataFrame) -> pd.DataFrame:
        """Import every row of the batch, recording the new address ids."""
        if self.debug:
            self.logger.debug(f"Processing batch of {len(batch_df)} rows")

        batch_df['address_id'] = None
        created = 0

        for idx, row in batch_df.iterrows():
            try:
                owner = self._owner_for(row)
                association = OwnerAssociation(owner, self.store, self.validator)
                address = association.add_address(self._extract_fields(row))
            except ValidationError as e:
                self.stats.invalid_rows += 1
                self.stats.total_errors += 1
                self.error_tracker.add_error('VALIDATION_ERROR', str(e), {'row': idx})
                if self.debug:
                    self.logger.debug(f"Row {idx} rejected: {e}")
                continue

            batch_df.at[idx, 'address_id'] = address.id
            created += 1

        self.stats.addresses_created += created
        return batch_df
