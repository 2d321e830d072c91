"""
Import models - Per-file and per-row results of the mapping engine
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from services.enums import ImportSource, TransactionField
from services.import_mappings import REQUIRED_FIELDS

ColumnMapping = Dict[str, str]

# A transaction record is only worth creating when one of these is present
TRANSACTION_TRIGGER_FIELDS = (
    TransactionField.SALE_PRICE.value,
    TransactionField.CAP_RATE.value,
    TransactionField.NOI.value,
)


@dataclass
class AutoMapResult:
    """Column mapping proposed for one uploaded file"""

    property_mapping: ColumnMapping
    transaction_mapping: ColumnMapping
    unmapped_columns: List[str]
    warnings: List[str]
    detected_source: ImportSource

    @property
    def mapped_columns(self) -> List[str]:
        """Raw columns bound to any canonical field, property side first"""
        return list(self.property_mapping) + list(self.transaction_mapping)

    @property
    def has_critical_warnings(self) -> bool:
        return any(warning.startswith('CRITICAL') for warning in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the key names the review UI expects"""
        return {
            'propertyMapping': dict(self.property_mapping),
            'transactionMapping': dict(self.transaction_mapping),
            'unmappedColumns': list(self.unmapped_columns),
            'warnings': list(self.warnings),
            'detectedSource': self.detected_source.value,
        }


@dataclass
class ImportRowResult:
    """Canonical property and transaction records built from one source row"""

    property: Dict[str, Any] = field(default_factory=dict)
    transaction: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def missing_required_fields(self) -> List[str]:
        """Required property fields that are null or absent after transformation"""
        return [
            required.value for required in REQUIRED_FIELDS
            if self.property.get(required.value) in (None, '')
        ]

    def has_transaction_data(self) -> bool:
        return any(self.transaction.get(name) for name in TRANSACTION_TRIGGER_FIELDS)

    def transaction_type(self) -> str:
        """'lease' when a lease rate was supplied, otherwise 'sale'"""
        if self.transaction.get(TransactionField.LEASE_RATE.value):
            return 'lease'
        return 'sale'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'property': dict(self.property),
            'transaction': dict(self.transaction),
            'errors': list(self.errors),
        }

