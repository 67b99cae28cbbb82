"""Domain models for the inventory spreadsheet import pipeline.

Value objects shared by the parser, the column mapper and the import orchestrator.
"""

from .column_mapping import ColumnMapping, MappingResult
from .error_record import ImportErrorRecord
from .import_state import ImportPhase, ImportState
from .import_summary import ImportSummary
from .parsed_table import Delimiter, ParsedTable
from .target_field import TargetField
from .validated_row import ItemCondition, ValidatedRow

__all__ = [
    # Parser output
    "Delimiter",
    "ParsedTable",
    # Mapping
    "TargetField",
    "ColumnMapping",
    "MappingResult",
    # Validation / import
    "ItemCondition",
    "ValidatedRow",
    "ImportErrorRecord",
    "ImportSummary",
    "ImportPhase",
    "ImportState",
]
