"""CSV import reconciliation: parse, deduplicate, match, review, commit."""

from __future__ import annotations

from .columns import (
    COLUMN_SPECS,
    REQUIRED_FIELDS,
    TEMPLATE_HEADERS,
    ColumnMap,
    ColumnSpec,
    render_template,
    resolve_columns,
)
from .dates import NormalizedDate, normalize_date, parse_date
from .deduplication import DuplicateFilterResult, filter_duplicates
from .errors import (
    CsvImportError,
    EmptyInputError,
    ImportInProgressError,
    InvalidImportStageError,
    MissingRequiredColumnsError,
    StructuralError,
    TransportError,
    UnknownConflictError,
)
from .ledger import ConflictEntry, ConflictLedger, Resolution
from .matching import FuzzyMatch, MatchResult, edit_distance, find_closest, match_entities
from .outcome import ImportMessage, ImportOutcome, MessageLevel
from .parser import CandidateRecord, ParseResult, ParseWarning, WarningKind, parse_shipments
from .pipeline import (
    DeduplicationPhase,
    ImportBatch,
    ImportContext,
    ImportPhase,
    ImportPipeline,
    MatchingPhase,
    default_pipeline,
    stage_import,
)
from .registry import CanonicalRegistry, WorkingRegistry
from .session import ImportSession, ImportStage

__all__ = [
    "COLUMN_SPECS",
    "REQUIRED_FIELDS",
    "TEMPLATE_HEADERS",
    "CandidateRecord",
    "CanonicalRegistry",
    "ColumnMap",
    "ColumnSpec",
    "ConflictEntry",
    "ConflictLedger",
    "CsvImportError",
    "DeduplicationPhase",
    "DuplicateFilterResult",
    "EmptyInputError",
    "FuzzyMatch",
    "ImportBatch",
    "ImportContext",
    "ImportInProgressError",
    "ImportMessage",
    "ImportOutcome",
    "ImportPhase",
    "ImportPipeline",
    "ImportSession",
    "ImportStage",
    "InvalidImportStageError",
    "MatchResult",
    "MatchingPhase",
    "MessageLevel",
    "MissingRequiredColumnsError",
    "NormalizedDate",
    "ParseResult",
    "ParseWarning",
    "Resolution",
    "StructuralError",
    "TransportError",
    "UnknownConflictError",
    "WarningKind",
    "WorkingRegistry",
    "default_pipeline",
    "edit_distance",
    "filter_duplicates",
    "find_closest",
    "match_entities",
    "normalize_date",
    "parse_date",
    "parse_shipments",
    "render_template",
    "resolve_columns",
    "stage_import",
]
