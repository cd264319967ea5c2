# mrp_analysis/__init__.py
"""
MRP log analysis package
Provides centralized access to the parser, differ and explanation engine
"""

from .models import (
    RunType,
    RunStatus,
    EntryType,
    DifferenceType,
    Severity,
    HEALTH_FLAG_KEYWORDS,
    MrpRunMetadata,
    MrpLogEntry,
    MrpLogDocument,
    MrpDifference,
    MrpLogComparison,
    ExplanationFact,
    ExplanationInference,
    Explanation,
)
from .log_parser import MrpLogParser, mrp_log_parser
from .run_differ import MrpRunDiffer, mrp_run_differ
from .explanation_engine import ExplanationEngine, explanation_engine

__all__ = [
    'RunType',
    'RunStatus',
    'EntryType',
    'DifferenceType',
    'Severity',
    'HEALTH_FLAG_KEYWORDS',
    'MrpRunMetadata',
    'MrpLogEntry',
    'MrpLogDocument',
    'MrpDifference',
    'MrpLogComparison',
    'ExplanationFact',
    'ExplanationInference',
    'Explanation',
    'MrpLogParser',
    'MrpRunDiffer',
    'ExplanationEngine',
    'mrp_log_parser',
    'mrp_run_differ',
    'explanation_engine'
]
