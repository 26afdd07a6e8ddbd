"""Services for LabelScan."""

from labelscan.services.submission import SubmissionAdapter
from labelscan.services.reconciler import AnalysisReconciler
from labelscan.services.analysis_model import (
    AnalysisModel,
    AnthropicAnalysisModel,
    GeminiAnalysisModel,
    build_analysis_model,
)
from labelscan.services.history import InMemoryHistoryStore, SQLiteHistoryStore

__all__ = [
    "SubmissionAdapter",
    "AnalysisReconciler",
    "AnalysisModel",
    "AnthropicAnalysisModel",
    "GeminiAnalysisModel",
    "build_analysis_model",
    "InMemoryHistoryStore",
    "SQLiteHistoryStore",
]
