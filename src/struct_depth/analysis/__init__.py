"""Analysis pipeline and result models."""

from .engine import AnalysisEngine, ProgressCallback
from .models import AnalysisResult, RunStats

__all__ = ["AnalysisEngine", "ProgressCallback", "AnalysisResult", "RunStats"]
