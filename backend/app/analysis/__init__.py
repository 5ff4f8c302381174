from app.analysis.models import StageKind, StageState
from app.analysis.orchestrator import AnalysisOrchestrator, PreconditionError
from app.analysis.store import SharedStateStore

__all__ = ["AnalysisOrchestrator", "PreconditionError", "SharedStateStore", "StageKind", "StageState"]
