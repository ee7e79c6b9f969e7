from .analysis import AnalysisDispatcher, DispatchOutcome

__all__ = ["AnalysisDispatcher", "DispatchOutcome"]
