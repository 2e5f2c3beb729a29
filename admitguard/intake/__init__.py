"""
Intake form orchestration: pure recomputation plus the stateful session.
"""

from .orchestrator import ValidationOrchestrator, classify_field, recompute
from .session import IntakeSession

__all__ = [
    "ValidationOrchestrator",
    "IntakeSession",
    "classify_field",
    "recompute",
]
