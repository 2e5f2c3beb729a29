"""
Input models for one validation pass: form values, exception requests and context.
"""

from typing import Union

from pydantic import BaseModel

FormValue = Union[str, bool, None]
FormValues = dict[str, FormValue]


class ExceptionRequest(BaseModel):
    """
    A user-asserted override of a soft-rule warning.

    Attributes:
        requested: Whether the waiver is requested
        rationale: Free-text justification (only meaningful when requested)
    """

    requested: bool = False
    rationale: str = ""

    class Config:
        frozen = True


ExceptionState = dict[str, ExceptionRequest]


class EvaluationContext(BaseModel):
    """
    Toggles that change how rules are evaluated without being rule inputs themselves.

    Attributes:
        is_cgpa: Scores are entered as CGPA rather than percentage
    """

    is_cgpa: bool = False

    class Config:
        frozen = True
