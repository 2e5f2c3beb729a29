"""
SubmissionRecord model: immutable snapshot of an accepted admission form.
"""

from pydantic import BaseModel, Field, model_validator


class SubmissionRecord(BaseModel):
    """
    Snapshot taken at submit time and appended to the audit log.

    Serialized with camelCase aliases (``model_dump(by_alias=True)``), which is
    the format consumed by audit-log readers.

    Attributes:
        id: Epoch-millisecond creation time, unique within an audit log
        full_name .. aadhaar: Submitted form values
        offer_sent: Offer letter toggle
        exceptions: Field -> rationale for every active exception
        flagged: Submission requires secondary review
        exception_count: Number of active exceptions
        is_cgpa: Score was entered as CGPA
        timestamp: Local display time of submission
    """

    id: int = Field(..., gt=0)
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    dob: str = ""
    qualification: str = ""
    grad_year: str = Field("", alias="gradYear")
    score: str = ""
    screening_score: str = Field("", alias="screeningScore")
    status: str = ""
    aadhaar: str = ""
    offer_sent: bool = Field(False, alias="offerSent")
    exceptions: dict[str, str] = Field(default_factory=dict)
    flagged: bool = False
    exception_count: int = Field(0, ge=0, alias="exceptionCount")
    is_cgpa: bool = Field(False, alias="isCgpa")
    timestamp: str

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": 1772000000000,
                "fullName": "Asha Verma",
                "email": "asha@example.com",
                "phone": "9876543210",
                "dob": "2004-06-15",
                "qualification": "B.Tech",
                "gradYear": "2024",
                "score": "58",
                "screeningScore": "72",
                "status": "Cleared",
                "aadhaar": "123456789012",
                "offerSent": True,
                "exceptions": {
                    "score": "Special case: documentation pending from university"
                },
                "flagged": False,
                "exceptionCount": 1,
                "isCgpa": False,
                "timestamp": "2026-02-25 10:30:00",
            }
        }

    @model_validator(mode="after")
    def check_exception_count(self):
        """Validate that exception_count matches the recorded exceptions."""
        if self.exception_count != len(self.exceptions):
            raise ValueError(
                f"exception_count={self.exception_count} but {len(self.exceptions)} exceptions recorded"
            )
        return self

    def to_record(self) -> dict:
        """Serialize using the external camelCase field names."""
        return self.model_dump(by_alias=True)
