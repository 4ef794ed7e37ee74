"""
Import report models.

FailedImport keeps the camelCase keys operators already grep for in the
logs (errorStatus, errorMessage, payloadSent).
"""

from typing import Any, Optional
from pydantic import Field

from models.base import BaseSchema

EXIT_OK = 0
EXIT_RECORD_FAILURES = 1
EXIT_ABORTED = 2


class FailedImport(BaseSchema):
    """Diagnostic detail extracted from one rejected record."""

    record_index: int = Field(..., alias="recordIndex")
    error_status: Optional[int] = Field(None, alias="errorStatus")
    error_message: Optional[str] = Field(None, alias="errorMessage")
    message: Optional[str] = None
    details: Any = None
    payload_sent: Optional[str] = Field(
        None,
        alias="payloadSent",
        description="URL of the failing request (identifies the entry/asset)"
    )
    raw_error: Optional[str] = Field(
        None,
        alias="rawError",
        description="Set when the rejection message is not a JSON error payload"
    )

    def to_log(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ImportReport(BaseSchema):
    """Outcome of one import run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: list[FailedImport] = Field(default_factory=list)
    aborted: bool = False
    abort_error: Optional[dict[str, Any]] = None

    @property
    def summary_line(self) -> str:
        return (
            f"Job Completed: Entries import. "
            f"Successfully: {self.succeeded}. Failed: {self.failed}."
        )

    @property
    def exit_code(self) -> int:
        if self.aborted:
            return EXIT_ABORTED
        if self.failed:
            return EXIT_RECORD_FAILURES
        return EXIT_OK

    @classmethod
    def abort(cls, error: dict[str, Any]) -> "ImportReport":
        return cls(aborted=True, abort_error=error)
