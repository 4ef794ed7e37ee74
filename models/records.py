"""
Record models flowing through one import run.

Raw record -> NormalizedRecord (field mapper) -> ImportedRecord (builder),
with every per-record outcome wrapped in a SettledResult (batch runner).
"""

from dataclasses import dataclass
from typing import Any, Literal, Optional
from pydantic import Field

from models.base import BaseSchema


class NormalizedField(BaseSchema):
    """Value copied from the raw record, tagged with the declared field type."""

    value: Any = None
    type: str


class NormalizedRecord(BaseSchema):
    """
    One raw record keyed by target field identifiers.

    source_index is the record's position in the raw input; it ties the
    normalized record back to its originating raw record.
    """

    source_index: int = Field(..., ge=0)
    fields: dict[str, NormalizedField] = Field(default_factory=dict)

    def value_of(self, field_id: str) -> Any:
        field = self.fields.get(field_id)
        return field.value if field is not None else None


class ImportedRecord(BaseSchema):
    """Fulfilled value of one record's import chain."""

    record_index: int
    entry_id: str
    asset_id: str


@dataclass(frozen=True)
class SettledResult:
    """Terminal outcome of one per-record operation."""

    index: int
    status: Literal["fulfilled", "rejected"]
    value: Optional[Any] = None
    reason: Optional[BaseException] = None

    @classmethod
    def fulfilled(cls, index: int, value: Any) -> "SettledResult":
        return cls(index=index, status="fulfilled", value=value)

    @classmethod
    def rejected(cls, index: int, reason: BaseException) -> "SettledResult":
        return cls(index=index, status="rejected", reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == "fulfilled"
