"""Filter criteria snapshot for the paginated FIR query."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from firdesk.schemas.fir import FIRStatus, Priority

ALL = "ALL"

# Fields edited per keystroke; everything else is a discrete selector
DEBOUNCED_FIELDS = frozenset({"search", "complainant"})


class FilterCriteria(BaseModel):
    """
    Immutable filter snapshot.

    Two snapshots are equal iff every field is equal, which is what decides
    whether a new fetch is required.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    complainant: str = ""
    status: FIRStatus | None = None
    priority: Priority | None = None
    incident_type: str | None = None
    date_filter: date | None = None
    page_size: int = 5

    @field_validator("status", "priority", "incident_type", mode="before")
    @classmethod
    def _all_means_unset(cls, value: Any, info: ValidationInfo) -> Any:
        """Treat the ``ALL`` selector value (or blank) as no filter."""
        if not isinstance(value, str):
            return value
        value = value.strip()
        if not value or value.upper() == ALL:
            return None
        # Enum selectors match case-insensitively
        return value if info.field_name == "incident_type" else value.upper()

    @field_validator("page_size")
    @classmethod
    def _positive_page_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("page_size must be positive")
        return value

    def with_changes(self, **changes: Any) -> "FilterCriteria":
        """Return a validated copy with ``changes`` applied."""
        return FilterCriteria.model_validate({**self.model_dump(), **changes})

    def to_query_params(self, page: int) -> dict[str, Any]:
        """Encode as query parameters for ``/fir/paginated``."""
        params: dict[str, Any] = {"page": page, "size": self.page_size}

        if self.search.strip():
            params["search"] = self.search.strip()
        if self.complainant.strip():
            params["complainant"] = self.complainant.strip()
        if self.status is not None:
            params["status"] = self.status.value
        if self.priority is not None:
            params["priority"] = self.priority.value
        if self.incident_type:
            params["incidentType"] = self.incident_type
        if self.date_filter is not None:
            params["dateFilter"] = self.date_filter.isoformat()

        return params
