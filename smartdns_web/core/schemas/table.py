"""Table response schemas shared by the listing endpoints.

Every listing endpoint answers with ``{"data": [...], "column": [...]}``:
the rows plus a static description of the columns the admin UI renders.
Columns are declared per feature as module-level tuples of ``TableColumn``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

RowT = TypeVar("RowT")


class TableColumn(BaseModel):
    """Column metadata for the admin table view."""

    label: str = Field(description="Column header shown to the user")
    prop: str = Field(description="Row attribute rendered in this column")
    width: str = Field(default="", description="Column width in pixels")

    model_config = ConfigDict(frozen=True)


class TableResponse(BaseModel, Generic[RowT]):
    """Rows plus column metadata."""

    data: list[RowT] = Field(default_factory=list)
    column: list[TableColumn] = Field(default_factory=list)

    @classmethod
    def build(
        cls, rows: Iterable[RowT], columns: Iterable[TableColumn]
    ) -> TableResponse[RowT]:
        """Create a table from rows and a column declaration."""
        return cls(data=list(rows), column=list(columns))


class MessageResponse(BaseModel):
    """Acknowledgement body for write endpoints."""

    mesg: str = Field(default="update done", description="Human-readable outcome")
