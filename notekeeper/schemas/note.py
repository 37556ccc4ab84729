"""
notekeeper — Pydantic Schemas
=============================

What:  Detached, request-scoped copies of notes plus the dispatcher's result.
How:   The store never hands ORM objects to callers; the dispatcher only
       sees these read-only snapshots and drops them after each command.
"""

from pydantic import BaseModel, Field


class NoteSummary(BaseModel):
    """
    What:  Compact note representation for the listing.
    Who:   Returned by NoteStore.list_all().
    """
    id: int = Field(description="Store-assigned identifier")
    name: str = Field(description="Unique note name")

    model_config = {"from_attributes": True, "frozen": True}


class NoteRecord(NoteSummary):
    """
    What:  Full representation of a note, body included.
    Who:   Returned by create, get_by_name, update, clear and rename.
    """
    data: str = Field(default="", description="Full note body, never truncated")


class DispatchResult(BaseModel):
    """
    What:  Outcome of one dispatched command.
    How:   `output` is the text to show the caller; `exit_code` is the
           process exit status (0 on success).
    """
    output: str = Field(default="", description="Text to print for the caller")
    exit_code: int = Field(default=0, ge=0, description="Process exit status")

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
