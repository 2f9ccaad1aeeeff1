"""Draft domain service."""

import uuid
from datetime import date
from typing import TYPE_CHECKING, Optional, Sequence

from ledgerbook.domain.entities import DraftEntry, EntrySide, LedgerDraft
from ledgerbook.domain.errors import NotFoundError, draft_not_found

if TYPE_CHECKING:
    from ledgerbook.database.base import Database


def new_draft_row(
    account_id: str = "",
    category_id: str = "",
    statement: str = "",
    side: EntrySide = EntrySide.RECEIVABLE,
    amount: str = "",
) -> DraftEntry:
    """Create a form row with a fresh client-side id."""
    return DraftEntry(
        id=str(uuid.uuid4()),
        account_id=account_id,
        category_id=category_id,
        statement=statement,
        type=EntrySide(side),
        amount=amount,
    )


class DraftService:
    """Service for saved, not yet committed entry batches."""

    def __init__(self, db: "Database"):
        """Initialize draft service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_drafts(self) -> list[LedgerDraft]:
        """List drafts, most recently updated first."""
        return self.db.list_drafts()

    def get_draft(self, draft_id: str) -> Optional[LedgerDraft]:
        return self.db.get_draft(draft_id)

    def require_draft(self, draft_id: str) -> LedgerDraft:
        draft = self.db.get_draft(draft_id)
        if draft is None:
            raise NotFoundError(draft_not_found(draft_id))
        return draft

    def save_draft(
        self,
        draft_id: Optional[str],
        draft_date: Optional[date],
        rows: Sequence[DraftEntry],
    ) -> str:
        """Insert a draft when there is no id yet, otherwise update it.

        Returns:
            Draft ID
        """
        payload = [row.to_dict() for row in rows]
        if draft_id is None:
            return self.db.create_draft(draft_date, payload)
        self.db.update_draft(draft_id, draft_date, payload)
        return draft_id

    def delete_draft(self, draft_id: str) -> None:
        """Delete a draft.

        Raises:
            NotFoundError: If the draft does not exist
        """
        self.require_draft(draft_id)
        self.db.delete_draft(draft_id)

    def close_session(self) -> None:
        """Release the calling thread's database session."""
        self.db.disconnect()
