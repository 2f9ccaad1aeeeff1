"""Debounced draft autosave for multi-row entry forms.

While a form is open every edit restarts a quiet-period timer; when the
timer runs out the latest rows are upserted as a draft. Closing the form
flushes immediately. Persist calls are serialised, so an edit arriving
while a save is in flight is written by the next save, never concurrently.
"""

import logging
import threading
from datetime import date
from enum import Enum
from typing import Callable, Optional, Sequence

from ledgerbook.domain.batch import has_data
from ledgerbook.domain.drafts import DraftService
from ledgerbook.domain.entities import DraftEntry, LedgerDraft

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 1.5


class AutosaveState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    PERSISTING = "persisting"


def daemon_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """threading.Timer that does not keep the interpreter alive."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class DraftAutosaveCoordinator:
    """Owns the draft of one entry form while it is open."""

    def __init__(
        self,
        draft_service: DraftService,
        delay: float = DEFAULT_DELAY,
        timer_factory: Callable[[float, Callable[[], None]], object] = daemon_timer,
    ):
        """Initialize the coordinator.

        Args:
            draft_service: Service used to save and delete drafts
            delay: Quiet period in seconds before an edit is saved
            timer_factory: Builds a startable, cancellable timer for a
                callback; threading.Timer semantics
        """
        self.draft_service = draft_service
        self.delay = delay
        self.timer_factory = timer_factory
        self.last_error: Optional[Exception] = None

        self._lock = threading.Lock()
        self._persist_lock = threading.Lock()
        self._timer = None
        self._generation = 0
        self._state = AutosaveState.IDLE
        self._draft_id: Optional[str] = None
        self._date: Optional[date] = None
        self._rows: tuple[DraftEntry, ...] = ()

    @property
    def state(self) -> AutosaveState:
        return self._state

    @property
    def draft_id(self) -> Optional[str]:
        return self._draft_id

    @property
    def has_pending_save(self) -> bool:
        return self._timer is not None

    def open(self, draft: Optional[LedgerDraft] = None) -> None:
        """Start editing, optionally resuming a saved draft."""
        with self._lock:
            self._cancel_timer()
            self._state = AutosaveState.EDITING
            self.last_error = None
            if draft is not None:
                self._draft_id = draft.id
                self._date = draft.date
                self._rows = tuple(draft.entries)
            else:
                self._draft_id = None
                self._date = None
                self._rows = ()

    def update(self, entry_date: Optional[date], rows: Sequence[DraftEntry]) -> None:
        """Record the latest form state and restart the quiet period.

        Nothing is scheduled while the form is closed or before any row
        has an account selected.
        """
        with self._lock:
            if self._state == AutosaveState.IDLE:
                return
            self._date = entry_date
            self._rows = tuple(rows)
            if not has_data(self._rows):
                return
            self._cancel_timer()
            self._generation += 1
            generation = self._generation
            self._timer = self.timer_factory(self.delay, lambda: self._on_timer(generation))
            self._timer.start()

    def flush(self) -> Optional[str]:
        """Cancel the pending timer and save the latest state now.

        Returns:
            Draft ID after the save, None if there was nothing to save
        """
        with self._lock:
            self._cancel_timer()
            self._generation += 1
        self._persist()
        return self._draft_id

    def cancel_pending(self) -> Optional[str]:
        """Drop a scheduled save and wait for one that is already running.

        Used before the form's rows are posted so that no autosave writes
        while the batch is being written.

        Returns:
            ID of the saved draft, if any
        """
        with self._lock:
            self._cancel_timer()
            self._generation += 1
        with self._persist_lock:
            return self._draft_id

    def close(self) -> Optional[str]:
        """Flush and stop editing. The saved draft stays in the database.

        Returns:
            ID of the draft holding the form's rows, if one was saved
        """
        saved_id = self.flush()
        with self._lock:
            self._draft_id = None
            self._date = None
            self._rows = ()
            self._state = AutosaveState.IDLE
        return saved_id

    def commit_succeeded(self) -> None:
        """Drop the draft after its rows were posted as ledger entries."""
        with self._lock:
            self._cancel_timer()
        with self._persist_lock:
            draft_id = self._draft_id
            if draft_id is not None and self.draft_service.get_draft(draft_id) is not None:
                self.draft_service.delete_draft(draft_id)
                logger.debug("Deleted draft %s after commit", draft_id)
            with self._lock:
                self._draft_id = None
                self._date = None
                self._rows = ()
                self._state = AutosaveState.IDLE

    def _cancel_timer(self) -> None:
        # caller holds self._lock
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state == AutosaveState.IDLE:
                return
            self._timer = None
        try:
            self._persist(generation)
        finally:
            # sessions are per thread and the timer thread ends here
            self.draft_service.close_session()

    def _persist(self, generation: Optional[int] = None) -> None:
        with self._persist_lock:
            with self._lock:
                if generation is not None and generation != self._generation:
                    return
                if not has_data(self._rows):
                    return
                draft_id = self._draft_id
                entry_date = self._date
                rows = self._rows
                previous_state = self._state
                self._state = AutosaveState.PERSISTING
            try:
                saved_id = self.draft_service.save_draft(draft_id, entry_date, rows)
            except Exception as e:
                # Autosave is best effort; the form keeps its rows
                logger.warning("Draft autosave failed (draft=%s)", draft_id, exc_info=True)
                self.last_error = e
            else:
                self.last_error = None
                with self._lock:
                    self._draft_id = saved_id
                logger.debug("Autosaved draft %s (%d rows)", saved_id, len(rows))
            finally:
                with self._lock:
                    if self._state == AutosaveState.PERSISTING:
                        self._state = previous_state
