"""Vendor insert / update / delete for the admin dashboard.

Sequence numbers are assigned here as ``max(existing) + 1`` from a full
scan of the store. Two dashboards inserting at the same moment can compute
the same number; the ``Srno`` primary key rejects the second insert, which
surfaces as ``DuplicateSequenceError`` and forces a rescan on the next try.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Optional

import structlog

from src.core.exceptions import AppException, DuplicateSequenceError, ValidationError
from src.repositories.vendor import VendorStore
from src.schemas.vendor import VendorForm, VendorRecord
from src.search.controller import ListState

logger = structlog.get_logger()

INSERT_SUCCESS = "Vendor added successfully!"
INSERT_ERROR = "Error submitting form. Please try again."
UPDATE_SUCCESS = "Vendor updated successfully!"
UPDATE_ERROR = "Error updating vendor. Please try again."
DELETE_SUCCESS = "Vendor deleted successfully!"
DELETE_ERROR = "Error deleting vendor"
DELETE_CONFIRM = "Are you sure you want to delete this vendor?"


def next_sequence_number(existing: Iterable[str]) -> int:
    """``max(existing) + 1``; values that are not integers are ignored."""
    highest = 0
    for value in existing:
        try:
            number = int(str(value).strip())
        except ValueError:
            continue
        highest = max(highest, number)
    return highest + 1


class VendorMutationController:
    """Form state and mutations for one admin consumer.

    ``listing`` is the same ``ListState`` the dashboard's search controller
    fills; successful updates and deletes are patched into it in place
    instead of refetching.
    """

    def __init__(
        self,
        store: VendorStore,
        listing: Optional[ListState] = None,
        dismiss_seconds: float = 1.5,
        on_change: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self.store = store
        self.listing = listing or ListState()
        self.dismiss_seconds = dismiss_seconds
        self.on_change = on_change

        self.form = VendorForm()
        self.next_sr_no: Optional[str] = None
        self.submitting = False
        self.message = ""

        self.editing: Optional[VendorRecord] = None
        self.update_message = ""
        self._dismiss_task: Optional[asyncio.Task] = None

        self.pending_delete: Optional[str] = None

    # -- insert ---------------------------------------------------------

    async def load_next_sequence(self) -> str:
        """Scan every stored sequence number and cache the next one.

        Falls back to ``"1"`` when the store cannot be read.
        """
        try:
            existing = await self.store.list_sequence_numbers()
        except AppException as e:
            logger.warning("vendor_sequence_scan_failed", error=e.message)
            self.next_sr_no = "1"
            return self.next_sr_no

        self.next_sr_no = str(next_sequence_number(existing))
        return self.next_sr_no

    async def insert(self, form: VendorForm) -> bool:
        """Submit the add-vendor form.

        On success the form is cleared and the cached sequence number is
        advanced locally. On failure the entered values are kept.
        """
        self.form = form
        self.message = ""
        try:
            form.require_complete()
        except ValidationError as e:
            self.message = e.message
            return False

        if self.next_sr_no is None:
            await self.load_next_sequence()

        record = VendorRecord(sr_no=self.next_sr_no, **form.model_dump())
        self.submitting = True
        try:
            await self.store.insert(record)
        except DuplicateSequenceError as e:
            self.next_sr_no = None
            self.message = e.message
            return False
        except AppException as e:
            logger.error("vendor_insert_failed", sr_no=record.sr_no, error=e.message)
            self.message = INSERT_ERROR
            return False
        finally:
            self.submitting = False

        self.form = VendorForm()
        self.next_sr_no = str(int(record.sr_no) + 1)
        self.message = INSERT_SUCCESS
        return True

    # -- update ---------------------------------------------------------

    def begin_edit(self, sr_no: str) -> VendorRecord:
        """Open the edit view on a snapshot of a listed record."""
        for vendor in self.listing.results:
            if vendor.sr_no == sr_no:
                self.editing = vendor.model_copy()
                self.update_message = ""
                return self.editing
        raise ValidationError(f"Vendor {sr_no} is not in the current list")

    def close_edit(self) -> None:
        self.editing = None
        self.update_message = ""

    async def submit_update(self, record: VendorRecord) -> bool:
        """Write an edited snapshot back and splice the stored row into the list.

        The sequence number is the key and cannot be edited.
        """
        self.update_message = ""
        if self.editing is not None and record.sr_no != self.editing.sr_no:
            self.update_message = "Sr. No cannot be changed"
            return False
        try:
            record.require_complete()
        except ValidationError as e:
            self.update_message = e.message
            return False

        self.editing = record
        try:
            await self.store.update(record)
            fresh = await self.store.get(record.sr_no)
        except AppException as e:
            logger.error("vendor_update_failed", sr_no=record.sr_no, error=e.message)
            self.update_message = UPDATE_ERROR
            return False

        self.listing.results = [
            fresh if vendor.sr_no == fresh.sr_no else vendor
            for vendor in self.listing.results
        ]
        self.update_message = UPDATE_SUCCESS
        self._schedule_dismiss()
        return True

    def _schedule_dismiss(self) -> None:
        if self._dismiss_task is not None and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        self._dismiss_task = asyncio.get_running_loop().create_task(self._dismiss_later())

    async def _dismiss_later(self) -> None:
        await asyncio.sleep(self.dismiss_seconds)
        self.close_edit()
        if self.on_change is not None:
            await self.on_change()

    # -- delete ---------------------------------------------------------

    def request_delete(self, sr_no: str) -> str:
        """First step of a delete: remember the target and return the prompt."""
        self.pending_delete = sr_no
        return DELETE_CONFIRM

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> bool:
        """Delete the record named by ``request_delete``.

        On failure the list is left as it is; the stale row stays visible.
        """
        sr_no = self.pending_delete
        if sr_no is None:
            self.message = "Nothing to delete"
            return False
        self.pending_delete = None

        try:
            await self.store.delete(sr_no)
        except AppException as e:
            logger.error("vendor_delete_failed", sr_no=sr_no, error=e.message)
            self.message = DELETE_ERROR
            return False

        self.listing.results = [v for v in self.listing.results if v.sr_no != sr_no]
        self.message = DELETE_SUCCESS
        return True

    async def close(self) -> None:
        if self._dismiss_task is not None and not self._dismiss_task.done():
            self._dismiss_task.cancel()
            await asyncio.gather(self._dismiss_task, return_exceptions=True)

    def to_dict(self) -> dict:
        return {
            "form": self.form.model_dump(),
            "next_sr_no": self.next_sr_no,
            "submitting": self.submitting,
            "message": self.message,
            "editing": self.editing.model_dump() if self.editing else None,
            "update_message": self.update_message,
            "pending_delete": self.pending_delete,
        }
