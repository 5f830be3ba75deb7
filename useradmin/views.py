"""State holders behind the user list and user detail screens."""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from .client import UsersAPIClient, UsersAPIError, UserId
from .models import FieldUpdate, UserDetail, UserDraft, UserSummary
from .tasks import LatestTask
from .validation import validate_form

logger = logging.getLogger("useradmin.views")

LOAD_ERROR_MESSAGE = "Error fetching users"


class Modal(str, Enum):
    NONE = "none"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class UserListView:
    """Owns the cached user collection, the modal state and both drafts.

    Every mutation is sent to the remote API first; the local collection is
    reconciled only after the call succeeds. Failed mutations are logged and
    leave the view exactly as it was.
    """

    def __init__(self, client: UsersAPIClient) -> None:
        self._client = client
        self._users: List[UserSummary] = []
        self.loading = True
        self.error: Optional[str] = None
        self.pending_delete: Optional[UserSummary] = None
        self.active_modal = Modal.NONE
        self.new_user = UserDraft()
        self.edit_user: Optional[UserSummary] = None
        self.form_error = ""

    @property
    def users(self) -> tuple[UserSummary, ...]:
        return tuple(self._users)

    @property
    def show_create_modal(self) -> bool:
        return self.active_modal is Modal.CREATE

    @property
    def show_edit_modal(self) -> bool:
        return self.active_modal is Modal.EDIT and self.edit_user is not None

    def find_user(self, user_id: int) -> Optional[UserSummary]:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    async def load(self) -> None:
        self.error = None
        try:
            users = await self._client.list_users()
        except UsersAPIError as exc:
            logger.warning("Error fetching users: %s", exc)
            self.error = LOAD_ERROR_MESSAGE
            self.loading = False
            return
        self._users = list(users)
        self.loading = False

    def confirm_delete(self, user: UserSummary) -> None:
        self.pending_delete = user
        self.edit_user = None
        self.active_modal = Modal.DELETE

    def cancel_delete(self) -> None:
        if self.pending_delete is None:
            return
        self.pending_delete = None
        self.active_modal = Modal.NONE

    async def delete_user(self, user_id: int) -> bool:
        try:
            await self._client.delete_user(user_id)
        except UsersAPIError as exc:
            logger.warning("Error deleting user %s: %s", user_id, exc)
            return False

        self._users = [user for user in self._users if user.id != user_id]
        self.pending_delete = None
        if self.active_modal is Modal.DELETE:
            self.active_modal = Modal.NONE
        return True

    def open_create_modal(self) -> None:
        self.new_user = UserDraft()
        self.edit_user = None
        self.pending_delete = None
        self.active_modal = Modal.CREATE

    def open_edit_modal(self, user: UserSummary) -> None:
        self.edit_user = user
        self.pending_delete = None
        self.active_modal = Modal.EDIT

    def close_modal(self) -> None:
        """Dismiss the create or edit modal, dropping the edit draft."""

        if self.active_modal in (Modal.CREATE, Modal.EDIT):
            self.active_modal = Modal.NONE
        self.edit_user = None

    def handle_input_change(self, update: FieldUpdate) -> None:
        if self.edit_user is not None:
            self.edit_user = update.apply(self.edit_user)
        else:
            self.new_user = update.apply(self.new_user)

    async def create_user(self) -> bool:
        error = validate_form(self.new_user)
        if error:
            self.form_error = error
            return False

        try:
            created = await self._client.create_user(self.new_user)
        except UsersAPIError as exc:
            logger.warning("Error creating user: %s", exc)
            return False

        self._users.append(created)
        self.new_user = UserDraft()
        if self.active_modal is Modal.CREATE:
            self.active_modal = Modal.NONE
        self.form_error = ""
        return True

    async def update_user(self) -> bool:
        edited = self.edit_user
        if edited is None:
            return False

        error = validate_form(edited)
        if error:
            self.form_error = error
            return False

        try:
            await self._client.update_user(edited)
        except UsersAPIError as exc:
            logger.warning("Error updating user %s: %s", edited.id, exc)
            return False

        self._users = [edited if user.id == edited.id else user for user in self._users]
        if self.active_modal is Modal.EDIT:
            self.active_modal = Modal.NONE
        self.edit_user = None
        self.form_error = ""
        return True


class UserDetailView:
    """Fetches one user's full record by the identifier taken from the path.

    A failed fetch is only logged, so the screen keeps showing its loading
    placeholder. A new load cancels any fetch still running for an earlier
    identifier.
    """

    def __init__(self, client: UsersAPIClient) -> None:
        self._client = client
        self._fetch: LatestTask[UserDetail] = LatestTask()
        self.user_id: Optional[str] = None
        self.user: Optional[UserDetail] = None

    @property
    def fetch_pending(self) -> bool:
        return self._fetch.pending

    async def load(self, user_id: UserId) -> Optional[UserDetail]:
        requested = str(user_id)
        if requested != self.user_id:
            self.user_id = requested
            self.user = None

        try:
            completed, user = await self._fetch.run(self._client.get_user(requested))
        except UsersAPIError as exc:
            logger.warning("Error fetching user details for %s: %s", requested, exc)
            return self.user

        if not completed:
            return None
        if self.user_id == requested:
            self.user = user
        return user


__all__ = ["LOAD_ERROR_MESSAGE", "Modal", "UserDetailView", "UserListView"]
