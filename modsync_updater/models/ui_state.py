"""Per-player UI state (page, status message, pending operation)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto


class StatusType(Enum):
    INFO = auto()
    SUCCESS = auto()
    WARNING = auto()
    ERROR = auto()


class PageType(Enum):
    MAIN = auto()
    ADD_MOD = auto()
    MOD_DETAIL = auto()
    SCAN = auto()
    CONFIG = auto()


@dataclass
class UIState:
    """UI bookkeeping for one player.

    Only one pending operation is tracked; replacing it cancels the old
    one. Cancelling a pending upgrade check only abandons this player's
    interest, the shared release request keeps running.
    """

    current_page: PageType = PageType.MAIN
    selected_mod: str | None = None
    loading: bool = False
    status_message: str | None = None
    status_type: StatusType | None = None
    pending_operation: asyncio.Future | None = None

    def start_loading(self) -> None:
        self.loading = True
        self.clear_status()

    def stop_loading(self) -> None:
        self.loading = False

    def set_status(self, message: str, status_type: StatusType) -> None:
        self.status_message = message
        self.status_type = status_type

    def clear_status(self) -> None:
        self.status_message = None
        self.status_type = None

    def set_pending_operation(self, operation: asyncio.Future | None) -> None:
        if operation is not self.pending_operation:
            self._cancel_pending()
        self.pending_operation = operation

    def cancel_pending_operation(self) -> None:
        self._cancel_pending()
        self.pending_operation = None

    def _cancel_pending(self) -> None:
        if self.pending_operation is not None and not self.pending_operation.done():
            self.pending_operation.cancel()

    def reset(self) -> None:
        self.current_page = PageType.MAIN
        self.selected_mod = None
        self.loading = False
        self.clear_status()
        self.cancel_pending_operation()
