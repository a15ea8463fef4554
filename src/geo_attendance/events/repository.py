from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    """Event lookup collaborator.

    Event CRUD lives elsewhere; attendance and proximity only read through this interface.
    """

    def get_event(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list_upcoming(self, cap: int) -> Sequence[Event]:
        """Events ordered by start time, at most `cap` of them."""

        raise NotImplementedError
