"""Handle-based lookup for back-navigation between views."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, NewType

if TYPE_CHECKING:
    from commander.views.base import View

logger = logging.getLogger(__name__)

ViewHandle = NewType("ViewHandle", int)


class Navigator:
    """Registry of views reachable from the active view.

    Views refer to their parent by handle instead of holding it directly,
    so a child never keeps a retired parent alive. ``activate`` drops every
    view that is neither the active one nor one of its ancestors.
    """

    def __init__(self) -> None:
        self._views: dict[ViewHandle, View] = {}
        self._ids = itertools.count(1)
        self.active: ViewHandle | None = None

    def register(self, view: View) -> ViewHandle:
        handle = ViewHandle(next(self._ids))
        self._views[handle] = view
        return handle

    def resolve(self, handle: ViewHandle | None) -> View | None:
        if handle is None:
            return None
        return self._views.get(handle)

    def activate(self, view: View) -> None:
        keep: set[ViewHandle] = set()
        current: View | None = view
        while current is not None and current.handle not in keep:
            keep.add(current.handle)
            current = self.resolve(current.parent)

        dropped = [h for h in self._views if h not in keep]
        for handle in dropped:
            del self._views[handle]
        if dropped:
            logger.debug("Dropped %d unreachable view(s)", len(dropped))

        self._views.setdefault(view.handle, view)
        self.active = view.handle

    def __contains__(self, view: object) -> bool:
        return any(v is view for v in self._views.values())

    def __len__(self) -> int:
        return len(self._views)
