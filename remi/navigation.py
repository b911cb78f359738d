from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from remi.models import AppState


class Screen(str, Enum):
    HOME = "home"
    NEW_MATCH = "new"
    ACTIVE_MATCH = "active"
    HISTORY = "history"
    MATCH_DETAILS = "details"
    STATISTICS = "stats"


@dataclass(frozen=True)
class Route:
    screen: Screen
    match_id: Optional[int] = None

    def __post_init__(self):
        if self.screen == Screen.MATCH_DETAILS and self.match_id is None:
            raise ValueError("MATCH_DETAILS route requires match_id")


HOME = Route(Screen.HOME)


class Navigator:
    """
    Back stack over named screens, independent of any UI toolkit.

    The stack is never empty: HOME is always at the bottom.
    """

    def __init__(self):
        self._stack: List[Route] = [HOME]

    @property
    def current(self) -> Route:
        return self._stack[-1]

    @property
    def stack(self) -> List[Route]:
        return list(self._stack)

    def navigate(self, route: Route) -> Route:
        if route == HOME:
            self._stack = [HOME]
        else:
            self._stack.append(route)
        return self.current

    def back(self) -> Route:
        if len(self._stack) > 1:
            self._stack.pop()
        return self.current

    def match_started(self) -> Route:
        # New-match form is dropped so back goes home
        self._stack = [HOME, Route(Screen.ACTIVE_MATCH)]
        return self.current

    def match_finished(self) -> Route:
        self._stack = [HOME]
        return self.current

    def resolve(self, state: AppState) -> Route:
        """
        Route to actually show for the given state.

        Screens whose data is gone are replaced silently:
        ACTIVE_MATCH without an active match goes HOME,
        MATCH_DETAILS for a deleted match goes back to HISTORY.
        """
        route = self.current

        if route.screen == Screen.ACTIVE_MATCH and state.active_match is None:
            return self.match_finished()

        if route.screen == Screen.MATCH_DETAILS:
            if not any(m.id == route.match_id for m in state.history):
                self._stack.pop()
                if self.current.screen != Screen.HISTORY:
                    self._stack.append(Route(Screen.HISTORY))
                return self.current

        return route
