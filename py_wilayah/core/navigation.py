"""
Drill-down navigation state.

The selection path is a strict linear chain Root -> Province -> Regency ->
District. Transitions are driven by explicit event values through the pure
``transition`` function; ``NavigationStateMachine`` owns the current path,
replaces it on every dispatch and notifies subscribers. It knows nothing
about the map widget or its callbacks.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, List, Optional, Tuple

import structlog

from .units import AdministrativeUnit, Level

logger = structlog.get_logger()


class InvalidTransitionError(ValueError):
    """Raised when an event is not valid in the current state."""


class NavState(IntEnum):
    """Depth of the selection path."""

    ROOT = 0
    PROVINCE_SELECTED = 1
    REGENCY_SELECTED = 2
    DISTRICT_SELECTED = 3


@dataclass(frozen=True)
class SelectionPath:
    """Ordered selection of at most one unit per level. Never mutated."""

    units: Tuple[AdministrativeUnit, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.units)

    @property
    def state(self) -> NavState:
        return NavState(self.depth)

    def _at(self, level: Level) -> Optional[AdministrativeUnit]:
        return self.units[level - 1] if self.depth >= level else None

    @property
    def province(self) -> Optional[AdministrativeUnit]:
        return self._at(Level.PROVINCE)

    @property
    def regency(self) -> Optional[AdministrativeUnit]:
        return self._at(Level.REGENCY)

    @property
    def district(self) -> Optional[AdministrativeUnit]:
        return self._at(Level.DISTRICT)

    @property
    def focus(self) -> Optional[AdministrativeUnit]:
        """The district active for synthetic point generation, if any."""
        return self.district

    @property
    def leaf(self) -> Optional[AdministrativeUnit]:
        return self.units[-1] if self.units else None

    def select(self, unit: AdministrativeUnit) -> "SelectionPath":
        """
        Return a path ending in ``unit``, discarding anything at its level
        or deeper. The levels above it must already be selected.
        """
        level = int(unit.level)
        if self.depth < level - 1:
            raise InvalidTransitionError(
                f"Cannot select {unit.level.name} at depth {self.depth}"
            )
        return SelectionPath(self.units[: level - 1] + (unit,))

    def popped(self) -> "SelectionPath":
        if not self.units:
            raise InvalidTransitionError("Already at root")
        return SelectionPath(self.units[:-1])

    def names(self) -> List[str]:
        return [unit.name for unit in self.units]


ROOT = SelectionPath()


@dataclass(frozen=True)
class Select:
    unit: AdministrativeUnit


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Reset:
    pass


# Level each state accepts as its next selection
_NEXT_LEVEL = {
    NavState.ROOT: Level.PROVINCE,
    NavState.PROVINCE_SELECTED: Level.REGENCY,
    NavState.REGENCY_SELECTED: Level.DISTRICT,
}


def transition(path: SelectionPath, event) -> SelectionPath:
    """
    Compute the path that follows ``event``.

    ``Select`` must carry a unit exactly one level below the current depth.
    ``Back`` pops one level. ``Reset`` returns to root from any depth.
    """
    if isinstance(event, Select):
        expected = _NEXT_LEVEL.get(path.state)
        if expected is None or event.unit.level != expected:
            raise InvalidTransitionError(
                f"Cannot select {event.unit.level.name} from {path.state.name}"
            )
        return path.select(event.unit)
    if isinstance(event, Back):
        return path.popped()
    if isinstance(event, Reset):
        return ROOT
    raise InvalidTransitionError(f"Unknown navigation event: {event!r}")


Listener = Callable[[SelectionPath, SelectionPath], None]


class NavigationStateMachine:
    """Owns the selection path; the only long-lived mutable state of the core."""

    def __init__(self, path: SelectionPath = ROOT):
        self.path = path
        self._listeners: List[Listener] = []

    @property
    def state(self) -> NavState:
        return self.path.state

    def subscribe(self, listener: Listener) -> None:
        """Register ``listener(old_path, new_path)`` called after each transition."""
        self._listeners.append(listener)

    def dispatch(self, event) -> SelectionPath:
        old = self.path
        new = transition(old, event)
        self.path = new
        logger.info(
            "Navigation transition",
            trigger=type(event).__name__,
            from_state=old.state.name,
            to_state=new.state.name,
            path=new.names(),
        )
        for listener in list(self._listeners):
            listener(old, new)
        return new

    def select_province(self, unit: AdministrativeUnit) -> SelectionPath:
        return self._select(unit, NavState.ROOT)

    def select_regency(self, unit: AdministrativeUnit) -> SelectionPath:
        # Callers pass regencies already filtered to path[0]; parent_key is not checked here
        return self._select(unit, NavState.PROVINCE_SELECTED)

    def select_district(self, unit: AdministrativeUnit) -> SelectionPath:
        return self._select(unit, NavState.REGENCY_SELECTED)

    def back(self) -> SelectionPath:
        return self.dispatch(Back())

    def reset(self) -> SelectionPath:
        return self.dispatch(Reset())

    def _select(self, unit: AdministrativeUnit, required: NavState) -> SelectionPath:
        if self.state != required:
            raise InvalidTransitionError(
                f"Cannot select {unit.level.name} from {self.state.name}"
            )
        return self.dispatch(Select(unit))
