"""
Region explorer: clicks, camera fits, transitions and level fetches.

Every navigation follows the same order:
1. The target extent is computed and a camera fit is requested
2. When the fit settles, the navigation state machine transitions
3. The new level's boundary file is fetched, tagged with the new path
4. On completion the result is dropped if the path has changed since;
   otherwise it is filtered, dissolved, scored and handed to the view

So a level's shapes are never requested while the camera is still flying
over the previous extent, and a slow fetch can never paint a stale level.
Clicks are accepted only on the layer built for the current path.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from ..data.sources import BoundaryUrls, Fetcher, FetchResult
from .geometry import INDONESIA_BOUNDS, BoundingBox, bounding_box
from .navigation import Back, NavigationStateMachine, NavState, Reset, Select, SelectionPath
from .sampler import (
    DEFAULT_COUNT_RANGE,
    SyntheticPoint,
    dummy_score,
    generate_points_inside,
    score_band,
    score_key,
)
from .units import (
    AdministrativeUnit,
    Level,
    UnitIndex,
    dissolve_districts,
    filter_districts,
    filter_regencies,
    region_name,
    unit_from_feature,
)
from .view_sync import Camera, ViewSynchronizer

logger = structlog.get_logger()


# Widget events
@dataclass(frozen=True)
class RegionClicked:
    feature: Mapping[str, Any]


@dataclass(frozen=True)
class CameraSettled:
    request_id: int


@dataclass(frozen=True)
class BackRequested:
    pass


@dataclass(frozen=True)
class ResetRequested:
    pass


@dataclass(frozen=True)
class RegionLayer:
    """Regions to display for one selection path, with their scores."""

    level: Level
    features: List[Dict[str, Any]]
    path: SelectionPath
    units: List[AdministrativeUnit] = field(default_factory=list)

    @property
    def focus(self) -> Optional[AdministrativeUnit]:
        return self.path.focus

    @property
    def index(self) -> UnitIndex:
        return UnitIndex(self.units)

    def __len__(self) -> int:
        return len(self.features)


class MapView:
    """Render collaborator side of region and marker display."""

    def show_regions(self, layer: RegionLayer) -> None:
        raise NotImplementedError

    def show_points(self, points: List[SyntheticPoint]) -> None:
        raise NotImplementedError


def displayed_level(path: SelectionPath) -> Level:
    """Level whose regions are on screen for ``path``."""
    return Level(min(path.depth + 1, Level.DISTRICT))


def point_seed(path: SelectionPath) -> str:
    return "/".join(unit.key for unit in path.units)


def scored(level: Level, features: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copy features with ``score_key``, ``score`` and ``score_band`` properties."""
    result = []
    for feature in features:
        key = score_key(level, region_name(level, feature))
        score = dummy_score(key)
        properties = dict(feature.get("properties") or {})
        properties.update(score_key=key, score=score, score_band=score_band(score))
        result.append({**feature, "properties": properties})
    return result


def prepare_level(path: SelectionPath, features: List[Dict[str, Any]]) -> RegionLayer:
    """
    Turn a fetched collection into the layer shown for ``path``.

    Regencies are filtered by the province code, districts by normalized
    regency name and then dissolved to one MultiPolygon per name. A parent
    that matches nothing yields an empty layer.
    """
    level = displayed_level(path)
    if level == Level.REGENCY:
        features = filter_regencies(features, path.province.id)
    elif level == Level.DISTRICT:
        features = dissolve_districts(filter_districts(features, path.regency.name))

    parent = path.province if level == Level.REGENCY else None
    units = [unit_from_feature(level, f, parent) for f in features]
    return RegionLayer(level=level, features=scored(level, features), path=path, units=units)


class RegionExplorer:
    """
    Drives the province -> regency -> district drill-down.

    Args:
        camera: Camera collaborator; its settle notifications must come back
            through ``handle(CameraSettled(request_id))``
        view: MapView receiving region layers and synthetic points
        fetcher: Fetch collaborator for boundary files
        urls: Boundary file locations
        home_box: Extent shown at root
        count_range: Synthetic point count bounds for the focused district
    """

    def __init__(
        self,
        camera: Camera,
        view: MapView,
        fetcher: Fetcher,
        urls: BoundaryUrls,
        home_box: BoundingBox = INDONESIA_BOUNDS,
        count_range: Tuple[int, int] = DEFAULT_COUNT_RANGE,
        machine: Optional[NavigationStateMachine] = None,
    ):
        self.view = view
        self.fetcher = fetcher
        self.urls = urls
        self.home_box = home_box
        self.count_range = count_range
        self.machine = machine or NavigationStateMachine()
        self.sync = ViewSynchronizer(camera)
        self.layer: Optional[RegionLayer] = None
        self.discarded_fetches = 0

    @property
    def path(self) -> SelectionPath:
        return self.machine.path

    @property
    def state(self) -> NavState:
        return self.machine.state

    def start(self) -> None:
        """Frame the home extent, then load the provinces."""
        self.sync.request_fit(self.home_box, lambda: self._load_level(self.path))

    def handle(self, event) -> None:
        if isinstance(event, RegionClicked):
            self.click(event.feature)
        elif isinstance(event, CameraSettled):
            self.sync.camera_settled(event.request_id)
        elif isinstance(event, BackRequested):
            self.back()
        elif isinstance(event, ResetRequested):
            self.reset()
        else:
            raise TypeError(f"Unsupported explorer event: {event!r}")

    def click(self, feature: Mapping[str, Any]) -> bool:
        """
        React to a click on a displayed region.

        Returns:
            False when the click was ignored: the layer on screen does not
            belong to the current path yet, or the feature has no usable
            geometry.
        """
        issued = self.path
        if self.layer is None or self.layer.path != issued:
            logger.info("Click on a layer not matching the selection, ignored", depth=issued.depth)
            return False

        level = displayed_level(issued)
        unit = unit_from_feature(level, feature, issued.province)
        box = bounding_box(unit.geometry)
        if box is None:
            logger.warning("Clicked region has no extent", level=level.name, name=unit.name)
            return False

        logger.info("Region clicked", level=level.name, name=unit.name)
        self.sync.request_fit(box, lambda: self._on_select_settled(issued, unit))
        return True

    def click_name(self, name: str) -> bool:
        """Select a region of the current layer by (any style of) its name."""
        if self.layer is None:
            return False
        unit = self.layer.index.get(name)
        if unit is None:
            logger.info("No region with that name in current layer", name=name)
            return False
        return self.click(unit.to_feature())

    def back(self) -> bool:
        """Fly to the parent extent, then pop one level."""
        issued = self.path
        if issued.depth == 0:
            return False
        target = issued.popped()
        box = self._extent_of(target)
        self.sync.request_fit(box, lambda: self._on_back_settled(issued))
        return True

    def reset(self) -> None:
        """Fly home, then return to root from any depth."""
        issued = self.path
        self.sync.request_fit(self.home_box, lambda: self._on_reset_settled(issued))

    def _extent_of(self, path: SelectionPath) -> BoundingBox:
        if path.leaf is None:
            return self.home_box
        return bounding_box(path.leaf.geometry) or self.home_box

    def _on_select_settled(self, issued: SelectionPath, unit: AdministrativeUnit) -> None:
        if self.path != issued:
            logger.info("Selection path changed during camera move, click dropped", name=unit.name)
            return
        if self.state == NavState.DISTRICT_SELECTED:
            # Refocus a sibling district
            self.machine.dispatch(Back())
        self.machine.dispatch(Select(unit))
        self._load_level(self.path)

    def _on_back_settled(self, issued: SelectionPath) -> None:
        if self.path != issued:
            return
        self.machine.back()
        self._load_level(self.path)

    def _on_reset_settled(self, issued: SelectionPath) -> None:
        if self.path != issued or issued.depth == 0:
            return
        self.machine.dispatch(Reset())
        self._load_level(self.path)

    def _level_url(self, path: SelectionPath) -> Optional[str]:
        level = displayed_level(path)
        if level == Level.PROVINCE:
            return self.urls.provinces()
        if level == Level.REGENCY:
            return self.urls.regencies()
        return self.urls.districts(path.province.id)

    def _load_level(self, path: SelectionPath) -> None:
        url = self._level_url(path)
        if url is None:
            logger.warning("No boundary file for province", prov_id=path.province.id)
            self._on_fetched(path, FetchResult.failure("", "No boundary file for this region"))
            return
        logger.debug("Fetching level", url=url, depth=path.depth)
        self.fetcher.fetch(url, lambda result: self._on_fetched(path, result))

    def _on_fetched(self, issued: SelectionPath, result: FetchResult) -> None:
        if self.path != issued:
            self.discarded_fetches += 1
            logger.info("Discarding fetch for stale selection", url=result.url)
            return
        if not result.ok:
            logger.warning("Level unavailable, showing empty layer", url=result.url, error=result.error)

        layer = prepare_level(issued, result.features)
        self.layer = layer
        logger.info("Showing regions", level=layer.level.name, count=len(layer))
        self.view.show_regions(layer)

        focus = issued.focus
        if focus is None:
            self.view.show_points([])
            return
        points = generate_points_inside(
            focus.geometry, point_seed(issued), desired_count_range=self.count_range
        )
        self.view.show_points(points)
