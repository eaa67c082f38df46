"""
Administrative units and the name-based joins between levels.

Province, regency and district boundaries come from independently produced
datasets that share no stable identifier. Provinces carry ``prov_id``,
regencies carry ``prov_id`` plus their own name, and districts only name
their parent regency. Units are joined by normalized name through
``UnitIndex``, never by object references.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from .geometry import Geometry, dissolve_by_key, normalize_name

logger = structlog.get_logger()


class Level(IntEnum):
    """Hierarchy depth of an administrative unit."""

    PROVINCE = 1
    REGENCY = 2
    DISTRICT = 3


@dataclass(frozen=True)
class AdministrativeUnit:
    """One region at a given level, built fresh from a parsed feature."""

    level: Level
    name: str
    geometry: Geometry
    id: Optional[str] = None
    parent_key: Optional[str] = None
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    def to_feature(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": self.geometry.to_geojson(),
        }


def _props(feature: Mapping[str, Any]) -> Mapping[str, Any]:
    return feature.get("properties") or {}


def _text(value) -> str:
    return "" if value is None else str(value)


def province_from_feature(feature: Mapping[str, Any]) -> AdministrativeUnit:
    props = _props(feature)
    prov_id = _text(props.get("prov_id")) or None
    return AdministrativeUnit(
        level=Level.PROVINCE,
        name=_text(props.get("prov_name") or props.get("name")),
        geometry=Geometry.from_geojson(feature.get("geometry")),
        id=prov_id,
        properties=dict(props),
    )


def regency_from_feature(
    feature: Mapping[str, Any], province: Optional[AdministrativeUnit] = None
) -> AdministrativeUnit:
    """
    Build a regency unit.

    The regency dataset only names its province by ``prov_id``, so the
    parent key is taken from the province the feature was filtered under.
    """
    props = _props(feature)
    return AdministrativeUnit(
        level=Level.REGENCY,
        name=_text(props.get("name")),
        geometry=Geometry.from_geojson(feature.get("geometry")),
        parent_key=province.key if province is not None else None,
        properties=dict(props),
    )


def district_from_feature(feature: Mapping[str, Any]) -> AdministrativeUnit:
    props = _props(feature)
    return AdministrativeUnit(
        level=Level.DISTRICT,
        name=district_name(feature),
        geometry=Geometry.from_geojson(feature.get("geometry")),
        parent_key=normalize_name(regency_of(feature)),
        properties=dict(props),
    )


def unit_from_feature(
    level: Level,
    feature: Mapping[str, Any],
    parent: Optional[AdministrativeUnit] = None,
) -> AdministrativeUnit:
    if level == Level.PROVINCE:
        return province_from_feature(feature)
    if level == Level.REGENCY:
        return regency_from_feature(feature, parent)
    return district_from_feature(feature)


def district_name(feature: Mapping[str, Any]) -> str:
    props = _props(feature)
    return _text(props.get("district") or props.get("name")).strip()


def regency_of(feature: Mapping[str, Any]) -> str:
    props = _props(feature)
    return _text(props.get("regency") or props.get("kabupaten"))


def filter_regencies(features: Iterable[Mapping[str, Any]], prov_id) -> List[Mapping[str, Any]]:
    """Keep regency features whose ``prov_id`` matches, compared as strings."""
    target = _text(prov_id)
    return [f for f in features if _text(_props(f).get("prov_id")) == target]


def filter_districts(
    features: Iterable[Mapping[str, Any]], regency_name: str
) -> List[Mapping[str, Any]]:
    """Keep district features whose parent regency normalizes to ``regency_name``."""
    target = normalize_name(regency_name)
    return [f for f in features if normalize_name(regency_of(f)) == target]


def dissolve_districts(features: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """One MultiPolygon feature per district name."""
    return dissolve_by_key(features, district_name, key_field="district")


def region_name(level: Level, feature: Mapping[str, Any]) -> str:
    """Display name of a feature at the given level."""
    props = _props(feature)
    if level == Level.PROVINCE:
        return _text(props.get("prov_name") or props.get("name"))
    if level == Level.DISTRICT:
        return district_name(feature)
    return _text(props.get("name"))


class UnitIndex:
    """
    Immutable lookup table from canonical name to unit.

    Later units with an already-seen key do not replace the first one.
    """

    def __init__(self, units: Iterable[AdministrativeUnit]):
        by_key: Dict[str, AdministrativeUnit] = {}
        for unit in units:
            if unit.key in by_key:
                logger.debug("Duplicate unit key ignored", key=unit.key, level=unit.level.name)
                continue
            by_key[unit.key] = unit
        self._by_key = by_key

    def get(self, name: str) -> Optional[AdministrativeUnit]:
        return self._by_key.get(normalize_name(name))

    def __contains__(self, name) -> bool:
        return normalize_name(name) in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)
