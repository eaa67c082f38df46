"""
Drill-down exploration of province, regency and district boundaries.
"""

from .core import (
    AdministrativeUnit,
    BoundingBox,
    Level,
    NavigationStateMachine,
    RegionExplorer,
    SelectionPath,
    ViewSynchronizer,
    bounding_box,
    dissolve_by_key,
    dummy_score,
    generate_points_inside,
    normalize_name,
    point_in_polygon,
)

__version__ = "0.1.0"

__all__ = ['AdministrativeUnit', 'BoundingBox', 'Level', 'NavigationStateMachine',
           'RegionExplorer', 'SelectionPath', 'ViewSynchronizer', 'bounding_box',
           'dissolve_by_key', 'dummy_score', 'generate_points_inside', 'normalize_name',
           'point_in_polygon']
