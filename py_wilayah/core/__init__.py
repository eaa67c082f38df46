"""
Core geometry, sampling and navigation functionality.
"""

from .geometry import BoundingBox, Geometry, bounding_box, centroid, dissolve_by_key, normalize_name, point_in_polygon
from .xorshift_prng import XorShiftPRNG, hash32
from .sampler import SyntheticPoint, dummy_score, generate_points_inside
from .units import AdministrativeUnit, Level, UnitIndex
from .navigation import InvalidTransitionError, NavigationStateMachine, NavState, SelectionPath
from .view_sync import ViewSynchronizer
from .explorer import RegionExplorer, RegionLayer

__all__ = ['BoundingBox', 'Geometry', 'bounding_box', 'centroid', 'dissolve_by_key',
           'normalize_name', 'point_in_polygon', 'XorShiftPRNG', 'hash32',
           'SyntheticPoint', 'dummy_score', 'generate_points_inside',
           'AdministrativeUnit', 'Level', 'UnitIndex',
           'InvalidTransitionError', 'NavigationStateMachine', 'NavState', 'SelectionPath',
           'ViewSynchronizer', 'RegionExplorer', 'RegionLayer']
