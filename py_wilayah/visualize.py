"""
Static rendering of the explorer's current view with matplotlib.

``StaticMapRenderer`` plays both render collaborator roles: it receives
region layers and synthetic points, and it acts as the camera. There is no
animation, so every camera move settles as soon as it is requested.
"""

from pathlib import Path
from typing import Callable, List, Optional

import structlog

from .core.explorer import CameraSettled, MapView, RegionLayer
from .core.geometry import BoundingBox, polygon_parts
from .core.sampler import SCORE_THRESHOLD, SyntheticPoint
from .core.view_sync import Camera

logger = structlog.get_logger()

HIGH_SCORE_COLOR = "#2e7d32"
LOW_SCORE_COLOR = "#c62828"
FOCUS_EDGE_COLOR = "#ffd600"
POINT_COLOR = "#1565c0"


def score_color(score: Optional[int]) -> str:
    """Two-color scale split at the score threshold."""
    if score is not None and score >= SCORE_THRESHOLD:
        return HIGH_SCORE_COLOR
    return LOW_SCORE_COLOR


class StaticMapRenderer(Camera, MapView):
    """
    Render collaborator drawing to PNG files.

    Args:
        on_event: Receives ``CameraSettled`` notifications, normally
            ``RegionExplorer.handle``. Can be bound after construction.
        padding: Fraction of the fitted box added on each side when drawing
    """

    def __init__(self, on_event: Optional[Callable[[object], None]] = None, padding: float = 0.05):
        self.on_event = on_event
        self.padding = padding
        self.extent: Optional[BoundingBox] = None
        self.layer: Optional[RegionLayer] = None
        self.points: List[SyntheticPoint] = []
        self.moves: List[BoundingBox] = []

    def fly_to_bounds(self, box: BoundingBox, request_id: int) -> None:
        self.extent = box
        self.moves.append(box)
        if self.on_event is not None:
            self.on_event(CameraSettled(request_id))

    def show_regions(self, layer: RegionLayer) -> None:
        self.layer = layer

    def show_points(self, points: List[SyntheticPoint]) -> None:
        self.points = list(points)

    def save(self, path, title: Optional[str] = None, dpi: int = 100) -> Path:
        """Draw the current layer, markers and extent to an image file."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        from matplotlib.patches import Polygon as PolygonPatch

        fig, ax = plt.subplots(figsize=(10, 8))
        try:
            focus_key = None
            if self.layer is not None and self.layer.focus is not None:
                focus_key = self.layer.focus.key

            if self.layer is not None:
                for feature, unit in zip(self.layer.features, self.layer.units):
                    props = feature.get("properties") or {}
                    face = score_color(props.get("score"))
                    edge = FOCUS_EDGE_COLOR if unit.key == focus_key else "white"
                    for rings in polygon_parts(feature.get("geometry")):
                        if not rings or len(rings[0]) < 3:
                            continue
                        ax.add_patch(
                            PolygonPatch(
                                [(p[0], p[1]) for p in rings[0]],
                                closed=True,
                                facecolor=face,
                                edgecolor=edge,
                                linewidth=1.0,
                                alpha=0.6,
                            )
                        )

            if self.points:
                ax.scatter(
                    [p.lon for p in self.points],
                    [p.lat for p in self.points],
                    s=12,
                    color=POINT_COLOR,
                    zorder=3,
                )

            if self.extent is not None:
                box = self.extent.padded(self.padding)
                ax.set_xlim(box.min_lon, box.max_lon)
                ax.set_ylim(box.min_lat, box.max_lat)
            ax.set_aspect("equal", adjustable="datalim")
            ax.set_xlabel("Longitude")
            ax.set_ylabel("Latitude")
            if title is None and self.layer is not None:
                names = self.layer.path.names()
                title = " / ".join(names) if names else "Indonesia"
            if title:
                ax.set_title(title)

            output = Path(path)
            fig.savefig(output, dpi=dpi, bbox_inches="tight")
        finally:
            plt.close(fig)

        logger.info("Map image saved", path=str(output))
        return output
