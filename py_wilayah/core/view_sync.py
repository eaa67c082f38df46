"""Camera-fit sequencing."""

from typing import Callable, Optional

import structlog

from .geometry import BoundingBox

logger = structlog.get_logger()


class Camera:
    """
    Render collaborator side of a camera move.

    Implementations start an animated move to ``box`` and later report
    completion by passing ``request_id`` back to
    ``ViewSynchronizer.camera_settled``. Reporting may happen synchronously
    from inside ``fly_to_bounds``.
    """

    def fly_to_bounds(self, box: BoundingBox, request_id: int) -> None:
        raise NotImplementedError


class ViewSynchronizer:
    """
    Runs camera fits one at a time and calls back when they settle.

    The last request wins: a request issued while another is in flight
    replaces it, and the replaced request's callback is dropped without
    being called. Every surviving callback fires exactly once.
    """

    def __init__(self, camera: Camera, initial_box: Optional[BoundingBox] = None):
        self.camera = camera
        self.current_box = initial_box
        self._next_id = 0
        self._pending_id: Optional[int] = None
        self._pending_box: Optional[BoundingBox] = None
        self._pending_callback: Optional[Callable[[], None]] = None

    @property
    def in_flight(self) -> bool:
        return self._pending_id is not None

    def request_fit(self, box: BoundingBox, on_settled: Callable[[], None]) -> int:
        """
        Start a camera move to ``box``.

        Returns:
            The request id. When ``box`` matches the current extent and no
            move is in flight, ``on_settled`` runs before this returns and
            the camera is not touched.
        """
        self._next_id += 1
        request_id = self._next_id

        if not self.in_flight and box.is_close(self.current_box):
            logger.debug("Camera already at extent, settling immediately", request_id=request_id)
            on_settled()
            return request_id

        if self.in_flight:
            logger.debug(
                "Camera fit superseded",
                superseded_id=self._pending_id,
                request_id=request_id,
            )

        # Pending state is set before the camera call so a synchronous settle finds it
        self._pending_id = request_id
        self._pending_box = box
        self._pending_callback = on_settled
        self.camera.fly_to_bounds(box, request_id)
        return request_id

    def camera_settled(self, request_id: int) -> bool:
        """
        Handle a camera "move finished" notification.

        Returns:
            True if it completed the newest request, False if it was stale.
        """
        if request_id != self._pending_id:
            logger.debug("Ignoring stale camera settle", request_id=request_id, pending_id=self._pending_id)
            return False

        callback = self._pending_callback
        self.current_box = self._pending_box
        self._pending_id = None
        self._pending_box = None
        self._pending_callback = None
        if callback is not None:
            callback()
        return True
