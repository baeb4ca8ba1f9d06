"""Resolve where the overlay is drawn each frame."""

from __future__ import annotations

import logging
import threading

from ..config.schema import OverlayConfig
from ..core.transform import Affine3

logger = logging.getLogger(__name__)


class AnchorResolver:
    """Owns access to an overlay's anchor for the render and input loops.

    ``placement`` is called once per rendered frame and ``reposition`` once
    per user reposition action. Both hold the same lock, so input handling
    may run on a different thread from the render loop.

    Example:
        resolver = AnchorResolver(config.overlay)
        # render loop
        overlay.set_transform(resolver.placement(head_pose))
        # reposition button released
        resolver.reposition(head_pose)
    """

    def __init__(self, overlay: OverlayConfig) -> None:
        self._overlay = overlay
        self._lock = threading.Lock()

    @property
    def mode(self) -> str:
        """Tag of the active anchor kind."""
        return self._overlay.position.MODE

    def placement(self, head_pose: Affine3) -> Affine3:
        """Compute the overlay transform for the current head pose."""
        with self._lock:
            return self._overlay.position.placement(head_pose)

    def reposition(self, head_pose: Affine3) -> bool:
        """Re-anchor the overlay to the current head pose.

        Only sticky anchors move; head-locked anchors follow the head anyway
        and absolute anchors are authored in the document.

        Returns:
            True if the stored anchor changed
        """
        with self._lock:
            moved = self._overlay.position.reposition(head_pose)
            placed = self._overlay.position.placement(head_pose)
        if moved:
            logger.debug("Overlay repositioned to %s", placed.position.tolist())
        else:
            logger.debug("Reposition ignored for %r anchor", self.mode)
        return moved
