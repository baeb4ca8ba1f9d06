"""Configuration entities for the passthrough overlay.

The overlay position and the display mode are closed unions: each variant is
its own dataclass carrying a ``MODE`` tag that matches the ``mode`` key of the
persisted document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import ClassVar, TypeAlias

from ..core.transform import Affine3
from .backends import Backend

DEFAULT_OVERLAY_DISTANCE = 1.0
U32_MAX = 2**32 - 1


def _forward(head_pose: Affine3, distance: float) -> Affine3:
    """Point ``distance`` units straight ahead (-Z) of a head pose."""
    return head_pose @ Affine3.translation(0.0, 0.0, -distance)


class ProjectionMode(Enum):
    """How the camera image is projected onto the overlay.

    The eyes and the cameras sit at different physical locations, so the
    projection can only be approximated. Things too close to you will
    show double vision in either mode.
    """

    # Assume your eyes are where the cameras are. Larger viewing range, but
    # everything looks smaller.
    FROM_CAMERA = "from_camera"
    # Assume the cameras are where your eyes are. Correct scale, smaller
    # viewing range.
    FROM_EYE = "from_eye"


class Eye(Enum):
    LEFT = "left"
    RIGHT = "right"


class Button(Enum):
    """Backend-neutral controller button."""

    MENU = "menu"
    GRIP = "grip"
    TRIGGER = "trigger"
    A = "a"
    B = "b"


@dataclass
class HeadLocked:
    """The overlay is shown right in front of the HMD and follows it.

    Attributes:
        distance: How far in front of the head the overlay sits
    """

    MODE: ClassVar[str] = "hmd"

    distance: float = DEFAULT_OVERLAY_DISTANCE

    def placement(self, head_pose: Affine3) -> Affine3:
        return _forward(head_pose, self.distance)

    def reposition(self, head_pose: Affine3) -> bool:
        return False


@dataclass
class Sticky:
    """The overlay stays at a fixed place in world space until repositioned.

    Attributes:
        distance: How far from your face the overlay is placed when
            repositioning
        transform: Where the overlay currently sits. Runtime state only, it
            is never read from or written to the document.
    """

    MODE: ClassVar[str] = "sticky"

    distance: float = DEFAULT_OVERLAY_DISTANCE
    transform: Affine3 | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.transform is None:
            self.transform = _forward(Affine3.identity(), self.distance)

    def placement(self, head_pose: Affine3) -> Affine3:
        return self.transform.copy()

    def reposition(self, head_pose: Affine3) -> bool:
        """Snapshot the current head-relative position into world space."""
        self.transform = _forward(head_pose, self.distance)
        return True


@dataclass
class Absolute:
    """The overlay is at a fixed, hand-authored location in space.

    Attributes:
        transform: Placement of the overlay, persisted verbatim
    """

    MODE: ClassVar[str] = "absolute"

    transform: Affine3

    def placement(self, head_pose: Affine3) -> Affine3:
        return self.transform.copy()

    def reposition(self, head_pose: Affine3) -> bool:
        return False


PositionMode: TypeAlias = HeadLocked | Sticky | Absolute

POSITION_MODES: dict[str, type[PositionMode]] = {
    cls.MODE: cls for cls in (HeadLocked, Sticky, Absolute)
}


@dataclass(frozen=True)
class Direct:
    """Show both camera images on the overlay as they come."""

    MODE: ClassVar[str] = "direct"

    @property
    def is_stereo(self) -> bool:
        return True

    @property
    def projection_mode(self) -> ProjectionMode | None:
        return None


@dataclass(frozen=True)
class Stereo:
    """Show a stereo image, turning the overlay into a portal to the real world.

    You see more of the real world the more of your field of view the
    overlay occupies.
    """

    MODE: ClassVar[str] = "stereo"

    projection_mode: ProjectionMode = ProjectionMode.FROM_CAMERA

    @property
    def is_stereo(self) -> bool:
        return True


@dataclass(frozen=True)
class Flat:
    """Show a single camera's image."""

    MODE: ClassVar[str] = "flat"

    eye: Eye = Eye.LEFT

    @property
    def is_stereo(self) -> bool:
        return False

    @property
    def projection_mode(self) -> ProjectionMode | None:
        return None


DisplayMode: TypeAlias = Direct | Stereo | Flat

DISPLAY_MODES: dict[str, type[DisplayMode]] = {
    cls.MODE: cls for cls in (Direct, Stereo, Flat)
}


@dataclass
class OverlayConfig:
    position: PositionMode = field(default_factory=HeadLocked)


@dataclass
class Config:
    """Index camera passthrough configuration.

    Attributes:
        backend: VR backend to use
        camera_device: Camera device to use, auto detected when empty
        overlay: Overlay related configuration
        display_mode: How the camera view is displayed on the overlay
        toggle_button: Button that toggles the overlay when pressed on both
            controllers
        open_delay: How long the button must be held before the overlay
            opens. Closing is always instantaneous.
        z_order: Higher values are drawn on top of other overlays. Not
            supported on every backend.
        debug: Enable debug options, e.g. trigger-button captures
    """

    backend: Backend
    camera_device: str = ""
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    display_mode: DisplayMode = field(default_factory=Direct)
    toggle_button: Button = Button.MENU
    open_delay: timedelta = field(default_factory=timedelta)
    z_order: int = U32_MAX
    debug: bool = False
