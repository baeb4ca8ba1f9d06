"""Affine3 class for 3D placement transforms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation

AFFINE_BOTTOM_ROW = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float32)


def is_affine(matrix: ArrayLike) -> bool:
    """Check the homogeneous invariant of a 4x4 matrix.

    The bottom row must be exactly [0, 0, 0, 1], compared on the raw
    float32 values with no tolerance.
    """
    m = np.asarray(matrix, dtype=np.float32)
    if m.shape != (4, 4):
        return False
    return bool(np.array_equal(m[3], AFFINE_BOTTOM_ROW))


@dataclass(eq=False)
class Affine3:
    """A 4x4 homogeneous transform with no projective component.

    Matrices use the column-vector convention (points are transformed as
    ``M @ [x, y, z, 1]``), right-handed, with -Z pointing forward.
    Values are stored as float32.
    """

    matrix: NDArray[np.float32]

    def __post_init__(self) -> None:
        self.matrix = np.array(self.matrix, dtype=np.float32)
        if self.matrix.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {self.matrix.shape}")

    @classmethod
    def from_matrix_unchecked(cls, matrix: ArrayLike) -> Self:
        """Wrap a matrix that is affine by construction."""
        return cls(np.asarray(matrix, dtype=np.float32))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> Self:
        """Create from a row-major 4x4 nested sequence.

        Raises:
            ValueError: If the matrix is not 4x4 or its bottom row is not
                [0, 0, 0, 1]
        """
        matrix = np.array(rows, dtype=np.float32)
        if matrix.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {matrix.shape}")
        if not is_affine(matrix):
            raise ValueError(f"Transform not affine, bottom row is {matrix[3].tolist()}")
        return cls(matrix)

    @classmethod
    def identity(cls) -> Self:
        """Create an identity transform."""
        return cls(np.eye(4, dtype=np.float32))

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> Self:
        """Create a pure translation."""
        m = np.eye(4, dtype=np.float32)
        m[:3, 3] = (x, y, z)
        return cls(m)

    @classmethod
    def from_trs(
        cls,
        translation: ArrayLike = (0.0, 0.0, 0.0),
        rotation: ArrayLike = (0.0, 0.0, 0.0),
        scale: ArrayLike = (1.0, 1.0, 1.0),
    ) -> Self:
        """Build from translation, XYZ Euler rotation (radians) and scale.

        Order: Scale -> Rotate -> Translate
        """
        s = np.diag([*np.asarray(scale, dtype=np.float64), 1.0])

        r = np.eye(4, dtype=np.float64)
        r[:3, :3] = Rotation.from_euler("xyz", rotation).as_matrix()

        t = np.eye(4, dtype=np.float64)
        t[:3, 3] = translation

        return cls(t @ r @ s)

    @classmethod
    def from_pose(cls, position: ArrayLike, orientation: ArrayLike) -> Self:
        """Build a rigid transform from a position and an (x, y, z, w) quaternion.

        This is the shape tracking runtimes usually report head poses in.
        """
        m = np.eye(4, dtype=np.float64)
        m[:3, :3] = Rotation.from_quat(orientation).as_matrix()
        m[:3, 3] = position
        return cls(m)

    @property
    def position(self) -> NDArray[np.float32]:
        """Translation component."""
        return self.matrix[:3, 3].copy()

    @property
    def rotation_matrix(self) -> NDArray[np.float32]:
        """Upper-left 3x3 linear block."""
        return self.matrix[:3, :3].copy()

    def transform_point(self, point: ArrayLike) -> NDArray[np.float32]:
        """Apply this transform to a 3D point."""
        p = np.append(np.asarray(point, dtype=np.float32), np.float32(1.0))
        return (self.matrix @ p)[:3]

    def is_affine(self) -> bool:
        return is_affine(self.matrix)

    def to_rows(self) -> list[list[float]]:
        """Row-major nested list, the persisted form."""
        return self.matrix.tolist()

    def copy(self) -> Self:
        """Create a deep copy of this transform."""
        return type(self)(self.matrix.copy())

    def __matmul__(self, other: Affine3) -> Affine3:
        """Compose two transforms; ``a @ b`` applies ``b`` first."""
        return Affine3.from_matrix_unchecked(self.matrix @ other.matrix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Affine3):
            return NotImplemented
        return bool(np.array_equal(self.matrix, other.matrix))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Affine3({self.to_rows()!r})"
