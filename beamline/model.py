# beamline/model.py
"""
Geometry model: Node, Segment and the immutable Beam snapshot.

A beam of N segments has N+1 nodes; segment i spans node i to node i+1.
Records are frozen, edits produce a new Beam (see `Beam.with_segment`,
`Beam.with_node`), so a solve or an optimisation never sees geometry
change underneath it.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

FREE = "free"
PINNED = "pinned"
FIXED = "fixed"
BOUNDARY_CONDITIONS = (FREE, PINNED, FIXED)


class GeometryError(ValueError):
    """Raised when nodes/segments cannot be analysed."""
    pass


@dataclass(frozen=True)
class Node:
    """
    Beam node.

    Parameters:
    -----------
    bc : str
        "free", "pinned" (w = 0, θ free) or "fixed" (w = 0, θ = 0)
    F : float
        Applied vertical force (up positive)
    M : float
        Applied moment (counterclockwise positive)
    Kv, Km : float
        Vertical / rotational spring stiffness to ground, >= 0
    hinge : bool
        Moment release; ignored on fixed nodes and nodes with Km > 0
    w0, th0 : Optional[float]
        Prescribed vertical displacement / rotation
    """
    bc: str = FREE
    F: float = 0.0
    M: float = 0.0
    Kv: float = 0.0
    Km: float = 0.0
    hinge: bool = False
    w0: Optional[float] = None
    th0: Optional[float] = None

    @property
    def hinge_allowed(self) -> bool:
        return not (self.bc == FIXED or self.Km > 0)


@dataclass(frozen=True)
class Segment:
    """
    Prismatic Euler-Bernoulli segment.

    qL/qR are the distributed load intensities at the left/right ends (up
    positive, linear in between). Self-weight wd*A always acts downward.
    St/Sb of None mean that face is not evaluated for stress.
    """
    E: float
    I: float
    L: float
    A: float = 0.0
    St: Optional[float] = None
    Sb: Optional[float] = None
    qL: float = 0.0
    qR: float = 0.0
    wd: float = 0.0
    section_index: Optional[int] = None

    @property
    def self_weight(self) -> float:
        """Downward self-weight intensity as a (negative) line load."""
        return -self.wd * self.A

    @property
    def effective_q(self) -> Tuple[float, float]:
        """End intensities (qL, qR) with self-weight superposed."""
        qw = self.self_weight
        return self.qL + qw, self.qR + qw


DEFAULT_SEGMENT = Segment(E=12e6, I=21.3, L=1.0, A=0.0, St=5.3, Sb=5.3)


def _check_finite(label: str, value: Optional[float]) -> None:
    if value is not None and not math.isfinite(value):
        raise GeometryError(f"{label} must be finite, got {value!r}")


def validate_segment(i: int, seg: Segment) -> None:
    for name in ("E", "I", "L", "A", "qL", "qR", "wd"):
        _check_finite(f"Segment {i} {name}", getattr(seg, name))
    _check_finite(f"Segment {i} St", seg.St)
    _check_finite(f"Segment {i} Sb", seg.Sb)
    if seg.E <= 0:
        raise GeometryError(f"Segment {i} has non-positive E ({seg.E}).")
    if seg.I <= 0:
        raise GeometryError(f"Segment {i} has non-positive I ({seg.I}).")
    if seg.L <= 0:
        raise GeometryError(f"Segment {i} has non-positive length ({seg.L}).")
    if seg.A < 0:
        raise GeometryError(f"Segment {i} has negative area ({seg.A}).")
    if seg.wd < 0:
        raise GeometryError(f"Segment {i} has negative weight density ({seg.wd}).")
    # zero means the face is not evaluated for stress
    for name in ("St", "Sb"):
        S = getattr(seg, name)
        if S is not None and S < 0:
            raise GeometryError(f"Segment {i} has negative section modulus {name} ({S}).")


def validate_node(i: int, node: Node) -> None:
    if node.bc not in BOUNDARY_CONDITIONS:
        raise GeometryError(
            f"Node {i} has unknown boundary condition {node.bc!r}; "
            f"expected one of {BOUNDARY_CONDITIONS}."
        )
    for name in ("F", "M", "Kv", "Km", "w0", "th0"):
        _check_finite(f"Node {i} {name}", getattr(node, name))
    if node.Kv < 0:
        raise GeometryError(f"Node {i} has negative Kv ({node.Kv}).")
    if node.Km < 0:
        raise GeometryError(f"Node {i} has negative Km ({node.Km}).")


def normalize_node(i: int, node: Node) -> Node:
    """Drop a hinge request where a hinge is meaningless."""
    if node.hinge and not node.hinge_allowed:
        logger.info(
            "Node %d: hinge ignored (bc=%s, Km=%g)", i, node.bc, node.Km
        )
        return replace(node, hinge=False)
    return node


@dataclass(frozen=True)
class Beam:
    """
    Validated, immutable beam snapshot.

    Construction checks `len(nodes) == len(segments) + 1` and the segment
    properties, then normalises hinge flags.
    """
    nodes: Tuple[Node, ...]
    segments: Tuple[Segment, ...]
    version: int = field(default=0, compare=False)

    def __post_init__(self):
        nodes = tuple(self.nodes)
        segments = tuple(self.segments)

        if len(segments) < 1:
            raise GeometryError("A beam needs at least one segment.")
        if len(nodes) != len(segments) + 1:
            raise GeometryError(
                f"Expected {len(segments) + 1} nodes for {len(segments)} "
                f"segments, got {len(nodes)}."
            )

        for i, seg in enumerate(segments):
            validate_segment(i, seg)
        for i, node in enumerate(nodes):
            validate_node(i, node)

        object.__setattr__(self, "nodes", tuple(normalize_node(i, n) for i, n in enumerate(nodes)))
        object.__setattr__(self, "segments", segments)

    @property
    def n_segments(self) -> int:
        return len(self.segments)

    @property
    def total_length(self) -> float:
        return float(sum(seg.L for seg in self.segments))

    @property
    def segment_offsets(self) -> List[float]:
        """Global x of the left end of every segment."""
        offsets = []
        x = 0.0
        for seg in self.segments:
            offsets.append(x)
            x += seg.L
        return offsets

    @property
    def hinges(self) -> List[bool]:
        return [node.hinge for node in self.nodes]

    def with_segment(self, index: int, segment: Segment) -> "Beam":
        segments = list(self.segments)
        segments[index] = segment
        return Beam(self.nodes, tuple(segments), self.version + 1)

    def with_segments(self, segments: Iterable[Segment]) -> "Beam":
        return Beam(self.nodes, tuple(segments), self.version + 1)

    def with_node(self, index: int, node: Node) -> "Beam":
        nodes = list(self.nodes)
        nodes[index] = node
        return Beam(tuple(nodes), self.segments, self.version + 1)


def build_beam(
    n_segments: int,
    total_length: float,
    template: Optional[Segment] = None
) -> Beam:
    """
    Build a beam of evenly spaced, identical segments with default nodes.

    Parameters:
    -----------
    n_segments : int
        Number of segments, >= 1
    total_length : float
        Total beam length, > 0
    template : Segment, optional
        Segment properties to copy (its length is replaced)

    Returns:
    --------
    Beam
        n_segments segments and n_segments + 1 free, unloaded nodes
    """
    if not isinstance(n_segments, int) or n_segments < 1:
        raise GeometryError(f"Number of segments must be an integer >= 1, got {n_segments!r}.")
    if not math.isfinite(total_length) or total_length <= 0:
        raise GeometryError(f"Total length must be > 0, got {total_length!r}.")

    seed = template if template is not None else DEFAULT_SEGMENT
    seg_len = total_length / n_segments
    segments = tuple(replace(seed, L=seg_len) for _ in range(n_segments))
    nodes = tuple(Node() for _ in range(n_segments + 1))
    return Beam(nodes, segments)


def make_beam(nodes: Sequence[Node], segments: Sequence[Segment]) -> Beam:
    """Wrap plain node/segment sequences from an editor into a Beam."""
    return Beam(tuple(nodes), tuple(segments))
