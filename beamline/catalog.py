"""
CATALOG: SECTIONS AND MATERIALS
===============================

PURPOSE:
--------
The discrete optimizer picks cross-sections from a short, ordered list
instead of sizing continuously. This module defines that list, the
material presets used to fill E and weight density, and the textual
exchange format an editor uses to import/export a catalog.

EXCHANGE FORMAT:
----------------
    name,I,St,Sb,A,wd
    W8x10,30.8,7.81,7.81,2.96,0.283
    W8x13,39.6,9.91,9.91,3.84,0.283

- header names are case-insensitive; A and wd columns are optional
- name, I, St and Sb are required and must be finite numbers (> 0)
- at most 10 rows are kept, sorted by capacity = min(St, Sb)

WHY SORT BY CAPACITY?
---------------------
The optimizer steps one index up when a segment is overstressed and one
index down when it is understressed. That only makes sense if a higher
index always means a stronger section.
"""

import io
import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .config import CONFIG
from .model import Beam, Segment

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = ['name', 'I', 'St', 'Sb', 'A', 'wd']
REQUIRED_COLUMNS = ['name', 'i', 'st', 'sb']


class CatalogError(ValueError):
    """Raised for malformed catalog text or invalid catalog operations."""
    pass


@dataclass(frozen=True)
class Section:
    """
    One catalog entry.

    Parameters:
    -----------
    name : str
        Human-readable name (e.g., "W8x10", "2x8")
    I : float
        Moment of inertia
    St, Sb : float
        Section modulus for the top / bottom fibre
    A : Optional[float]
        Area; None keeps the segment's own area when applied
    wd : Optional[float]
        Weight density; None keeps the segment's own value when applied

    A missing A or wd therefore never adds self-weight by itself.
    """
    name: str
    I: float
    St: float
    Sb: float
    A: Optional[float] = None
    wd: Optional[float] = None

    @property
    def capacity(self) -> float:
        return min(self.St, self.Sb)


@dataclass(frozen=True)
class Material:
    """
    Material preset.

    E : Young's modulus
    wd : weight density (weight per unit volume, so wd·A is a line load)
    """
    name: str
    E: float
    wd: float


# ============================================================================
# MATERIAL PRESETS
# ============================================================================

# US: psi and lb/in³, SI: Pa and N/m³
MATERIAL_PRESETS: Dict[str, Dict[str, Material]] = {
    "US": {
        "steel": Material("steel", E=29e6, wd=0.283),
        "aluminum": Material("aluminum", E=10e6, wd=0.098),
        "hardwood": Material("hardwood", E=1.6e6, wd=0.025),
        "softwood": Material("softwood", E=1.2e6, wd=0.018),
    },
    "SI": {
        "steel": Material("steel", E=200e9, wd=77000.0),
        "aluminum": Material("aluminum", E=69e9, wd=26500.0),
        "hardwood": Material("hardwood", E=11e9, wd=7000.0),
        "softwood": Material("softwood", E=8.3e9, wd=5000.0),
    },
}


def material_preset(name: str, units: str = "US") -> Material:
    try:
        return MATERIAL_PRESETS[units][name]
    except KeyError:
        raise KeyError(f"No material preset {name!r} for units {units!r}") from None


def apply_material(seg: Segment, material: Material) -> Segment:
    return replace(seg, E=material.E, wd=material.wd)


# ============================================================================
# DEFAULT CATALOG (US wide-flange beams, in⁴ / in³ / in²)
# ============================================================================

DEFAULT_CATALOG = [
    Section("W6x9", I=16.4, St=5.56, Sb=5.56, A=2.68, wd=0.283),
    Section("W8x10", I=30.8, St=7.81, Sb=7.81, A=2.96, wd=0.283),
    Section("W8x13", I=39.6, St=9.91, Sb=9.91, A=3.84, wd=0.283),
    Section("W10x12", I=53.8, St=10.9, Sb=10.9, A=3.54, wd=0.283),
    Section("W10x15", I=68.9, St=13.8, Sb=13.8, A=4.41, wd=0.283),
    Section("W12x16", I=103.0, St=17.1, Sb=17.1, A=4.71, wd=0.283),
    Section("W12x19", I=130.0, St=21.3, Sb=21.3, A=5.57, wd=0.283),
    Section("W14x22", I=199.0, St=29.0, Sb=29.0, A=6.49, wd=0.283),
]


# ============================================================================
# CATALOG OPERATIONS
# ============================================================================

def apply_section(seg: Segment, catalog: Sequence[Section], index: int) -> Segment:
    """
    Copy I, St, Sb (and A, wd where the entry defines them) onto a segment
    and record the catalog index.
    """
    s = catalog[index]
    changes = dict(I=s.I, St=s.St, Sb=s.Sb, section_index=index)
    if s.A is not None:
        changes['A'] = s.A
    if s.wd is not None:
        changes['wd'] = s.wd
    return replace(seg, **changes)


def sort_catalog(rows: Sequence[Section]) -> List[Section]:
    """Ascending by capacity min(St, Sb); ties keep their order."""
    return sorted(rows, key=lambda s: s.capacity)


def interpolate_catalog(endpoints: Sequence[Section], n: int) -> List[Section]:
    """
    Expand two sections into n linearly interpolated rows (endpoints included).

    I, St and Sb are always interpolated. A and wd are interpolated when
    both endpoints define them; if only one does, its value is carried to
    every row, if neither does they stay None.
    """
    if len(endpoints) != 2:
        raise CatalogError(f"Interpolation requires exactly 2 rows, got {len(endpoints)}.")
    if not CONFIG.min_interpolated_rows <= n <= CONFIG.max_catalog_size:
        raise CatalogError(
            f"Interpolated row count must be {CONFIG.min_interpolated_rows}.."
            f"{CONFIG.max_catalog_size}, got {n}."
        )

    r0, r1 = endpoints

    def lerp(a, b, t):
        return a + (b - a) * t

    def optional_lerp(a, b, t):
        if a is None and b is None:
            return None
        if a is None:
            return b
        if b is None:
            return a
        return lerp(a, b, t)

    out = []
    for k in range(n):
        t = k / (n - 1)
        out.append(Section(
            name=f"{r0.name}-{r1.name}-{k + 1}",
            I=lerp(r0.I, r1.I, t),
            St=lerp(r0.St, r1.St, t),
            Sb=lerp(r0.Sb, r1.Sb, t),
            A=optional_lerp(r0.A, r1.A, t),
            wd=optional_lerp(r0.wd, r1.wd, t),
        ))
    return out


def prepare_catalog(rows: Sequence[Section], interpolate_to: Optional[int] = None) -> List[Section]:
    """
    Make a catalog ready for the optimizer: optional 2-row interpolation,
    keep at most CONFIG.max_catalog_size rows, sort by capacity.
    """
    rows = list(rows)
    if interpolate_to is not None:
        rows = interpolate_catalog(rows, interpolate_to)
    return sort_catalog(rows[:CONFIG.max_catalog_size])


def _cell(record: dict, key: str) -> str:
    value = record.get(key, "")
    # short rows come back as NaN even with keep_default_na=False
    return value.strip() if isinstance(value, str) else ""


def _parse_number(raw: str) -> Optional[float]:
    if raw == '':
        return None
    try:
        return float(raw)
    except ValueError:
        return math.nan


def parse_catalog_csv(text: str) -> List[Section]:
    """
    Parse catalog rows from CSV text (see module docstring for the format).

    Rows are returned in file order; use `prepare_catalog` to truncate and
    sort them.

    Raises:
    -------
    CatalogError
        Empty input, missing required header columns, a row without a
        finite positive I/St/Sb, or no rows at all
    """
    if text is None or not text.strip():
        raise CatalogError("Empty input.")

    try:
        df = pd.read_csv(
            io.StringIO(text.strip()),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except pd.errors.ParserError as exc:
        raise CatalogError(f"Unreadable catalog: {exc}") from exc

    df.columns = [str(c).strip().lower() for c in df.columns]
    if any(col not in df.columns for col in REQUIRED_COLUMNS):
        raise CatalogError("Header must include name,I,St,Sb")

    rows = []
    for line_no, record in enumerate(df.to_dict('records'), start=1):
        name = _cell(record, "name")
        if not name:
            continue

        I = _parse_number(_cell(record, "i"))
        St = _parse_number(_cell(record, "st"))
        Sb = _parse_number(_cell(record, "sb"))
        A = _parse_number(_cell(record, "a"))
        wd = _parse_number(_cell(record, "wd"))

        required = (I, St, Sb)
        if any(v is None or not math.isfinite(v) or v <= 0 for v in required):
            raise CatalogError(f"Bad row {line_no}: need name,I,St,Sb")
        if any(v is not None and not math.isfinite(v) for v in (A, wd)):
            raise CatalogError(f"Bad row {line_no}: A and wd must be numbers when given")

        rows.append(Section(name=name, I=I, St=St, Sb=Sb, A=A, wd=wd))

    if not rows:
        raise CatalogError("No valid rows found.")

    logger.debug("Parsed %d catalog rows", len(rows))
    return rows


def _fmt(value: Optional[float]) -> str:
    # repr of a float is the shortest text that parses back to the same value
    return "" if value is None else repr(float(value))


def catalog_to_csv(rows: Sequence[Section]) -> str:
    """Export rows as `name,I,St,Sb,A,wd` CSV; unset A/wd are left blank."""
    df = pd.DataFrame(
        [[s.name, _fmt(s.I), _fmt(s.St), _fmt(s.Sb), _fmt(s.A), _fmt(s.wd)] for s in rows],
        columns=CATALOG_COLUMNS,
    )
    return df.to_csv(index=False, lineterminator='\n')


def assign_sections(beam: Beam, catalog: Sequence[Section], indices: Sequence[int]) -> Beam:
    """New beam snapshot with catalog entry indices[i] applied to segment i."""
    if len(indices) != beam.n_segments:
        raise CatalogError(f"Expected {beam.n_segments} section indices, got {len(indices)}.")
    return beam.with_segments(
        apply_section(seg, catalog, k) for seg, k in zip(beam.segments, indices)
    )


def load_catalog(text: str, interpolate_to: Optional[int] = None) -> List[Section]:
    """parse_catalog_csv + prepare_catalog."""
    return prepare_catalog(parse_catalog_csv(text), interpolate_to)
