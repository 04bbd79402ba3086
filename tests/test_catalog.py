# File: tests/test_catalog.py
"""
Test catalog CSV import/export, truncation, sorting and interpolation.
"""

import pytest

from beamline.catalog import (
    DEFAULT_CATALOG,
    CatalogError,
    Section,
    apply_material,
    apply_section,
    assign_sections,
    catalog_to_csv,
    interpolate_catalog,
    load_catalog,
    material_preset,
    parse_catalog_csv,
    prepare_catalog,
    sort_catalog,
)
from beamline.model import Segment, build_beam


def test_parse_basic():
    rows = parse_catalog_csv("name,I,St,Sb\n2x8,47.6,11.9,11.9\n2x10,98.9,19.8,21.0\n")

    assert [r.name for r in rows] == ["2x8", "2x10"]
    assert rows[1] == Section("2x10", I=98.9, St=19.8, Sb=21.0)
    assert rows[1].capacity == 19.8


def test_parse_header_case_and_spacing():
    rows = parse_catalog_csv("NAME, i ,ST,sB,a,WD\n  W8x10 , 30.8, 7.81, 7.81, 2.96, 0.283\n")

    assert rows == [Section("W8x10", I=30.8, St=7.81, Sb=7.81, A=2.96, wd=0.283)]


def test_parse_optional_columns_blank():
    rows = parse_catalog_csv("name,I,St,Sb,A,wd\nX,10,2,2,,\nY,20,3,3,1.5\n")

    assert rows[0].A is None and rows[0].wd is None
    assert rows[1].A == 1.5 and rows[1].wd is None


def test_parse_skips_blank_names():
    rows = parse_catalog_csv("name,I,St,Sb\n,1,1,1\nB,2,2,2\n")
    assert [r.name for r in rows] == ["B"]


@pytest.mark.parametrize("text", [
    "",
    "   \n",
    "name,I,St\nA,1,1\n",
    "name,I,St,Sb\n",
    "name,I,St,Sb\n,1,1,1\n",
    "name,I,St,Sb\nA,abc,1,1\n",
    "name,I,St,Sb\nA,1,-2,1\n",
    "name,I,St,Sb\nA,1,1\n",
    "name,I,St,Sb,A\nA,1,1,1,oops\n",
])
def test_parse_errors(text):
    with pytest.raises(CatalogError):
        parse_catalog_csv(text)


def test_truncates_to_ten_rows_then_sorts():
    lines = ["name,I,St,Sb"]
    for k in range(12, 0, -1):
        lines.append(f"S{k},{k * 5},{k},{k}")
    rows = load_catalog("\n".join(lines))

    assert len(rows) == 10
    # first ten rows of the file were S12..S3, sorted ascending
    assert [r.name for r in rows] == [f"S{k}" for k in range(3, 13)]


def test_sort_by_smaller_modulus():
    rows = [
        Section("a", I=1, St=10, Sb=2),
        Section("b", I=1, St=3, Sb=3),
        Section("c", I=1, St=1, Sb=50),
    ]
    assert [r.name for r in sort_catalog(rows)] == ["c", "a", "b"]


def test_interpolate_two_rows():
    rows = interpolate_catalog(
        [Section("a", I=10, St=2, Sb=4, A=1.0), Section("b", I=50, St=10, Sb=12, A=3.0, wd=0.1)],
        5,
    )

    assert [r.name for r in rows] == ["a-b-1", "a-b-2", "a-b-3", "a-b-4", "a-b-5"]
    assert rows[0].I == 10 and rows[-1].I == 50
    assert rows[2].St == pytest.approx(6.0)
    assert rows[2].Sb == pytest.approx(8.0)
    assert rows[2].A == pytest.approx(2.0)
    # only one endpoint defines wd: carried unchanged
    assert all(r.wd == 0.1 for r in rows)


def test_interpolate_errors():
    two = [Section("a", 1, 1, 1), Section("b", 2, 2, 2)]
    with pytest.raises(CatalogError):
        interpolate_catalog(two + [Section("c", 3, 3, 3)], 4)
    with pytest.raises(CatalogError):
        interpolate_catalog(two, 1)
    with pytest.raises(CatalogError):
        interpolate_catalog(two, 11)


def test_load_with_interpolation():
    rows = load_catalog("name,I,St,Sb\nbig,100,20,20\nsmall,10,2,2\n", interpolate_to=4)

    assert len(rows) == 4
    assert rows[0].St == pytest.approx(2.0)
    assert rows[-1].St == pytest.approx(20.0)


def test_csv_export_round_trip():
    text = catalog_to_csv(DEFAULT_CATALOG + [Section("plain", I=1.0 / 3.0, St=0.1, Sb=0.2)])

    assert text.splitlines()[0] == "name,I,St,Sb,A,wd"
    assert text.splitlines()[-1] == "plain,0.3333333333333333,0.1,0.2,,"
    assert parse_catalog_csv(text) == DEFAULT_CATALOG + [Section("plain", I=1.0 / 3.0, St=0.1, Sb=0.2)]


def test_prepare_catalog_default_is_sorted():
    rows = prepare_catalog(DEFAULT_CATALOG)
    caps = [r.capacity for r in rows]
    assert caps == sorted(caps)


def test_apply_section_keeps_own_area_when_unset():
    seg = Segment(E=1.0, I=1.0, L=1.0, A=7.0, wd=0.5)
    catalog = [Section("s", I=9.0, St=3.0, Sb=4.0)]
    out = apply_section(seg, catalog, 0)

    assert (out.I, out.St, out.Sb, out.section_index) == (9.0, 3.0, 4.0, 0)
    assert (out.A, out.wd) == (7.0, 0.5)


def test_apply_section_copies_area_and_density():
    out = apply_section(Segment(E=1.0, I=1.0, L=1.0), DEFAULT_CATALOG, 2)
    assert out.A == DEFAULT_CATALOG[2].A
    assert out.wd == DEFAULT_CATALOG[2].wd


def test_assign_sections():
    beam = build_beam(3, 6.0)
    out = assign_sections(beam, DEFAULT_CATALOG, [0, 1, 2])

    assert [s.section_index for s in out.segments] == [0, 1, 2]
    assert out.version == beam.version + 1
    with pytest.raises(CatalogError):
        assign_sections(beam, DEFAULT_CATALOG, [0, 1])


def test_material_presets():
    steel = material_preset("steel")
    assert steel.E == 29e6
    assert material_preset("steel", "SI").E == 200e9

    seg = apply_material(Segment(E=1.0, I=1.0, L=1.0), steel)
    assert (seg.E, seg.wd) == (29e6, 0.283)

    with pytest.raises(KeyError):
        material_preset("unobtainium")
