import pytest
import numpy as np
from isosurf import tables

@pytest.mark.parametrize("code", range(256))
def test_EdgeTable_matches_TriTable(code):
    # Every crossed edge is used by the triangulation and vice versa
    used = 0
    for edge in tables.TriTable[code]:
        used |= 1 << edge
    assert used == tables.EdgeTable[code], f'Edge mask mismatch for code {code:d}'

@pytest.mark.parametrize("code", range(256))
def test_EdgeTable_geometry(code):
    # An edge is crossed iff its two corners are on opposite sides
    inside = [(code >> k) & 1 for k in range(8)]
    expected = 0
    for e, (c0, c1) in enumerate(tables.EdgeCorners):
        if inside[c0] != inside[c1]:
            expected |= 1 << e
    assert expected == tables.EdgeTable[code], f'Edge mask inconsistent with corner layout for code {code:d}'

def test_empty_cases():
    empty = [code for code in range(256) if len(tables.TriTable[code]) == 0]
    assert empty == [0, 255]
    assert tables.EdgeTable[0] == 0 and tables.EdgeTable[255] == 0

def test_table_shapes():
    assert len(tables.EdgeTable) == 256
    assert len(tables.TriTable) == 256
    assert all(len(edges) % 3 == 0 and len(edges) <= 15 for edges in tables.TriTable)
    assert tables.TriTableArray.shape == (256, 15)
    assert np.all(tables.TriCount == [len(edges)//3 for edges in tables.TriTable])
    for code, edges in enumerate(tables.TriTable):
        assert np.all(tables.TriTableArray[code, :len(edges)] == edges)
        assert np.all(tables.TriTableArray[code, len(edges):] == -1)

def test_edge_orientation():
    # Each edge connects neighboring corners, directed along +x, +y or +z
    d = tables.CornerOffsets[tables.EdgeCorners[:,1]] - tables.CornerOffsets[tables.EdgeCorners[:,0]]
    assert np.all(np.sort(d, axis=1) == [0, 0, 1])

@pytest.mark.parametrize("corner", range(8))
def test_single_corner(corner):
    # One inside corner gives a single triangle across the three edges meeting at that corner
    for code in (1 << corner, 255 - (1 << corner)):
        edges = tables.TriTable[code]
        assert len(edges) == 3
        for e in edges:
            assert corner in tables.EdgeCorners[e]

@pytest.mark.parametrize("edge", range(12))
def test_single_edge(edge):
    # Two inside corners sharing an edge give a quad (two triangles) across the four parallel neighboring edges
    c0, c1 = tables.EdgeCorners[edge]
    code = (1 << c0) | (1 << c1)
    edges = set(tables.TriTable[code])
    assert tables.TriCount[code] == 2
    assert len(edges) == 4
    assert edge not in edges
    for e in edges:
        assert c0 in tables.EdgeCorners[e] or c1 in tables.EdgeCorners[e]
