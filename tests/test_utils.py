import pytest
import numpy as np
from isosurf import utils

@pytest.mark.parametrize("TriCoords, expected", [
    # Case 1: Single triangle on the XY plane
    (np.array([[[0, 0, 0], [1, 0, 0], [0, 1, 0]]]),
     [[0, 0, -1]]),
    # Case 2: Reversed ordering
    (np.array([[[0, 0, 0], [0, 1, 0], [1, 0, 0]]]),
     [[0, 0, 1]]),
    # Case 3: Triangle on the YZ plane, scaled
    (np.array([[[0, 0, 0], [0, 2, 0], [0, 0, 2]]]),
     [[-1, 0, 0]]),
    # Case 4: Degenerate triangle (collinear)
    (np.array([[[0, 0, 0], [1, 1, 1], [2, 2, 2]]]),
     [[0, 0, 0]]),
    # Case 5: Empty
    (np.empty((0,3,3)),
     np.empty((0,3))),
])
def test_TriNormals(TriCoords, expected):
    normals = utils.TriNormals(TriCoords)
    assert np.shape(normals) == np.shape(expected)
    assert np.allclose(normals, expected), 'Incorrect normals'

@pytest.mark.parametrize("TriCoords, expected", [
    (np.array([[[0, 0, 0], [1, 0, 0], [0, 1, 0]]]), [0.5]),
    (np.array([[[0, 0, 0], [2, 0, 0], [0, 0, 3]], [[0, 0, 0], [1, 1, 1], [2, 2, 2]]]), [3, 0]),
])
def test_TriArea(TriCoords, expected):
    assert np.allclose(utils.TriArea(TriCoords), expected), 'Incorrect area'

def test_Tris2Mesh():
    TriCoords = np.random.default_rng(1).random((5,3,3))
    NodeCoords, NodeConn = utils.Tris2Mesh(TriCoords)
    assert NodeCoords.shape == (15,3)
    assert np.all(NodeConn == np.arange(15).reshape(5,3))
    assert np.all(utils.Mesh2Tris(NodeCoords, NodeConn) == TriCoords)

def test_Mesh2Tris():
    NodeCoords = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]])
    NodeConn = [[0, 1, 2], [0, 2, 3]]
    TriCoords = utils.Mesh2Tris(NodeCoords, NodeConn)
    assert TriCoords.shape == (2,3,3)
    assert np.all(TriCoords[1] == [[0, 0, 0], [1, 1, 0], [0, 1, 0]])
    assert utils.Mesh2Tris(NodeCoords, []).shape == (0,3,3)
