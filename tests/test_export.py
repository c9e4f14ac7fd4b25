import pytest
import numpy as np
import tempfile, os
from isosurf import export, utils, contour, demo_volume

def _sphere_tris():
    G = demo_volume('sphere', n=8)
    return contour.MarchingCubes(G, isovalue=0.3)

@pytest.mark.parametrize("filetype", ['stl', 'obj', export.MeshFileType.STL, None])
def test_read_write(filetype):
    TriCoords = _sphere_tris()
    with tempfile.TemporaryDirectory() as path:
        ext = '.obj' if filetype == 'obj' else '.stl'
        fname = os.path.join(path, 'surface'+ext)
        out = export.write(fname, TriCoords, isovalue=0.3, filetype=filetype)
        assert out == fname
        assert os.path.isfile(fname)
        T = export.read(fname)

    assert T.shape == TriCoords.shape, 'Incorrect number of triangles.'
    assert np.allclose(T, TriCoords, rtol=0, atol=1e-6), 'Mesh read/write mismatch.'

def test_stl_format():
    TriCoords = _sphere_tris()
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'surface.stl')
        export.write_stl(fname, TriCoords, isovalue=0.3)
        with open(fname, 'rb') as f:
            data = f.read()
        T, normals = export.read_stl(fname)

    # 80 byte header, uint32 triangle count, 50 bytes per triangle
    assert len(data) == 84 + 50*len(TriCoords)
    assert data[:80].rstrip(b'\0') == b'isosurf isovalue=0.3'
    assert int.from_bytes(data[80:84], 'little') == len(TriCoords)
    assert np.allclose(normals, utils.TriNormals(TriCoords), atol=1e-6)
    assert np.allclose(np.frombuffer(data, dtype='<f4', count=9, offset=84+12), TriCoords[0].ravel(), atol=1e-6)

def test_stl_single_cube():
    TriCoords = np.array([
        [[1,0,0.5],[1,1,0.5],[0,0,0.5]],
        [[1,1,0.5],[0,1,0.5],[0,0,0.5]],
    ])
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'cube.stl')
        export.write(fname, TriCoords)
        T, normals = export.read_stl(fname)
    assert np.all(T == TriCoords)
    assert np.all(normals == [[0,0,-1],[0,0,-1]])

def test_truncated_stl():
    TriCoords = _sphere_tris()
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'surface.stl')
        export.write_stl(fname, TriCoords)
        with open(fname, 'rb') as f:
            data = f.read()
        with open(fname, 'wb') as f:
            f.write(data[:-10])
        with pytest.raises(ValueError):
            export.read_stl(fname)
        with open(fname, 'wb') as f:
            f.write(data[:50])
        with pytest.raises(ValueError):
            export.read_stl(fname)

@pytest.mark.parametrize("filetype", ['stl', 'obj'])
def test_empty(filetype):
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'empty.'+filetype)
        with pytest.warns(UserWarning):
            out = export.write(fname, np.empty((0,3,3)), isovalue=5)
        assert out == fname
        assert os.path.isfile(fname)
        if filetype == 'stl':
            # Header and a zero triangle count only
            with open(fname, 'rb') as f:
                data = f.read()
            assert len(data) == 84
            assert int.from_bytes(data[80:84], 'little') == 0
            T, normals = export.read_stl(fname)
            assert T.shape == (0,3,3)

@pytest.mark.parametrize("filetype, filename, expected", [
    ('stl', None, export.MeshFileType.STL),
    ('.OBJ', None, export.MeshFileType.OBJ),
    (export.MeshFileType.OBJ, 'surface.stl', export.MeshFileType.OBJ),
    (None, 'surface.stl', export.MeshFileType.STL),
    (None, 'dir/surface.Obj', export.MeshFileType.OBJ),
])
def test_filetype_from(filetype, filename, expected):
    assert export.filetype_from(filetype, filename) == expected

@pytest.mark.parametrize("filetype, filename", [
    ('vtk', None),
    (None, 'surface.ply'),
    (None, None),
])
def test_filetype_invalid(filetype, filename):
    with pytest.raises(ValueError):
        export.filetype_from(filetype, filename)
