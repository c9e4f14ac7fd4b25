import pytest
import numpy as np
import tempfile, os
from isosurf import volume

CTL = """DSET ^{dset}
TITLE test data
UNDEF -9.99e33
OPTIONS {options}
XDEF 4 LINEAR 10.0 0.5
YDEF 3 LINEAR -1.0 2.0
ZDEF 2 LEVELS 1000 900
TDEF 2 LINEAR 00Z01JAN2000 1hr
* comment
VARS 2
a 2 99 first variable
b 0 99 surface variable
ENDVARS
"""

def _write_grads(path, byteorder='<', options='little_endian', data=None):
    # Two time steps of a (2 level) and b (surface), 4x3 horizontal grid
    if data is None:
        data = np.arange(72, dtype=np.float32)
    data.astype(byteorder+'f4').tofile(os.path.join(path, 'test.bin'))
    fname = os.path.join(path, 'test.ctl')
    with open(fname, 'w') as f:
        f.write(CTL.format(dset='test.bin', options=options))
    return fname

@pytest.mark.parametrize("img", [
    np.random.default_rng(0).random((2,3,4)),
    np.arange(27).reshape(3,3,3),
])
def test_read_array(img):
    G = volume.read(img, step=0.5, origin=(1,2,3))
    nz, ny, nx = img.shape
    assert G.shape == (nx, ny, nz)
    assert np.all(G.image() == img)
    assert np.all(G.Coords[0] == [1,2,3])
    assert np.all(G.step == 0.5)

def test_read_npy():
    img = np.random.default_rng(0).random((3,4,5))
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'volume.npy')
        np.save(fname, img)
        G = volume.read(fname)
    assert G.shape == (5,4,3)
    assert np.all(G.image() == img)

@pytest.mark.parametrize("var, t, offset, nz", [
    (None, 0, 0, 2),
    ('a', 1, 36, 2),
    ('B', 0, 24, 1),
    (1, 1, 60, 1),
])
def test_read_ctl(var, t, offset, nz):
    with tempfile.TemporaryDirectory() as path:
        fname = _write_grads(path)
        img, step, origin = volume.read_ctl(fname, var=var, t=t)
    assert img.shape == (nz, 3, 4)
    assert np.all(img.ravel() == np.arange(offset, offset+nz*12))
    assert np.allclose(step, [0.5, 2, -100])
    assert np.allclose(origin, [10, -1, 1000])

@pytest.mark.parametrize("byteorder, options", [
    ('<', 'little_endian'),
    ('>', 'big_endian'),
    ('>', 'template big_endian'),
])
def test_read_ctl_byteorder(byteorder, options):
    with tempfile.TemporaryDirectory() as path:
        fname = _write_grads(path, byteorder=byteorder, options=options)
        G = volume.read(fname, var='a')
    assert G.shape == (4,3,2)
    assert np.all(G.Values == np.arange(24))
    assert np.allclose(G.Coords[G.index(3,2,1)], [11.5, 3, 900])

def test_undef():
    data = np.arange(72, dtype=np.float32)
    data[5] = -9.99e33
    with tempfile.TemporaryDirectory() as path:
        fname = _write_grads(path, data=data)
        with pytest.warns(UserWarning):
            img, _, _ = volume.read_ctl(fname)
        assert img.ravel()[5] == np.float32(-9.99e33)
        img, _, _ = volume.read_ctl(fname, fill_undef=0)
        assert img.ravel()[5] == 0

def test_parse_ctl():
    with tempfile.TemporaryDirectory() as path:
        fname = _write_grads(path)
        ctl = volume.parse_ctl(fname)
        assert ctl['dset'] == os.path.join(path, 'test.bin')
    assert ctl['byteorder'] == '<'
    assert ctl['xdef'] == (4, 10.0, 0.5)
    assert ctl['zdef'][0] == 2
    assert ctl['tdef'] == 2
    assert ctl['vars'] == [('a', 2), ('b', 0)]
    assert ctl['undef'] == -9.99e33

def test_levels_continued():
    ctl = """DSET ^test.bin
XDEF 2 LINEAR 0 1
YDEF 2 LINEAR 0 1
ZDEF 3 LEVELS 1000
  900 800
VARS 1
v 3 99 values
ENDVARS
"""
    with tempfile.TemporaryDirectory() as path:
        np.arange(12, dtype='<f4').tofile(os.path.join(path, 'test.bin'))
        fname = os.path.join(path, 'test.ctl')
        with open(fname, 'w') as f:
            f.write(ctl)
        img, step, origin = volume.read_ctl(fname)
    assert img.shape == (3,2,2)
    assert np.allclose(step, [1, 1, -100])
    assert np.allclose(origin, [0, 0, 1000])

@pytest.mark.parametrize("ctl", [
    # Non-uniform levels
    "DSET ^test.bin\nXDEF 2 LINEAR 0 1\nYDEF 2 LINEAR 0 1\nZDEF 3 LEVELS 1 2 4\nVARS 1\nv 3 99\nENDVARS\n",
    # Missing DSET
    "XDEF 2 LINEAR 0 1\nYDEF 2 LINEAR 0 1\nVARS 1\nv 0 99\nENDVARS\n",
    # Missing YDEF
    "DSET ^test.bin\nXDEF 2 LINEAR 0 1\nVARS 1\nv 0 99\nENDVARS\n",
    # No variables
    "DSET ^test.bin\nXDEF 2 LINEAR 0 1\nYDEF 2 LINEAR 0 1\nVARS 0\nENDVARS\n",
    # Unsupported mapping
    "DSET ^test.bin\nXDEF 2 GAUST62 0 1\nYDEF 2 LINEAR 0 1\nVARS 1\nv 0 99\nENDVARS\n",
    # Sequential data
    "DSET ^test.bin\nOPTIONS sequential\nXDEF 2 LINEAR 0 1\nYDEF 2 LINEAR 0 1\nVARS 1\nv 0 99\nENDVARS\n",
])
def test_parse_ctl_invalid(ctl):
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'test.ctl')
        with open(fname, 'w') as f:
            f.write(ctl)
        with pytest.raises(ValueError):
            volume.parse_ctl(fname)

@pytest.mark.parametrize("kwargs", [
    dict(var='c'),
    dict(var=2),
    dict(t=2),
])
def test_read_ctl_invalid(kwargs):
    with tempfile.TemporaryDirectory() as path:
        fname = _write_grads(path)
        with pytest.raises(ValueError):
            volume.read_ctl(fname, **kwargs)

def test_read_ctl_short():
    with tempfile.TemporaryDirectory() as path:
        fname = _write_grads(path, data=np.arange(20, dtype=np.float32))
        with pytest.raises(ValueError):
            volume.read_ctl(fname)

@pytest.mark.parametrize("shape, step, scalefactor", [
    ((10,10,10), 1, 2),
    ((4,4,4), (1,2,3), 2),
    ((6,5,4), 0.5, 0.5),
    ((5,7,9), (1,-1,2), 3),
])
def test_scalefactor(shape, step, scalefactor):
    # Resampling keeps the extent of the grid
    img = np.random.default_rng(0).random(shape)
    G0 = volume.read(img, step=step, origin=(1,2,3))
    G = volume.read(img, step=step, origin=(1,2,3), scalefactor=scalefactor)
    assert G.shape != G0.shape
    assert np.allclose(G.bounds, G0.bounds), 'Resampled grid bounds changed.'

def test_scalefactor_shape():
    img = np.random.default_rng(0).random((4,4,4))
    G = volume.read(img, step=1, scalefactor=2)
    assert G.shape == (8,8,8)
    assert np.allclose(G.step, 3/7)
    G = volume.read(img, step=1, scalefactor=0.5, scaleorder=0)
    assert G.shape == (2,2,2)

@pytest.mark.parametrize("source", [
    'does_not_exist.npy',
    np.zeros((3,3)),
    5,
])
def test_read_invalid(source):
    with pytest.raises(ValueError):
        volume.read(source)

def test_read_extension():
    with tempfile.TemporaryDirectory() as path:
        fname = os.path.join(path, 'volume.txt')
        with open(fname, 'w') as f:
            f.write('0 1 2')
        with pytest.raises(ValueError):
            volume.read(fname)
