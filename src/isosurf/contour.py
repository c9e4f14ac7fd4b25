# -*- coding: utf-8 -*-
# Created on Tue Oct 13 14:37:02 2026
"""
Isosurface extraction by marching cubes


.. currentmodule:: isosurf.contour

Marching Cubes
==============
.. autosummary::
    :toctree: submodules/

    MarchingCubes
    Isosurface
    CubeCodes
    Interpolate

"""
import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

from . import tables, try_njit, check_numba
from .mesh import mesh

def CubeCodes(grid):
    """
    Corner codes of every cube of a classified grid. Bit k of a cube's code is
    set if corner k (see :data:`isosurf.tables.CornerOffsets`) is inside the
    isosurface.

    Parameters
    ----------
    grid : isosurf.grid.VolumeGrid
        Classified volume grid.

    Returns
    -------
    codes : np.ndarray
        (sizeZ-1, sizeY-1, sizeX-1) uint8 array of corner codes, so that
        ``codes[z, y, x]`` is the code of the cube based at sample (x, y, z).
    """
    return _slab_codes(grid.image(grid.Inside), 0, grid.shape[2]-1)

def Interpolate(p0, p1, v0, v1, isovalue):
    """
    Linear interpolation of the isovalue crossing between two samples.

    The crossing is at ``t = (isovalue - v0)/(v1 - v0)`` along the segment
    from p0 to p1. If ``v0 == v1``, t = 0. The point is evaluated as
    ``(1-t)*p0 + t*p1`` so that t = 0 and t = 1 give p0 and p1 exactly.

    Parameters
    ----------
    p0, p1 : array_like
        (...,3) positions of the two samples.
    v0, v1 : array_like
        (...) values of the two samples.
    isovalue : float
        Isosurface threshold.

    Returns
    -------
    points : np.ndarray
        (...,3) interpolated positions.
    """
    p0 = np.asarray(p0, dtype=np.float64); p1 = np.asarray(p1, dtype=np.float64)
    v0 = np.asarray(v0, dtype=np.float64); v1 = np.asarray(v1, dtype=np.float64)
    dv = v1 - v0
    t = np.zeros(np.broadcast(v0, v1).shape)
    np.divide(isovalue - v0, dv, out=t, where=(dv != 0))
    t = t[...,None]
    return (1 - t)*p0 + t*p1

def MarchingCubes(grid, isovalue=None, method=None, n_jobs=1, chunksize=None):
    """
    Extract a triangulated isosurface from a volume grid using marching cubes
    (:cite:p:`Lorensen1987`).

    Samples with values greater than the isovalue are inside the surface.
    Triangle vertices are placed by linear interpolation along the crossed
    cube edges. Triangles are not connected, each triangle has its own three
    vertices and vertices on edges shared by neighboring cubes are duplicated
    (at identical positions).

    Parameters
    ----------
    grid : isosurf.grid.VolumeGrid
        Volume grid.
    isovalue : float, optional
        Isosurface threshold. If given, the grid is classified with this
        isovalue before extraction. If None, the grid's current
        classification (see :meth:`~isosurf.grid.VolumeGrid.classify`) is
        used, by default None.
    method : str, optional
        Extraction method, by default None.

        'vectorized' : numpy array operations over slabs of cubes

        'loop' : cube-by-cube loop, compiled with numba if numba is enabled
        (see :func:`isosurf.use_numba`)

        If None, 'loop' is used if numba is enabled (see
        :func:`isosurf.check_numba`), otherwise 'vectorized'.
    n_jobs : int, optional
        Number of parallel jobs (see joblib.Parallel), by default 1. The
        cubes are partitioned into slabs along z which are extracted
        independently and concatenated in order.
    chunksize : int, optional
        Number of cube layers along z per slab, by default None. If None,
        slabs are sized to give each job one slab for the 'loop' method
        and to hold roughly one million cubes for the 'vectorized' method.

    Returns
    -------
    TriCoords : np.ndarray
        (n,3,3) array of triangle vertex coordinates, in order of cubes
        (x fastest, then y, then z) and, within each cube, in case table order.
    """
    if isovalue is not None:
        grid.classify(isovalue)
    elif grid.isovalue is None:
        raise ValueError('The grid must be classified before extraction, either provide an isovalue or call grid.classify().')
    isovalue = grid.isovalue

    if method is None:
        method = 'loop' if check_numba() else 'vectorized'
    if method not in ('vectorized', 'loop'):
        raise ValueError(f'Invalid method "{str(method):s}". Must be "vectorized" or "loop".')
    if chunksize is not None and int(chunksize) < 1:
        raise ValueError(f'chunksize must be a positive number of cube layers, not {chunksize}.')

    sx, sy, sz = grid.shape
    nlayers = sz - 1
    if min(grid.shape) < 2:
        return np.empty((0,3,3))

    if chunksize is None:
        if method == 'loop':
            chunksize = int(np.ceil(nlayers/effective_n_jobs(n_jobs)))
        else:
            chunksize = max(1, int(1e6//((sx-1)*(sy-1))))
    chunksize = int(chunksize)
    slabs = [(z0, min(z0+chunksize, nlayers)) for z0 in range(0, nlayers, chunksize)]

    if method == 'vectorized':
        func = lambda z0, z1 : _march_slab(grid.Coords, grid.Values, grid.image(grid.Inside), isovalue, z0, z1)
    else:
        kernel = _loop_kernel()
        func = lambda z0, z1 : kernel(grid.Coords, grid.Values, grid.Inside, sx, sy, z0, z1, isovalue,
            tables.EdgeTable, tables.TriTableArray, tables.TriCount, _corner_strides(sx, sy), tables.EdgeCorners)

    if effective_n_jobs(n_jobs) == 1 or len(slabs) == 1:
        buffers = [func(z0, z1) for z0, z1 in slabs]
    else:
        buffers = Parallel(n_jobs=n_jobs, backend='threading')(delayed(func)(z0, z1) for z0, z1 in slabs)

    return np.concatenate(buffers, axis=0)

def Isosurface(grid, isovalue, method=None, n_jobs=1, chunksize=None):
    """
    Classify a grid and extract the isosurface as a mesh object.

    Parameters
    ----------
    grid : isosurf.grid.VolumeGrid
        Volume grid.
    isovalue : float
        Isosurface threshold.
    method : str, optional
        Extraction method, see :func:`MarchingCubes`, by default None.
    n_jobs : int, optional
        Number of parallel jobs, by default 1.
    chunksize : int, optional
        Number of cube layers along z per slab, see :func:`MarchingCubes`.

    Returns
    -------
    surface : isosurf.mesh.mesh
        Mesh object containing the isosurface triangles.

        .. note:: Due to the ability to unpack the mesh object to NodeCoords and NodeConn, the NodeCoords and NodeConn array can be returned directly (instead of the mesh object) by running: ``NodeCoords, NodeConn = contour.Isosurface(...)``
    """
    TriCoords = MarchingCubes(grid, isovalue=isovalue, method=method, n_jobs=n_jobs, chunksize=chunksize)
    surface = mesh.from_tris(TriCoords)
    surface.isovalue = float(isovalue)
    return surface

def _loop_kernel():
    # The compiled kernel, or its pure python version if numba has been disabled since import
    if check_numba():
        return _march_loop
    return getattr(_march_loop, 'py_func', _march_loop)

def _corner_strides(sx, sy):
    # Flat index offset of each cube corner from the cube's base sample
    return tables.CornerOffsets[:,0] + tables.CornerOffsets[:,1]*sx + tables.CornerOffsets[:,2]*sx*sy

def _slab_codes(inside, z0, z1):
    # Corner codes for cube layers z0 <= z < z1 of a (sz,sy,sx) inside image
    nz = z1 - z0
    ny = inside.shape[1] - 1
    nx = inside.shape[2] - 1
    codes = np.zeros((max(nz, 0), max(ny, 0), max(nx, 0)), dtype=np.uint8)
    if codes.size == 0:
        return codes
    for k, (dx, dy, dz) in enumerate(tables.CornerOffsets):
        corner = inside[z0+dz:z1+dz, dy:dy+ny, dx:dx+nx]
        codes |= corner.astype(np.uint8) << np.uint8(k)
    return codes

def _march_slab(Coords, Values, inside, isovalue, z0, z1):
    sz, sy, sx = inside.shape
    codes = _slab_codes(inside, z0, z1).ravel()
    cubes = np.flatnonzero((codes != 0) & (codes != 255))
    if len(cubes) == 0:
        return np.empty((0,3,3))
    codes = codes[cubes]

    # Base sample of each active cube
    x = cubes % (sx-1)
    y = (cubes // (sx-1)) % (sy-1)
    z = cubes // ((sx-1)*(sy-1)) + z0
    base = x + y*sx + z*sx*sy
    corners = base[:,None] + _corner_strides(sx, sy)[None,:]
    i0 = corners[:, tables.EdgeCorners[:,0]]
    i1 = corners[:, tables.EdgeCorners[:,1]]

    # Interpolate only the crossed edges
    crossed = ((tables.EdgeTable[codes][:,None] >> np.arange(12)) & 1).astype(bool)
    v0 = Values[i0]
    dv = Values[i1] - v0
    t = np.zeros(i0.shape)
    np.divide(isovalue - v0, dv, out=t, where=crossed & (dv != 0))
    t = t[:,:,None]
    EdgePoints = (1 - t)*Coords[i0] + t*Coords[i1]

    TriEdges = tables.TriTableArray[codes].reshape(-1,5,3)
    valid = TriEdges[:,:,0] >= 0
    TriCoords = EdgePoints[np.arange(len(cubes))[:,None,None], TriEdges]
    return TriCoords[valid]

@try_njit(cache=True, nogil=True)
def _march_loop(Coords, Values, Inside, sx, sy, z0, z1, isovalue, EdgeTable, TriTable, TriCount, CornerStrides, EdgeCorners):
    nx = sx - 1
    ny = sy - 1
    codes = np.zeros((z1-z0)*ny*nx, dtype=np.int64)
    ntri = 0
    c = 0
    for z in range(z0, z1):
        for y in range(ny):
            for x in range(nx):
                base = x + y*sx + z*sx*sy
                code = 0
                for k in range(8):
                    if Inside[base + CornerStrides[k]]:
                        code |= 1 << k
                codes[c] = code
                ntri += TriCount[code]
                c += 1

    TriCoords = np.empty((ntri,3,3))
    EdgePoints = np.empty((12,3))
    n = 0
    c = 0
    for z in range(z0, z1):
        for y in range(ny):
            for x in range(nx):
                code = codes[c]
                c += 1
                if code == 0 or code == 255:
                    continue
                base = x + y*sx + z*sx*sy
                mask = EdgeTable[code]
                for e in range(12):
                    if (mask >> e) & 1:
                        i0 = base + CornerStrides[EdgeCorners[e,0]]
                        i1 = base + CornerStrides[EdgeCorners[e,1]]
                        v0 = Values[i0]
                        dv = Values[i1] - v0
                        if dv != 0:
                            t = (isovalue - v0)/dv
                        else:
                            t = 0.
                        for d in range(3):
                            EdgePoints[e,d] = (1 - t)*Coords[i0,d] + t*Coords[i1,d]
                for j in range(TriCount[code]):
                    for m in range(3):
                        e = TriTable[code, 3*j+m]
                        for d in range(3):
                            TriCoords[n,m,d] = EdgePoints[e,d]
                    n += 1
    return TriCoords
