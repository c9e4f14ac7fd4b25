# -*- coding: utf-8 -*-
# Created on Wed Oct 14 13:30:58 2026
"""
Mesh file export

Triangle lists can be written to binary STL or Wavefront OBJ files. Vertices
are written per triangle, without merging vertices shared by adjacent
triangles.

.. currentmodule:: isosurf.export

.. autosummary::
    :toctree: submodules/

    MeshFileType
    write
    read
    write_stl
    read_stl
    write_obj
    read_obj

"""
import numpy as np
import os, warnings
from enum import Enum
import meshio

from . import utils

class MeshFileType(Enum):
    STL = 'stl'
    OBJ = 'obj'

Extensions = {
    MeshFileType.STL : '.stl',
    MeshFileType.OBJ : '.obj',
}

# Binary STL triangle record, 50 bytes
_STL_HEADER_SIZE = 80
_STL_RECORD = np.dtype([
    ('normal', '<f4', (3,)),
    ('vertices', '<f4', (3,3)),
    ('attribute', '<u2'),
])

def filetype_from(filetype=None, filename=None):
    """
    Resolve a mesh file type from a MeshFileType, a string ('stl' or 'obj'),
    or, if filetype is None, from the extension of filename.
    """
    if isinstance(filetype, MeshFileType):
        return filetype
    if filetype is None:
        if filename is None:
            raise ValueError('Either filetype or filename must be given.')
        filetype = os.path.splitext(filename)[1]
    key = str(filetype).lower().lstrip('.')
    for ftype in MeshFileType:
        if ftype.value == key:
            return ftype
    raise ValueError(f'Unsupported mesh file type "{str(filetype):s}". Must be one of: {", ".join(Extensions.values()):s}')

def write(filename, TriCoords, isovalue=None, filetype=None):
    """
    Write a triangle list to a mesh file.

    Parameters
    ----------
    filename : str
        Output file path.
    TriCoords : array_like
        (n,3,3) array of triangle vertex coordinates.
    isovalue : float, optional
        Isovalue of the surface, recorded in the file header where the format
        allows it, by default None.
    filetype : str or MeshFileType, optional
        File format, by default None. If None, the format is determined from
        the file extension.

    Returns
    -------
    filename : str
        Path of the written file.
    """
    ftype = filetype_from(filetype, filename)
    TriCoords = np.asarray(TriCoords, dtype=np.float64).reshape(-1,3,3)
    if len(TriCoords) == 0:
        warnings.warn(f'Mesh empty - writing {filename:s} with no triangles.')
    _writers[ftype](filename, TriCoords, isovalue=isovalue)
    return filename

def read(filename, filetype=None):
    """
    Read a triangle list from a mesh file.

    Parameters
    ----------
    filename : str
        Input file path.
    filetype : str or MeshFileType, optional
        File format, by default None. If None, the format is determined from
        the file extension.

    Returns
    -------
    TriCoords : np.ndarray
        (n,3,3) array of triangle vertex coordinates.
    """
    ftype = filetype_from(filetype, filename)
    if ftype == MeshFileType.STL:
        TriCoords, _ = read_stl(filename)
    else:
        TriCoords = read_obj(filename)
    return TriCoords

def write_stl(filename, TriCoords, isovalue=None):
    """
    Write a binary STL file. Facet normals are the normalized cross product
    (v3 - v1) x (v2 - v1) of each triangle (see :func:`isosurf.utils.TriNormals`).

    Parameters
    ----------
    filename : str
        Output file path.
    TriCoords : array_like
        (n,3,3) array of triangle vertex coordinates.
    isovalue : float, optional
        Isovalue recorded in the 80 byte header, by default None.
    """
    TriCoords = np.asarray(TriCoords, dtype=np.float64).reshape(-1,3,3)
    header = 'isosurf'
    if isovalue is not None:
        header += f' isovalue={isovalue:.9g}'
    header = header.encode('ascii')[:_STL_HEADER_SIZE].ljust(_STL_HEADER_SIZE, b'\0')

    records = np.zeros(len(TriCoords), dtype=_STL_RECORD)
    records['normal'] = utils.TriNormals(TriCoords)
    records['vertices'] = TriCoords

    with open(filename, 'wb') as f:
        f.write(header)
        f.write(np.array(len(TriCoords), dtype='<u4').tobytes())
        f.write(records.tobytes())

def read_stl(filename):
    """
    Read a binary STL file.

    Parameters
    ----------
    filename : str
        Input file path.

    Returns
    -------
    TriCoords : np.ndarray
        (n,3,3) array of triangle vertex coordinates.
    normals : np.ndarray
        (n,3) array of facet normals stored in the file.
    """
    with open(filename, 'rb') as f:
        data = f.read()
    if len(data) < _STL_HEADER_SIZE + 4:
        raise ValueError(f'{filename:s} is too short to be a binary STL file.')
    ntri = int(np.frombuffer(data, dtype='<u4', count=1, offset=_STL_HEADER_SIZE)[0])
    expected = _STL_HEADER_SIZE + 4 + ntri*_STL_RECORD.itemsize
    if len(data) < expected:
        raise ValueError(f'{filename:s} is truncated: header specifies {ntri:d} triangles ({expected:d} bytes), file has {len(data):d} bytes.')
    records = np.frombuffer(data, dtype=_STL_RECORD, count=ntri, offset=_STL_HEADER_SIZE + 4)
    TriCoords = records['vertices'].astype(np.float64)
    normals = records['normal'].astype(np.float64)
    return TriCoords, normals

def write_obj(filename, TriCoords, isovalue=None):
    """
    Write a Wavefront OBJ file using meshio (see
    :meth:`isosurf.mesh.mesh.Mesh2Meshio`). Each triangle references its own
    three vertices.

    Parameters
    ----------
    filename : str
        Output file path.
    TriCoords : array_like
        (n,3,3) array of triangle vertex coordinates.
    isovalue : float, optional
        Unused, OBJ files don't record the isovalue.
    """
    from .mesh import mesh
    m = mesh.from_tris(TriCoords).Mesh2Meshio()
    m.write(filename, file_format='obj')

def read_obj(filename):
    """
    Read the triangles of a Wavefront OBJ file using meshio.

    Parameters
    ----------
    filename : str
        Input file path.

    Returns
    -------
    TriCoords : np.ndarray
        (n,3,3) array of triangle vertex coordinates.
    """
    m = meshio.read(filename, file_format='obj')
    NodeConn = [cells.data for cells in m.cells if cells.type == 'triangle']
    if len(NodeConn) == 0:
        return np.empty((0,3,3))
    return utils.Mesh2Tris(m.points, np.vstack(NodeConn))

_writers = {
    MeshFileType.STL : write_stl,
    MeshFileType.OBJ : write_obj,
}
