# -*- coding: utf-8 -*-
# Created on Tue Oct 13 09:12:50 2026
"""
Triangle geometry utilities

Triangle lists are represented as ``TriCoords`` arrays of shape (n,3,3),
indexed by triangle, vertex and coordinate. Vertices are never shared between
triangles.

.. currentmodule:: isosurf.utils

.. autosummary::
    :toctree: submodules/

    TriNormals
    TriArea
    Tris2Mesh
    Mesh2Tris

"""
import numpy as np

def TriNormals(TriCoords):
    """
    Calculate unit normal vectors of triangles. The normal of triangle
    (v1, v2, v3) is the normalized cross product (v3 - v1) x (v2 - v1), so it
    follows the triangle's vertex ordering. Degenerate (zero area) triangles
    are given a zero normal.

    Parameters
    ----------
    TriCoords : array_like
        (n,3,3) array of triangle vertex coordinates.

    Returns
    -------
    normals : np.ndarray
        (n,3) array of unit normal vectors.
    """
    TriCoords = np.asarray(TriCoords, dtype=np.float64).reshape(-1,3,3)
    v1 = TriCoords[:,0]; v2 = TriCoords[:,1]; v3 = TriCoords[:,2]
    cross = np.cross(v3 - v1, v2 - v1)
    norm = np.linalg.norm(cross, axis=1)
    normals = np.zeros_like(cross)
    np.divide(cross, norm[:,None], out=normals, where=norm[:,None] > 0)
    return normals

def TriArea(TriCoords):
    """
    Area of each triangle.

    Parameters
    ----------
    TriCoords : array_like
        (n,3,3) array of triangle vertex coordinates.

    Returns
    -------
    area : np.ndarray
        (n,) array of triangle areas.
    """
    TriCoords = np.asarray(TriCoords, dtype=np.float64).reshape(-1,3,3)
    cross = np.cross(TriCoords[:,1] - TriCoords[:,0], TriCoords[:,2] - TriCoords[:,0])
    return 0.5*np.linalg.norm(cross, axis=1)

def Tris2Mesh(TriCoords):
    """
    Convert a triangle list to node coordinates and node connectivity. Every
    triangle gets three nodes of its own, no nodes are merged.

    Parameters
    ----------
    TriCoords : array_like
        (n,3,3) array of triangle vertex coordinates.

    Returns
    -------
    NodeCoords : np.ndarray
        (3n,3) array of node coordinates.
    NodeConn : np.ndarray
        (n,3) array of node connectivity.
    """
    TriCoords = np.asarray(TriCoords, dtype=np.float64).reshape(-1,3,3)
    NodeCoords = TriCoords.reshape(-1,3)
    NodeConn = np.arange(len(NodeCoords), dtype=np.int64).reshape(-1,3)
    return NodeCoords, NodeConn

def Mesh2Tris(NodeCoords, NodeConn):
    """
    Gather the vertex coordinates of each triangle of a triangular mesh.

    Parameters
    ----------
    NodeCoords : array_like
        Node coordinates.
    NodeConn : array_like
        (n,3) node connectivity of triangles.

    Returns
    -------
    TriCoords : np.ndarray
        (n,3,3) array of triangle vertex coordinates.
    """
    NodeCoords = np.asarray(NodeCoords, dtype=np.float64)
    NodeConn = np.asarray(NodeConn, dtype=np.int64).reshape(-1,3)
    if len(NodeConn) == 0:
        return np.empty((0,3,3))
    return NodeCoords[NodeConn]
