# -*- coding: utf-8 -*-
# Created on Wed Oct 14 08:45:19 2026
"""
Triangular surface mesh object

.. currentmodule:: isosurf.mesh

Objects
=======
.. autosummary::
    :toctree: submodules/

    mesh

"""
import numpy as np
import copy
import meshio

from . import utils, export

class mesh:
    """
    Triangular surface mesh. Isosurfaces are stored as unwelded triangle
    lists: each element has its own three nodes.

    Parameters
    ----------
    NodeCoords : array_like, optional
        Node coordinates.
    NodeConn : array_like, optional
        Node connectivity of triangles.

    Attributes
    ----------
    isovalue : float or None
        Isovalue of the surface, if the mesh was created by isosurface
        extraction.
    """
    def __init__(self, *args):
        # Primary attributes
        self.NodeCoords = np.empty((0,3))
        self.NodeConn = np.empty((0,3), dtype=np.int64)

        # Properties:
        self._ElemNormals = []

        self.isovalue = None
        for i,arg in enumerate(args):
            if i == 0:
                self.NodeCoords = np.asarray(arg, dtype=np.float64).reshape(-1,3)
            elif i == 1:
                self.NodeConn = np.asarray(arg, dtype=np.int64).reshape(-1,3)

        self.verbose = False
        self._printlevel = 0

    @classmethod
    def from_tris(cls, TriCoords):
        """
        Create a mesh from an (n,3,3) triangle list.
        """
        return cls(*utils.Tris2Mesh(TriCoords))

    def __repr__(self):
        return 'Mesh Object\n{0:d} Nodes\n{1:d} Elements'.format(self.NNode,self.NElem)
    def __iter__(self):
        return iter((self.NodeCoords,self.NodeConn))

    def reset(self):
        self._ElemNormals = []

    def copy(self):
        M = mesh(copy.copy(self.NodeCoords), copy.copy(self.NodeConn))
        M._ElemNormals = copy.copy(self._ElemNormals)
        M.isovalue = self.isovalue
        M.verbose = self.verbose
        return M

    @property
    def NNode(self):
        return len(self.NodeCoords)
    @property
    def NElem(self):
        return len(self.NodeConn)
    @property
    def TriCoords(self):
        return utils.Mesh2Tris(self.NodeCoords, self.NodeConn)
    @property
    def ElemNormals(self):
        if len(self._ElemNormals) != self.NElem or self.NElem == 0:
            if self.verbose:
                print('\n'+'\t'*self._printlevel+'Calculating surface element normals...',end='')
            self._ElemNormals = utils.TriNormals(self.TriCoords)
            if self.verbose:
                print('Done', end='\n'+'\t'*self._printlevel)
        return self._ElemNormals
    @property
    def bounds(self):
        """[xmin, xmax, ymin, ymax, zmin, zmax] of the nodes"""
        if self.NNode == 0:
            return []
        mins = np.min(self.NodeCoords, axis=0)
        maxs = np.max(self.NodeCoords, axis=0)
        return [mins[0], maxs[0], mins[1], maxs[1], mins[2], maxs[2]]

    def Mesh2Meshio(self):
        """
        Convert the mesh to a meshio.Mesh with a single triangle cell block
        (no cell blocks if the mesh is empty).
        """
        cells = [('triangle', self.NodeConn)] if self.NElem > 0 else []
        m = meshio.Mesh(self.NodeCoords, cells)
        return m

    def write(self, filename, filetype=None):
        """
        Write the mesh to a .stl or .obj file (see :func:`isosurf.export.write`).

        Parameters
        ----------
        filename : str
            Output file path.
        filetype : str or isosurf.export.MeshFileType, optional
            File format, by default None. If None, the format is determined
            from the file extension.

        Returns
        -------
        filename : str
            Path of the written file.
        """
        return export.write(filename, self.TriCoords, isovalue=self.isovalue, filetype=filetype)

    def read(file):
        """
        read read a triangular surface mesh from a .stl or .obj file

        Parameters
        ----------
        file : str
            File path to a mesh file.

        Returns
        -------
        M : isosurf.mesh.mesh
            Mesh object
        """
        TriCoords = export.read(file)
        M = mesh.from_tris(TriCoords)
        return M
