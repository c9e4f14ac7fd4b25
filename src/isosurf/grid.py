# -*- coding: utf-8 -*-
# Created on Mon Oct 12 11:02:45 2026
"""
Regular volume grids

.. currentmodule:: isosurf.grid

Objects
=======
.. autosummary::
    :toctree: submodules/

    VolumeGrid

"""
import numpy as np
import copy

class VolumeGrid:
    """
    Flat representation of a regularly sampled 3D scalar field.

    Samples are stored in x-fastest order, sample (x, y, z) is at flat index
    ``x + y*sizeX + z*sizeX*sizeY``. Sample positions are computed once, at
    construction, as ``origin + step*(x, y, z)``.

    Parameters
    ----------
    shape : array_like
        Number of samples along each axis, (sizeX, sizeY, sizeZ). Each must be
        at least 1.
    step : scalar or array_like
        Sample spacing along each axis, (stepX, stepY, stepZ). Spacings can be
        negative but not zero.
    origin : scalar or array_like
        Position of sample (0, 0, 0), (startX, startY, startZ).
    values : array_like
        Scalar values of the sampled field, sizeX*sizeY*sizeZ values in
        x-fastest order.

    Attributes
    ----------
    Values : np.ndarray
        (N,) array of sample values.
    Coords : np.ndarray
        (N,3) array of sample positions.
    Inside : np.ndarray
        (N,) boolean array, True where the sample value is greater than the
        last classified isovalue.
    isovalue : float or None
        Isovalue of the last call to :meth:`classify`, None if the grid hasn't
        been classified.
    """
    def __init__(self, shape, step, origin, values):

        shape = tuple(int(n) for n in shape)
        if len(shape) != 3:
            raise ValueError(f'shape must have three elements, not {len(shape):d}.')
        if min(shape) < 1:
            raise ValueError(f'Grid dimensions must be at least 1, not {str(shape):s}.')
        step = np.broadcast_to(np.asarray(step, dtype=np.float64), (3,)).copy()
        if np.any(step == 0):
            raise ValueError('Grid spacing must be non-zero along every axis.')
        origin = np.broadcast_to(np.asarray(origin, dtype=np.float64), (3,)).copy()

        values = np.array(values, dtype=np.float64).ravel()
        NSample = shape[0]*shape[1]*shape[2]
        if len(values) != NSample:
            raise ValueError(f'Expected {NSample:d} sample values for a {shape[0]:d}x{shape[1]:d}x{shape[2]:d} grid, got {len(values):d}.')

        self.shape = shape
        self.step = step
        self.origin = origin
        self.Values = values
        self.Values.flags.writeable = False

        # x fastest
        z, y, x = np.indices(shape[::-1]).reshape(3, -1)
        self.Coords = origin + step*np.column_stack([x, y, z])
        self.Coords.flags.writeable = False

        self.Inside = np.zeros(NSample, dtype=bool)
        self.isovalue = None

    @classmethod
    def from_image(cls, img, step=1, origin=0):
        """
        Create a grid from a 3D image array. Image axes 0, 1, 2 correspond to
        z, y, x, so ``img[z, y, x]`` is the value of sample (x, y, z).

        Parameters
        ----------
        img : array_like
            3D array of image data.
        step : scalar or array_like, optional
            Sample spacing, (stepX, stepY, stepZ), by default 1.
        origin : scalar or array_like, optional
            Position of sample (0, 0, 0), by default 0.

        Returns
        -------
        grid : VolumeGrid
        """
        img = np.asarray(img)
        if img.ndim != 3:
            raise ValueError('Image data must be a 3D array.')
        nz, ny, nx = img.shape
        return cls((nx, ny, nz), step, origin, img.ravel())

    def __repr__(self):
        return 'VolumeGrid\n{0:d}x{1:d}x{2:d} Samples\n{3:d} Cubes'.format(*self.shape, self.NCube)

    @property
    def NSample(self):
        return len(self.Values)
    @property
    def NCube(self):
        return int(np.prod([n-1 for n in self.shape]))
    @property
    def bounds(self):
        """[xmin, xmax, ymin, ymax, zmin, zmax] of the sample positions"""
        mins = np.min(self.Coords, axis=0)
        maxs = np.max(self.Coords, axis=0)
        return [mins[0], maxs[0], mins[1], maxs[1], mins[2], maxs[2]]

    def index(self, x, y, z):
        """
        Flat sample index of grid position (x, y, z). Accepts scalars or
        integer arrays.
        """
        sx, sy, _ = self.shape
        return x + y*sx + z*sx*sy

    def image(self, data=None):
        """
        Reshape per-sample data (by default the sample values) to a
        (sizeZ, sizeY, sizeX) image array. The result is a view.
        """
        if data is None:
            data = self.Values
        sx, sy, sz = self.shape
        return np.reshape(data, (sz, sy, sx))

    def classify(self, isovalue):
        """
        Mark each sample as inside (value > isovalue) or outside the
        isosurface. This overwrites the classification of any previous
        isovalue and must be done before extracting a surface for a new
        isovalue.

        Parameters
        ----------
        isovalue : float
            Isosurface threshold.

        Returns
        -------
        Inside : np.ndarray
            (N,) boolean array, the updated ``VolumeGrid.Inside`` array.
        """
        np.greater(self.Values, isovalue, out=self.Inside)
        self.isovalue = float(isovalue)
        return self.Inside

    def copy(self):
        G = copy.copy(self)
        G.Inside = self.Inside.copy()
        return G
