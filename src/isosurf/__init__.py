# -*- coding: utf-8 -*-
# Created on Mon Oct 12 10:04:31 2026
"""
Isosurface extraction from regular 3D scalar fields.

Objects
=======
.. autosummary::
    :toctree: generated/

    .. currentmodule:: isosurf.grid

    VolumeGrid

    .. currentmodule:: isosurf.mesh

    mesh


.. currentmodule:: isosurf

Submodules
===============
.. autosummary::
    :toctree: generated/

    batch
    cli
    contour
    export
    grid
    tables
    utils
    volume

"""
from functools import wraps
import warnings
import numpy as np

__version__ = '0.1.0'

try:
    from numba import njit
    _ISOSURF_USE_NUMBA = True
except ImportError:
    njit = None
    _ISOSURF_USE_NUMBA = False

def use_numba(enabled=True):
    global _ISOSURF_USE_NUMBA
    if njit is None and enabled:
        warnings.warn('numba is not available for import. Install with `conda install numba` or `pip install numba`.')
    _ISOSURF_USE_NUMBA = enabled and (njit is not None)

def check_numba():
    global _ISOSURF_USE_NUMBA
    if _ISOSURF_USE_NUMBA and (njit is not None):
        check = True
    else:
        check = False
    return check

def try_njit(func=None, *njit_args, **njit_kwargs):
    @wraps(func)
    def decorator(func):
        if check_numba():
            jit_func = njit(*njit_args, **njit_kwargs)(func)
        else:
            jit_func = func

        return jit_func

    return decorator(func) if func else decorator

def demo_volume(name='sphere', n=32):
    """
    Generate example volume data.

    Parameters
    ----------
    name : str, optional
        Name of the example field, by default 'sphere'.
        Available options are:

        - "sphere" - distance from the center of the unit cube, the 0.35 isosurface is a sphere
        - "gyroid" - the gyroid triply periodic minimal surface, with one period across the unit cube
        - "torus" - torus with major radius 0.3, the 0.1 isosurface is the torus surface

    n : int, optional
        Number of samples along each axis, by default 32.

    Returns
    -------
    grid : isosurf.grid.VolumeGrid
        Volume grid spanning [0,1]^3 with n samples along each axis.

    """
    x = np.linspace(0, 1, n)
    Z, Y, X = np.meshgrid(x, x, x, indexing='ij')
    if name == 'sphere':
        img = np.sqrt((X-0.5)**2 + (Y-0.5)**2 + (Z-0.5)**2)
    elif name == 'gyroid':
        X = 2*np.pi*X; Y = 2*np.pi*Y; Z = 2*np.pi*Z
        img = np.sin(X)*np.cos(Y) + np.sin(Y)*np.cos(Z) + np.sin(Z)*np.cos(X)
    elif name == 'torus':
        img = np.sqrt((np.sqrt((X-0.5)**2 + (Y-0.5)**2) - 0.3)**2 + (Z-0.5)**2)
    else:
        raise ValueError(f'Unknown volume option: {name:s}')

    h = 1/(n-1) if n > 1 else 1
    return grid.VolumeGrid.from_image(img, h)

from . import tables, grid, utils, contour, export, volume, batch
from .mesh import mesh
from .grid import VolumeGrid
from .contour import MarchingCubes, Isosurface
__all__ = ["check_numba", "use_numba", "try_njit", "demo_volume", "VolumeGrid",
"MarchingCubes", "Isosurface", "batch", "contour", "export", "grid", "mesh",
"tables", "utils", "volume"]
