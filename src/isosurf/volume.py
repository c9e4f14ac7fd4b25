# -*- coding: utf-8 -*-
# Created on Thu Oct 15 10:17:44 2026
"""
Volume data input

Volume data can be given as a 3D image array, a numpy ``.npy`` file or a GrADS
data descriptor (``.ctl``) file with its binary data file.

.. currentmodule:: isosurf.volume

.. autosummary::
    :toctree: submodules/

    read
    read_ctl
    parse_ctl

"""
import numpy as np
from scipy import ndimage
import sys, os, warnings

from .grid import VolumeGrid

Extensions = ('.ctl', '.npy')

def read(source, step=1, origin=0, scalefactor=1, scaleorder=1, var=None, t=0, fill_undef=None):
    """
    Read volume data into a :class:`~isosurf.grid.VolumeGrid`.

    Parameters
    ----------
    source : str or np.ndarray
        3D image array (axes 0, 1, 2 correspond to z, y, x), or the path to a
        ``.npy`` file containing one, or the path to a GrADS ``.ctl`` file.
    step : scalar or array_like, optional
        Sample spacing (stepX, stepY, stepZ) for array and ``.npy`` data, by
        default 1. GrADS files define their own spacing.
    origin : scalar or array_like, optional
        Position of the first sample for array and ``.npy`` data, by default 0.
    scalefactor : float, optional
        Scale factor for resampling the volume. If greater than 1, the volume
        will be sampled more finely, if less than 1 it will be coarsened,
        by default 1. The sample spacing is adjusted so that the resampled
        grid covers the same bounds.
    scaleorder : int, optional
        Interpolation order for scaling the volume (see scipy.ndimage.zoom),
        by default 1. Must be 0-5.
    var : str or int, optional
        Name or index of the GrADS variable to read, by default None (the
        first variable).
    t : int, optional
        GrADS time step to read, by default 0.
    fill_undef : float, optional
        Value to replace GrADS undefined values with, by default None. If
        None, undefined values are kept as they are.

    Returns
    -------
    grid : isosurf.grid.VolumeGrid
        Volume grid.
    """
    if isinstance(source, np.ndarray):
        img = source
    elif isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        if not os.path.isfile(path):
            raise ValueError(f'File {path:s} does not exist.')
        ext = os.path.splitext(path)[1].lower()
        if ext == '.npy':
            img = np.load(path)
        elif ext == '.ctl':
            img, step, origin = read_ctl(path, var=var, t=t, fill_undef=fill_undef)
        else:
            raise ValueError(f'Volume file must have one of the following extensions: {", ".join(Extensions):s}, not "{ext:s}".')
    else:
        raise ValueError(f'source must be an array or a file path, not {str(type(source)):s}')

    img = np.asarray(img)
    if img.ndim != 3:
        raise ValueError(f'Volume data must be a 3D array, not {img.ndim:d}D.')
    if scalefactor != 1:
        # zoom maps the first and last samples onto themselves, so the grid keeps its extent
        n0 = np.array(img.shape[::-1])
        img = ndimage.zoom(img.astype(np.float64), scalefactor, order=scaleorder)
        n1 = np.array(img.shape[::-1])
        step = np.broadcast_to(np.asarray(step, dtype=np.float64), (3,)).copy()
        span = (n0 > 1) & (n1 > 1)
        step[span] *= (n0[span] - 1)/(n1[span] - 1)
        step[~span] /= scalefactor

    return VolumeGrid.from_image(img, step=step, origin=origin)

def parse_ctl(filename):
    """
    Parse a GrADS data descriptor file.

    Supported entries are DSET, UNDEF, OPTIONS, FILEHEADER, XDEF, YDEF and
    ZDEF (LINEAR or LEVELS mappings), TDEF and the VARS ... ENDVARS block.
    Lines starting with ``*`` are comments.

    Parameters
    ----------
    filename : str
        Path to the ``.ctl`` file.

    Returns
    -------
    ctl : dict
        Descriptor contents, with keys 'dset' (absolute path to the data file),
        'undef', 'byteorder' ('<' or '>'), 'fileheader', 'xdef', 'ydef',
        'zdef' (each a (n, start, step) tuple), 'tdef' (number of times) and
        'vars' (list of (name, nlevels) tuples).
    """
    with open(filename) as f:
        lines = [line.strip() for line in f]
    lines = [line for line in lines if len(line) > 0 and not line.startswith('*')]

    ctl = {'dset' : None, 'undef' : None, 'byteorder' : '<' if sys.byteorder == 'little' else '>',
           'fileheader' : 0, 'tdef' : 1, 'vars' : []}
    i = 0
    while i < len(lines):
        tokens = lines[i].split()
        key = tokens[0].lower()
        if key == 'dset':
            dset = lines[i].split(None, 1)[1].strip()
            if dset.startswith('^'):
                dset = os.path.join(os.path.dirname(os.path.abspath(filename)), dset[1:])
            ctl['dset'] = dset
        elif key == 'undef':
            ctl['undef'] = float(tokens[1])
        elif key == 'options':
            for option in tokens[1:]:
                option = option.lower()
                if option == 'little_endian':
                    ctl['byteorder'] = '<'
                elif option == 'big_endian':
                    ctl['byteorder'] = '>'
                elif option == 'byteswapped':
                    ctl['byteorder'] = '>' if sys.byteorder == 'little' else '<'
                elif option == 'sequential':
                    raise ValueError('Sequential (FORTRAN record) GrADS data is not supported.')
        elif key == 'fileheader':
            ctl['fileheader'] = int(tokens[1])
        elif key in ('xdef', 'ydef', 'zdef'):
            n = int(tokens[1])
            mapping = tokens[2].lower()
            if mapping == 'linear':
                ctl[key] = (n, float(tokens[3]), float(tokens[4]))
            elif mapping == 'levels':
                levels = tokens[3:]
                while len(levels) < n and i+1 < len(lines):
                    i += 1
                    levels += lines[i].split()
                levels = np.array(levels[:n], dtype=np.float64)
                if len(levels) < n:
                    raise ValueError(f'{key.upper():s} specifies {n:d} levels, only {len(levels):d} given.')
                if n > 1:
                    h = levels[1] - levels[0]
                    if not np.allclose(np.diff(levels), h):
                        raise ValueError(f'{key.upper():s} levels must be uniformly spaced.')
                else:
                    h = 1.
                ctl[key] = (n, levels[0], h)
            else:
                raise ValueError(f'Unsupported {key.upper():s} mapping "{tokens[2]:s}", must be LINEAR or LEVELS.')
        elif key == 'tdef':
            ctl['tdef'] = int(tokens[1])
        elif key == 'vars':
            nvars = int(tokens[1])
            for _ in range(nvars):
                i += 1
                vtokens = lines[i].split()
                ctl['vars'].append((vtokens[0], int(vtokens[1])))
        i += 1

    if ctl['dset'] is None:
        raise ValueError(f'{filename:s} has no DSET entry.')
    for key in ('xdef', 'ydef'):
        if key not in ctl:
            raise ValueError(f'{filename:s} has no {key.upper():s} entry.')
    if 'zdef' not in ctl:
        ctl['zdef'] = (1, 0., 1.)
    if len(ctl['vars']) == 0:
        raise ValueError(f'{filename:s} defines no variables.')
    return ctl

def read_ctl(filename, var=None, t=0, fill_undef=None):
    """
    Read one variable at one time step from GrADS data.

    Parameters
    ----------
    filename : str
        Path to the ``.ctl`` file.
    var : str or int, optional
        Name or index of the variable to read, by default None (the first
        variable).
    t : int, optional
        Time step, by default 0.
    fill_undef : float, optional
        Value to replace undefined values with, by default None.

    Returns
    -------
    img : np.ndarray
        (nz, ny, nx) array of float32 data.
    step : np.ndarray
        (stepX, stepY, stepZ)
    origin : np.ndarray
        (startX, startY, startZ)
    """
    ctl = parse_ctl(filename)
    nx, x0, hx = ctl['xdef']
    ny, y0, hy = ctl['ydef']
    _, z0, hz = ctl['zdef']

    names = [name.lower() for name, _ in ctl['vars']]
    if var is None:
        ivar = 0
    elif isinstance(var, str):
        if var.lower() not in names:
            raise ValueError(f'Variable "{var:s}" is not defined in {filename:s}. Available variables: {", ".join(names):s}')
        ivar = names.index(var.lower())
    else:
        ivar = int(var)
        if not 0 <= ivar < len(names):
            raise ValueError(f'Variable index {ivar:d} out of range for {len(names):d} variables.')
    if not 0 <= t < ctl['tdef']:
        raise ValueError(f'Time step {t:d} out of range for {ctl["tdef"]:d} time steps.')

    # Variables with 0 levels are surface variables with one level
    nlevels = [max(nlev, 1) for _, nlev in ctl['vars']]
    nz = nlevels[ivar]
    offset = nx*ny*(t*sum(nlevels) + sum(nlevels[:ivar]))

    dtype = np.dtype(ctl['byteorder'] + 'f4')
    count = nx*ny*nz
    if not os.path.isfile(ctl['dset']):
        raise ValueError(f'Data file {ctl["dset"]:s} does not exist.')
    data = np.fromfile(ctl['dset'], dtype=dtype, count=count, offset=ctl['fileheader'] + offset*dtype.itemsize)
    if len(data) < count:
        raise ValueError(f'Data file {ctl["dset"]:s} is too short for the grid defined in {filename:s}.')

    data = data.astype(np.float32)
    if ctl['undef'] is not None:
        undef = data == np.float32(ctl['undef'])
        if np.any(undef):
            if fill_undef is None:
                warnings.warn(f'{np.sum(undef):d} undefined values in {filename:s}.')
            else:
                data[undef] = fill_undef

    img = data.reshape(nz, ny, nx)
    return img, np.array([hx, hy, hz]), np.array([x0, y0, z0])
