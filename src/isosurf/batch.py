# -*- coding: utf-8 -*-
# Created on Thu Oct 15 16:03:11 2026
"""
Batch isosurface generation

.. currentmodule:: isosurf.batch

.. autosummary::
    :toctree: submodules/

    ProcessFile
    ProcessBatch
    OutputPath

"""
import numpy as np
import os, glob, time, warnings
import tqdm

from . import volume, contour, export

def OutputPath(outdir, filename, isovalue=None, filetype='obj'):
    """
    Output mesh file path for a volume file. If an isovalue is given, it is
    appended to the file name: ``<outdir>/<name>_<isovalue>.<ext>``,
    otherwise the path is ``<outdir>/<name>.<ext>``. The isovalue is written
    with full precision (``repr``), so distinct isovalues give distinct paths.
    """
    ftype = export.filetype_from(filetype)
    stem = os.path.splitext(os.path.basename(filename))[0]
    if isovalue is not None:
        stem += f'_{float(isovalue)!r}'
    return os.path.join(outdir, stem + export.Extensions[ftype])

def ProcessFile(filename, outdir, isovalues, filetype='obj', verbose=True, method=None, n_jobs=1, **kwargs):
    """
    Generate isosurfaces for one volume file. The volume grid is built once
    and reused for every isovalue. One mesh file is written per isovalue
    (see :func:`OutputPath`, the isovalue is only added to the file name if
    more than one isovalue is requested).

    Parameters
    ----------
    filename : str
        Path to a volume file (see :func:`isosurf.volume.read`).
    outdir : str
        Output directory, created if it doesn't exist.
    isovalues : float or list
        Isovalue(s) to extract.
    filetype : str or isosurf.export.MeshFileType, optional
        Output mesh format, 'stl' or 'obj', by default 'obj'.
    verbose : bool, optional
        Print progress and elapsed times, by default True.
    method : str, optional
        Extraction method (see :func:`isosurf.contour.MarchingCubes`), by
        default None.
    n_jobs : int, optional
        Number of parallel extraction jobs, by default 1.
    **kwargs
        Additional keyword arguments passed to :func:`isosurf.volume.read`.

    Returns
    -------
    results : dict
        For each distinct isovalue, a (path, number of triangles) tuple.
    """
    if np.isscalar(isovalues):
        isovalues = [isovalues]
    # Repeated isovalues would write the same file
    isovalues = list(dict.fromkeys(float(iso) for iso in isovalues))
    os.makedirs(outdir, exist_ok=True)

    if verbose:
        print('========================================')
        print(f'Processing {filename:s}')

    t0 = time.time()
    grid = volume.read(filename, **kwargs)
    if verbose:
        print(f'Loaded {grid.shape[0]:d}x{grid.shape[1]:d}x{grid.shape[2]:d} volume data ({(time.time()-t0)*1000:.0f} ms)')

    results = {}
    for isovalue in isovalues:
        t0 = time.time()
        TriCoords = contour.MarchingCubes(grid, isovalue=isovalue, method=method, n_jobs=n_jobs)
        if verbose:
            print(f'Generated isosurface for {isovalue!r} ({(time.time()-t0)*1000:.0f} ms)')

        t0 = time.time()
        path = OutputPath(outdir, filename, isovalue=isovalue if len(isovalues) > 1 else None, filetype=filetype)
        path = export.write(path, TriCoords, isovalue=isovalue, filetype=filetype)
        if verbose:
            print(f'Wrote {len(TriCoords):d} triangles to {path:s} ({(time.time()-t0)*1000:.0f} ms)')
        results[isovalue] = (path, len(TriCoords))

    return results

def ProcessBatch(path, outdir, isovalues, filetype='obj', verbose=True, progress=False, **kwargs):
    """
    Generate isosurfaces for a volume file or every volume file (.ctl, .npy)
    in a directory. A failure while processing one file is reported as a
    warning and the remaining files are still processed.

    Parameters
    ----------
    path : str
        Path to a volume file or a directory of volume files.
    outdir : str
        Output directory.
    isovalues : float or list
        Isovalue(s) to extract.
    filetype : str or isosurf.export.MeshFileType, optional
        Output mesh format, 'stl' or 'obj', by default 'obj'.
    verbose : bool, optional
        Print progress and elapsed times, by default True.
    progress : bool, optional
        Show a progress bar over the files, by default False.
    **kwargs
        Additional keyword arguments passed to :func:`ProcessFile`.

    Returns
    -------
    results : dict
        Results of :func:`ProcessFile` for each successfully processed file.
    failures : dict
        Exception raised for each file that failed.
    """
    if os.path.isdir(path):
        files = sorted(f for ext in volume.Extensions for f in glob.glob(os.path.join(path, '*'+ext)))
        if len(files) == 0:
            warnings.warn(f'No volume files ({", ".join(volume.Extensions):s}) found in {path:s}.')
    elif os.path.isfile(path):
        files = [path]
    else:
        raise ValueError(f'File path {path:s} does not exist.')

    results = {}
    failures = {}
    for file in tqdm.tqdm(files, disable=not progress):
        try:
            results[file] = ProcessFile(file, outdir, isovalues, filetype=filetype, verbose=verbose, **kwargs)
        except Exception as e:
            warnings.warn(f'Error while processing "{file:s}": {str(e):s}')
            failures[file] = e

    return results, failures
