# -*- coding: utf-8 -*-
# Created on Fri Oct 16 09:40:26 2026
"""
Command line interface

.. code-block:: none

    isosurf INPUT OUTDIR ISOVALUE [ISOVALUE ...] [--format {stl,obj}]

INPUT is a volume file (.ctl, .npy) or a directory of volume files. One mesh
file per input file and isovalue is written to OUTDIR.
"""
import argparse, os, sys

from . import __version__, batch, use_numba

def parse_args(argv=None):
    ap = argparse.ArgumentParser(prog='isosurf', description='Generate isosurface meshes from volume data.')
    ap.add_argument('input', help='volume file (.ctl, .npy) or directory of volume files')
    ap.add_argument('outdir', help='output directory')
    ap.add_argument('isovalues', type=float, nargs='+', metavar='isovalue', help='isosurface value(s)')
    ap.add_argument('--format', dest='filetype', choices=['stl','obj'], default='obj', help='output mesh format (default: obj)')
    ap.add_argument('--method', choices=['vectorized','loop'], default=None, help='extraction method (default: loop if numba is available, otherwise vectorized)')
    ap.add_argument('--n-jobs', type=int, default=1, help='number of parallel extraction jobs (default: 1)')
    ap.add_argument('--no-numba', action='store_true', help="don't use numba: the default method becomes vectorized and the loop method runs as plain python")
    ap.add_argument('--quiet', action='store_true', help='only report errors')
    return ap.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    verbose = not args.quiet
    if args.no_numba:
        use_numba(False)
    if verbose:
        print(f'Isosurface Generator {__version__}\n')

    if not os.path.exists(args.input):
        print(f'Input path "{args.input:s}" does not exist.', file=sys.stderr)
        return 1

    results, failures = batch.ProcessBatch(args.input, args.outdir, args.isovalues, filetype=args.filetype,
        verbose=verbose, progress=not verbose, method=args.method, n_jobs=args.n_jobs)

    for file, e in failures.items():
        print(f'Error while processing "{file:s}":\n{str(e):s}', file=sys.stderr)
    if len(failures) > 0:
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
