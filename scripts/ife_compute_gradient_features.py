#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Calculate features derived from the gradient estimated in each voxel,
masked with a mask image. The gradient is estimated by correlation with
first order central difference operators along each axis.

The calculated features are
  * Gradient magnitude, saved to <outdir>/<prefix>GradientMagnitude.nii.gz
"""
import argparse
import sys

from ifepy import __version__
from ifepy.feature.gradient import BOUNDARY_MODES, DEFAULT_BOUNDARY_MODE
from ifepy.pipeline import DEFAULT_PREFIX, PipelineConfig, run_pipeline
from ifepy.utils.errors import PipelineError
from ifepy.utils.io import add_verbose_arg, configure_logging


def _build_arg_parser():
    p = argparse.ArgumentParser(description=__doc__,
                                formatter_class=argparse.RawTextHelpFormatter)
    p.add_argument('-i', '--image', required=True, metavar='path',
                   help='Path to image.')
    p.add_argument('-m', '--mask', required=True, metavar='path',
                   help='Path to mask. Must match image dimensions.')
    p.add_argument('-o', '--outdir', required=True, metavar='path',
                   help='Path to output directory.')
    p.add_argument('-p', '--prefix', default=DEFAULT_PREFIX, metavar='string',
                   help='Prefix to use for output filenames [%(default)s].')

    p.add_argument('--boundary_mode', choices=BOUNDARY_MODES,
                   default=DEFAULT_BOUNDARY_MODE,
                   help='Extension of the volume past its edges when computing\n'
                        'derivatives [%(default)s].')
    p.add_argument('--no_image_spacing', action='store_true',
                   help='Compute derivatives per voxel instead of per unit\n'
                        'of physical distance.')
    p.add_argument('--version', action='version', version=__version__)
    add_verbose_arg(p)
    return p


def main():
    parser = _build_arg_parser()
    args = parser.parse_args()
    configure_logging(args.verbose)

    config = PipelineConfig.from_args(args)
    try:
        run_pipeline(config, progress=args.verbose != 'WARNING')
    except PipelineError as e:
        print('Failed to process.\n'
              f'Image: {config.image_path}\n'
              f'Mask: {config.mask_path}\n'
              f'Base file name: {config.base_filename}\n'
              f'{type(e).__name__}: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
