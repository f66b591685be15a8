# -*- coding: utf-8 -*-
"""
Masked gradient magnitude feature map, from input files to output file.

Stages run one after the other, each handing a new volume to the next:
load image and mask, gradient magnitude, masking, writing. The first
failing stage raises a PipelineError and nothing after it runs.
"""
import logging
from collections import namedtuple

from ifepy.feature.gradient import DEFAULT_BOUNDARY_MODE, gradient_magnitude
from ifepy.feature.mask import apply_mask, assert_same_space
from ifepy.io.image import (get_base_filename, get_output_filename,
                            load_volume, save_volume)
from ifepy.utils.errors import ComputeError

DEFAULT_PREFIX = 'gradient_'
FEATURE_NAME = 'GradientMagnitude'

logger = logging.getLogger(__name__)

_PipelineConfig = namedtuple('PipelineConfig',
                             ['image_path', 'mask_path', 'out_dir', 'prefix',
                              'use_image_spacing', 'boundary_mode'],
                             defaults=(DEFAULT_PREFIX, True, DEFAULT_BOUNDARY_MODE))


class PipelineConfig(_PipelineConfig):
    __slots__ = ()

    @classmethod
    def from_args(cls, args):
        return cls(image_path=args.image,
                   mask_path=args.mask,
                   out_dir=args.outdir,
                   prefix=args.prefix,
                   use_image_spacing=not args.no_image_spacing,
                   boundary_mode=args.boundary_mode)

    @property
    def base_filename(self):
        return get_base_filename(self.out_dir, self.prefix)

    @property
    def output_filename(self):
        return get_output_filename(self.out_dir, self.prefix, FEATURE_NAME)


def run_pipeline(config, progress=False):
    """
    Compute the masked gradient magnitude described by `config`.

    Parameters
    ----------
    config : PipelineConfig
        Input and output locations and processing options.
    progress : bool
        Show progress bars.

    Returns
    -------
    out_file : str
        Path of the written feature map.

    Raises
    ------
    LoadError, ComputeError, WriteError
        From the stage that failed.
    """
    image = load_volume(config.image_path)
    mask = load_volume(config.mask_path)
    assert_same_space(image, mask)
    logger.info('Loaded image %s and mask %s, shape %s, spacing %s',
                config.image_path, config.mask_path, image.shape, image.spacing)

    spacing = image.spacing if config.use_image_spacing else None
    try:
        gradient = image.with_data(gradient_magnitude(image.data, spacing,
                                                      config.boundary_mode,
                                                      progress=progress))
    except MemoryError as e:
        raise ComputeError('Not enough memory to compute the gradient magnitude.') from e
    logger.info('Gradient magnitude computed')

    masked = gradient.with_data(apply_mask(gradient.data, mask.data))
    logger.info('Masked %d of %d voxels', (mask.data == 0).sum(), mask.data.size)

    out_file = config.output_filename
    save_volume(masked, out_file)
    logger.info('Wrote %s', out_file)
    return out_file
