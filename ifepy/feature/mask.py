# -*- coding: utf-8 -*-
"""
Restrict feature maps to a region of interest.
"""
import numpy as np

from ifepy.utils.errors import ComputeError

# Largest difference allowed between the affines of an image and its mask
AFFINE_TOLERANCE = 1e-4


def apply_mask(data, mask, outside_value=0.0):
    """
    Keep `data` where `mask` is nonzero and set `outside_value` elsewhere.

    A new array is returned; `data` is left untouched.
    """
    data = np.asarray(data)
    mask = np.asarray(mask)
    if data.shape != mask.shape:
        raise ComputeError(f'Mask shape {mask.shape} does not match '
                           f'image shape {data.shape}.')
    return np.where(mask != 0, data, np.asarray(outside_value, dtype=data.dtype))


def assert_same_space(volume, mask, tolerance=AFFINE_TOLERANCE):
    """
    Raise ComputeError unless `volume` and `mask` share grid and affine.
    """
    if volume.shape != mask.shape:
        raise ComputeError(f'Mask shape {mask.shape} does not match '
                           f'image shape {volume.shape}.')
    if not np.allclose(volume.affine, mask.affine, rtol=0.0, atol=tolerance):
        raise ComputeError('Mask and image do not occupy the same physical space.\n'
                           f'Image affine:\n{volume.affine}\n'
                           f'Mask affine:\n{mask.affine}')


def mask_volume(volume, mask, outside_value=0.0):
    """
    Volume counterpart of `apply_mask`, checking that both volumes are
    defined on the same grid first.
    """
    assert_same_space(volume, mask)
    return volume.with_data(apply_mask(volume.data, mask.data, outside_value))
