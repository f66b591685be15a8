# -*- coding: utf-8 -*-
"""
Gradient features estimated with first order central difference operators.

The derivative along an axis is the correlation of the volume with
[-1/2, 0, 1/2], i.e. D[i] = (f[i+1] - f[i-1]) / 2, divided by the voxel
spacing along that axis. Outside the volume, samples are extended with the
scipy.ndimage `mode` given; the default 'nearest' replicates the edge voxel
(zero flux Neumann condition).
"""
import logging

import numpy as np
from scipy.ndimage import correlate1d
from tqdm import tqdm

from ifepy.utils.errors import ComputeError

BOUNDARY_MODES = ('nearest', 'reflect', 'mirror', 'constant', 'wrap')
DEFAULT_BOUNDARY_MODE = 'nearest'

CENTRAL_DIFFERENCE = np.array([-0.5, 0.0, 0.5])

logger = logging.getLogger(__name__)


def directional_derivative(data, axis, spacing=1.0, mode=DEFAULT_BOUNDARY_MODE):
    """
    First order derivative of `data` along `axis`.

    Parameters
    ----------
    data : array_like
        Input samples.
    axis : int
        Axis along which the derivative is estimated.
    spacing : float
        Distance between two samples along `axis`.
    mode : str
        Boundary extension, one of BOUNDARY_MODES.

    Returns
    -------
    derivative : ndarray
        Float64 array with the shape of `data`.
    """
    derivative = correlate1d(np.asarray(data, dtype=np.float64),
                             CENTRAL_DIFFERENCE, axis=axis, mode=mode)
    return derivative / float(spacing)


def gradient_magnitude(data, spacing=None, mode=DEFAULT_BOUNDARY_MODE,
                       progress=False):
    """
    Euclidean norm of the gradient at each voxel of a 3D volume.

    Parameters
    ----------
    data : array_like (X, Y, Z)
        Input volume.
    spacing : sequence of 3 floats, optional
        Voxel size along each axis. Derivatives are taken per voxel when
        None.
    mode : str
        Boundary extension, one of BOUNDARY_MODES.
    progress : bool
        Show a progress bar over the axes.

    Returns
    -------
    magnitude : ndarray (X, Y, Z)
        Float32 gradient magnitude, non-negative.
    """
    data = np.asarray(data, dtype=np.float64)
    if data.ndim != 3:
        raise ComputeError(f'Expected a 3D volume, got shape {data.shape}.')
    if mode not in BOUNDARY_MODES:
        raise ComputeError(f'Unknown boundary mode {mode}. '
                           f'Choose one of {BOUNDARY_MODES}.')

    if spacing is None:
        spacing = np.ones(data.ndim)
    spacing = np.asarray(spacing, dtype=float)
    if spacing.shape != (data.ndim,):
        raise ComputeError(f'Expected {data.ndim} spacing values, got {spacing.tolist()}.')
    if np.any(spacing <= 0.0):
        raise ComputeError(f'Voxel spacing must be positive, got {spacing.tolist()}.')

    logger.info('Gradient magnitude with spacing %s and %s boundaries',
                spacing.tolist(), mode)
    sum_of_squares = np.zeros(data.shape, dtype=np.float64)
    for axis in tqdm(range(data.ndim), 'Derivatives', disable=not progress):
        sum_of_squares += directional_derivative(data, axis, spacing[axis], mode)**2

    return np.sqrt(sum_of_squares).astype(np.float32)
