# -*- coding: utf-8 -*-
"""
Reading and writing of 3D scalar volumes.

NIfTI (and the other formats nibabel understands) are read with nibabel.
ITK MetaImage and NRRD files are read with SimpleITK and converted to the
RAS+ voxel-to-world affine used everywhere else in the package. Outputs are
always written as gzip-compressed NIfTI-1.
"""
import logging
import os

import nibabel as nib
import numpy as np
import SimpleITK as sitk
from nibabel.filebasedimages import ImageFileError
from nibabel.spatialimages import HeaderDataError, SpatialImage

from ifepy.utils.errors import LoadError, WriteError

OUT_FILE_TYPE = '.nii.gz'
SITK_FILE_TYPES = ('.mha', '.mhd', '.nrrd', '.nhdr')

# ITK physical space is LPS
LPS_TO_RAS = np.diag([-1.0, -1.0, 1.0, 1.0])

logger = logging.getLogger(__name__)


class Volume:
    """
    Dense 3D scalar grid with its spatial metadata.

    Parameters
    ----------
    data : ndarray (X, Y, Z)
        Voxel samples indexed (x, y, z).
    affine : ndarray (4, 4)
        Voxel to RAS+ world transform.
    header : nibabel header or None
        Header of the file the volume was read from, if any.
    """
    def __init__(self, data, affine, header=None):
        self.data = data
        self.affine = np.asarray(affine, dtype=float)
        self.header = header

    @property
    def shape(self):
        return self.data.shape

    @property
    def spacing(self):
        """Voxel size along each axis."""
        if self.header is not None and hasattr(self.header, 'get_zooms'):
            return tuple(float(z) for z in self.header.get_zooms()[:3])
        return tuple(float(s) for s in np.linalg.norm(self.affine[:3, :3], axis=0))

    def with_data(self, data):
        """New volume holding `data` in the same space as this one."""
        return Volume(data, self.affine.copy(), self.header)


def _read_nibabel(path):
    img = nib.load(path)
    if not isinstance(img, SpatialImage):
        raise LoadError(path, 'not a volumetric image')
    dtype = img.get_data_dtype()
    if dtype.fields is not None or np.issubdtype(dtype, np.complexfloating):
        raise LoadError(path, f'expected scalar real samples, got {dtype}')
    return img.get_fdata(dtype=np.float32), img.affine, img.header


def _read_sitk(path):
    image = sitk.ReadImage(path, sitk.sitkFloat32)
    ndim = image.GetDimension()
    if ndim < 3:
        raise LoadError(path, f'expected a 3D volume, got {ndim}D')

    # GetArrayFromImage returns (..., z, y, x)
    data = sitk.GetArrayFromImage(image).T
    spacing = np.array(image.GetSpacing()[:3])
    direction = np.array(image.GetDirection()).reshape((ndim, ndim))[:3, :3]

    affine = np.eye(4)
    affine[:3, :3] = direction * spacing.reshape((1, 3))
    affine[:3, 3] = image.GetOrigin()[:3]
    return data, LPS_TO_RAS.dot(affine), None


def load_volume(path):
    """
    Load a 3D scalar volume from disk.

    Parameters
    ----------
    path : str or Path
        Image file. NIfTI and other nibabel formats, or one of
        .mha, .mhd, .nrrd, .nhdr.

    Returns
    -------
    volume : Volume
        Float32 samples with the file's spatial metadata.

    Raises
    ------
    LoadError
        When the file is missing, unreadable, of an unsupported format or
        not a scalar 3D volume.
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise LoadError(path, 'no such file')

    try:
        if path.lower().endswith(SITK_FILE_TYPES):
            data, affine, header = _read_sitk(path)
        else:
            data, affine, header = _read_nibabel(path)
    except (ImageFileError, HeaderDataError, OSError,
            EOFError, ValueError, RuntimeError) as e:
        raise LoadError(path, str(e)) from e

    # 4D images with singleton trailing dimensions are 3D volumes
    if data.ndim > 3 and all(s == 1 for s in data.shape[3:]):
        data = data.reshape(data.shape[:3])
    if data.ndim != 3:
        raise LoadError(path, f'expected a 3D scalar volume, got shape {data.shape}')

    logger.debug('Loaded %s with shape %s', path, data.shape)
    return Volume(data, affine, header)


def get_base_filename(out_dir, prefix):
    return os.path.join(out_dir, prefix)


def get_output_filename(out_dir, prefix, feature_name='GradientMagnitude'):
    """
    Output path `<out_dir>/<prefix><feature_name>.nii.gz`.
    """
    return get_base_filename(out_dir, prefix) + feature_name + OUT_FILE_TYPE


def save_volume(volume, path):
    """
    Write `volume` as a float32 NIfTI-1 image.

    The affine of the volume is written unchanged. When the volume comes
    from a NIfTI file, its sform/qform codes and spatial units are kept.

    Raises
    ------
    WriteError
        When the output directory is missing or not writable, or when
        nibabel fails to serialize the image.
    """
    path = os.fspath(path)
    out_dir = os.path.dirname(path) or os.curdir
    if not os.path.isdir(out_dir):
        raise WriteError(path, f'output directory {out_dir} does not exist')
    if not os.access(out_dir, os.W_OK):
        raise WriteError(path, f'output directory {out_dir} is not writable')

    img = nib.Nifti1Image(volume.data.astype(np.float32), volume.affine)
    if isinstance(volume.header, nib.Nifti1Header):
        sform_code = int(volume.header['sform_code'])
        qform_code = int(volume.header['qform_code'])
        if sform_code > 0:
            img.set_sform(volume.affine, code=sform_code)
        if qform_code > 0:
            img.set_qform(volume.affine, code=qform_code)
        img.header.set_xyzt_units(*volume.header.get_xyzt_units())
    img.set_data_dtype(np.float32)

    try:
        nib.save(img, path)
    except (ImageFileError, OSError, ValueError) as e:
        raise WriteError(path, str(e)) from e
    logger.debug('Saved %s', path)
