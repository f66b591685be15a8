#!/usr/bin/env python3
# -*- coding:utf-8 -*-
import os

import nibabel as nib
import numpy as np
from nibabel.gifti import GiftiDataArray, GiftiImage

from ifepy.io.test_data import TEST_SHAPE, get_data

SCRIPT = 'ife_compute_gradient_features.py'


def test_help(script_runner):
    ret = script_runner.run([SCRIPT, '--help'])
    assert ret.success


def test_version(script_runner):
    ret = script_runner.run([SCRIPT, '--version'])
    assert ret.success
    assert '0.1' in ret.stdout


def test_execution(script_runner, tmp_path):
    image = get_data('image', tmp_path)
    mask = get_data('mask', tmp_path)

    ret = script_runner.run([SCRIPT, '-i', image, '-m', mask,
                             '-o', str(tmp_path), '-p', 'foo_'])
    assert ret.success

    out = nib.load(os.path.join(tmp_path, 'foo_GradientMagnitude.nii.gz'))
    assert out.shape == TEST_SHAPE
    data = out.get_fdata()
    assert np.all(data >= 0.0)
    assert not np.any(data[nib.load(mask).get_fdata() == 0])


def test_default_prefix(script_runner, tmp_path):
    ret = script_runner.run([SCRIPT,
                             '--image', get_data('image', tmp_path),
                             '--mask', get_data('full_mask', tmp_path),
                             '--outdir', str(tmp_path),
                             '--boundary_mode', 'reflect',
                             '--no_image_spacing', '-v'])
    assert ret.success
    assert os.path.isfile(os.path.join(tmp_path, 'gradient_GradientMagnitude.nii.gz'))


def test_missing_image_argument(script_runner, tmp_path):
    ret = script_runner.run([SCRIPT, '-m', get_data('mask', tmp_path),
                             '-o', str(tmp_path)])
    assert not ret.success
    assert '-i/--image' in ret.stderr
    assert not os.path.exists(os.path.join(tmp_path, 'gradient_GradientMagnitude.nii.gz'))


def test_mismatched_mask(script_runner, tmp_path):
    image = get_data('image', tmp_path)
    mask = get_data('mismatched_mask', tmp_path)

    ret = script_runner.run([SCRIPT, '-i', image, '-m', mask, '-o', str(tmp_path)])
    assert ret.returncode == 1
    assert 'Failed to process.' in ret.stderr
    assert f'Image: {image}' in ret.stderr
    assert f'Mask: {mask}' in ret.stderr
    assert 'Base file name: ' + os.path.join(str(tmp_path), 'gradient_') in ret.stderr
    assert 'ComputeError' in ret.stderr
    assert not os.path.exists(os.path.join(tmp_path, 'gradient_GradientMagnitude.nii.gz'))


def test_missing_output_directory(script_runner, tmp_path):
    out_dir = str(tmp_path / 'missing')
    ret = script_runner.run([SCRIPT, '-i', get_data('image', tmp_path),
                             '-m', get_data('mask', tmp_path), '-o', out_dir])
    assert ret.returncode == 1
    assert 'WriteError' in ret.stderr


def test_surface_image(script_runner, tmp_path):
    surface = str(tmp_path / 'surface.gii')
    array = GiftiDataArray(np.zeros((4, 3), dtype=np.float32))
    nib.save(GiftiImage(darrays=[array]), surface)

    ret = script_runner.run([SCRIPT, '-i', surface, '-m', get_data('mask', tmp_path),
                             '-o', str(tmp_path)])
    assert ret.returncode == 1
    assert 'Failed to process.' in ret.stderr
    assert f'Image: {surface}' in ret.stderr
    assert 'LoadError' in ret.stderr
