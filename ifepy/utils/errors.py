# -*- coding: utf-8 -*-
"""
Exceptions raised by the feature extraction pipeline.
"""


class PipelineError(Exception):
    """Base class for every failure of a pipeline stage."""


class LoadError(PipelineError):
    def __init__(self, path, reason):
        super().__init__(f'Could not load {path}: {reason}')
        self.path = path
        self.reason = reason


class ComputeError(PipelineError):
    pass


class WriteError(PipelineError):
    def __init__(self, path, reason):
        super().__init__(f'Could not write {path}: {reason}')
        self.path = path
        self.reason = reason
