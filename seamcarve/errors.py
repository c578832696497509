"""
Exceptions raised by the seam carving engine.
"""


class SeamCarvingError(Exception):
    """Base class for every failure raised by seamcarve."""


class InvalidDimensionsError(SeamCarvingError, ValueError):
    """The input image is too small (width or height below 2) to carve."""


class InfeasibleSeamCountError(SeamCarvingError, ValueError):
    """More seams were requested than half the input width allows."""


class InternalInconsistencyError(SeamCarvingError, RuntimeError):
    """Backtracking found no predecessor matching a stored cost.

    This signals a defect in the cost matrix construction, not bad input.
    """
