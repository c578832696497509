"""
Content-aware image width resizing by seam carving.

Seams are found by forward-energy dynamic programming over a shrinking map
of active columns, optionally steered away from a protection mask.
"""

__version__ = "0.1.0"

from .errors import (SeamCarvingError, InvalidDimensionsError,
                     InfeasibleSeamCountError, InternalInconsistencyError)
from .imaging import RGBWeights, to_intensity, load_image, save_image, load_mask, save_mask
from .energy import FORCED_ENERGY, gradient_energy
from .seam import (BOUNDARY_COST, EXHAUSTED, init_column_map, transition_costs,
                   cost_matrix, min_bottom_slot, shift_left, backtrack_seam)
from .carving import (
    ResizeMode,
    SeamCarver,
    carve_width,
    reduce_width,
    enlarge_width,
    enlarge_index_table,
)

__all__ = [
    'SeamCarvingError',
    'InvalidDimensionsError',
    'InfeasibleSeamCountError',
    'InternalInconsistencyError',
    'RGBWeights',
    'to_intensity',
    'load_image',
    'save_image',
    'load_mask',
    'save_mask',
    'FORCED_ENERGY',
    'gradient_energy',
    'BOUNDARY_COST',
    'EXHAUSTED',
    'init_column_map',
    'transition_costs',
    'cost_matrix',
    'min_bottom_slot',
    'shift_left',
    'backtrack_seam',
    'ResizeMode',
    'SeamCarver',
    'carve_width',
    'reduce_width',
    'enlarge_width',
    'enlarge_index_table',
]
