"""
Energy function for seam carving.

The energy function determines which pixels are "important".
Low-energy seams are preferred for removal.

We use the L1 norm of forward differences of the grayscale intensity,
with protected pixels forced to a sentinel that outranks any gradient.
"""

from typing import Optional

import torch

# Larger than any gradient value (at most 2 * 255), small enough that a
# full column of it still fits comfortably in an int64 cost.
FORCED_ENERGY = 2 ** 31 - 1


def gradient_energy(intensity: torch.Tensor,
                    mask: Optional[torch.Tensor] = None) -> torch.Tensor:
    """
    Compute the per-pixel energy of an intensity field.

    E(y, x) = |I(y, x) - I(y, x')| + |I(y, x) - I(y', x)|

    where x' is the next column (previous one on the last column) and
    y' is the next row (previous one on the last row). Pixels protected
    by the mask get FORCED_ENERGY instead.

    Args:
        intensity: Grayscale intensity field (H, W), integer valued
        mask: Optional boolean protection mask (H, W)

    Returns:
        Energy field (H, W), dtype int64
    """
    if intensity.dim() != 2:
        raise ValueError(f"Expected intensity of shape (H, W), got {tuple(intensity.shape)}")

    H, W = intensity.shape
    if H < 2 or W < 2:
        raise ValueError(f"Energy needs at least a 2x2 field, got {H}x{W}")

    gray = intensity.long()

    # I(y, x'): next column, previous one on the last column
    x_neighbor = torch.empty_like(gray)
    x_neighbor[:, :-1] = gray[:, 1:]
    x_neighbor[:, -1] = gray[:, -2]

    # I(y', x): next row, previous one on the last row
    y_neighbor = torch.empty_like(gray)
    y_neighbor[:-1, :] = gray[1:, :]
    y_neighbor[-1, :] = gray[-2, :]

    energy = torch.abs(gray - x_neighbor) + torch.abs(gray - y_neighbor)

    if mask is not None:
        if mask.shape != gray.shape:
            raise ValueError(f"Mask shape {tuple(mask.shape)} does not match "
                             f"intensity shape {tuple(gray.shape)}")
        energy = torch.where(mask.bool(), torch.full_like(energy, FORCED_ENERGY), energy)

    return energy
