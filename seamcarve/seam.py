"""
Seam computation over a shrinking set of active columns.

The original image is never modified while seams are searched. Instead an
active column map records, per row, which original column sits in each
logical slot; removing a seam shifts the slots of every row one step left.
Each iteration builds a fresh forward-energy cost matrix over the active
slots, walks it upward to recover the cheapest seam, and shrinks the map.
"""

import logging
from typing import List, Tuple

import torch

from .errors import InternalInconsistencyError

logger = logging.getLogger(__name__)

# Vertical transition cost at the first and last active slot.
BOUNDARY_COST = 255

# Marks a slot of the column map that no longer holds a column.
EXHAUSTED = torch.iinfo(torch.int64).max


def init_column_map(height: int, width: int, device='cpu') -> torch.Tensor:
    """Column map where every slot holds its own original column index."""
    return torch.arange(width, dtype=torch.int64, device=device).unsqueeze(0).repeat(height, 1)


def transition_costs(intensity: torch.Tensor, column_map: torch.Tensor,
                     y: int, width: int) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Forward-energy transition costs for entering row y (y >= 1).

    For active slot x, with every intensity read at the original column
    currently mapped to that slot:
      C_V = |I(y, x+1) - I(y, x-1)|    (BOUNDARY_COST on the first/last slot)
      C_R = C_V + |I(y-1, x) - I(y, x+1)|
      C_L = C_V + |I(y-1, x) - I(y, x-1)|

    C_R at the last slot and C_L at the first slot have no predecessor and
    are left equal to C_V; callers never read them.

    Args:
        intensity: Intensity field of the original image (H, W)
        column_map: Active column map (H, W)
        y: Row entered from row y - 1
        width: Current active width

    Returns:
        (C_V, C_R, C_L), each (width,) int64
    """
    row = intensity[y, column_map[y, :width]].long()
    above = intensity[y - 1, column_map[y - 1, :width]].long()

    cost_v = torch.full((width,), BOUNDARY_COST, dtype=torch.int64, device=intensity.device)
    cost_v[1:-1] = torch.abs(row[2:] - row[:-2])

    cost_r = cost_v.clone()
    cost_r[:-1] += torch.abs(above[:-1] - row[1:])

    cost_l = cost_v.clone()
    cost_l[1:] += torch.abs(above[1:] - row[:-1])

    return cost_v, cost_r, cost_l


def cost_matrix(energy: torch.Tensor, intensity: torch.Tensor,
                column_map: torch.Tensor, width: int) -> torch.Tensor:
    """
    Minimum accumulated cost of reaching every active pixel from the top row.

    M[0, x] = E(0, x)
    M[y, x] = E(y, x) + min(M[y-1, x]   + C_V,
                            M[y-1, x+1] + C_R,   (not on the last slot)
                            M[y-1, x-1] + C_L)   (not on the first slot)

    Rows depend on the previous row only, so each row is computed in one
    vectorised step.

    Args:
        energy: Energy field of the original image (H, W)
        intensity: Intensity field of the original image (H, W)
        column_map: Active column map (H, W)
        width: Current active width

    Returns:
        Cost matrix (H, width), dtype int64
    """
    H = energy.shape[0]
    costs = torch.empty((H, width), dtype=torch.int64, device=energy.device)
    costs[0] = energy[0, column_map[0, :width]]

    for y in range(1, H):
        cost_v, cost_r, cost_l = transition_costs(intensity, column_map, y, width)
        prev = costs[y - 1]

        best = prev + cost_v
        best[:-1] = torch.minimum(best[:-1], prev[1:] + cost_r[:-1])
        best[1:] = torch.minimum(best[1:], prev[:-1] + cost_l[1:])

        costs[y] = energy[y, column_map[y, :width]] + best

    return costs


def min_bottom_slot(costs: torch.Tensor) -> int:
    """Slot with the smallest cost in the bottom row; the first one wins ties."""
    return int(torch.argmin(costs[-1]).item())


def shift_left(column_map: torch.Tensor, working_mask: torch.Tensor,
               y: int, slot: int, width: int):
    """
    Remove an active slot from row y.

    Every slot after `slot` moves one position left in both the column map
    and the working mask; the freed trailing slot is marked EXHAUSTED and
    unprotected.
    """
    column_map[y, slot:width - 1] = column_map[y, slot + 1:width].clone()
    working_mask[y, slot:width - 1] = working_mask[y, slot + 1:width].clone()
    column_map[y, width - 1] = EXHAUSTED
    working_mask[y, width - 1] = False


def backtrack_seam(costs: torch.Tensor, energy: torch.Tensor, intensity: torch.Tensor,
                   column_map: torch.Tensor, working_mask: torch.Tensor,
                   seam_marks: torch.Tensor, width: int) -> List[int]:
    """
    Recover the cheapest seam from a cost matrix and remove it.

    Starting at the cheapest bottom slot, each row's predecessor is found by
    re-evaluating the transition formulas in a fixed order (vertical, right,
    left) against the stored cost. The seam pixel is marked in seam_marks in
    original coordinates, and the row below is shifted once its slot is no
    longer needed; the top row is shifted last.

    Args:
        costs: Cost matrix from cost_matrix (H, width)
        energy: Energy field (H, W)
        intensity: Intensity field (H, W)
        column_map: Active column map (H, W), shrunk in place
        working_mask: Working protection mask (H, W), shrunk in place
        seam_marks: Seam marks in original coordinates (H, W), updated in place
        width: Active width the cost matrix was built for

    Returns:
        Original column of the seam in every row, top row first
    """
    H = costs.shape[0]
    slot = min_bottom_slot(costs)
    logger.debug("Bottom of seam at slot %d", slot)

    seam = [0] * H
    seam[H - 1] = int(column_map[H - 1, slot].item())
    seam_marks[H - 1, seam[H - 1]] = True

    for y in range(H - 2, -1, -1):
        below = y + 1
        cost_v, cost_r, cost_l = transition_costs(intensity, column_map, below, width)
        pixel_energy = int(energy[below, column_map[below, slot]].item())
        reached = int(costs[below, slot].item()) - pixel_energy

        prev_slot = slot
        if reached == int(costs[y, slot].item()) + int(cost_v[slot].item()):
            pass
        elif (slot < width - 1
              and reached == int(costs[y, slot + 1].item()) + int(cost_r[slot].item())):
            slot += 1
        elif (slot > 0
              and reached == int(costs[y, slot - 1].item()) + int(cost_l[slot].item())):
            slot -= 1
        else:
            raise InternalInconsistencyError(
                f"No predecessor matches cost {costs[below, prev_slot].item()} "
                f"at row {below}, slot {prev_slot}")

        seam[y] = int(column_map[y, slot].item())
        seam_marks[y, seam[y]] = True
        shift_left(column_map, working_mask, below, prev_slot, width)

    shift_left(column_map, working_mask, 0, slot, width)
    return seam
