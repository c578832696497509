"""
High-level carving: the resize context and the geometry that applies seams.
"""

import enum
import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union

import torch

from .energy import gradient_energy
from .errors import InfeasibleSeamCountError, InvalidDimensionsError
from .imaging import RGBWeights, to_intensity
from .seam import backtrack_seam, cost_matrix, init_column_map

logger = logging.getLogger(__name__)


class ResizeMode(enum.Enum):
    REDUCE = 'reduce'
    ENLARGE = 'enlarge'
    IDENTITY = 'identity'

    @classmethod
    def select(cls, in_width: int, out_width: int) -> 'ResizeMode':
        if out_width < in_width:
            return cls.REDUCE
        if out_width > in_width:
            return cls.ENLARGE
        return cls.IDENTITY


def _image_size(image: torch.Tensor) -> Tuple[int, int]:
    if image.dim() == 2:
        return image.shape[0], image.shape[1]
    if image.dim() == 3:
        return image.shape[1], image.shape[2]
    raise ValueError(f"Expected image of shape (C, H, W) or (H, W), got {tuple(image.shape)}")


def _sample_columns(image: torch.Tensor, index: torch.Tensor) -> torch.Tensor:
    """Build an image whose pixel (y, x) is image[..., y, index[y, x]]."""
    if image.dim() == 2:
        return image.gather(1, index)
    C = image.shape[0]
    return image.gather(2, index.unsqueeze(0).expand(C, -1, -1))


def reduce_width(image: torch.Tensor, column_map: torch.Tensor,
                 out_width: int) -> torch.Tensor:
    """
    Keep the columns that survived seam removal.

    Args:
        image: Original image (C, H, W) or (H, W)
        column_map: Active column map after all seams were removed
        out_width: Requested width, equal to the final active width

    Returns:
        Reduced image (C, H, out_width) or (H, out_width)
    """
    return _sample_columns(image, column_map[:, :out_width])


def enlarge_index_table(seam_marks: torch.Tensor) -> torch.Tensor:
    """
    Index table for widening: every marked column is followed by a duplicate.

    Args:
        seam_marks: Seam marks in original coordinates (H, W)

    Returns:
        Original column for every output pixel (H, W + seams per row)
    """
    H, W = seam_marks.shape
    columns = torch.arange(W, dtype=torch.int64, device=seam_marks.device)
    rows = [torch.repeat_interleave(columns, 1 + seam_marks[y].long()) for y in range(H)]

    widths = {len(row) for row in rows}
    if len(widths) != 1:
        raise ValueError(f"Every row needs the same number of seam marks, got widths {sorted(widths)}")

    return torch.stack(rows)


def enlarge_width(image: torch.Tensor, seam_marks: torch.Tensor) -> torch.Tensor:
    """Duplicate every seam pixel right after itself."""
    return _sample_columns(image, enlarge_index_table(seam_marks))


class SeamCarver:
    """
    Width resize of one image by seam carving.

    All seams are found when the carver is constructed: the energy field is
    computed once from the original image, then each iteration builds a cost
    matrix over the active columns, backtracks the cheapest seam and shrinks
    the column map. resize() then applies the recorded seams in one pass.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        out_width: Requested output width
        weights: Channel weights for grayscale conversion (equal by default)
        mask: Optional boolean protection mask (H, W); True pixels are avoided
        log: Optional callable receiving progress messages
    """

    def __init__(self, image: torch.Tensor, out_width: int,
                 weights: Optional[RGBWeights] = None,
                 mask: Optional[torch.Tensor] = None,
                 log: Optional[Callable[[str], None]] = None):
        self._sink = log
        H, W = _image_size(image)

        if W < 2 or H < 2:
            raise InvalidDimensionsError(
                f"Can not apply seam carving: image is too small ({H}x{W})")

        num_seams = abs(out_width - W)
        if num_seams > W // 2:
            raise InfeasibleSeamCountError(
                f"Can not apply seam carving: {num_seams} seams requested, "
                f"at most {W // 2} allowed for width {W}")

        if mask is not None and tuple(mask.shape) != (H, W):
            raise ValueError(f"Mask shape {tuple(mask.shape)} does not match image size ({H}, {W})")

        self.image = image
        self.mask = mask.bool() if mask is not None else None
        self.weights = weights if weights is not None else RGBWeights()
        self.in_height = H
        self.in_width = W
        self.out_width = out_width
        self.num_seams = num_seams
        self.mode = ResizeMode.select(W, out_width)

        device = image.device
        self.seam_marks = torch.zeros((H, W), dtype=torch.bool, device=device)
        self.seams: List[List[int]] = []
        self.intensity = None
        self.energy = None
        self.column_map = None
        self.working_mask = None

        self._log("begins preliminary calculations.")
        if num_seams > 0:
            self._log("initializes intensity, energy and column map.")
            self.intensity = to_intensity(image, self.weights)
            if self.mask is not None:
                self.working_mask = self.mask.clone()
            else:
                self.working_mask = torch.zeros((H, W), dtype=torch.bool, device=device)
            self.energy = gradient_energy(self.intensity, self.mask)
            self.column_map = init_column_map(H, W, device=device)
            self._calculate_seams()
        self._log("preliminary calculations were ended.")

    def _log(self, message: str):
        message = f"Seam carving: {message}"
        if self._sink is not None:
            self._sink(message)
        else:
            logger.debug(message)

    def _calculate_seams(self):
        self._log(f"finds the {self.num_seams} minimal seams.")
        for k in range(self.num_seams):
            width = self.in_width - k
            self._log(f"finds seam no: {k + 1}.")
            costs = cost_matrix(self.energy, self.intensity, self.column_map, width)
            seam = backtrack_seam(costs, self.energy, self.intensity, self.column_map,
                                  self.working_mask, self.seam_marks, width)
            self.seams.append(seam)

    def resize(self) -> torch.Tensor:
        """Produce the image at the requested width."""
        if self.mode is ResizeMode.REDUCE:
            self._log(f"reduces image width by {self.num_seams} pixels.")
            return reduce_width(self.image, self.column_map, self.out_width)
        elif self.mode is ResizeMode.ENLARGE:
            self._log(f"increases image width by {self.num_seams} pixels.")
            return enlarge_width(self.image, self.seam_marks)
        else:
            return self.image.clone()

    def mask_after_carving(self) -> torch.Tensor:
        """Protection mask at the output size.

        Inserted duplicate columns are unprotected.
        """
        H = self.in_height
        if self.mask is None:
            return torch.zeros((H, self.out_width), dtype=torch.bool, device=self.image.device)

        if self.mode is ResizeMode.REDUCE:
            return self.working_mask[:, :self.out_width].clone()
        elif self.mode is ResizeMode.ENLARGE:
            table = enlarge_index_table(self.seam_marks)
            sampled = self.mask.gather(1, table)
            duplicate = torch.zeros_like(sampled)
            duplicate[:, 1:] = table[:, 1:] == table[:, :-1]
            return sampled & ~duplicate
        else:
            return self.mask.clone()

    def show_seams(self, color: Union[float, int, Sequence[float]]) -> torch.Tensor:
        """
        Copy of the original image with every seam pixel painted in `color`.

        Args:
            color: One value per channel (or a single value), on the image's scale

        Returns:
            Image tensor shaped like the input
        """
        img = self.image.clone()
        fill = torch.as_tensor(color, dtype=img.dtype, device=img.device)

        if img.dim() == 2:
            img[self.seam_marks] = fill.reshape(-1)[0]
        else:
            img[:, self.seam_marks] = fill.reshape(-1, 1) if fill.dim() > 0 else fill
        return img


def carve_width(image: torch.Tensor, out_width: int,
                weights: Optional[RGBWeights] = None,
                mask: Optional[torch.Tensor] = None,
                log: Optional[Callable[[str], None]] = None) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Seam-carve an image to a new width.

    Returns:
        (resized image, protection mask at the output size)
    """
    carver = SeamCarver(image, out_width, weights=weights, mask=mask, log=log)
    return carver.resize(), carver.mask_after_carving()
