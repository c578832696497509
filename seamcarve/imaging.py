"""
Image containers, grayscale conversion and file I/O.

Images are torch tensors shaped (C, H, W) or (H, W). Floating tensors hold
values in [0, 1], integer tensors hold 0..255. The carving engine only ever
looks at an integer intensity field derived from the image.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
import torch
from PIL import Image


@dataclass(frozen=True)
class RGBWeights:
    """Channel weights for grayscale conversion."""

    red: int = 1
    green: int = 1
    blue: int = 1

    def __post_init__(self):
        if min(self.red, self.green, self.blue) < 0:
            raise ValueError(f"RGB weights must be non-negative, got {self}")
        if self.amount == 0:
            raise ValueError("At least one RGB weight must be positive")

    @property
    def amount(self) -> int:
        return self.red + self.green + self.blue


def _to_byte_scale(image: torch.Tensor) -> torch.Tensor:
    """Bring an image onto the integer 0..255 scale as int64."""
    if image.is_floating_point():
        return (image * 255.0).round().clamp(0, 255).long()
    return image.long()


def to_intensity(image: torch.Tensor, weights: RGBWeights = RGBWeights()) -> torch.Tensor:
    """
    Convert an image to an integer grayscale intensity field.

    Each pixel becomes (r*wr + g*wg + b*wb) // (wr + wg + wb) on the 0..255
    scale. Single-channel images are returned as-is on that scale.

    Args:
        image: RGB image tensor (C, H, W) or grayscale (H, W) / (1, H, W)
        weights: Channel weights

    Returns:
        Intensity field (H, W), dtype int64
    """
    pixels = _to_byte_scale(image)

    if pixels.dim() == 2:
        return pixels.clone()
    if pixels.dim() != 3:
        raise ValueError(f"Expected image of shape (C, H, W) or (H, W), got {tuple(image.shape)}")

    if pixels.shape[0] == 1:
        return pixels[0].clone()
    if pixels.shape[0] < 3:
        raise ValueError(f"Expected 1 or 3+ channels, got {pixels.shape[0]}")

    weighted = (pixels[0] * weights.red
                + pixels[1] * weights.green
                + pixels[2] * weights.blue)
    return torch.div(weighted, weights.amount, rounding_mode='floor')


def load_image(path: Union[str, Path], device='cpu') -> torch.Tensor:
    """Load image and convert to a (3, H, W) float tensor in [0, 1]."""
    img = Image.open(path).convert('RGB')
    img_array = np.array(img, dtype=np.float32) / 255.0
    return torch.from_numpy(img_array).permute(2, 0, 1).to(device)


def save_image(tensor: torch.Tensor, path: Union[str, Path]):
    """Save an image tensor (float in [0, 1] or integer 0..255)."""
    if tensor.dim() == 3 and tensor.shape[0] == 1:
        tensor = tensor[0]

    if tensor.is_floating_point():
        img_array = (tensor.cpu().numpy() * 255).round().clip(0, 255).astype(np.uint8)
    else:
        img_array = tensor.cpu().numpy().clip(0, 255).astype(np.uint8)

    if img_array.ndim == 3:
        img_array = img_array.transpose(1, 2, 0)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(img_array).save(path)


def load_mask(path: Union[str, Path], threshold: int = 128) -> torch.Tensor:
    """Load a protection mask; pixels at least `threshold` bright are protected."""
    img = Image.open(path).convert('L')
    mask_array = np.array(img, dtype=np.uint8) >= threshold
    return torch.from_numpy(mask_array)


def save_mask(mask: torch.Tensor, path: Union[str, Path]):
    """Save a boolean mask as a black/white image (white = protected)."""
    mask_array = mask.cpu().numpy().astype(np.uint8) * 255
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(mask_array).save(path)
