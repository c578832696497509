"""Shared test fixtures for the seamcarve test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest


def make_striped_image(row_values, H, channels=3):
    """uint8 image whose every row holds `row_values`, identical in all channels."""
    row = torch.tensor(row_values, dtype=torch.uint8)
    gray = row.unsqueeze(0).expand(H, -1)
    if channels > 0:
        return gray.unsqueeze(0).expand(channels, -1, -1).clone()
    return gray.clone()


def make_column_mask(H, W, columns):
    """Boolean mask protecting the given columns in every row."""
    mask = torch.zeros(H, W, dtype=torch.bool)
    for col in columns:
        mask[:, col] = True
    return mask


@pytest.fixture
def spike_image():
    """4 wide, 2 high, grayscale columns [0, 0, 100, 0]."""
    return make_striped_image([0, 0, 100, 0], H=2)


@pytest.fixture
def uniform_image():
    """6 wide, 3 high, flat gray."""
    return make_striped_image([128] * 6, H=3)


@pytest.fixture
def random_image():
    torch.manual_seed(42)
    return torch.rand(3, 20, 16)
