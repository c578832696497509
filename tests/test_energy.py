"""Tests for the energy function."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from seamcarve.energy import FORCED_ENERGY, gradient_energy

from conftest import make_column_mask


class TestGradientEnergy:
    def test_spike_column_energies(self):
        """Forward differences, falling back to the previous column on the last one."""
        intensity = torch.tensor([[0, 0, 100, 0],
                                  [0, 0, 100, 0]])
        energy = gradient_energy(intensity)
        expected = torch.tensor([[0, 100, 100, 100],
                                 [0, 100, 100, 100]])
        assert torch.equal(energy, expected)

    def test_vertical_difference_uses_previous_row_at_bottom(self):
        """The last row compares against the row above it."""
        intensity = torch.tensor([[10, 10],
                                  [10, 10],
                                  [40, 40]])
        energy = gradient_energy(intensity)
        assert energy[0].tolist() == [0, 0]
        assert energy[1].tolist() == [30, 30]
        assert energy[2].tolist() == [30, 30]

    def test_uniform_field_is_zero(self):
        """A flat field has no gradient anywhere."""
        energy = gradient_energy(torch.full((5, 7), 42))
        assert (energy == 0).all()

    def test_energy_nonnegative_and_bounded(self):
        """Gradient energy lies in [0, 510] on the 0..255 scale."""
        torch.manual_seed(42)
        intensity = torch.randint(0, 256, (30, 30))
        energy = gradient_energy(intensity)
        assert (energy >= 0).all()
        assert (energy <= 2 * 255).all()

    def test_output_is_int64(self):
        energy = gradient_energy(torch.zeros(4, 4, dtype=torch.uint8))
        assert energy.dtype == torch.int64
        assert energy.shape == (4, 4)


class TestMaskedEnergy:
    def test_protected_pixels_get_forced_energy(self):
        """Masked pixels are replaced by the sentinel, others keep their gradient."""
        torch.manual_seed(42)
        intensity = torch.randint(0, 256, (10, 12))
        mask = make_column_mask(10, 12, [3, 7])
        energy = gradient_energy(intensity, mask)
        plain = gradient_energy(intensity)

        assert (energy[mask] == FORCED_ENERGY).all()
        assert torch.equal(energy[~mask], plain[~mask])

    def test_forced_energy_outranks_every_gradient(self):
        torch.manual_seed(0)
        intensity = torch.randint(0, 256, (8, 8))
        mask = torch.zeros(8, 8, dtype=torch.bool)
        mask[4, 4] = True
        energy = gradient_energy(intensity, mask)
        assert energy[4, 4] > energy[~mask].max()

    def test_mask_shape_mismatch_raises(self):
        with pytest.raises(ValueError):
            gradient_energy(torch.zeros(4, 4), torch.zeros(4, 5, dtype=torch.bool))


class TestEnergyValidation:
    def test_rejects_single_column(self):
        with pytest.raises(ValueError):
            gradient_energy(torch.zeros(5, 1))

    def test_rejects_single_row(self):
        with pytest.raises(ValueError):
            gradient_energy(torch.zeros(1, 5))

    def test_rejects_three_dimensional_input(self):
        with pytest.raises(ValueError):
            gradient_energy(torch.zeros(3, 4, 4))
