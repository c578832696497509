"""
Resize an image's width with seam carving.

    python examples/carve_image.py input.jpg output.png --width 300
    python examples/carve_image.py input.jpg output.png --width 500 \
        --mask protect.png --seams-out seams.png --show
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import matplotlib.pyplot as plt

from seamcarve import RGBWeights, SeamCarver, load_image, load_mask, save_image, save_mask


def parse_weights(text: str) -> RGBWeights:
    try:
        red, green, blue = (int(part) for part in text.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected R,G,B integers, got {text!r}")
    return RGBWeights(red, green, blue)


def show_comparison(original: torch.Tensor, seams: torch.Tensor, result: torch.Tensor):
    """Plot original, seams and result side by side."""
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    panels = [(original, 'Original'), (seams, 'Seams'), (result, 'Result')]
    for ax, (img, title) in zip(axes, panels):
        ax.imshow(img.permute(1, 2, 0).cpu().numpy())
        ax.set_title(f"{title} ({img.shape[2]}x{img.shape[1]})")
        ax.axis('off')
    plt.tight_layout()
    plt.show()


def main():
    parser = argparse.ArgumentParser(description="Content-aware width resizing")
    parser.add_argument('input', help="Input image")
    parser.add_argument('output', help="Output image")
    parser.add_argument('--width', type=int, required=True, help="Output width in pixels")
    parser.add_argument('--mask', help="Protection mask image (white = protect)")
    parser.add_argument('--mask-out', help="Where to save the carved mask")
    parser.add_argument('--weights', type=parse_weights, default=RGBWeights(),
                        help="Grayscale channel weights as R,G,B (default 1,1,1)")
    parser.add_argument('--seams-out', help="Save the original with seams highlighted")
    parser.add_argument('--show', action='store_true', help="Plot the result")
    parser.add_argument('--verbose', action='store_true', help="Log every step")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")

    print(f"Loading {args.input}...")
    image = load_image(args.input)
    C, H, W = image.shape
    print(f"Image shape: {C} x {H} x {W}")

    mask = load_mask(args.mask) if args.mask else None

    print(f"Carving width {W} -> {args.width}...")
    carver = SeamCarver(image, args.width, weights=args.weights, mask=mask)
    result = carver.resize()
    save_image(result, args.output)
    print(f"Saved: {args.output}")

    if args.mask_out:
        save_mask(carver.mask_after_carving(), args.mask_out)
        print(f"Saved: {args.mask_out}")

    seams = carver.show_seams((1.0, 0.0, 0.0))
    if args.seams_out:
        save_image(seams, args.seams_out)
        print(f"Saved: {args.seams_out}")

    if args.show:
        show_comparison(image, seams, result)


if __name__ == '__main__':
    main()
