#!/usr/bin/env python3
import argparse
import os
import sys
import time
from blur import DEFAULT_CHUNK_SIZE, apply_box_blur
from ppm_image import ImageStoreError, read_image, write_image


def non_negative_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def positive_int(text):
    value = non_negative_int(text)
    if value == 0:
        raise argparse.ArgumentTypeError("must be positive, got 0")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='fast-blur',
        description='Box blur a raw PPM image using summed-area tables.')
    parser.add_argument('radius', type=non_negative_int,
                        help='half-width of the square averaging window')
    parser.add_argument('input_path', help='raw (P6) PPM image to read')
    parser.add_argument('output_path', help='where to write the blurred PPM image')
    parser.add_argument('--workers', type=positive_int, default=os.cpu_count() or 1,
                        help='number of worker threads (default: CPU count)')
    parser.add_argument('--chunk-size', type=positive_int, default=DEFAULT_CHUNK_SIZE,
                        help=f'rows or columns per task (default: {DEFAULT_CHUNK_SIZE})')
    parser.add_argument('--quiet', action='store_true', help='do not print timings')
    return parser.parse_args(argv)


def fail(message):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    args = parse_args(argv)
    verbose = not args.quiet

    # Load image
    start_time = time.time()
    try:
        image = read_image(args.input_path)
    except ImageStoreError as e:
        fail(e)
    load_time = time.time() - start_time
    if verbose:
        print(f"Image loading took {load_time * 1000:.2f}ms")

    # Apply blur
    start_time = time.time()
    try:
        blurred = apply_box_blur(image, args.radius, args.workers, args.chunk_size, verbose=verbose)
    except MemoryError:
        fail(f"not enough memory to blur a {image.width()}x{image.height()} image")
    blur_time = time.time() - start_time
    if verbose:
        print(f"Blur processing took {blur_time * 1000:.2f}ms")

    # Save image
    start_time = time.time()
    try:
        write_image(blurred, args.output_path)
    except ImageStoreError as e:
        fail(e)
    save_time = time.time() - start_time
    if verbose:
        print(f"Image saving took {save_time * 1000:.2f}ms")

        total_time = load_time + blur_time + save_time
        print(f"Total time: {total_time * 1000:.2f}ms")


if __name__ == "__main__":
    main()
