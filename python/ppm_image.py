#!/usr/bin/env python3
import io
import os
import tempfile
import numpy as np
from PIL import Image

CHANNELS = 3
MAXVAL = 255


class ImageStoreError(Exception):
    pass


class PixelImage:
    """RGB pixel buffer with per-channel accessors, stored as a (height, width, 3) uint8 array."""

    def __init__(self, pixels):
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValueError(f"Expected (height, width, {CHANNELS}) pixels, got shape {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Image must have positive width and height")
        self.pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    @classmethod
    def create(cls, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid image size {width}x{height}")
        return cls(np.zeros((height, width, CHANNELS), dtype=np.uint8))

    def width(self):
        return self.pixels.shape[1]

    def height(self):
        return self.pixels.shape[0]

    def get_channel(self, x, y, channel):
        return int(self.pixels[y, x, channel])

    def set_channel(self, x, y, channel, value):
        self.pixels[y, x, channel] = value

    def channel(self, index):
        view = self.pixels[:, :, index]
        view.flags.writeable = False
        return view

    def clear(self, red, green, blue):
        self.pixels[:, :] = (red, green, blue)


def read_header(f):
    """Return (magic, width, height, maxval) from the start of a PPM file."""
    magic = f.read(2)
    if magic not in (b'P3', b'P6'):
        raise ImageStoreError("not an RGB PPM image")
    tokens = []
    token = b''
    while len(tokens) < 3:
        char = f.read(1)
        if char == b'#':
            f.readline()
            char = b'\n'
        if char and not char.isspace():
            token += char
            continue
        if token:
            tokens.append(token)
            token = b''
        if not char:
            raise ImageStoreError("truncated PPM header")
    try:
        width, height, maxval = (int(t) for t in tokens)
    except ValueError:
        raise ImageStoreError(f"malformed PPM header {b' '.join(tokens)!r}") from None
    return magic.decode(), width, height, maxval


def read_image(path):
    try:
        with open(path, 'rb') as f:
            _, _, _, maxval = read_header(f)
        # Pillow rescales other maxvals instead of keeping the raw samples
        if maxval != MAXVAL:
            raise ImageStoreError(f"only 8-bit samples (maxval {MAXVAL}) are supported, got maxval {maxval}")
        with Image.open(path) as img:
            if img.format != 'PPM' or img.mode != 'RGB':
                raise ImageStoreError(f"not an RGB PPM image ({img.format}, {img.mode})")
            img.load()
            pixels = np.array(img, dtype=np.uint8)
    except ImageStoreError as e:
        raise ImageStoreError(f"Cannot read {path}: {e}") from None
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageStoreError(f"Cannot read {path}: {e}") from e
    return PixelImage(pixels)


def write_image(image, path):
    # Encode fully before touching the output path
    buffer = io.BytesIO()
    Image.fromarray(image.pixels).save(buffer, format='PPM')
    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(dir=os.path.dirname(os.path.abspath(path)),
                                         prefix='.fast-blur-', delete=False) as f:
            temp_path = f.name
            f.write(buffer.getvalue())
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, path)
    except OSError as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.remove(temp_path)
        raise ImageStoreError(f"Cannot write {path}: {e}") from e
