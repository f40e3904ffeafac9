"""
Pure-Python kernels: the interpreted single-threaded baseline.

These run on plain lists and ints so the baseline measures CPython itself.
Arithmetic order matches the compiled kernels term for term.
"""

import math
from typing import List

from .constants import (
    AMBIENT,
    BACKGROUND,
    DIFFUSE,
    HASH_BLOCK_STRIDE,
    HASH_MULTIPLIER,
    HASH_ROTATION,
    HASH_SEED,
    LIGHT_X,
    LIGHT_Y,
    LIGHT_Z,
    MASK32,
    SPHERE_RADIUS2,
    SPHERE_X,
    SPHERE_Y,
    SPHERE_Z,
    SURFACE_TINT,
)


def matrix_multiply(matrix_a: List[float], matrix_b: List[float], size: int) -> List[float]:
    """Dense n x n product in (i, k, j) order."""
    result = [0.0] * (size * size)
    for i in range(size):
        row = i * size
        for k in range(size):
            aik = matrix_a[row + k]
            bk = k * size
            for j in range(size):
                result[row + j] += aik * matrix_b[bk + j]
    return result


def mandelbrot(width: int, height: int, xmin: float, xmax: float,
               ymin: float, ymax: float, max_iter: int) -> List[int]:
    """Escape-time iteration counts, row-major, capped at max_iter."""
    result = [0] * (width * height)
    dx = (xmax - xmin) / width
    dy = (ymax - ymin) / height
    idx = 0
    for py in range(height):
        cy = ymin + py * dy
        for px in range(width):
            cx = xmin + px * dx
            zx = 0.0
            zy = 0.0
            it = 0
            while it < max_iter:
                zx2 = zx * zx
                zy2 = zy * zy
                if zx2 + zy2 > 4.0:
                    break
                zy = 2.0 * zx * zy + cy
                zx = zx2 - zy2 + cx
                it += 1
            result[idx] = it
            idx += 1
    return result


def _diffuse(h: int, value: int) -> int:
    h = (h * HASH_MULTIPLIER + value) & MASK32
    return ((h << HASH_ROTATION) | (h >> (32 - HASH_ROTATION))) & MASK32


def hash_block(data: bytes, block: int) -> int:
    h = (HASH_SEED + block * HASH_BLOCK_STRIDE) & MASK32
    for byte in data:
        h = _diffuse(h, byte)
    return h


def hash_diffusion(data: bytes, iterations: int) -> int:
    """Fold the per-iteration block digests into one 32-bit value."""
    acc = HASH_SEED
    for block in range(iterations):
        acc = _diffuse(acc, hash_block(data, block))
    return acc


def ray_color(nx: float, ny: float, samples: int):
    r = g = b = 0.0
    for _ in range(samples):
        inv_len = 1.0 / math.sqrt(nx * nx + ny * ny + 1.0)
        dir_x = nx * inv_len
        dir_y = ny * inv_len
        dir_z = -1.0 * inv_len

        oc_x = 0.0 - SPHERE_X
        oc_y = 0.0 - SPHERE_Y
        oc_z = 0.0 - SPHERE_Z
        qa = dir_x * dir_x + dir_y * dir_y + dir_z * dir_z
        qb = 2.0 * (oc_x * dir_x + oc_y * dir_y + oc_z * dir_z)
        qc = oc_x * oc_x + oc_y * oc_y + oc_z * oc_z - SPHERE_RADIUS2
        disc = qb * qb - 4.0 * qa * qc

        t = -1.0
        if disc >= 0.0:
            sqrt_disc = math.sqrt(disc)
            t = (-qb - sqrt_disc) / (2.0 * qa)
            if t < 0.0:
                t = (-qb + sqrt_disc) / (2.0 * qa)

        if t < 0.0:
            r += BACKGROUND[0]
            g += BACKGROUND[1]
            b += BACKGROUND[2]
        else:
            normal_x = t * dir_x - SPHERE_X
            normal_y = t * dir_y - SPHERE_Y
            normal_z = t * dir_z - SPHERE_Z
            dot = normal_x * LIGHT_X + normal_y * LIGHT_Y + normal_z * LIGHT_Z
            shade = AMBIENT + DIFFUSE * max(dot, 0.0)
            r += shade * SURFACE_TINT[0]
            g += shade * SURFACE_TINT[1]
            b += shade * SURFACE_TINT[2]

    inv_samples = 1.0 / samples
    return r * inv_samples, g * inv_samples, b * inv_samples


def ray_trace(width: int, height: int, samples: int) -> List[float]:
    """Row-major RGB triples, one per pixel."""
    result = [0.0] * (width * height * 3)
    for y in range(height):
        ny = (y / height) * 2.0 - 1.0
        for x in range(width):
            nx = (x / width) * 2.0 - 1.0
            idx = (y * width + x) * 3
            result[idx], result[idx + 1], result[idx + 2] = ray_color(nx, ny, samples)
    return result
