"""
Compiled kernels (numba, nogil).

Every kernel computes a unit range [start, end) and writes it into ``out``,
which is the caller's view of that range only: unit ``u`` lands at
``(u - start) * stride``. Releasing the GIL lets the worker pool run
partitions on separate cores from plain Python threads.
"""

import math

import numpy as np
from numba import njit

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

# numba freezes module globals as compile-time constants; keep them scalar.
BG_R, BG_G, BG_B = BACKGROUND
TINT_R, TINT_G, TINT_B = SURFACE_TINT
ROT_BACK = 32 - HASH_ROTATION


@njit(nogil=True, cache=False)
def matrix_multiply_rows(matrix_a, matrix_b, out, size, start, end):
    for i in range(start, end):
        row = (i - start) * size
        for k in range(size):
            aik = matrix_a[i * size + k]
            bk = k * size
            for j in range(size):
                out[row + j] += aik * matrix_b[bk + j]


@njit(nogil=True, cache=False)
def mandelbrot_rows(out, width, height, xmin, xmax, ymin, ymax, max_iter, start, end):
    dx = (xmax - xmin) / width
    dy = (ymax - ymin) / height
    for py in range(start, end):
        cy = ymin + py * dy
        base = (py - start) * width
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
            out[base + px] = it


@njit(nogil=True, cache=False)
def _diffuse(h, value):
    h = (h * HASH_MULTIPLIER + value) & MASK32
    return ((h << HASH_ROTATION) | (h >> ROT_BACK)) & MASK32


@njit(nogil=True, cache=False)
def hash_blocks(data, out, start, end):
    n = data.shape[0]
    for block in range(start, end):
        h = (HASH_SEED + block * HASH_BLOCK_STRIDE) & MASK32
        for i in range(n):
            h = _diffuse(h, np.int64(data[i]))
        out[block - start] = h


@njit(nogil=True, cache=False)
def hash_fold(blocks):
    acc = np.int64(HASH_SEED)
    for k in range(blocks.shape[0]):
        acc = _diffuse(acc, blocks[k])
    return acc


@njit(nogil=True, cache=False)
def _ray_color(nx, ny, samples):
    r = 0.0
    g = 0.0
    b = 0.0
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
            r += BG_R
            g += BG_G
            b += BG_B
        else:
            normal_x = t * dir_x - SPHERE_X
            normal_y = t * dir_y - SPHERE_Y
            normal_z = t * dir_z - SPHERE_Z
            dot = normal_x * LIGHT_X + normal_y * LIGHT_Y + normal_z * LIGHT_Z
            shade = AMBIENT + DIFFUSE * max(dot, 0.0)
            r += shade * TINT_R
            g += shade * TINT_G
            b += shade * TINT_B

    inv_samples = 1.0 / samples
    return r * inv_samples, g * inv_samples, b * inv_samples


@njit(nogil=True, cache=False)
def ray_trace_rows(out, width, height, samples, start, end):
    for y in range(start, end):
        ny = (y / height) * 2.0 - 1.0
        for x in range(width):
            nx = (x / width) * 2.0 - 1.0
            r, g, b = _ray_color(nx, ny, samples)
            idx = ((y - start) * width + x) * 3
            out[idx] = r
            out[idx + 1] = g
            out[idx + 2] = b
