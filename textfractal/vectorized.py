"""Batch evaluation of escape functions with TensorFlow."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import numpy as np
import tensorflow as tf

from .arithmetic import Complex, magnitude_squared
from .escape import ESCAPE_RADIUS_SQUARED, EscapeFunction


@lru_cache(maxsize=None)
def _compile(escape_fn: EscapeFunction):
    """Build the ``while_loop`` kernel for one escape function."""

    @tf.function
    def _escape_step(zr: tf.Tensor, zi: tf.Tensor, cr: tf.Tensor, ci: tf.Tensor, ns: tf.Tensor, active: tf.Tensor):
        """Advance every point that has not escaped yet by one iteration."""

        z = escape_fn.iterate(Complex(zr, zi), Complex(cr, ci))
        zr = tf.where(active, z.real, zr)
        zi = tf.where(active, z.imaginary, zi)
        ns = ns + tf.cast(active, tf.int32)
        radius = tf.constant(ESCAPE_RADIUS_SQUARED, dtype=tf.float64)
        new_active = tf.logical_and(active, magnitude_squared(Complex(zr, zi)) < radius)
        return zr, zi, ns, new_active

    @tf.function
    def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor):
        max_iterations = tf.cast(max_iterations, tf.int32)
        i = tf.constant(0, dtype=tf.int32)
        zr = tf.zeros_like(cr)
        zi = tf.zeros_like(ci)
        ns = tf.zeros_like(cr, dtype=tf.int32)
        active = tf.ones_like(ns, dtype=tf.bool)

        def cond(i, zr, zi, ns, active):
            return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

        def body(i, zr, zi, ns, active):
            zr, zi, ns, active = _escape_step(zr, zi, cr, ci, ns, active)
            return i + 1, zr, zi, ns, active

        _, _, _, ns, _ = tf.while_loop(cond, body, (i, zr, zi, ns, active))
        return ns

    return _escape_run


def escape_grid(
    escape_fn: EscapeFunction,
    real: np.ndarray,
    imaginary: np.ndarray,
    max_iterations: int,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Evaluate ``escape_fn`` for every ``real + imaginary*i`` pair.

    ``real`` and ``imaginary`` must share a shape; the result is an ``int32``
    array of that shape holding the same counts as ``escape_fn.evaluate``.
    """

    real = np.asarray(real, dtype=np.float64)
    imaginary = np.asarray(imaginary, dtype=np.float64)
    if real.shape != imaginary.shape:
        raise ValueError(f"Coordinate shapes differ: {real.shape} != {imaginary.shape}.")
    if real.size == 0 or max_iterations <= 0:
        return np.zeros(real.shape, dtype=np.int32)

    kernel = _compile(escape_fn)
    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(real, dtype=tf.float64)
        ci = tf.convert_to_tensor(imaginary, dtype=tf.float64)
        ns = kernel(cr, ci, tf.constant(max_iterations, dtype=tf.int32))
    return ns.numpy().astype(np.int32, copy=False)


def escape_plane(escape_fn: EscapeFunction, outer: np.ndarray, inner: np.ndarray, max_iterations: int, *, device: Optional[str] = None) -> np.ndarray:
    """Evaluate the grid spanned by the two sampling axes, one row per ``outer`` value."""

    imaginary, real = np.meshgrid(np.asarray(outer, dtype=np.float64), np.asarray(inner, dtype=np.float64), indexing="ij")
    return escape_grid(escape_fn, real, imaginary, max_iterations, device=device)
