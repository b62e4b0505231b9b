"""A tensor is just an n-dimensional array. Everything the layers need from
linear algebra lives here so the layers only talk in vectors and matrices."""

import numpy as np

from adiff import errors

Tensor = np.ndarray

DTYPE = np.float64


def vector(x, dim: int, name: str = "input") -> Tensor:
    """Coerce x into a float vector of width dim

    Args:
        x: anything numpy can turn into a 1-d array
        dim (int): required width
        name (str, optional): what to call x in the error message. Defaults to "input".

    Raises:
        errors.DimensionMismatchError: x is not a vector of width dim

    Returns:
        Tensor: a fresh (dim,) float64 array
    """
    arr = np.array(x, dtype=DTYPE)
    if arr.ndim != 1 or arr.shape[0] != dim:
        raise errors.DimensionMismatchError(
            f"{name} must have shape ({dim},), got {arr.shape}")
    return arr


def matrix(x, rows: int, cols: int, name: str = "matrix") -> Tensor:
    """Coerce x into a float matrix of shape (rows, cols)"""
    arr = np.array(x, dtype=DTYPE)
    if arr.shape != (rows, cols):
        raise errors.DimensionMismatchError(
            f"{name} must have shape ({rows}, {cols}), got {arr.shape}")
    return arr


def diagonal(v: Tensor) -> Tensor:
    """Square matrix with v on the diagonal"""
    return np.diag(v)


def ones_row(n: int) -> Tensor:
    """A (1, n) row of ones, the gradient of a sum"""
    return np.ones((1, n), dtype=DTYPE)
