"""Finite-difference check of the Jacobians the layers compute by hand"""

import numpy as np

from adiff import tensor


def numerical_jacobian(fn, x, eps: float = 1e-6) -> tensor.Tensor:
    """Estimate the Jacobian of fn at x with central differences

    Args:
        fn: callable taking a vector and returning a vector (or a scalar)
        x: the point to differentiate at
        eps (float, optional): step size. Defaults to 1e-6.

    Returns:
        tensor.Tensor: (len(fn(x)), len(x)) matrix
    """
    x = np.array(x, dtype=tensor.DTYPE)
    columns = []
    for i in range(x.shape[0]):
        step = np.zeros_like(x)
        step[i] = eps
        plus = np.atleast_1d(fn(x + step))
        minus = np.atleast_1d(fn(x - step))
        columns.append((plus - minus) / (2 * eps))
    return np.stack(columns, axis=1)


def check_jacobian(net, x, rtol: float = 1e-4, atol: float = 1e-7, eps: float = 1e-6):
    """Compare net.backward() at x against central differences of net.forward

    The numerical estimate runs forward many times, so net is forwarded at x
    once more afterwards; it is left in that state when this returns.

    Returns:
        tuple[bool, tensor.Tensor, tensor.Tensor]: (close enough, analytic, numeric)
    """
    numeric = numerical_jacobian(net.forward, x, eps)
    net.forward(x)
    analytic = net.backward()
    ok = analytic.shape == numeric.shape and np.allclose(analytic, numeric, rtol=rtol, atol=atol)
    return bool(ok), analytic, numeric
