"""Chain builders shared by the adiff tests."""

from __future__ import annotations

import numpy as np

from adiff import chain, layer


def random_linear(rng: np.random.Generator, in_dim: int, out_dim: int,
                  parent: layer.Layer | None = None) -> layer.Linear:
    lin = layer.Linear(in_dim, out_dim, parent)
    lin.set_weights(rng.normal(size=(out_dim, in_dim)), rng.normal(size=out_dim))
    return lin


def build_chain(kind: str, rng: np.random.Generator) -> chain.Chain:
    """Build one of a few fixed topologies with random weights."""
    if kind == "linear":
        layers = [random_linear(rng, 3, 2)]
    elif kind == "linear-tanh":
        l0 = random_linear(rng, 3, 4)
        layers = [l0, layer.Tanh(parent=l0)]
    elif kind == "mlp":
        l0 = random_linear(rng, 3, 5)
        l1 = layer.Tanh(parent=l0)
        l2 = random_linear(rng, 5, 2, l1)
        layers = [l0, l1, l2, layer.Tanh(parent=l2)]
    elif kind == "mlp-sum":
        l0 = random_linear(rng, 4, 6)
        l1 = layer.Tanh(parent=l0)
        l2 = random_linear(rng, 6, 3, l1)
        l3 = layer.Tanh(parent=l2)
        layers = [l0, l1, l2, l3, layer.Sum(parent=l3)]
    elif kind == "tanh-root":
        l0 = layer.Tanh(3)
        l1 = random_linear(rng, 3, 3, l0)
        layers = [l0, l1, layer.Tanh(parent=l1)]
    elif kind == "sum-then-linear":
        l0 = layer.Sum(3)
        layers = [l0, random_linear(rng, 1, 2, l0)]
    else:
        raise ValueError(kind)
    return chain.Chain(layers)


CHAIN_KINDS = ["linear", "linear-tanh", "mlp", "mlp-sum", "tanh-root", "sum-then-linear"]
