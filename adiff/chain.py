"""A chain is the owner of every layer in one fixed feed-forward pipeline. Layers only
hold weak references to their parents, so the chain is what keeps them alive."""

import logging
from typing import Iterator

from adiff import errors, layer, tensor

logger = logging.getLogger(__name__)


class Chain():
    def __init__(self, layers: list[layer.Layer]):
        """Take ownership of an already linked list of layers

        Args:
            layers (list[layer.Layer]): root first, each following layer chained to the one before it

        Raises:
            errors.ChainAssemblyError: the layers don't form a single root-to-tail chain
        """
        layers = list(layers)
        if not layers:
            raise errors.ChainAssemblyError("a chain needs at least one layer")
        seen = set()
        for i, current in enumerate(layers):
            if not isinstance(current, layer.Layer):
                raise errors.ChainAssemblyError(
                    f"item {i} is a {type(current).__name__}, not a Layer")
            if id(current) in seen:
                raise errors.ChainAssemblyError(f"{current!r} appears more than once")
            seen.add(id(current))
            if i == 0:
                if not current.is_root:
                    raise errors.ChainAssemblyError(f"first layer {current!r} is not a root")
            elif not self._linked(current, layers[i - 1]):
                raise errors.ChainAssemblyError(
                    f"layer {i} ({current!r}) is not chained to layer {i - 1}")
        self.layers = tuple(layers)  # fixed once assembled
        logger.debug("assembled chain of %d layers: %d -> %d",
                     len(layers), self.in_dim, self.out_dim)

    @staticmethod
    def _linked(current: layer.Layer, previous: layer.Layer) -> bool:
        if current.is_root:
            return False
        try:
            return current.parent is previous
        except errors.ParentReleasedError:
            # the real parent is gone, so it can't be the listed one
            return False

    @property
    def root(self) -> layer.Layer:
        return self.layers[0]

    @property
    def tail(self) -> layer.Layer:
        return self.layers[-1]

    @property
    def in_dim(self) -> int:
        return self.root.in_dim

    @property
    def out_dim(self) -> int:
        return self.tail.out_dim

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[layer.Layer]:
        return iter(self.layers)

    def forward(self, x) -> tensor.Tensor:
        """Forward pass through the whole chain, root to tail"""
        for current in self.layers:
            x = current.forward(x)
        return x

    def __call__(self, x) -> tensor.Tensor:
        return self.forward(x)

    def backward(self) -> tensor.Tensor:
        """Jacobian of the chain output w.r.t. the input of the last forward call"""
        return self.tail.backward()

    def jacobian(self, x) -> tensor.Tensor:
        """Run forward at x, then return the (out_dim, in_dim) Jacobian there"""
        self.forward(x)
        return self.backward()

    def replicate(self) -> "Chain":
        """An independent copy with the same weights, for use by another caller.

        Cached forward state isn't shared or copied: every layer in the copy
        starts out uninitialized.
        """
        copies = []
        parent = None
        for current in self.layers:
            parent = current.replicate(parent)
            copies.append(parent)
        return Chain(copies)
