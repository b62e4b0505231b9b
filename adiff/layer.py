"""Layers of a fixed feed-forward chain. Each layer knows its own local derivative
and, if it has a parent, how to fold that into the parent's Jacobian so that the
tail of a chain can hand back d(output)/d(root input) in one backward call.

A layer with no parent is the root of its chain. Any other layer is chained: it
holds a weak reference to the layer feeding it, so the chain (or whoever built
the layers) has to keep parents alive.

    l0 = Linear(4, 8)          # root, root_dim = 4
    l1 = Tanh(parent=l0)       # chained, in_dim deduced from l0.out_dim
    l1.forward(l0.forward(x))
    l1.backward()              # (8, 4) Jacobian of l1 w.r.t. x
"""

import enum
import logging
import weakref

import numpy as np

from adiff import errors, tensor

logger = logging.getLogger(__name__)


class LayerState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    FORWARDED = "forwarded"


def _check_dim(dim, name: str) -> int:
    if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)) or dim < 1:
        raise errors.DimensionMismatchError(f"{name} must be a positive integer, got {dim!r}")
    return int(dim)


class Layer():
    def __init__(self, in_dim: int, out_dim: int, parent: "Layer | None" = None):
        """Set up the dimensions and the link to the parent layer

        Args:
            in_dim (int): width of the vectors fed to forward
            out_dim (int): width of the vectors forward returns
            parent (Layer, optional): the layer feeding this one. None makes this the root.

        Raises:
            errors.DimensionMismatchError: in_dim doesn't match the parent's out_dim
        """
        self._in_dim = _check_dim(in_dim, "in_dim")
        self._out_dim = _check_dim(out_dim, "out_dim")
        if parent is None:
            self._parent_ref = None
            self._root_dim = self._in_dim
        else:
            if not isinstance(parent, Layer):
                raise TypeError(f"parent must be a Layer, got {type(parent).__name__}")
            if parent.out_dim != self._in_dim:
                raise errors.DimensionMismatchError(
                    f"{type(self).__name__} expects {self._in_dim} inputs but its parent "
                    f"{type(parent).__name__} produces {parent.out_dim}")
            self._parent_ref = weakref.ref(parent)
            self._root_dim = parent.root_dim
        self.state = LayerState.UNINITIALIZED
        logger.debug("created %s %d -> %d (root_dim=%d, %s)", type(self).__name__,
                     self._in_dim, self._out_dim, self._root_dim,
                     "root" if parent is None else "chained")

    @property
    def in_dim(self) -> int:
        return self._in_dim

    @property
    def out_dim(self) -> int:
        return self._out_dim

    @property
    def root_dim(self) -> int:
        """Input width of the root of this layer's chain"""
        return self._root_dim

    @property
    def is_root(self) -> bool:
        return self._parent_ref is None

    @property
    def parent(self) -> "Layer | None":
        if self._parent_ref is None:
            return None
        parent = self._parent_ref()
        if parent is None:
            raise errors.ParentReleasedError(
                f"parent of {type(self).__name__} was released while the layer was still in use")
        return parent

    def forward(self, x) -> tensor.Tensor:
        """A forward pass through the layer, caching whatever backward needs"""
        x = tensor.vector(x, self.in_dim)
        y = self._forward(x)
        self.state = LayerState.FORWARDED
        return y

    def __call__(self, x) -> tensor.Tensor:
        return self.forward(x)

    def _forward(self, x: tensor.Tensor) -> tensor.Tensor:
        raise NotImplementedError

    def local_jacobian(self) -> tensor.Tensor:
        """d(output)/d(input) of this layer alone, shape (out_dim, in_dim)"""
        raise NotImplementedError

    def backward(self) -> tensor.Tensor:
        """Jacobian of this layer's output with respect to the root's input.

        The root hands back its local derivative. A chained layer multiplies its
        own local derivative into its parent's Jacobian, so calling this on the
        tail gives L_tail @ ... @ L_root. The parents are walked in a loop rather
        than by recursion, so chain depth isn't bounded by the interpreter stack.

        Returns:
            tensor.Tensor: (out_dim, root_dim) matrix
        """
        jacobian = self.local_jacobian()
        parent = self.parent
        while parent is not None:
            jacobian = jacobian @ parent.local_jacobian()
            parent = parent.parent
        return jacobian

    def replicate(self, parent: "Layer | None" = None) -> "Layer":
        """A fresh, unforwarded copy of this layer hung off parent"""
        raise NotImplementedError

    def _check_forwarded(self):
        if self.state is not LayerState.FORWARDED:
            raise errors.UninitializedStateError(
                f"{type(self).__name__}.backward called before forward")

    def __repr__(self) -> str:
        kind = "root" if self.is_root else "chained"
        return f"{type(self).__name__}({self.in_dim} -> {self.out_dim}, {kind})"


class Linear(Layer):
    def __init__(self, in_dim: int, out_dim: int, parent: Layer | None = None):
        """Create a new affine layer y = W @ x + b. Weights start unset."""
        super().__init__(in_dim, out_dim, parent)
        self.w = None  # (out_dim, in_dim)
        self.b = None  # (out_dim,)

    def set_weights(self, w, b):
        """Replace the weights and bias together

        Column vector convention: w is (out_dim, in_dim), so weights exported
        from a library that computes x @ W + b have to be transposed first.

        Args:
            w: weight matrix of shape (out_dim, in_dim)
            b: bias vector of width out_dim

        Raises:
            errors.DimensionMismatchError: either shape is wrong; nothing is replaced
        """
        w = tensor.matrix(w, self.out_dim, self.in_dim, name="w")
        b = tensor.vector(b, self.out_dim, name="b")
        self.w, self.b = w, b
        logger.debug("set weights on Linear %d -> %d", self.in_dim, self.out_dim)

    def _check_weights(self):
        if self.w is None:
            raise errors.WeightsNotSetError("Linear layer used before set_weights")

    def _forward(self, x: tensor.Tensor) -> tensor.Tensor:
        self._check_weights()
        return self.w @ x + self.b

    def local_jacobian(self) -> tensor.Tensor:
        # the Jacobian of W @ x + b is W, whatever x was
        self._check_weights()
        self._check_forwarded()
        return self.w.copy()

    def replicate(self, parent: Layer | None = None) -> "Linear":
        clone = Linear(self.in_dim, self.out_dim, parent)
        if self.w is not None:
            clone.set_weights(self.w, self.b)
        return clone


class Tanh(Layer):
    def __init__(self, dim: int | None = None, parent: Layer | None = None):
        """Create an elementwise tanh layer

        Args:
            dim (int, optional): input and output width. Taken from parent.out_dim when left out.
            parent (Layer, optional): the layer feeding this one. None makes this the root.
        """
        dim = _deduce_dim(dim, parent, "Tanh")
        super().__init__(dim, dim, parent)
        self.x = None  # pre-activation input from the last forward

    def _forward(self, x: tensor.Tensor) -> tensor.Tensor:
        self.x = x
        return np.tanh(x)

    def local_jacobian(self) -> tensor.Tensor:
        self._check_forwarded()
        return tensor.diagonal(1 - np.tanh(self.x)**2)  # first derivative of tanh

    def replicate(self, parent: Layer | None = None) -> "Tanh":
        return Tanh(self.in_dim, parent)


class Sum(Layer):
    def __init__(self, in_dim: int | None = None, parent: Layer | None = None):
        """Create a layer that reduces its input to a single value"""
        in_dim = _deduce_dim(in_dim, parent, "Sum")
        super().__init__(in_dim, 1, parent)

    def _forward(self, x: tensor.Tensor) -> tensor.Tensor:
        return np.array([x.sum()])

    def local_jacobian(self) -> tensor.Tensor:
        self._check_forwarded()
        return tensor.ones_row(self.in_dim)

    def replicate(self, parent: Layer | None = None) -> "Sum":
        return Sum(self.in_dim, parent)


def _deduce_dim(dim, parent: Layer | None, kind: str) -> int:
    if dim is not None:
        return dim
    if parent is None:
        raise errors.DimensionMismatchError(f"a root {kind} layer needs an explicit width")
    return parent.out_dim
