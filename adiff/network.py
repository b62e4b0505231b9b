"""An example network built on the layers: Linear -> Tanh -> Linear -> Tanh"""

import logging

import numpy as np

from adiff import chain, config, layer, tensor

logger = logging.getLogger(__name__)


class NN():
    def __init__(self, settings: config.NetworkConfig | None = None):
        """Assemble the chain and give it random weights

        Args:
            settings (config.NetworkConfig, optional): sizes and seed. Defaults to NetworkConfig().
        """
        self.config = settings or config.NetworkConfig()
        c = self.config
        l0 = layer.Linear(c.in_dim, c.hidden_dim)
        l1 = layer.Tanh(parent=l0)
        l2 = layer.Linear(c.hidden_dim, c.out_dim, parent=l1)
        l3 = layer.Tanh(parent=l2)
        self.chain = chain.Chain([l0, l1, l2, l3])
        self.init_weights()

    @property
    def layers(self) -> tuple[layer.Layer, ...]:
        return self.chain.layers

    def init_weights(self, seed: int | None = None):
        """Draw every Linear layer's weights and bias from N(0, scale^2)"""
        rng = np.random.default_rng(self.config.seed if seed is None else seed)
        for current in self.layers:
            if isinstance(current, layer.Linear):
                scale = self.config.weight_scale or 1 / np.sqrt(current.in_dim)
                current.set_weights(rng.normal(0, scale, (current.out_dim, current.in_dim)),
                                    rng.normal(0, scale, current.out_dim))
        logger.debug("initialised weights (seed=%s)", self.config.seed if seed is None else seed)

    def forward(self, x) -> tensor.Tensor:
        return self.chain.forward(x)

    def __call__(self, x) -> tensor.Tensor:
        return self.forward(x)

    def backward(self) -> tensor.Tensor:
        return self.chain.backward()

    def jacobian(self, x) -> tensor.Tensor:
        return self.chain.jacobian(x)
