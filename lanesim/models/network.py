# Feed-forward step-activation network
# FORBIDDEN: env.*, training.*, logging, pathlib

import copy
from typing import Dict, List, Optional, Sequence

import numpy as np
import torch
import torch.nn as nn

from ..core.errors import InvalidTopology, ShapeMismatch
from ..core.math_utils import lerp

DTYPE = torch.float64


def uniform_symmetric(
    shape: Sequence[int],
    generator: Optional[torch.Generator] = None,
) -> torch.Tensor:
    """Draw values uniformly from [-1, 1].

    Args:
        shape: Output shape
        generator: Random source (torch default generator if None)

    Returns:
        Tensor of the requested shape
    """
    return torch.rand(tuple(shape), generator=generator, dtype=DTYPE) * 2 - 1


def _validate_layer_sizes(layer_sizes: Sequence[int]) -> List[int]:
    sizes = list(layer_sizes)
    if len(sizes) < 2:
        raise InvalidTopology(f"Need at least 2 layer sizes, got {sizes}")
    for size in sizes:
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
            raise InvalidTopology(f"Layer sizes must be positive integers, got {sizes}")
    return [int(s) for s in sizes]


class Layer(nn.Module):
    """One fully connected level with a hard step activation.

    Output j fires (1) when the weighted input sum exceeds bias j.
    Weights and biases are buffers, not parameters: they are never
    trained by gradients, only mutated.
    """

    def __init__(
        self,
        input_count: int,
        output_count: int,
        generator: Optional[torch.Generator] = None,
    ):
        super().__init__()

        self.input_count = input_count
        self.output_count = output_count

        self.register_buffer("weights", uniform_symmetric((input_count, output_count), generator))
        self.register_buffer("biases", uniform_symmetric((output_count,), generator))

        # Last activations, kept for inspection only
        self.inputs = torch.zeros(input_count, dtype=DTYPE)
        self.outputs = torch.zeros(output_count, dtype=DTYPE)

    def forward(self, inputs: torch.Tensor) -> torch.Tensor:
        """Propagate one input vector.

        Args:
            inputs: Input vector, shape (input_count,)

        Returns:
            0/1 vector, shape (output_count,)
        """
        if inputs.dim() != 1 or inputs.shape[0] != self.input_count:
            raise ShapeMismatch(
                f"Layer expects {self.input_count} inputs, got shape {tuple(inputs.shape)}"
            )
        self.inputs = inputs.detach().clone()
        sums = inputs @ self.weights
        self.outputs = (sums > self.biases).to(DTYPE)
        return self.outputs

    @torch.no_grad()
    def mutate(self, amount: float, generator: Optional[torch.Generator] = None) -> None:
        """Blend every bias and weight toward a fresh random value in place."""
        self.biases.copy_(lerp(self.biases, uniform_symmetric(self.biases.shape, generator), amount))
        self.weights.copy_(lerp(self.weights, uniform_symmetric(self.weights.shape, generator), amount))


class NeuralNetwork(nn.Module):
    """Stack of step-activation layers driving the four vehicle controls.

    Adapted only by random mutation; there is no gradient update.
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        generator: Optional[torch.Generator] = None,
    ):
        super().__init__()

        sizes = _validate_layer_sizes(layer_sizes)
        self.levels = nn.ModuleList(
            Layer(sizes[i], sizes[i + 1], generator=generator)
            for i in range(len(sizes) - 1)
        )

    @property
    def layer_sizes(self) -> List[int]:
        return [self.levels[0].input_count] + [level.output_count for level in self.levels]

    @property
    def input_count(self) -> int:
        return self.levels[0].input_count

    @property
    def output_count(self) -> int:
        return self.levels[-1].output_count

    def forward(self, inputs) -> torch.Tensor:
        """Run inference.

        Args:
            inputs: Sequence, numpy array or tensor of length input_count

        Returns:
            0/1 tensor of length output_count
        """
        outputs = torch.as_tensor(inputs, dtype=DTYPE)
        if outputs.dim() != 1 or outputs.shape[0] != self.input_count:
            raise ShapeMismatch(
                f"Network expects {self.input_count} inputs, got shape {tuple(outputs.shape)}"
            )
        for level in self.levels:
            outputs = level(outputs)
        return outputs

    @torch.no_grad()
    def feed_forward(self, inputs) -> List[int]:
        """Run inference and return plain 0/1 integers."""
        return [int(v) for v in self.forward(inputs).tolist()]

    def mutate(self, amount: float = 1.0, generator: Optional[torch.Generator] = None) -> None:
        """Mutate every weight and bias in place.

        value <- value * (1 - amount) + U(-1, 1) * amount

        Args:
            amount: 0 keeps the network, 1 fully re-randomizes it
            generator: Random source (torch default generator if None)
        """
        if not 0.0 <= amount <= 1.0:
            raise ValueError(f"Mutation amount must be in [0, 1], got {amount}")
        for level in self.levels:
            level.mutate(amount, generator)

    def clone(self) -> "NeuralNetwork":
        return copy.deepcopy(self)

    def export_levels(self) -> List[Dict[str, List]]:
        """Plain-list weights and biases, one dict per level."""
        return [
            {
                "weights": level.weights.tolist(),
                "biases": level.biases.tolist(),
            }
            for level in self.levels
        ]

    @classmethod
    def from_state(
        cls,
        layer_sizes: Sequence[int],
        state_dict: Dict[str, torch.Tensor],
    ) -> "NeuralNetwork":
        """Rebuild a network from saved layer sizes and state dict."""
        network = cls(layer_sizes, generator=torch.Generator())
        network.load_state_dict(state_dict)
        return network
