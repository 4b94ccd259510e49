# Tests for the step-activation network

import numpy as np
import pytest
import torch

from lanesim.core.errors import InvalidTopology, ShapeMismatch
from lanesim.models.network import DTYPE, NeuralNetwork, uniform_symmetric


def _set_level(level, weights, biases):
    level.weights.copy_(torch.tensor(weights, dtype=DTYPE))
    level.biases.copy_(torch.tensor(biases, dtype=DTYPE))


class TestConstruction:

    def test_layer_shapes(self, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)

        assert len(network.levels) == 2
        assert network.levels[0].weights.shape == (5, 6)
        assert network.levels[0].biases.shape == (6,)
        assert network.levels[1].weights.shape == (6, 4)
        assert network.levels[1].biases.shape == (4,)
        assert network.layer_sizes == [5, 6, 4]

    def test_initial_values_in_range(self, generator):
        network = NeuralNetwork([8, 16, 4], generator=generator)
        for level in network.levels:
            assert level.weights.min() >= -1.0
            assert level.weights.max() <= 1.0
            assert level.biases.min() >= -1.0
            assert level.biases.max() <= 1.0

    def test_same_seed_same_network(self):
        a = NeuralNetwork([5, 6, 4], generator=torch.Generator().manual_seed(3))
        b = NeuralNetwork([5, 6, 4], generator=torch.Generator().manual_seed(3))
        for la, lb in zip(a.levels, b.levels):
            assert torch.equal(la.weights, lb.weights)
            assert torch.equal(la.biases, lb.biases)

    @pytest.mark.parametrize("sizes", [[], [5], [5, 0, 4], [5, -1], [5, 2.5], [5, True]])
    def test_invalid_topology(self, sizes, generator):
        with pytest.raises(InvalidTopology):
            NeuralNetwork(sizes, generator=generator)

    def test_invalid_topology_is_value_error(self, generator):
        with pytest.raises(ValueError):
            NeuralNetwork([3], generator=generator)

    def test_weights_are_not_trainable(self, generator):
        """Only mutation adapts the network."""
        network = NeuralNetwork([5, 6, 4], generator=generator)
        assert list(network.parameters()) == []


class TestInference:

    def test_output_width_and_values(self, generator):
        """[5, 6, 4] on a 5-element input gives four 0/1 outputs."""
        network = NeuralNetwork([5, 6, 4], generator=generator)
        outputs = network.feed_forward([0.1, 0.0, 0.9, 0.4, 0.0])

        assert len(outputs) == 4
        assert all(v in (0, 1) for v in outputs)

    def test_deterministic(self, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        inputs = np.array([0.3, 0.7, 0.0, 0.2, 1.0])

        first = network(inputs)
        for _ in range(5):
            assert torch.equal(network(inputs), first)

    def test_accepts_tensor_input(self, generator):
        network = NeuralNetwork([3, 2], generator=generator)
        outputs = network(torch.tensor([0.1, 0.2, 0.3], dtype=torch.float32))
        assert outputs.shape == (2,)

    def test_step_threshold(self, generator):
        """Output fires only when the weighted sum strictly exceeds the bias."""
        network = NeuralNetwork([2, 1], generator=generator)
        _set_level(network.levels[0], [[1.0], [1.0]], [0.5])

        assert network.feed_forward([0.3, 0.3]) == [1]
        assert network.feed_forward([0.2, 0.2]) == [0]
        assert network.feed_forward([0.25, 0.25]) == [0]

    def test_weight_orientation(self, generator):
        """weights[i][j] connects input i to output j."""
        network = NeuralNetwork([2, 2], generator=generator)
        _set_level(network.levels[0], [[1.0, 0.0], [0.0, -1.0]], [0.0, 0.0])

        assert network.feed_forward([1.0, 1.0]) == [1, 0]
        assert network.feed_forward([0.0, -1.0]) == [0, 1]

    def test_multi_layer_propagation(self, generator):
        network = NeuralNetwork([2, 2, 1], generator=generator)
        _set_level(network.levels[0], [[1.0, -1.0], [1.0, -1.0]], [0.5, 0.5])
        _set_level(network.levels[1], [[1.0], [1.0]], [0.5])

        # Hidden = [1, 0] -> output 1
        assert network.feed_forward([0.5, 0.5]) == [1]
        # Hidden = [0, 0] -> output 0
        assert network.feed_forward([0.0, 0.0]) == [0]

    def test_caches_last_activations(self, generator):
        network = NeuralNetwork([2, 3, 1], generator=generator)
        network([0.4, 0.6])

        assert torch.allclose(network.levels[0].inputs, torch.tensor([0.4, 0.6], dtype=DTYPE))
        assert torch.equal(network.levels[1].inputs, network.levels[0].outputs)

    @pytest.mark.parametrize("inputs", [[0.1] * 4, [0.1] * 6, [[0.1] * 5]])
    def test_shape_mismatch(self, inputs, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        with pytest.raises(ShapeMismatch):
            network.feed_forward(inputs)


class TestMutation:

    def test_zero_amount_is_identity(self, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        before = network.clone()

        network.mutate(0.0, generator=torch.Generator().manual_seed(99))

        for la, lb in zip(network.levels, before.levels):
            assert torch.equal(la.weights, lb.weights)
            assert torch.equal(la.biases, lb.biases)

    def test_full_amount_ignores_prior_state(self):
        """amount=1 gives the same values regardless of the starting weights."""
        a = NeuralNetwork([5, 6, 4], generator=torch.Generator().manual_seed(1))
        b = NeuralNetwork([5, 6, 4], generator=torch.Generator().manual_seed(2))

        a.mutate(1.0, generator=torch.Generator().manual_seed(7))
        b.mutate(1.0, generator=torch.Generator().manual_seed(7))

        for la, lb in zip(a.levels, b.levels):
            assert torch.equal(la.weights, lb.weights)
            assert torch.equal(la.biases, lb.biases)
            assert la.weights.abs().max() <= 1.0
            assert la.biases.abs().max() <= 1.0

    def test_partial_amount_blends(self, generator):
        network = NeuralNetwork([3, 2, 2], generator=generator)
        before = network.clone()

        network.mutate(0.25, generator=torch.Generator().manual_seed(5))

        # Replay the same draws: biases then weights, level by level
        replay = torch.Generator().manual_seed(5)
        for level, old in zip(network.levels, before.levels):
            rb = uniform_symmetric(old.biases.shape, replay)
            rw = uniform_symmetric(old.weights.shape, replay)
            assert torch.allclose(level.biases, old.biases * 0.75 + rb * 0.25)
            assert torch.allclose(level.weights, old.weights * 0.75 + rw * 0.25)

    def test_mutation_in_place(self, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        weights = network.levels[0].weights
        network.mutate(0.5, generator=generator)
        assert network.levels[0].weights is weights

    @pytest.mark.parametrize("amount", [-0.1, 1.5])
    def test_amount_out_of_range(self, amount, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        with pytest.raises(ValueError):
            network.mutate(amount, generator=generator)

    def test_clone_is_independent(self, generator):
        parent = NeuralNetwork([5, 6, 4], generator=generator)
        snapshot = parent.clone()
        child = parent.clone()

        child.mutate(1.0, generator=generator)

        for lp, ls in zip(parent.levels, snapshot.levels):
            assert torch.equal(lp.weights, ls.weights)
        assert not torch.equal(child.levels[0].weights, parent.levels[0].weights)


class TestSerialization:

    def test_from_state_roundtrip(self, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        restored = NeuralNetwork.from_state(network.layer_sizes, network.state_dict())

        for la, lb in zip(network.levels, restored.levels):
            assert torch.equal(la.weights, lb.weights)
            assert torch.equal(la.biases, lb.biases)

    def test_export_levels(self, generator):
        network = NeuralNetwork([5, 6, 4], generator=generator)
        levels = network.export_levels()

        assert len(levels) == 2
        assert len(levels[0]["weights"]) == 5
        assert len(levels[0]["weights"][0]) == 6
        assert len(levels[1]["biases"]) == 4
