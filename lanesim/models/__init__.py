# Models module - Neural networks
# FORBIDDEN: env.*, training.*, logging, pathlib

from .network import NeuralNetwork, Layer, uniform_symmetric
