# Training module - Orchestration
# This module may import from all other lanesim modules

from .trainer import EvolutionTrainer
from .rollout import GenerationResult, simulate_generation, step_frame
from .evolution import spawn_population, fitness, select_best
