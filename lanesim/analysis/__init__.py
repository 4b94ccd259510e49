# Analysis module - Logging, metrics, checkpointing
# IMPURE - Has side effects (file I/O, logging)

from .logger import setup_logging, MetricsLogger, ExperimentLogger
from .metrics import compute_generation_metrics, check_population_health
from .checkpointing import save_checkpoint, load_checkpoint, load_network, CheckpointManager
