from .dsl import target, targets, matrix, DEFAULT_MATRIX
from .config import ReleaseConfig, load_config
from .orchestrator import run_release
from .model import Target, ReleaseReport

__all__ = [
    "target",
    "targets",
    "matrix",
    "DEFAULT_MATRIX",
    "ReleaseConfig",
    "load_config",
    "run_release",
    "Target",
    "ReleaseReport",
]
