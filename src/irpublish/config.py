# config.py
from __future__ import annotations

import runpy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from .dsl import DEFAULT_MATRIX
from .model import Target


@dataclass(frozen=True)
class ReleaseConfig:
    """
    Fixed constants of one release run.

    Paths are relative to the working directory the run starts in.
    """
    targets: Tuple[Target, ...] = field(default=DEFAULT_MATRIX)

    # compiler
    compiler: str = "julec"
    package: str = "src/julec"
    staging_dir: str = "dist"
    generated_name: str = "ir.cpp"
    extension: str = ".cpp"
    include_marker: str = "/jule/"

    # destination repository
    dest_url: str = "https://github.com/julelang/julec-ir"
    dest_dir: str = "julec-ir"
    dest_src: str = "src"
    readme: str = "README.md"

    # stamp + commit
    stamp_prefix: str = "IR version: ["
    commit_url: str = "https://github.com/julelang/jule/commit/"
    commit_message: str = "update IR to julelang/jule@{commit}"

    @property
    def staging_path(self) -> Path:
        return Path(self.staging_dir)

    @property
    def dest_path(self) -> Path:
        return Path(self.dest_dir)

    def staged_artifact(self, t: Target) -> Path:
        return self.staging_path / t.artifact_name(self.extension)

    def message_for(self, commit: str) -> str:
        return self.commit_message.format(commit=commit)


DEFAULT_CONFIG = ReleaseConfig()


# ----------------------------------------------------------------------
# Config loading (local python file)
# ----------------------------------------------------------------------

def load_config(path: str | Path) -> ReleaseConfig:
    """
    Load a release config from a python file path.

    The file must define either:
      - config() -> ReleaseConfig
      - CONFIG = ReleaseConfig(...)

    Returns:
      ReleaseConfig
    """
    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    if cfg_path.suffix != ".py":
        raise ValueError(f"Config must be a .py file, got: {cfg_path.name}")

    module_name = f"irpublish_config_{cfg_path.stem}"
    globals_dict = runpy.run_path(str(cfg_path), run_name=module_name)

    cfg = None
    if "config" in globals_dict and callable(globals_dict["config"]):
        cfg = globals_dict["config"]()
    elif "CONFIG" in globals_dict:
        cfg = globals_dict["CONFIG"]

    if not isinstance(cfg, ReleaseConfig):
        raise TypeError(
            "Config file must return/define a ReleaseConfig. "
            "Define config() -> ReleaseConfig or CONFIG = ReleaseConfig(...)."
        )
    if not cfg.targets:
        raise ValueError("Config must declare at least one target")

    return cfg
