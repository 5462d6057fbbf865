from dataclasses import dataclass
from enum import Enum

DEFAULT_HISTORY_MAX_SIZE = 100


class Envs(Enum):
    DEV = "dev"
    PROD = "prod"


@dataclass
class Config:
    """Runtime settings for a ReqForge workspace."""

    workspace_dir: str = "workspace"
    env: Envs = Envs.DEV
    debug: bool = False
    history_max_size: int = DEFAULT_HISTORY_MAX_SIZE
    log_folder: str = "logs"
