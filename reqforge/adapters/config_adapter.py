import os

from dependency_injector import containers, providers
from dotenv import load_dotenv

from ..configuration.config import DEFAULT_HISTORY_MAX_SIZE, Config, Envs

TRUTHY = ("1", "true", "yes", "on")


def build_config(env: Envs) -> Config:
    """Build a Config from ``REQFORGE_*`` environment variables, reading ``.env`` first."""
    load_dotenv()
    return Config(
        workspace_dir=os.getenv("REQFORGE_WORKSPACE", "workspace"),
        env=env,
        debug=os.getenv("REQFORGE_DEBUG", "false").strip().lower() in TRUTHY,
        history_max_size=int(os.getenv("REQFORGE_HISTORY_MAX_SIZE", DEFAULT_HISTORY_MAX_SIZE)),
        log_folder=os.getenv("REQFORGE_LOG_FOLDER", "logs"),
    )


class DevConfigAdapter(containers.DeclarativeContainer):
    config = providers.Singleton(build_config, env=Envs.DEV)


class ProdConfigAdapter(containers.DeclarativeContainer):
    config = providers.Singleton(build_config, env=Envs.PROD)
