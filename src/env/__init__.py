from env.env import (
    ConfigError,
    DiagnosticsEnvironment,
    Environment,
    LoggingEnvironment,
    get_diagnostics_env,
    get_env,
    get_logging_env,
    reset_env_caches,
)

from env.paths import (
    CONFIG_DIR,
    DIR_MODE,
    ENV_FILE,
    PROJECT_ROOT,
    ensure_dir,
    resolve_logs_dir,
)

__all__ = [
    "ConfigError",
    "DiagnosticsEnvironment",
    "Environment",
    "LoggingEnvironment",
    "get_diagnostics_env",
    "get_env",
    "get_logging_env",
    "reset_env_caches",
    "CONFIG_DIR",
    "DIR_MODE",
    "ENV_FILE",
    "PROJECT_ROOT",
    "ensure_dir",
    "resolve_logs_dir",
]
