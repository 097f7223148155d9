"""
config.py

This file manages the application configuration settings.
Every value can be overridden through a TODO_* environment variable,
so the same code runs unchanged on a laptop, in CI and in a container.
"""
import os
from pathlib import Path

# Database configuration defaults
#
# The user's home directory works across operating systems and survives
# reinstalls of the service.
DEFAULT_DB_FOLDER = Path.home() / '.todolist-service'
DEFAULT_DB_FILE = 'todos.sqlite'
MEMORY_DB = ':memory:'

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = 'INFO'


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


class DatabaseConfig:
    """
    Database configuration class

    Reads TODO_DB_FOLDER and TODO_DB_FILE, falling back to defaults.
    Setting TODO_DB_FILE to ":memory:" keeps everything in memory.
    """
    def __init__(self):
        self.folder = Path(os.getenv('TODO_DB_FOLDER', str(DEFAULT_DB_FOLDER)))
        self.filename = os.getenv('TODO_DB_FILE', DEFAULT_DB_FILE)

    @property
    def in_memory(self) -> bool:
        return self.filename == MEMORY_DB

    @property
    def path(self) -> Path:
        """Full path to the database file"""
        return self.folder / self.filename


class ServerConfig:
    """HTTP bind address for the API process"""
    def __init__(self):
        self.host = os.getenv('TODO_HOST', DEFAULT_HOST)
        self.port = int(os.getenv('TODO_PORT', str(DEFAULT_PORT)))


class LoggingConfig:
    """Log level and renderer selection"""
    def __init__(self):
        self.level = os.getenv('TODO_LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
        self.json = _env_flag('TODO_LOG_JSON')


class Config:
    """Application configuration object"""
    def __init__(self):
        self.db = DatabaseConfig()
        self.server = ServerConfig()
        self.logging = LoggingConfig()


def ensure_db_folder(db_config: DatabaseConfig):
    """
    Ensure the database folder exists

    Creating the folder up front prevents sqlite from failing to open
    a file in a directory that is not there yet.
    """
    if not db_config.in_memory:
        db_config.folder.mkdir(parents=True, exist_ok=True)
