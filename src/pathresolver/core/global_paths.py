"""Per-user directories for pathresolver configuration and logs."""

from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "pathresolver"


class GlobalPath:
    """Platform directory lookup.

    Nothing is created on import; callers that write into a directory
    create it themselves.
    """

    @classmethod
    def data(cls) -> str:
        """Application data directory."""
        return user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")

    @classmethod
    def config(cls) -> str:
        """Configuration directory."""
        return user_config_dir(APP_NAME)
