from dotenv import load_dotenv
from dataclasses import dataclass, field
from pathlib import Path
import json
import logging
import os

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///pageaudit.db")  # Default to SQLite
    USER_AGENT = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (compatible; PageAudit/1.0; +https://github.com/pageaudit/pageaudit)",
    )
    LIGHTHOUSE_BIN = os.getenv("LIGHTHOUSE_BIN", "lighthouse")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Network timeouts (seconds)
    FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "10"))
    SITEMAP_PROBE_TIMEOUT = float(os.getenv("SITEMAP_PROBE_TIMEOUT", "5"))
    LIGHTHOUSE_TIMEOUT = int(os.getenv("LIGHTHOUSE_TIMEOUT", "120"))


settings = Settings()


@dataclass
class AnalysisThresholds:
    """Configurable thresholds for page metrics."""

    # Title and meta description length bands (characters)
    title_min: int = 50
    title_max: int = 60
    meta_description_min: int = 150
    meta_description_max: int = 160

    # Heading text length limits (characters)
    heading_text_min: int = 5
    heading_text_max: int = 70

    # Heading totals
    excessive_headings: int = 50  # More than this is excessive
    insufficient_headings: int = 2  # Fewer than this is insufficient

    # SEO-friendly URL path length
    url_path_min: int = 3
    url_path_max: int = 2048

    # Reachability probe, per request
    probe_timeout_seconds: float = field(default_factory=lambda: settings.SITEMAP_PROBE_TIMEOUT)

    # Reading time estimate
    words_per_minute: int = 200

    @classmethod
    def from_env(cls) -> "AnalysisThresholds":
        """Load thresholds from environment variables.

        Environment variables should be prefixed with PAGEAUDIT_THRESHOLD_
        e.g., PAGEAUDIT_THRESHOLD_TITLE_MIN=45

        Returns:
            AnalysisThresholds with values from environment
        """
        thresholds = cls()
        prefix = "PAGEAUDIT_THRESHOLD_"

        for field_name in thresholds.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = thresholds.__dataclass_fields__[field_name].type
                try:
                    if field_type in (int, "int"):
                        setattr(thresholds, field_name, int(env_value))
                    elif field_type in (float, "float"):
                        setattr(thresholds, field_name, float(env_value))
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_key}: {env_value!r}")

        return thresholds

    @classmethod
    def from_file(cls, path: str) -> "AnalysisThresholds":
        """Load thresholds from a JSON configuration file.

        Args:
            path: Path to JSON configuration file

        Returns:
            AnalysisThresholds with values from file
        """
        thresholds = cls()
        file_path = Path(path)

        if not file_path.exists():
            return thresholds

        with open(file_path, 'r') as f:
            config = json.load(f)

        threshold_config = config.get('thresholds', config)

        for field_name in thresholds.__dataclass_fields__:
            if field_name in threshold_config:
                setattr(thresholds, field_name, threshold_config[field_name])

        return thresholds

    def to_dict(self) -> dict:
        """Convert thresholds to dictionary.

        Returns:
            Dictionary of all threshold values
        """
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }

    def save_to_file(self, path: str) -> None:
        """Save current thresholds to a JSON file.

        Args:
            path: Path to save configuration
        """
        with open(path, 'w') as f:
            json.dump({'thresholds': self.to_dict()}, f, indent=2)


# Global default thresholds, with PAGEAUDIT_THRESHOLD_* overrides applied
default_thresholds = AnalysisThresholds.from_env()
