"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

from temple_passport.exceptions import ConfigurationError

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Local calendar used for check-in dates when a user has no timezone set
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Merit economy policy
CHECK_IN_REWARD: int = int(os.getenv("CHECK_IN_REWARD", "10"))
PRAYER_COST: int = int(os.getenv("PRAYER_COST", "10"))
PRAYER_REWARD: int = int(os.getenv("PRAYER_REWARD", "20"))
VISIT_BONUSES_ENABLED: bool = os.getenv("VISIT_BONUSES_ENABLED", "false").lower() == "true"

# Level curve
MAX_LEVEL: int = int(os.getenv("MAX_LEVEL", "100"))

# Metrics
ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if CHECK_IN_REWARD <= 0:
        raise ConfigurationError("CHECK_IN_REWARD must be positive", config_key="CHECK_IN_REWARD")
    if PRAYER_COST <= 0:
        raise ConfigurationError("PRAYER_COST must be positive", config_key="PRAYER_COST")
    if PRAYER_REWARD <= 0:
        raise ConfigurationError("PRAYER_REWARD must be positive", config_key="PRAYER_REWARD")
    if MAX_LEVEL < 1:
        raise ConfigurationError("MAX_LEVEL must be at least 1", config_key="MAX_LEVEL")
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Unknown LOG_LEVEL {LOG_LEVEL}", config_key="LOG_LEVEL")
