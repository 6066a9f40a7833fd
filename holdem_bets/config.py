"""Application configuration."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    """Read a boolean flag from the environment."""
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # State store ("memory" or "redis")
    store_backend: str = os.getenv("STORE_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    lock_timeout_seconds: int = int(os.getenv("LOCK_TIMEOUT_SECONDS", "10"))
    
    # Table setup
    min_players: int = int(os.getenv("MIN_PLAYERS", "3"))
    max_players: int = int(os.getenv("MAX_PLAYERS", "6"))
    
    # House rules
    small_blind_fold_penalty: bool = _env_flag("SMALL_BLIND_FOLD_PENALTY", "false")
    reset_bets_each_round: bool = _env_flag("RESET_BETS_EACH_ROUND", "true")
    
    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8765"))
    
    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
