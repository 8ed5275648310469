import logging
import os
import yaml
from pathlib import Path
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from typing import Dict, Optional

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "levels.yaml"

class LevelConfig(BaseModel):
    label: str
    rollouts: int = Field(ge=1, lt=2**32)  # MCTS iterations per bot move

class LevelRegistry:
    def __init__(self, config_path: Optional[str] = None):
        self.levels: Dict[int, LevelConfig] = {}
        self.default_level: int = 1
        self._load(config_path or os.getenv("C4_LEVELS_CONFIG") or str(DEFAULT_CONFIG_PATH))

    def _load(self, path: str):
        with open(path, "r") as f:
            data = yaml.safe_load(f)
            for key, val in data.get("levels", {}).items():
                self.levels[int(key)] = LevelConfig(**val)
        self.default_level = int(data.get("default_level", min(self.levels)))
        if self.default_level not in self.levels:
            raise ValueError(f"Default level {self.default_level} is not configured in {path}")

    def get(self, level: Optional[int]) -> LevelConfig:
        """Config for 'level', falling back to the default level."""
        if level is None:
            return self.levels[self.default_level]
        config = self.levels.get(level)
        if config is None:
            logger.warning("Unknown AI level %s, using default level %s", level, self.default_level)
            return self.levels[self.default_level]
        return config

    def rollouts_for(self, level: Optional[int]) -> int:
        return self.get(level).rollouts

    def list_all(self) -> Dict[int, LevelConfig]:
        return self.levels

# Singleton instance
registry = LevelRegistry()
