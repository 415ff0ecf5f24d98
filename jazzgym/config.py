from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
	model_config = SettingsConfigDict(env_prefix="JAZZGYM_", env_file=".env", extra="ignore")

	data_dir: Path = Field(default_factory=lambda: Path.home() / ".jazzgym")
	history_limit: int = Field(default=50, ge=1)
	log_level: str = "INFO"

	@property
	def data_path(self) -> Path:
		return self.data_dir / "data.json"


def load_config() -> AppConfig:
	return AppConfig()


def configure_logging(level: str = "INFO") -> None:
	root = logging.getLogger()
	if not root.handlers:
		logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
	logging.getLogger("jazzgym").setLevel(level.upper())
