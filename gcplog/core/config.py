"""
Application configuration for the GCP log formatter.

Provides environment-aware settings with conservative defaults. Target
settings mirror what the host agent configures per subscription: timestamp
and line policy, static labels, and relabel rules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gcplog.core.labels import is_internal_label, is_valid_label_name, is_valid_label_value
from gcplog.relabel.schema import RelabelConfig


class TargetConfig(BaseModel):
	"""
	Per-target formatting policy.

	Notes:
	- use_incoming_timestamp: adopt the entry's timestamp (falling back to
	  receiveTimestamp) instead of the processing time.
	- use_full_line: always ship the whole JSON entry as the log line, even
	  when textPayload is set.
	- labels: static labels; they override same-named pipeline labels.
	- relabel_configs: rules applied to the internal label set.
	"""

	use_incoming_timestamp: bool = False
	use_full_line: bool = False
	labels: Dict[str, str] = Field(default_factory=dict)
	relabel_configs: List[RelabelConfig] = Field(default_factory=list)

	@field_validator("labels")
	@classmethod
	def _labels_are_valid(cls, value: Dict[str, str]) -> Dict[str, str]:
		for name, label_value in value.items():
			if not is_valid_label_name(name) or is_internal_label(name):
				raise ValueError(f"invalid static label name: {name!r}")
			if not is_valid_label_value(label_value):
				raise ValueError(f"invalid value for static label {name!r}")
		return value


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.
	"""

	model_config = SettingsConfigDict(
		env_prefix="GCPLOG_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Optional[Path] = Field(None, description="Directory for log files; console only when unset")
	target: TargetConfig = TargetConfig()

	def model_post_init(self, __context: object) -> None:
		if self.logs_dir is not None:
			self.logs_dir.mkdir(parents=True, exist_ok=True)


config = Config()
