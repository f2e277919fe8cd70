from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import os
from functools import lru_cache

import yaml

# Looked up in the working directory, in this order
CONFIG_FILE_NAMES = ("config", "config.yaml", "config.yml")
CONFIG_PATH_ENV = "FLEETWATCH_CONFIG"


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or malformed."""


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Telegram
    telegram_bot_token: Optional[str] = Field(
        default=None,
        alias="telegramBotToken",
        description="Bot token used to post alerts to Telegram",
    )
    telegram_chat_id: Optional[int] = Field(
        default=None,
        alias="telegramChatID",
        description="Destination chat id for alerts",
    )

    # Fleet: hosts + per-host command templates (one %s each)
    hosts: Optional[List[str]] = Field(
        default=None,
        alias="IPs",
        description="Host addresses, their order defines the 1-based server index",
    )
    health_command: Optional[str] = Field(
        default=None,
        alias="SSHCommands",
        description="Status command template, e.g. \"ssh controller@%s 'uptime; top -bn1 | head -5; free; df -h /'\"",
    )
    error_log_command: Optional[str] = Field(
        default=None,
        alias="SSHErrorLogCommand",
        description="Command template printing the error log of a host",
    )
    validator_log_command: Optional[str] = Field(
        default=None,
        alias="SSHValidatorLogCommand",
        description="Command template printing the validator log of a host",
    )

    # Tuning
    poll_interval: float = Field(default=10.0, gt=0, alias="pollInterval")
    command_timeout: float = Field(default=10.0, gt=0, alias="commandTimeout")
    usage_threshold: float = Field(default=80.0, ge=0, le=100, alias="usageThreshold")
    http_port: int = Field(default=8002, ge=1, le=65535, alias="httpPort")
    shared_log_snapshots: bool = Field(
        default=False,
        alias="sharedLogSnapshots",
        description="Use one log snapshot per stream for all hosts instead of one per host",
    )

    @field_validator("hosts", mode="before")
    @classmethod
    def hosts_as_strings(cls, value):
        # YAML reads unquoted entries such as `- 1234` as numbers
        if isinstance(value, list):
            return [item if isinstance(item, str) else str(item) for item in value]
        return value

    @staticmethod
    def render_command(template: Optional[str], host: str) -> str:
        if not template:
            return ""
        return template.replace("%s", host, 1)

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except OSError as exc:
            raise ConfigError(f"Error reading config file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Error parsing config file {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a YAML mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config file {path}: {exc}") from exc


def find_config_file(directory: str = ".") -> str:
    explicit = os.getenv(CONFIG_PATH_ENV)
    if explicit:
        if not os.path.isfile(explicit):
            raise ConfigError(f"Config file {explicit} (from {CONFIG_PATH_ENV}) not found")
        return explicit

    for name in CONFIG_FILE_NAMES:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate

    raise ConfigError(
        f"No config file found in {os.path.abspath(directory)} "
        f"(looked for {', '.join(CONFIG_FILE_NAMES)})"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_yaml(find_config_file())
