"""Configuration storage for sprout.

Stores user settings in ``~/.sprout/config.json``. The directory can be moved
with the ``SPROUT_HOME`` environment variable. The file is read as JSON5, so
comments and trailing commas are allowed. Keys are camelCase on disk:

    {
      "defaultCommand": "claude",
      "linearApiKey": "lin_api_...",
      "sparseCheckout": {"/home/me/src/monorepo": ["services/api", "libs"]},
      "logLevel": "warn",
      "logOutput": "stderr",
      // $REPO_BASEPATH, $REPO_NAME and $BRANCH_NAME are expanded
      "worktreeBasePath": "$REPO_BASEPATH/worktrees/$REPO_NAME"
    }
"""

import json
import os
import shlex
from pathlib import Path
from typing import Literal

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sprout.domain.shared import Err, Ok, Result, SproutError

CONFIG_FILE = "config.json"

LogLevel = Literal["debug", "info", "warn", "error"]


class SproutConfig(BaseModel):
    """User configuration. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    default_command: str = Field(default="", alias="defaultCommand")
    linear_api_key: str = Field(default="", alias="linearApiKey")
    sparse_checkout: dict[str, list[str]] = Field(default_factory=dict, alias="sparseCheckout")
    log_level: LogLevel = Field(default="warn", alias="logLevel")
    log_output: str = Field(default="stderr", alias="logOutput")
    worktree_base_path: str = Field(default="", alias="worktreeBasePath")
    worktree_base_paths: dict[str, str] = Field(default_factory=dict, alias="worktreeBasePaths")

    @property
    def command_args(self) -> list[str]:
        """``default_command`` split like a shell would, quotes respected."""
        return shlex.split(self.default_command) if self.default_command.strip() else []

    @property
    def has_linear(self) -> bool:
        return bool(self.linear_api_key.strip())

    def sparse_directories(self, repo_path: Path) -> list[str]:
        return list(self.sparse_checkout.get(str(repo_path), []))

    @property
    def masked_api_key(self) -> str:
        """The API key with only its ends visible, for display."""
        key = self.linear_api_key
        if not key:
            return ""
        if len(key) <= 12:
            return "*" * len(key)
        return f"{key[:8]}...{key[-4:]}"


def get_config_dir() -> Path:
    """Get the sprout config directory."""
    override = os.environ.get("SPROUT_HOME")
    return Path(override) if override else Path.home() / ".sprout"


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE


def load_config(path: Path | None = None) -> Result[SproutConfig, SproutError]:
    """Load the configuration, falling back to defaults when there is no file.

    Returns:
        Ok(SproutConfig), or Err for malformed content (validation) or an
        unreadable file (configuration).
    """
    config_file = path or get_config_path()
    if not config_file.exists():
        return Ok(SproutConfig())
    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError as e:
        return Err(SproutError.configuration(f"cannot read {config_file}", cause=e))
    if not raw.strip():
        return Ok(SproutConfig())
    try:
        data = json5.loads(raw)
    except ValueError as e:
        return Err(SproutError.validation(f"invalid JSON in {config_file}: {e}"))
    if not isinstance(data, dict):
        return Err(SproutError.validation(f"{config_file} must contain a JSON object"))
    try:
        return Ok(SproutConfig.model_validate(data))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return Err(SproutError.validation(f"invalid config {config_file}: {problems}"))


def save_config(config: SproutConfig, path: Path | None = None) -> Result[Path, SproutError]:
    """Write ``config`` as camelCase JSON."""
    config_file = path or get_config_path()
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(
            json.dumps(config.model_dump(by_alias=True), indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        return Err(SproutError.configuration(f"cannot write {config_file}", cause=e))
    return Ok(config_file)
