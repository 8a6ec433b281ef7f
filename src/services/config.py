from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_FIELDS = {
    "CM_ONESHOT": "oneshot",
    "CM_OWN_CLIPBOARD": "own_clipboard",
    "CM_MAX_CLIPS": "max_clips",
    "CM_SELECTIONS": "selections",
    "CM_SLEEP": "sleep_interval",
    "CM_LOCK_TIMEOUT": "lock_timeout",
    "CM_IGNORE_WINDOW": "ignore_window",
    "CM_DIR": "cache_base",
    "CM_DEBUG": "debug",
}


class DaemonConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    oneshot: bool = False
    own_clipboard: bool = False
    max_clips: int = Field(default=1000, ge=0)
    selections: List[str] = Field(default_factory=lambda: ["clipboard", "primary"])
    sleep_interval: float = Field(default=0.5, gt=0)
    lock_timeout: float = Field(default=2.0, ge=0)
    ignore_window: Optional[str] = None
    cache_base: Optional[Path] = None
    debug: bool = False

    @field_validator("selections", mode="before")
    @classmethod
    def _split_selections(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.split()
        return value

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        env_file: Optional[Path] = None,
        **overrides: Any,
    ) -> "DaemonConfig":
        """Build the config from ``CM_*`` variables.

        When ``environ`` is not given, an optional ``.env`` file is loaded
        into ``os.environ`` first; variables already set take precedence.
        Keyword overrides that are not ``None`` win over the environment.
        """
        if environ is None:
            if env_file is not None:
                load_dotenv(dotenv_path=env_file)
            else:
                load_dotenv()
            environ = os.environ

        values: Dict[str, Any] = {}
        for key, field_name in _ENV_FIELDS.items():
            raw = environ.get(key)
            if raw is None or raw.strip() == "":
                continue
            values[field_name] = raw.strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
