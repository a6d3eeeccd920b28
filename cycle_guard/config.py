"""Configuration schema and loader.

The configuration lives at the workspace root in one of ``CONFIG_FILE_NAMES``.
Only the ``circular`` section is read here; every field has a default so a
missing file or section behaves like an empty one.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from cycle_guard.errors import ConfigError
from cycle_guard.models import Severity

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "monorepo.config.json",
    ".monoreporc",
    ".monoreporc.json",
    "monorepo.config.yaml",
    "monorepo.config.yml",
)

AnalyzerName = Literal["dpdm", "madge", "native"]


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class IgnoreCycle(_Schema):
    pattern: str = Field(description="File path glob pattern to ignore")
    package: str | None = Field(default=None, description="Package name glob to scope the ignore rule")
    reason: str | None = Field(default=None, description="Reason for ignoring this cycle")


class DpdmOptions(_Schema):
    skip_dynamic_imports: bool = True
    skip_type_only: bool = True
    tsconfig: str | None = None


class MadgeOptions(_Schema):
    tsconfig: str | None = None
    file_extensions: list[str] = Field(default_factory=lambda: ["ts", "tsx", "js", "jsx"])


class NativeOptions(_Schema):
    skip_dynamic_imports: bool = True
    skip_type_only: bool = True
    max_cycle_length: int = Field(default=10, ge=1)


class CircularConfig(_Schema):
    enabled: bool = True
    intra_package: bool = True
    inter_package: bool = True
    intra_package_severity: Severity = Severity.HIGH
    inter_package_severity: Severity = Severity.CRITICAL
    tools: list[AnalyzerName] = Field(default_factory=lambda: ["dpdm", "madge"])
    ignore_cycles: list[IgnoreCycle] = Field(default_factory=list)
    ignore_package_cycles: list[Annotated[list[str], Field(min_length=2)]] = Field(default_factory=list)
    include_packages: list[str] = Field(default_factory=list)
    exclude_packages: list[str] = Field(default_factory=list)
    dpdm: DpdmOptions = Field(default_factory=DpdmOptions)
    madge: MadgeOptions = Field(default_factory=MadgeOptions)
    native: NativeOptions = Field(default_factory=NativeOptions)
    analyzer_timeout: float = Field(default=120.0, gt=0, description="Seconds before one analyzer run is abandoned")

    def analyzer_options(self, name: str) -> BaseModel | None:
        return getattr(self, name, None) if name in ("dpdm", "madge", "native") else None


class MonorepoConfig(_Schema):
    version: str = "1.0.0"
    circular: CircularConfig = Field(default_factory=CircularConfig)


def find_config_file(root: Path) -> Path | None:
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(root: Path, config_path: Path | None = None) -> MonorepoConfig:
    """Load and validate the workspace configuration.

    ``config_path`` may be absolute or relative to ``root``. Without one the
    default file names are tried in order; if none exists the defaults apply.
    """
    if config_path is not None:
        path = config_path if config_path.is_absolute() else root / config_path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}", path)
    else:
        path = find_config_file(root)
        if path is None:
            logger.debug("No config file under %s, using defaults", root)
            return MonorepoConfig()

    data = _read_config_file(path)
    try:
        return MonorepoConfig.model_validate(data)
    except ValidationError as e:
        lines = [
            f"  - {'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError(
            "Configuration validation failed:\n" + "\n".join(lines), path,
        ) from e


def _read_config_file(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", path) from e

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain an object", path)
    return data
