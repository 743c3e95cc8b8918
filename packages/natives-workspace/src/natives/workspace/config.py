from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from natives.spec import DeliveryMode, MapFunction, OriginRedirect, PlatformInfo
from .exceptions import ConfigError
from .platform import resolve_platform_info

# Keys that only make sense programmatically; a TOML file cannot carry them.
_CALLABLE_KEYS = {"map", "origin_redirect"}


@dataclass
class NativesConfig:
    copy_to: str = "./"
    dest_dir: str = "./"
    mode: DeliveryMode = DeliveryMode.PLAIN
    target_platform: Optional[str] = None
    target_arch: Optional[str] = None
    target_version: Optional[str] = None
    target_modules_abi: Optional[str] = None
    target_napi_version: Optional[int] = None
    target_libc: Optional[str] = None
    map: Optional[MapFunction] = None
    origin_redirect: Optional[OriginRedirect] = None
    sourcemap: bool = True

    def __post_init__(self):
        self.mode = _coerce_mode(self.mode)
        if self.map is not None and not callable(self.map):
            raise ConfigError("'map' must be callable")
        if self.origin_redirect is not None and not callable(self.origin_redirect):
            raise ConfigError("'origin_redirect' must be callable")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NativesConfig":
        """
        Builds a config from a plain mapping such as the [tool.natives] table.

        Hyphenated keys are accepted (`copy-to`). The legacy boolean `dlopen`
        selects the dlopen delivery mode.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        for raw_key, value in data.items():
            key = raw_key.replace("-", "_")
            if key == "dlopen":
                if not isinstance(value, bool):
                    raise ConfigError("'dlopen' must be a boolean")
                if value:
                    values.setdefault("mode", DeliveryMode.DLOPEN)
                continue
            if key not in known:
                raise ConfigError(f"Unknown option '{raw_key}'")
            values[key] = value

        return cls(**values)

    def platform_info(self) -> PlatformInfo:
        return resolve_platform_info(
            platform=self.target_platform,
            arch=self.target_arch,
            version=self.target_version,
            modules_abi=self.target_modules_abi,
            napi_version=self.target_napi_version,
            libc=self.target_libc,
        )


def _coerce_mode(mode: Union[str, DeliveryMode]) -> DeliveryMode:
    if isinstance(mode, DeliveryMode):
        return mode
    try:
        return DeliveryMode(str(mode).lower())
    except ValueError:
        choices = ", ".join(m.value for m in DeliveryMode)
        raise ConfigError(f"Invalid mode '{mode}' (expected one of: {choices})")


def load_config_from_path(root_path: Path) -> NativesConfig:
    """
    Reads [tool.natives] from root_path/pyproject.toml.

    A missing file or table yields the defaults. A relative `copy_to` is
    anchored at root_path.
    """
    pyproject_path = root_path / "pyproject.toml"
    table: Dict[str, Any] = {}

    if pyproject_path.is_file():
        try:
            with pyproject_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Could not parse {pyproject_path}: {e}")
        table = data.get("tool", {}).get("natives", {})

    bad_keys = _CALLABLE_KEYS.intersection(k.replace("-", "_") for k in table)
    if bad_keys:
        raise ConfigError(
            f"Option(s) {', '.join(sorted(bad_keys))} can only be set programmatically"
        )

    config = NativesConfig.from_mapping(table)
    if not Path(config.copy_to).is_absolute():
        config.copy_to = str(root_path / config.copy_to)
    return config
