"""Configuration management for wphmr."""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel, to_snake
from pydantic_settings import BaseSettings, SettingsConfigDict

from wphmr.exceptions import ConfigLoadError
from wphmr.origin import Origin, origin_for_server
from wphmr.paths import resolve_path

DEFAULT_CONFIG_FILE = "wphmr.yml"

DEFAULT_DEV_PATTERNS = ("local", "test", "dev")

DEFAULT_POLICY = (
    "Content-Security-Policy: script-src * blob: 'unsafe-inline' 'unsafe-eval'; "
    "worker-src * blob:; connect-src * 'unsafe-inline';"
)


class PolicyKind(str, Enum):
    """Which Content-Security-Policy header the generated plugin sends."""

    DISABLED = "disabled"
    DEFAULT = "default"
    CUSTOM = "custom"


class _Policy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DisabledPolicy(_Policy):
    """No header function is generated."""

    kind: Literal[PolicyKind.DISABLED] = PolicyKind.DISABLED


class DefaultPolicy(_Policy):
    """Send the permissive policy Vite's client needs."""

    kind: Literal[PolicyKind.DEFAULT] = PolicyKind.DEFAULT

    @property
    def header(self) -> str:
        return DEFAULT_POLICY


class CustomPolicy(_Policy):
    """Send a caller supplied header line, verbatim."""

    kind: Literal[PolicyKind.CUSTOM] = PolicyKind.CUSTOM
    header: str


CspPolicy = Annotated[
    DisabledPolicy | DefaultPolicy | CustomPolicy,
    Field(discriminator="kind"),
]


def coerce_csp(value: Any) -> Any:
    """Map the loose ``bool | str`` csp setting onto a policy variant.

    ``False`` disables the header, ``True`` or ``None`` selects the default
    policy and any string is used as the header line. Anything else (dicts,
    policy instances) is left for the discriminated union to validate.
    """
    if value is None or value is True:
        return DefaultPolicy()
    if value is False:
        return DisabledPolicy()
    if isinstance(value, str):
        return CustomPolicy(header=value)
    return value


class ProbeCache(BaseModel):
    """Key-value store the generated probe caches its result in.

    The store is addressed through a getter and a setter with WordPress
    transient semantics: the getter returns ``false`` on a miss and the setter
    takes ``(key, value, ttl_seconds)``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    getter: str = Field(
        default="get_transient",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="PHP function reading a cached value",
    )
    setter: str = Field(
        default="set_transient",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="PHP function writing a cached value with a TTL",
    )
    key_prefix: str = Field(
        default="vite_hmr_",
        pattern=r"^[A-Za-z0-9_\-:.]*$",
        description="Prefix of the per-port cache key",
    )

    def key(self, port: int) -> str:
        return f"{self.key_prefix}{port}"


class HmrOptions(BaseModel):
    """Options that shape the generated plugin.

    Accepts both the snake_case field names and their camelCase aliases
    (``devPatterns``, ``cssReloadEvents``, ``cacheTtl``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    dev_patterns: tuple[str, ...] = Field(
        default=(),
        description="Extra host suffixes treated as development, after the "
        "built-in local/test/dev",
    )
    css_reload_events: tuple[str, ...] = Field(
        default=(),
        description="Vite HMR events that trigger a stylesheet cache-bust",
    )
    csp: CspPolicy = Field(
        default_factory=DefaultPolicy,
        description="Content-Security-Policy header sent in development",
    )
    cache_ttl: int = Field(
        default=5,
        ge=0,
        description="Seconds the port probe result stays cached",
    )
    cache: ProbeCache = Field(default_factory=ProbeCache)

    @field_validator("csp", mode="before")
    @classmethod
    def coerce_csp_setting(cls, value: Any) -> Any:
        return coerce_csp(value)

    @property
    def all_dev_patterns(self) -> tuple[str, ...]:
        """Built-in patterns followed by the configured ones, undeduplicated."""
        return DEFAULT_DEV_PATTERNS + self.dev_patterns


class WpHmrConfig(BaseSettings):
    """Main configuration for a wphmr session."""

    model_config = SettingsConfigDict(
        env_prefix="WPHMR_",
        case_sensitive=False,
    )

    # Where the plugin is written
    output_dir: Path = Field(
        description="Directory the plugin file is written to, usually "
        "wp-content/mu-plugins",
    )
    file_name: str = Field(default="vite-hmr.php", description="Plugin file name")
    cleanup: bool = Field(
        default=True, description="Remove the plugin file when the session ends"
    )

    # Dev server location
    origin: str | None = Field(
        default=None,
        description="Full dev server origin, e.g. https://localhost:5173. "
        "Overrides server_host/server_port/server_https",
    )
    server_host: str = Field(default="localhost", description="Dev server host")
    server_port: int = Field(default=5173, description="Dev server port")
    server_https: bool = Field(default=False, description="Dev server uses TLS")

    # Session behaviour
    watch_config: bool = Field(
        default=True, description="Regenerate the plugin when the config changes"
    )
    follow_server: bool = Field(
        default=False,
        description="End the session once the dev server stops accepting "
        "connections",
    )
    poll_interval: float = Field(
        default=1.0, gt=0, description="Seconds between dev server checks"
    )

    # Generator options, validated again by HmrOptions
    dev_patterns: list[str] = Field(default_factory=list)
    css_reload_events: list[str] = Field(default_factory=list)
    csp: bool | str = Field(default=True)
    cache_ttl: int = Field(default=5, ge=0)
    cache: ProbeCache = Field(default_factory=ProbeCache)

    _config_file: Path | None = PrivateAttr(default=None)

    def __init__(self, config_file: Path | None = None, **kwargs: Any) -> None:
        if config_file is not None:
            kwargs = {**load_config_file(config_file), **kwargs}

        super().__init__(**kwargs)
        self._config_file = config_file

    @field_validator("csp", mode="before")
    @classmethod
    def parse_csp_flag(cls, value: Any) -> Any:
        # Environment variables only carry strings
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return value

    @property
    def config_file_path(self) -> Path | None:
        return self._config_file

    @property
    def plugin_path(self) -> Path:
        return self.output_dir / self.file_name

    @property
    def options(self) -> HmrOptions:
        """Generator options derived from this configuration."""
        return HmrOptions(
            dev_patterns=self.dev_patterns,
            css_reload_events=self.css_reload_events,
            csp=self.csp,
            cache_ttl=self.cache_ttl,
            cache=self.cache,
        )

    def resolve_origin(self) -> Origin:
        """Return the origin override, or the origin of the configured server."""
        if self.origin:
            return Origin.parse(self.origin)
        return origin_for_server(self.server_host, self.server_port, self.server_https)


def load_config_file(config_file: Path) -> dict[str, Any]:
    """Read a YAML config file into snake_case keyword arguments.

    Keys may use the camelCase option names (``outputDir``, ``devPatterns``).
    A relative ``output_dir`` is taken relative to the file's directory.
    """
    try:
        with open(config_file, encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Could not load {config_file}: {e}") from e

    if not isinstance(config_data, dict):
        raise ConfigLoadError(f"{config_file} must contain a mapping at the top level")

    config_data = {to_snake(str(key)): value for key, value in config_data.items()}
    if isinstance(config_data.get("output_dir"), str):
        config_data["output_dir"] = resolve_path(
            config_data["output_dir"], config_file.parent
        )
    return config_data


def find_config_file(directory: Path | None = None) -> Path | None:
    """Return ``wphmr.yml`` in ``directory`` (default: cwd) when it exists."""
    candidate = (directory or Path.cwd()) / DEFAULT_CONFIG_FILE
    if candidate.exists():
        return candidate
    return None
