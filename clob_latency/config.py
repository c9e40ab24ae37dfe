"""
Latency test configuration.

Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

DEFAULT_GAMMA_API_URL = "https://gamma-api.polymarket.com"
DEFAULT_CLOB_API_URL = "https://clob.polymarket.com"

# User-Agent is required to get past the Cloudflare WAF in front of the CLOB
DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
})


@dataclass(frozen=True)
class ProbeConfig:
    """Immutable configuration for one latency test run."""

    # URLs
    gamma_api_url: str = DEFAULT_GAMMA_API_URL
    clob_api_url: str = DEFAULT_CLOB_API_URL

    # Collection
    iterations: int = 30
    sleep_ms: int = 250
    discovery_limit: int = 10
    request_timeout_seconds: float = 300.0
    headers: Mapping[str, str] = field(default_factory=lambda: DEFAULT_HEADERS)

    # Run identity
    region: str = "Unknown"
    token_id: Optional[str] = None

    # Output
    output_dir: str = "."

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ProbeConfig":
        """
        Load config from environment variables.

        Raises:
            ValueError: if a numeric setting cannot be parsed
        """
        return cls(
            # URLs
            gamma_api_url=os.getenv("GAMMA_API_URL", DEFAULT_GAMMA_API_URL),
            clob_api_url=os.getenv("CLOB_API_URL", DEFAULT_CLOB_API_URL),

            # Collection
            iterations=_env_number("ITERATIONS", 30, int),
            sleep_ms=_env_number("SLEEP_MS", 250, int),
            discovery_limit=_env_number("DISCOVERY_LIMIT", 10, int),
            request_timeout_seconds=_env_number("REQUEST_TIMEOUT_SECONDS", 300.0, float),

            # Run identity
            region=os.getenv("REGION") or "Unknown",
            token_id=os.getenv("TOKEN_ID") or None,

            # Output
            output_dir=os.getenv("OUTPUT_DIR", "."),

            # Logging
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @classmethod
    def from_env_file(cls, path: str) -> "ProbeConfig":
        """
        Load config from a .env file, then environment variables.

        The file only fills keys missing from the environment, so a REGION or
        TOKEN_ID exported by the shell that launches the probe always wins.
        """
        for key, value in read_env_file(path).items():
            os.environ.setdefault(key, value)

        return cls.from_env()

    def with_overrides(self, **overrides) -> "ProbeConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.iterations < 1:
            errors.append("ITERATIONS must be at least 1")

        if self.sleep_ms < 0:
            errors.append("SLEEP_MS must not be negative")

        if self.discovery_limit < 1:
            errors.append("DISCOVERY_LIMIT must be at least 1")

        if self.request_timeout_seconds <= 0:
            errors.append("REQUEST_TIMEOUT_SECONDS must be positive")

        for name, url in (("GAMMA_API_URL", self.gamma_api_url), ("CLOB_API_URL", self.clob_api_url)):
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} must be an http(s) URL")

        return errors


def _env_number(name: str, default, cast):
    """Read a numeric environment variable, naming it in the error."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def read_env_file(path: str) -> dict[str, str]:
    """
    Parse KEY=VALUE lines from a .env file.

    Blank lines and comments are skipped, an optional leading `export` is
    accepted so the same file can be sourced by a shell, and surrounding
    quotes are removed. A missing file yields an empty dict.
    """
    values: dict[str, str] = {}
    if not os.path.exists(path):
        return values

    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[len("export "):]
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip().strip("'\"")

    return values
