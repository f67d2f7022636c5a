from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.vloex.com"
DEFAULT_TIMEOUT = 60.0

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings shared by every request a client makes.

    Build one directly, or via :meth:`from_env`, and hand it to
    :meth:`Vloex.from_config <vloex.Vloex.from_config>`.  To change a value,
    derive a new config with :func:`dataclasses.replace`; an existing config
    is never mutated.
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "VLOEX API key required. Get one at https://vloex.com/api-keys"
            )
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty.")
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive number, got {self.timeout!r}")
        # frozen, so normalise through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "timeout", float(self.timeout))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "ClientConfig":
        """Read ``VLOEX_API_KEY``, ``VLOEX_BASE_URL``, ``VLOEX_TIMEOUT`` and ``VLOEX_DEBUG``.

        Keyword *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {"api_key": env.get("VLOEX_API_KEY", "")}

        if env.get("VLOEX_BASE_URL"):
            values["base_url"] = env["VLOEX_BASE_URL"]
        if env.get("VLOEX_TIMEOUT"):
            try:
                values["timeout"] = float(env["VLOEX_TIMEOUT"])
            except ValueError:
                raise ConfigurationError(
                    f"VLOEX_TIMEOUT must be a number of seconds, got {env['VLOEX_TIMEOUT']!r}"
                ) from None
        if env.get("VLOEX_DEBUG"):
            values["debug"] = env["VLOEX_DEBUG"].strip().lower() in _TRUTHY

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def __repr__(self) -> str:
        # never print the key itself
        return (
            f"ClientConfig(api_key='{_mask(self.api_key)}', base_url={self.base_url!r}, "
            f"timeout={self.timeout}, debug={self.debug})"
        )


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "***"
    return f"{secret[:4]}…{secret[-4:]}"
