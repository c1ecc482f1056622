"""
Runtime configuration for vmtrace.

Values come from the environment; CLI flags override them.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

DEFAULT_RPC_URL = "http://localhost:8011"
DEFAULT_OPENCHAIN_URL = "https://api.openchain.xyz/signature-database/v1/lookup"
DEFAULT_FOURBYTE_URL = "https://www.4byte.directory/api/v1"
DEFAULT_RESOLVER_TIMEOUT = 5.0


@dataclass(frozen=True)
class Config:
    """Settings shared by the resolver, the contracts loader and the CLI."""
    zksync_home: Path = field(default_factory=Path.cwd)
    rpc_url: str = DEFAULT_RPC_URL
    openchain_url: str = DEFAULT_OPENCHAIN_URL
    fourbyte_url: str = DEFAULT_FOURBYTE_URL
    resolver_timeout: float = DEFAULT_RESOLVER_TIMEOUT
    use_colors: bool = True

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Config":
        env = os.environ if environ is None else environ

        timeout = DEFAULT_RESOLVER_TIMEOUT
        raw_timeout = env.get("VMTRACE_RESOLVER_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"Invalid VMTRACE_RESOLVER_TIMEOUT: {raw_timeout}")

        home = env.get("ZKSYNC_HOME")
        return cls(
            zksync_home=Path(home) if home else Path.cwd(),
            rpc_url=env.get("RPC_URL", DEFAULT_RPC_URL),
            openchain_url=env.get("VMTRACE_OPENCHAIN_URL", DEFAULT_OPENCHAIN_URL),
            fourbyte_url=env.get("VMTRACE_FOURBYTE_URL", DEFAULT_FOURBYTE_URL),
            resolver_timeout=timeout,
            use_colors=not env.get("NO_COLOR"),
        )

    def with_overrides(self, **overrides) -> "Config":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "zksync_home" in values:
            values["zksync_home"] = Path(values["zksync_home"])
        return replace(self, **values)
