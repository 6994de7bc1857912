from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .errors import ConfigError
from .project_constants import (
    CLUSTER_URLS,
    COMMITMENT_LEVELS,
    DEFAULT_CLUSTER,
    DEFAULT_COMMITMENT,
)


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    payer_secret: str
    mint_secret: str | None = None
    cluster: str = DEFAULT_CLUSTER
    commitment: str = DEFAULT_COMMITMENT

    def __repr__(self) -> str:
        # Never echo key material.
        return (
            f"Settings(rpc_url={self.rpc_url!r}, cluster={self.cluster!r}, "
            f"commitment={self.commitment!r}, mint_secret_set={self.mint_secret is not None})"
        )

    @staticmethod
    def from_env(
        rpc_url_override: str | None = None,
        cluster_override: str | None = None,
        commitment_override: str | None = None,
    ) -> "Settings":
        load_dotenv()

        payer_secret = os.getenv("PAYER_PRIVATE_KEY", "").strip()
        if not payer_secret:
            raise ConfigError(
                "Missing PAYER_PRIVATE_KEY. Put it in .env or export it.",
                stage="config",
            )

        mint_secret = os.getenv("MINT_PRIVATE_KEY_BASE58", "").strip() or None

        cluster = cluster_override or os.getenv("SOLANA_CLUSTER", "").strip() or DEFAULT_CLUSTER
        if cluster not in CLUSTER_URLS:
            raise ConfigError(
                f"Unknown cluster {cluster!r} (expected one of {', '.join(CLUSTER_URLS)}).",
                stage="config",
            )

        commitment = (
            commitment_override or os.getenv("COMMITMENT", "").strip() or DEFAULT_COMMITMENT
        )
        if commitment not in COMMITMENT_LEVELS:
            raise ConfigError(
                f"Unknown commitment {commitment!r} (expected one of {', '.join(COMMITMENT_LEVELS)}).",
                stage="config",
            )

        # If user provides --rpc-url, trust it. Otherwise RPC_URL, else the cluster default.
        rpc_url = rpc_url_override or os.getenv("RPC_URL", "").strip() or CLUSTER_URLS[cluster]

        return Settings(
            rpc_url=rpc_url,
            payer_secret=payer_secret,
            mint_secret=mint_secret,
            cluster=cluster,
            commitment=commitment,
        )
