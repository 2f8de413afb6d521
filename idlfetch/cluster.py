"""Named Solana clusters and their public RPC endpoints."""

from __future__ import annotations

from enum import Enum


class Cluster(Enum):
    """The three public Solana networks."""
    DEVNET = "devnet"
    TESTNET = "testnet"
    MAINNET = "mainnet-beta"

    @property
    def url(self) -> str:
        return CLUSTER_URLS[self]

    @classmethod
    def from_name(cls, name: str) -> Cluster:
        """
        Look up a cluster by name.

        Accepts "devnet", "testnet", "mainnet" and "mainnet-beta",
        case-insensitively.

        Raises:
            ValueError: If the name is not a known cluster
        """
        key = name.strip().lower()
        if key == "mainnet":
            return cls.MAINNET
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown cluster '{name}', expected one of: "
                f"{', '.join(CLUSTER_NAMES)}"
            )


CLUSTER_URLS = {
    Cluster.DEVNET: "https://api.devnet.solana.com",
    Cluster.TESTNET: "https://api.testnet.solana.com",
    Cluster.MAINNET: "https://api.mainnet-beta.solana.com",
}

CLUSTER_NAMES = ["devnet", "testnet", "mainnet"]
