"""Data models for the wallet blueprint."""

from __future__ import annotations

from typing import Any, TypedDict


class LedgerEntry(TypedDict, total=False):
    """A document in the ``transactions`` collection."""

    id: str
    userId: str
    amount: float
    type: str  # deposit/withdrawal/entry/prize
    status: str  # pending/success/failed
    description: str
    timestamp: Any
    tournamentId: str
    gatewayOrderId: str
    gatewayTxnId: str
    utr: str
    settledAt: Any
    settledVia: str  # webhook/poll
    failureReason: str
    adjustedBy: str


class WalletSummary(TypedDict):
    """What the wallet page shows."""

    walletBalance: float
    recentTransactions: list[LedgerEntry]
    totalWinnings: float
    totalSpent: float
