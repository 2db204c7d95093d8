"""Fallback policy for the OCR orchestrator."""

from __future__ import annotations

from enum import Enum


class FallbackPolicy(str, Enum):
    """How the orchestrator combines external vendors with the local engine.

    CHAIN                  Configured external vendors only, in priority order.
    CHAIN_THEN_LOCAL       External vendors, then the local engine as last resort.
    LOCAL_IF_UNCONFIGURED  External vendors; the local engine only when no
                           external vendor is configured at all.
    SINGLE                 Exactly the first configured external vendor, no fallback.
    """

    CHAIN = "chain"
    CHAIN_THEN_LOCAL = "chain_then_local"
    LOCAL_IF_UNCONFIGURED = "local_if_unconfigured"
    SINGLE = "single"
