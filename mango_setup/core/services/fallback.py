"""
Fallback chains — ordered install strategies with typed results.

A chain is a list of named strategies. Each one returns a
StrategyResult; the first ``ok`` wins and the rest are never tried.
Strategies signal a hard failure by raising InstallError instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from mango_setup.core.models.install import StrategyResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Strategy:
    """A named way of getting something installed."""

    name: str
    attempt: Callable[[], StrategyResult]


def run_strategies(label: str, strategies: Sequence[Strategy]) -> StrategyResult:
    """Evaluate ``strategies`` in order until one succeeds.

    Returns the winning result, or the last non-ok result when the
    chain is exhausted.
    """
    last = StrategyResult.failure("none", f"No install strategies for {label}")
    for strategy in strategies:
        logger.debug("%s: trying %s", label, strategy.name)
        result = strategy.attempt()
        if result.ok:
            logger.debug("%s: %s succeeded", label, strategy.name)
            return result
        if result.status == "skipped":
            logger.debug("%s: %s skipped (%s)", label, strategy.name, result.detail)
        else:
            logger.debug("%s: %s failed (%s)", label, strategy.name, result.detail)
        last = result
    return last
