from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from bs4 import BeautifulSoup


T = TypeVar("T")
Strategy = Callable[[BeautifulSoup], Optional[T]]

logger = logging.getLogger(__name__)


def _is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return True


class FallbackChain(Generic[T]):
    """Ordered strategies for one extraction concern; first non-empty result wins.

    A strategy that raises counts as an empty result. When no strategy yields
    anything the concern is logged as a gap and ``None`` is returned.
    """

    def __init__(self, concern: str, strategies: Sequence[Tuple[str, Strategy]]):
        self.concern = concern
        self.strategies: List[Tuple[str, Strategy]] = list(strategies)

    def run(self, soup: BeautifulSoup) -> Optional[T]:
        for name, strategy in self.strategies:
            try:
                value = strategy(soup)
            except Exception as e:
                logger.debug(
                    "strategy failed",
                    extra={"step": f"extract.{self.concern}", "status": name, "error": repr(e)},
                )
                continue
            if _is_present(value):
                logger.debug("strategy matched", extra={"step": f"extract.{self.concern}", "status": name})
                return value
        logger.info("extraction gap", extra={"step": f"extract.{self.concern}", "status": "gap"})
        return None
