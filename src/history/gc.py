import logging
from typing import Dict, List, Set

from src.history.models import Commit

logger = logging.getLogger(__name__)


def collect_garbage(commits: Dict[str, Commit], orphaned: Set[str]) -> List[str]:
    """Deletes every orphaned commit and empties the orphan set.

    Mutates both arguments in place and returns the removed ids in creation
    order.
    """
    if not orphaned:
        return []

    removed = [oid for oid in commits if oid in orphaned]
    for oid in removed:
        del commits[oid]
    orphaned.clear()

    logger.info("Garbage collected %d orphaned commit(s)", len(removed))
    return removed
