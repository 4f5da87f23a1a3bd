"""Category-constrained task sampling without replacement."""

from __future__ import annotations

import random
import threading
from contextlib import nullcontext
from typing import Dict, List, Mapping, Optional, Sequence

from ...platform.config import settings
from .catalog import CatalogTask, CategoryQuota
from .errors import InsufficientTasksInCategory

_shared_rng: Optional[random.Random] = None
_shared_rng_lock = threading.Lock()


def get_task_rng() -> random.Random:
    """Process-wide sampler RNG, seeded from TASK_SAMPLER_SEED when configured."""
    global _shared_rng
    with _shared_rng_lock:
        if _shared_rng is None:
            seed = settings.TASK_SAMPLER_SEED
            _shared_rng = random.Random(seed) if seed is not None else random.SystemRandom()
        return _shared_rng


def reset_task_rng() -> None:
    """Drop the shared RNG so the next call re-reads the seed setting."""
    global _shared_rng
    with _shared_rng_lock:
        _shared_rng = None


def sample_tasks(
    categories: Sequence[CategoryQuota],
    tasks_by_category: Mapping[int, Sequence[CatalogTask]],
    rng: Optional[random.Random] = None,
) -> List[CatalogTask]:
    """Pick ``required_count`` distinct tasks per category, in category order.

    Within a category the tasks are appended in the order they were drawn; the
    concatenated list is the student's task sequence. A category whose pool is
    smaller than its quota raises InsufficientTasksInCategory. A quota equal to
    the pool size selects the whole pool in random order.
    """
    if rng is None:
        rng = get_task_rng()
        guard = _shared_rng_lock
    else:
        guard = nullcontext()

    selected: List[CatalogTask] = []
    with guard:
        for quota in categories:
            required = quota.required_count
            if required <= 0:
                continue
            available = list(tasks_by_category.get(quota.category_id) or [])
            if required > len(available):
                raise InsufficientTasksInCategory(quota.category_id, required, len(available))
            selected.extend(rng.sample(available, required))
    return selected


def tasks_per_category(tasks: Sequence[CatalogTask]) -> Dict[int, int]:
    counts: Dict[int, int] = {}
    for task in tasks:
        counts[task.category_id] = counts.get(task.category_id, 0) + 1
    return counts
