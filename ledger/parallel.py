"""Run independent API calls concurrently and join their results."""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict

from .api_client import ApiResponse
from .log import get_logger


logger = get_logger(__name__)

MAX_WORKERS = 4


def gather(calls: Dict[str, Callable[[], ApiResponse]], max_workers: int = MAX_WORKERS) -> Dict[str, ApiResponse]:
    """
    Run each call on a worker thread and wait for all of them.

    A call that raises becomes a failed ApiResponse under its own key, so the
    other results still reach the page.

    Args:
        calls: Name -> zero-argument callable returning an ApiResponse
        max_workers: Thread pool size

    Returns:
        Name -> ApiResponse, one entry per call
    """
    if not calls:
        return {}

    results: Dict[str, ApiResponse] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(calls)),
                            thread_name_prefix="ledger-fetch") as pool:
        futures = {pool.submit(func): name for name, func in calls.items()}
        for future in as_completed(futures):
            name = futures[future]
            try:
                results[name] = future.result()
            except Exception as e:
                logger.error("Parallel fetch %r raised: %s", name, e, exc_info=True)
                results[name] = ApiResponse.fail(str(e) or e.__class__.__name__)
    return results
