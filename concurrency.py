from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, TypeVar

from tqdm import tqdm

T = TypeVar("T")
R = TypeVar("R")

MAX_WORKERS = 10


def run_concurrently(
    func: Callable[[T], R],
    items: Iterable[T],
    desc: str,
    unit: str = "items",
    max_workers: int = MAX_WORKERS,
) -> List[R]:
    """Call `func` for every item in parallel and return the results in input order.

    The batch fails as a whole: on the first exception every call that has not
    started yet is cancelled and the exception is re-raised once the running
    calls have finished.
    """
    items = list(items)
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(func, item) for item in items]
        with tqdm(total=len(futures), desc=desc, unit=unit, leave=False) as progress:
            for future in futures:
                future.add_done_callback(lambda _: progress.update())
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

            failed = next((f for f in futures if f in done and f.exception() is not None), None)
            if failed is not None:
                for future in not_done:
                    future.cancel()
                raise failed.exception()

    return [future.result() for future in futures]
