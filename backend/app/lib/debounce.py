import asyncio
import logging
from typing import Callable, Dict, Optional

from app.core.verifiers import VerificationOutcome

log = logging.getLogger("uvicorn.error")

ResultHandler = Callable[[str, str, VerificationOutcome], None]


class DebouncedValidator:
    """
    One remote verification per field, issued after the value has stopped
    changing for `window` seconds.

    Every schedule() bumps the field's generation and cancels whatever task
    the field already had (sleeping or in flight). A result is handed to
    `on_result` only if its generation is still the field's latest, so a
    late answer for an older value can never overwrite a newer one.
    """

    def __init__(self, verifiers: Dict[str, object], on_result: ResultHandler, window: float = 0.5):
        self.verifiers = verifiers
        self.window = window
        self._on_result = on_result
        self._generation: Dict[str, int] = {name: 0 for name in verifiers}
        self._tasks: Dict[str, asyncio.Task] = {}

    def schedule(self, field: str, value: str) -> int:
        if field not in self.verifiers:
            raise KeyError(field)
        self._generation[field] += 1
        gen = self._generation[field]

        prior = self._tasks.pop(field, None)
        if prior is not None and not prior.done():
            prior.cancel()

        task = asyncio.get_running_loop().create_task(self._run(field, value, gen))
        self._tasks[field] = task
        task.add_done_callback(lambda t, f=field: self._forget(f, t))
        return gen

    async def _run(self, field: str, value: str, gen: int) -> None:
        await asyncio.sleep(self.window)
        log.debug(f"[verify] {field} gen={gen} -> remote")
        try:
            outcome = await self.verifiers[field].verify(value)
        except Exception as exc:
            log.warning(f"[verify] {field} verifier raised {exc!r}; treating as unavailable")
            outcome = VerificationOutcome.UNAVAILABLE
        self.apply(field, gen, value, outcome)

    def apply(self, field: str, gen: int, value: str, outcome: VerificationOutcome) -> bool:
        if gen != self._generation[field]:
            log.debug(f"[verify] dropping stale {field} result gen={gen} latest={self._generation[field]}")
            return False
        self._on_result(field, value, outcome)
        return True

    def _forget(self, field: str, task: asyncio.Task) -> None:
        if self._tasks.get(field) is task:
            del self._tasks[field]

    def latest_generation(self, field: str) -> int:
        return self._generation[field]

    def is_pending(self, field: str) -> bool:
        task: Optional[asyncio.Task] = self._tasks.get(field)
        return task is not None and not task.done()

    async def wait_idle(self) -> None:
        # new work may be scheduled while we wait; loop until nothing is left
        while True:
            tasks = [t for t in self._tasks.values() if not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    def cancel_all(self) -> None:
        for task in list(self._tasks.values()):
            task.cancel()
        self._tasks.clear()
