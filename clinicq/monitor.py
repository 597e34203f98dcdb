from __future__ import annotations

# Waiting-room monitor.
#
# Shows who is next and how many are waiting behind them. It owns its own
# RemoteQueueClient (separate from any patient view) and only listens to
# queue updates.

from dataclasses import dataclass

from .errors import QUEUE_REGION, ErrorState
from .matcher import find_head, waiting_entries
from .models import Queue, QueueEntry, QueueSnapshot
from .remote import RemoteQueueClient
from .store import QueueStateStore


@dataclass(frozen=True)
class MonitorBoard:
    head: QueueEntry | None
    waiting: Queue

    @classmethod
    def from_queue(cls, queue: Queue) -> MonitorBoard:
        idx = find_head(queue)
        head = queue[idx] if idx is not None else None
        return cls(head=head, waiting=waiting_entries(queue))

    def lines(self) -> list[str]:
        if self.head is None:
            return ["No patients in queue."]
        out = [f"Next: {self.head.name}"]
        if self.waiting:
            n = len(self.waiting)
            out.append(f"Waiting: {n} patient{'s' if n > 1 else ''}")
            out.extend(f"  {entry.name}" for entry in self.waiting)
        return out


def run_monitor(*, base_url: str, timeout: float = 5.0) -> None:
    store = QueueStateStore()

    def render(_snapshot: QueueSnapshot) -> None:
        print("[monitor] " + "-" * 30)
        for line in MonitorBoard.from_queue(store.queue).lines():
            print(f"[monitor] {line}")

    def report(error: ErrorState) -> None:
        if error.region == QUEUE_REGION:
            print(f"[monitor] error: {error.message}")

    with RemoteQueueClient.for_base_url(base_url, timeout=timeout) as remote:
        remote.on_queue(store.apply)
        remote.on_error(report)
        store.subscribe(render)
        print(f"[monitor] connecting to {base_url}")
        try:
            remote.start()
            remote.run()
        except KeyboardInterrupt:
            pass
        finally:
            store.close()
