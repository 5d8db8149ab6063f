import time
from dataclasses import dataclass, field
from typing import Optional, List, Dict

@dataclass
class StatusStore:
    state: str = "idle"
    last_error: Optional[str] = None
    last_delivered_at: Optional[float] = None
    ticks: Dict[str, int] = field(default_factory=dict)   # TickOutcome value -> count
    echo: bool = False                                       # also print lines to stdout
    logs: List[str] = field(default_factory=list)

    def set_state(self, state: str):
        self.state = state

    def record_tick(self, outcome: str):
        self.ticks[outcome] = self.ticks.get(outcome, 0) + 1
        if outcome == "delivered":
            self.last_delivered_at = time.time()

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
        if self.echo:
            print(f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {msg}", flush=True)
