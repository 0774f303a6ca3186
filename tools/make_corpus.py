import json
import os
import random
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

def get_timestamp(start_time: datetime, offset_seconds: float) -> str:
    t = start_time + timedelta(seconds=offset_seconds)
    return t.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def make_event_log(rng: random.Random, n_events: int) -> bytes:
    start_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    lines = []
    t = 0.0
    for _ in range(n_events):
        evt = {
            "ts": get_timestamp(start_time, t),
            "lvl": rng.choice(["INFO", "INFO", "INFO", "WARN"]),
            "evt": rng.choice(["cmd_vel", "heartbeat", "wheel_slip", "recovery_action"]),
            "vx": round(rng.uniform(0.5, 1.5), 2),
        }
        # Canonical serialization for the log
        lines.append(json.dumps(evt, sort_keys=True, separators=(',', ':')))
        t += rng.uniform(0.05, 1.0)
    return ("\n".join(lines) + "\n").encode("utf-8")

def generate_corpus(output_dir: str, seed: int | None = None) -> Path:
    rng = random.Random(seed)
    out = Path(output_dir) / f"corpus-{uuid.UUID(int=rng.getrandbits(128)).hex[:8]}"
    (out / "logs").mkdir(parents=True, exist_ok=True)
    (out / "bin").mkdir(parents=True, exist_ok=True)

    (out / "logs" / "events.jsonl").write_bytes(make_event_log(rng, 200))
    (out / "readme.txt").write_bytes(b"That Sam-I-am, that Sam-I-am, I do not like that Sam-I-am.\n" * 20)
    (out / "bin" / "runs.bin").write_bytes(b"A" * 255 + b"B" + b"\x00" * 1000 + bytes(range(256)))
    (out / "bin" / "random.bin").write_bytes(bytes(rng.getrandbits(8) for _ in range(4096)))
    (out / "empty.dat").write_bytes(b"")

    print(f"GENERATED: {out}")
    return out

if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_corpus.py OUT_DIR [--runs N] [--seed S]

    args = [a for a in sys.argv[1:] if a]

    def pop_option(arg_list: list[str], name: str) -> tuple[str | None, list[str]]:
        """Remove ``name VALUE`` from an argv-style list."""
        if name not in arg_list:
            return None, arg_list
        i = arg_list.index(name)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{name} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    runs, args = pop_option(args, "--runs")
    seed, args = pop_option(args, "--seed")

    out = args[0] if len(args) > 0 else os.path.join(".", "corpus")
    for i in range(int(runs or 1)):
        generate_corpus(out, seed=None if seed is None else int(seed) + i)
