"""
Seed Data Generator — creates realistic fake sessions for development and demos.

Run: python scripts/seed_data.py [days]
"""

import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from restledger.data.database import Database
from restledger.data.models import (
    POWER_INTERRUPT_WORK_NOTE,
    Session,
    SessionType,
)
from restledger.data.repository import SessionRepository

WORK_PLANNED_SEC = 25 * 60
BREAK_PLANNED_SEC = 5 * 60


def seed(num_days: int = 45) -> int:
    db = Database()
    db.connect()
    repo = SessionRepository(db.conn)

    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    sessions = []

    for day_offset in range(num_days, -1, -1):
        # ~1 in 5 days off
        if random.random() < 0.2:
            continue
        cursor = today - timedelta(days=day_offset) + timedelta(
            hours=random.randint(8, 10), minutes=random.randint(0, 59)
        )
        for i in range(random.randint(4, 14)):
            # Work for 15-60 min
            work_sec = random.randint(15, 60) * 60
            end = cursor + timedelta(seconds=work_sec)
            notes = POWER_INTERRUPT_WORK_NOTE if random.random() < 0.03 else None
            sessions.append(Session(
                id=f"seed-w-{cursor:%Y%m%d%H%M%S}-{i}",
                type=SessionType.WORK, start_time=cursor, end_time=end,
                duration=float(work_sec), planned_duration=WORK_PLANNED_SEC,
                notes=notes,
            ))
            cursor = end

            # Break: skipped early 25% of the time
            skipped = random.random() < 0.25
            brk_sec = random.randint(10, 120) if skipped else random.randint(3, 15) * 60
            end = cursor + timedelta(seconds=brk_sec)
            sessions.append(Session(
                id=f"seed-b-{cursor:%Y%m%d%H%M%S}-{i}",
                type=SessionType.BREAK, start_time=cursor, end_time=end,
                duration=float(brk_sec), planned_duration=BREAK_PLANNED_SEC,
                is_skipped=skipped,
            ))
            # Idle 0-20 min before the next work block
            cursor = end + timedelta(minutes=random.choice([0, 0, 1, 5, 20]))

    count = repo.save_sessions(sessions)
    db.close()
    print(f"Seeded {count} sessions over {num_days} days.")
    return count


if __name__ == "__main__":
    days = int(sys.argv[1]) if len(sys.argv) > 1 else 45
    seed(days)
