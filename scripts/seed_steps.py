#!/usr/bin/env python3
"""
Seed daily step history into the Step Tracker API.

Pattern per week (Mon–Sun):
  - Weekdays: commute walking, around the weekly base
  - Sat: long walk (base x 1.6)
  - Sun: rest day, a handful of steps
  - Every 10th day: no data at all (phone left at home), so streaks break

Weekly base builds from 6000 towards 11000 steps/day over the seeded weeks.

Usage examples:
  - Against a local backend:
      python scripts/seed_steps.py --base-url http://localhost:8000
  - As a specific user with a custom goal:
      python scripts/seed_steps.py --base-url http://localhost:8000 --user alice --daily-goal 8000
"""

from __future__ import annotations

import argparse
import datetime as dt
import random
from typing import List

import httpx


STRIDE_M = 0.762
CALORIES_PER_STEP = 0.04
SYNC_BATCH_DAYS = 30


def monday_of_week(d: dt.date) -> dt.date:
    return d - dt.timedelta(days=d.weekday())


def weekly_base(week_index: int, weeks: int) -> int:
    if weeks <= 1:
        return 6000
    return int(6000 + (11000 - 6000) * week_index / (weeks - 1))


def day_entry(day: dt.date, base: int, rng: random.Random) -> dict:
    if day.weekday() == 6:
        steps = rng.randint(300, 1500)
    elif day.weekday() == 5:
        steps = int(base * 1.6 * rng.uniform(0.9, 1.1))
    else:
        steps = int(base * rng.uniform(0.8, 1.2))
    return {
        "date": day.isoformat(),
        "steps": steps,
        "distanceMeters": round(steps * STRIDE_M, 1),
        "calories": int(round(steps * CALORIES_PER_STEP)),
        "activeMinutes": steps // 110,
    }


def build_days(weeks: int, today: dt.date, seed: int) -> List[dict]:
    rng = random.Random(seed)
    first_monday = monday_of_week(today) - dt.timedelta(weeks=weeks - 1)
    days = []
    d = first_monday
    while d <= today:
        week_index = (d - first_monday).days // 7
        if (d - first_monday).days % 10 != 9:
            days.append(day_entry(d, weekly_base(week_index, weeks), rng))
        d += dt.timedelta(days=1)
    return days


def send(client: httpx.Client, method: str, path: str, payload: dict) -> dict:
    r = client.request(method, path, json=payload)
    if r.status_code >= 300:
        raise RuntimeError(f"{method} {path} -> HTTP {r.status_code}: {r.text}")
    return r.json()


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed weeks of daily step data and a step goal")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--user", default="local", help="Value sent as X-User-Id")
    ap.add_argument("--weeks", type=int, default=16, help="Number of weeks ending with the current week")
    ap.add_argument("--daily-goal", type=int, default=10000)
    ap.add_argument("--seed", type=int, default=7, help="Random seed for reproducible data")
    args = ap.parse_args()

    days = build_days(args.weeks, dt.date.today(), args.seed)

    with httpx.Client(
        base_url=args.base_url.rstrip("/"),
        headers={"X-User-Id": args.user},
        timeout=15,
    ) as client:
        send(client, "PUT", "/goals/", {"dailySteps": args.daily_goal})
        created = 0
        for i in range(0, len(days), SYNC_BATCH_DAYS):
            body = send(client, "POST", "/steps/sync", {"steps": days[i:i + SYNC_BATCH_DAYS]})
            created += sum(1 for r in body["results"] if r["action"] == "created")

    print(f"Seed complete: {len(days)} days synced ({created} new) for user '{args.user}'.")


if __name__ == "__main__":
    main()
