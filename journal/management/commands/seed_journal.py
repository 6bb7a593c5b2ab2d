# journal/management/commands/seed_journal.py
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from journal.entries import MoodEntry, create_entry
from journal.errors import StorageError
from journal.moods import Mood, all_moods
from journal.storage import MemorySlotStorage, SlotStorage, get_default_storage
from journal.store import EntryStore


@dataclass(frozen=True)
class BiasConfig:
    """Weights for drawing moods depending on bias."""
    # order must match all_moods(): angry, sad, neutral, happy, great
    weights: tuple[int, ...]


# Simple, hand-tuned weights for the demo
BIAS_WEIGHTS = {
    "neg": BiasConfig(weights=(8, 10, 5, 3, 1)),
    "neutral": BiasConfig(weights=(2, 5, 10, 5, 2)),
    "pos": BiasConfig(weights=(1, 3, 5, 10, 8)),
}

DEMO_NOTES: tuple[str, ...] = (
    "",
    "",
    "Good day",
    "Rough one",
    "Long walk after work",
    "Slept badly",
    "Coffee with an old friend",
    "Too many meetings",
    "  Finished the book\n",
)


def _pick_mood(bias: str) -> Mood:
    """Draw a mood using the configured bias weights."""
    conf = BIAS_WEIGHTS[bias]
    return random.choices(all_moods(), weights=conf.weights, k=1)[0]


def _timestamps(count: int, days: int, now: datetime) -> list[datetime]:
    """`count` random moments within the last `days` days, oldest first."""
    span = timedelta(days=days).total_seconds()
    return sorted(now - timedelta(seconds=random.uniform(0, span)) for _ in range(count))


class Command(BaseCommand):
    """Seed demo mood entries into the journal slot.

    Examples:
        python manage.py seed_journal --entries 50 --days 60 --seed 42 --bias pos
        python manage.py seed_journal --clear-only
        python manage.py seed_journal --dry-run

    Safety:
        - Entries are appended; existing history is kept unless --clear is given.
        - --dry-run works on an in-memory copy of the slot and writes nothing.
    """

    help = "Append demo mood entries to the journal (optionally clearing it first)."

    def add_arguments(self, parser):
        parser.add_argument("--entries", type=int, default=30, help="Number of entries to add (default: 30).")
        parser.add_argument("--days", type=int, default=30, help="Spread entries over the last N days (default: 30).")
        parser.add_argument(
            "--bias",
            type=str,
            choices=tuple(BIAS_WEIGHTS),
            default="neutral",
            help="Distribution bias for moods (default: neutral).",
        )
        parser.add_argument(
            "--slot",
            type=str,
            default=None,
            help="Storage slot to seed (default: settings.JOURNAL_STORAGE_SLOT).",
        )

        # Determinism
        parser.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Random seed for reproducible results (optional).",
        )

        # Safety / cleanup
        parser.add_argument("--clear", action="store_true", help="Empty the slot before seeding.")
        parser.add_argument("--clear-only", action="store_true", help="Empty the slot and exit.")
        parser.add_argument("--dry-run", action="store_true", help="Do everything in memory; persist nothing.")

    @transaction.atomic
    def handle(self, *args, **opts):
        seed: Optional[int] = opts.get("seed")
        if seed is not None:
            random.seed(seed)
            self.stdout.write(self.style.NOTICE(f"[seed] Using random seed {seed}"))

        count: int = int(opts["entries"])
        days: int = int(opts["days"])
        bias: str = str(opts["bias"])
        slot: str = opts.get("slot") or settings.JOURNAL_STORAGE_SLOT
        do_clear: bool = bool(opts["clear"])
        clear_only: bool = bool(opts["clear_only"])
        dry_run: bool = bool(opts["dry_run"])

        if count < 0 or days < 1:
            raise CommandError("--entries must be >= 0 and --days >= 1.")

        storage: SlotStorage = get_default_storage()
        try:
            if dry_run:
                existing = storage.get(slot)
                storage = MemorySlotStorage({slot: existing} if existing is not None else None)
                self.stdout.write(self.style.NOTICE("[dry-run] Working on an in-memory copy."))

            if do_clear or clear_only:
                storage.clear(slot)
                self.stdout.write(self.style.WARNING(f"[clear] Emptied slot '{slot}'."))
        except StorageError as exc:
            raise CommandError(str(exc)) from exc

        if clear_only:
            self.stdout.write(self.style.SUCCESS("[done] Clear-only completed."))
            return

        store = EntryStore(storage, key=slot)
        loaded = store.load()
        if not loaded:
            raise CommandError(f"Could not load slot '{slot}': {loaded.error}")
        before = len(store)

        for ts in _timestamps(count, days, timezone.now()):
            entry: MoodEntry = create_entry(_pick_mood(bias), random.choice(DEMO_NOTES), clock=lambda ts=ts: ts)
            store.append(entry)

        saved = store.save()
        if not saved:
            raise CommandError(f"Could not save slot '{slot}': {saved.error}")

        self.stdout.write(
            self.style.SUCCESS(
                f"[done] Entries added: {len(store) - before}, total: {len(store)} "
                f"(slot={slot}, days={days}, bias={bias}, dry_run={'on' if dry_run else 'off'})"
            )
        )
