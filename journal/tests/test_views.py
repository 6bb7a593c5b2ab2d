from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.test import Client, TestCase
from django.urls import reverse
from django.utils import timezone

from journal.entries import create_entry
from journal.errors import StorageReadError, StorageWriteError
from journal.moods import Mood
from journal.storage import DatabaseSlotStorage
from journal.store import EntryStore
from journal.views import SESSION_MOOD_KEY


def stored_entries():
    """Entries currently persisted in the default slot, insertion order."""
    store = EntryStore(DatabaseSlotStorage())
    store.load()
    return store.entries


class HealthTests(TestCase):
    def test_healthz(self) -> None:
        resp = Client().get(reverse("health"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b"ok")


class SettingsTests(TestCase):
    def test_only_languages_with_catalogs_are_offered(self) -> None:
        """No translation catalogs ship, so English is the only language."""
        self.assertEqual([code for code, _ in settings.LANGUAGES], ["en"])
        self.assertEqual(list(getattr(settings, "LOCALE_PATHS", [])), [])


class JournalPageTests(TestCase):
    """Tests for the single journal page."""

    def setUp(self) -> None:
        self.client = Client()
        self.url = reverse("journal:index")

    def test_get_renders_picker_without_creating_entries(self) -> None:
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "journal/index.html")
        self.assertEqual(resp.context["entries_count"], 0)
        for label in ("Very angry", "Sad", "Okay", "Happy", "Great"):
            self.assertContains(resp, label)
        self.assertContains(resp, "What happened today?")
        self.assertContains(resp, "No moods saved yet.")
        self.assertEqual(stored_entries(), ())

    def test_post_creates_entry_and_redirects(self) -> None:
        payload = {"mood": Mood.HAPPY.value, "note": "  Good day \n"}
        resp = self.client.post(self.url, data=payload)
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], self.url)

        entries = stored_entries()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].mood, Mood.HAPPY)
        self.assertEqual(entries[0].note, "Good day")

    def test_posts_append(self) -> None:
        self.client.post(self.url, data={"mood": Mood.HAPPY.value, "note": "Good day"})
        self.client.post(self.url, data={"mood": Mood.SAD.value, "note": "Rough one"})
        self.assertEqual([e.note for e in stored_entries()], ["Good day", "Rough one"])

    def test_history_is_newest_first(self) -> None:
        store = EntryStore(DatabaseSlotStorage())
        store.load()
        now = timezone.now()
        old = create_entry(Mood.HAPPY, "Good day", clock=lambda: now - timedelta(days=1))
        new = create_entry(Mood.SAD, "Rough one", clock=lambda: now)
        store.append(old)
        store.append(new)
        store.save()

        resp = self.client.get(self.url)
        self.assertEqual(list(resp.context["entries"]), [new, old])
        body = resp.content.decode("utf-8")
        self.assertLess(body.index("Rough one"), body.index("Good day"))

    def test_success_message_after_redirect(self) -> None:
        resp = self.client.post(self.url, data={"mood": Mood.GREAT.value}, follow=True)
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Mood saved.")

    def test_invalid_post_rerenders_form(self) -> None:
        resp = self.client.post(self.url, data={"note": "no mood"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn("mood", resp.context["form"].errors)
        self.assertEqual(stored_entries(), ())

    def test_picked_mood_is_remembered(self) -> None:
        self.client.post(self.url, data={"mood": Mood.ANGRY.value})
        self.assertEqual(self.client.session[SESSION_MOOD_KEY], Mood.ANGRY.value)
        resp = self.client.get(self.url)
        self.assertEqual(resp.context["form"].initial["mood"], Mood.ANGRY.value)
        # The note field starts empty again.
        self.assertFalse(resp.context["form"].is_bound)

    def test_default_pick_is_happy(self) -> None:
        resp = self.client.get(self.url)
        self.assertEqual(resp.context["form"].initial["mood"], Mood.HAPPY.value)

    def test_corrupted_slot_renders_empty_history(self) -> None:
        DatabaseSlotStorage().set("moodEntries", b"\x00definitely not json")
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context["entries_count"], 0)
        self.assertTrue(resp.context["storage_ok"])
        self.assertNotContains(resp, "could not be read")

    def test_empty_note_is_not_rendered(self) -> None:
        self.client.post(self.url, data={"mood": Mood.NEUTRAL.value, "note": "   "})
        resp = self.client.get(self.url)
        self.assertNotContains(resp, "<p></p>", html=False)
        self.assertEqual(stored_entries()[0].note, "")


class StorageFailureTests(TestCase):
    """The page degrades gracefully when the slot cannot be used."""

    def setUp(self) -> None:
        self.client = Client()
        self.url = reverse("journal:index")

    def test_read_failure_shows_error(self) -> None:
        with self.settings(JOURNAL_STORAGE_BACKEND="journal.tests.test_views.UnreadableStorage"):
            resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.context["storage_ok"])
        self.assertContains(resp, "Your journal could not be read.")

    def test_read_failure_does_not_overwrite_history(self) -> None:
        with self.settings(JOURNAL_STORAGE_BACKEND="journal.tests.test_views.UnreadableStorage"):
            resp = self.client.post(self.url, data={"mood": Mood.SAD.value, "note": "lost?"})
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(UnreadableStorage.writes, 0)

    def test_write_failure_shows_error(self) -> None:
        with self.settings(JOURNAL_STORAGE_BACKEND="journal.tests.test_views.UnwritableStorage"):
            resp = self.client.post(self.url, data={"mood": Mood.SAD.value}, follow=True)
        self.assertContains(resp, "Your mood could not be saved.")


class UnreadableStorage(DatabaseSlotStorage):
    writes = 0

    def get(self, key):
        raise StorageReadError("boom")

    def set(self, key, data):
        type(self).writes += 1
        super().set(key, data)


class UnwritableStorage(DatabaseSlotStorage):
    def set(self, key, data):
        raise StorageWriteError("boom")
