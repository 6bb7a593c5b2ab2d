from __future__ import annotations

import logging
from typing import Any

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _

from .entries import create_entry
from .forms import MoodEntryForm
from .moods import DEFAULT_MOOD, Mood, all_moods
from .storage import get_default_storage
from .store import EntryStore

logger = logging.getLogger(__name__)

# Session key remembering the last picked mood across saves.
SESSION_MOOD_KEY = "journal_selected_mood"


def _remembered_mood(request: HttpRequest) -> Mood:
    """Last mood picked in this session, falling back to the default."""
    try:
        return Mood(request.session.get(SESSION_MOOD_KEY, DEFAULT_MOOD.value))
    except ValueError:
        return DEFAULT_MOOD


def journal_view(request: HttpRequest) -> HttpResponse:
    """Mood picker, note field and history on a single page.

    GET:
        Render the picker (preselecting the last picked mood) and all
        entries, newest first.
    POST:
        Save a new entry from the picked mood and note, then redirect
        back here so the note field starts empty.
    """
    store = EntryStore(get_default_storage())
    loaded = store.load()
    if not loaded:
        messages.error(request, _("Your journal could not be read. Please try again later."))

    if request.method == "POST":
        form = MoodEntryForm(request.POST)
        if form.is_valid():
            mood: Mood = form.cleaned_data["mood"]
            request.session[SESSION_MOOD_KEY] = mood.value

            if loaded:
                entry = create_entry(mood, form.cleaned_data["note"])
                store.append(entry)
                if store.save():
                    logger.info("Saved entry %s (%s)", entry.id, entry.mood.name)
                    messages.success(request, _("Mood saved."))
                else:
                    messages.error(request, _("Your mood could not be saved. Please try again."))
            return redirect("journal:index")
    else:
        form = MoodEntryForm(initial={"mood": _remembered_mood(request).value})

    context: dict[str, Any] = {
        "form": form,
        "entries": store.sorted_descending(),
        "entries_count": len(store),
        "moods": all_moods(),
        "storage_ok": loaded.ok,
    }
    return render(request, "journal/index.html", context)
