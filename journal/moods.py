from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class Mood(models.TextChoices):
    """The five fixed moods a journal entry can carry.

    The value is the display glyph, which is also what gets persisted;
    the label is the human-readable, localized name.
    """

    ANGRY   = "😡", _("Very angry")
    SAD     = "🙁", _("Sad")
    NEUTRAL = "😐", _("Okay")
    HAPPY   = "🙂", _("Happy")
    GREAT   = "😄", _("Great")


# Preselected in the picker until the user chooses something else.
DEFAULT_MOOD: Mood = Mood.HAPPY


def label_for(mood: Mood) -> str:
    """Human-readable label for ``mood``."""
    return str(mood.label)


def glyph_for(mood: Mood) -> str:
    """Display glyph for ``mood``."""
    return mood.value


def all_moods() -> tuple[Mood, ...]:
    """All moods in declaration order (angry → great), as shown in the picker."""
    return tuple(Mood)
