from django import forms
from django.utils.translation import gettext_lazy as _

from .moods import DEFAULT_MOOD, Mood, all_moods


class MoodEntryForm(forms.Form):
    mood = forms.ChoiceField(
        label=_("How do you feel today?"),
        widget=forms.RadioSelect(attrs={
            "class": "mood-option",          # CSS hook for the picker buttons
            "aria-label": _("Mood"),         # a11y
        }),
    )
    note = forms.CharField(
        label=_("Add a note (optional)"),
        required=False,
        # Do not let Django strip; clean_note owns whitespace handling.
        strip=False,
        widget=forms.Textarea(attrs={
            "rows": 2,
            "placeholder": _("What happened today?"),
        }),
    )

    def __init__(self, *args, **kwargs):
        kwargs["initial"] = {"mood": DEFAULT_MOOD.value, **(kwargs.get("initial") or {})}
        super().__init__(*args, **kwargs)

        # Single source of truth: choices in picker order straight from the enum
        self.fields["mood"].choices = [(m.value, m.label) for m in all_moods()]

    def clean_mood(self) -> Mood:
        return Mood(self.cleaned_data["mood"])

    def clean_note(self) -> str:
        """Trim whitespace and newlines; missing notes become empty."""
        return (self.cleaned_data.get("note") or "").strip()
