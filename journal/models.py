from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class StorageSlot(models.Model):
    """Named key-value cell holding one serialized payload."""

    key = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_("Key"),
        help_text=_("Name of the slot (e.g. 'moodEntries')."),
    )
    data = models.BinaryField(
        default=b"",
        verbose_name=_("Data"),
        help_text=_("Raw payload, overwritten in full on every save."),
    )

    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    class Meta:
        verbose_name = _("Storage slot")
        verbose_name_plural = _("Storage slots")

    def __str__(self) -> str:
        return f"{self.key} ({len(self.data or b'')} bytes)"
