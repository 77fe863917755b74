"""
Journal entries are append-only: block deletion of headers and lines.
Accounts referenced by lines are already protected by on_delete=PROTECT.
"""
from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import JournalEntry, JournalLine


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_journal_entry(sender, instance, **kwargs):
    raise ValidationError("Journal entries cannot be deleted once recorded.")


@receiver(pre_delete, sender=JournalLine)
def prevent_delete_journal_line(sender, instance, **kwargs):
    raise ValidationError("Journal lines cannot be deleted once recorded.")
