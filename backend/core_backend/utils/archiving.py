"""
Archiving (soft delete) for catalog records.

Ingredients and suppliers are referenced by purchase records, recipe lines and
stock ledger rows, so deleting one only archives it. Archived rows drop out of
the default manager but stay reachable through ``with_archived()``.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def archived(self):
        return self.filter(is_active=False)


class SoftDeleteManager(models.Manager):
    """Default manager: archived records are hidden."""

    def get_queryset(self):
        return SoftDeleteQuerySet(self.model, using=self._db).active()

    def with_archived(self):
        return SoftDeleteQuerySet(self.model, using=self._db)

    def archived_only(self):
        return SoftDeleteQuerySet(self.model, using=self._db).archived()


class SoftDeleteMixin(models.Model):
    """
    Abstract base for archivable catalog models.

    Provides ``is_active`` / ``archived_at`` / ``archived_by``, the
    ``archive()`` and ``unarchive()`` methods and a manager that hides
    archived rows. ``delete()`` archives instead of removing the row.
    """

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive records are archived: hidden from catalogs but kept for history."
    )
    archived_at = models.DateTimeField(null=True, blank=True)
    archived_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(app_label)s_%(class)s_archived",
    )

    objects = SoftDeleteManager()

    class Meta:
        abstract = True

    def archive(self, archived_by=None):
        self.is_active = False
        self.archived_at = timezone.now()
        if archived_by:
            self.archived_by = archived_by
        self.save(update_fields=['is_active', 'archived_at', 'archived_by'])

    def unarchive(self):
        self.is_active = True
        self.archived_at = None
        self.archived_by = None
        self.save(update_fields=['is_active', 'archived_at', 'archived_by'])

    @property
    def is_archived(self):
        return not self.is_active

    def delete(self, using=None, keep_parents=False):
        self.archive()
