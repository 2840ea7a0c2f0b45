"""
Admin mixin for archivable catalog models (see ``core_backend.utils.archiving``).
"""

from django.contrib import admin
from django.contrib import messages


class ArchivingAdminMixin:
    """
    Admin mixin for models using SoftDeleteMixin.

    The bulk delete action is replaced by archive/unarchive actions, and the
    changelist shows archived rows too, filterable by ``is_active``.
    """

    actions = ['archive_selected', 'unarchive_selected']

    def get_list_display(self, request):
        list_display = list(super().get_list_display(request))
        if 'is_active' not in list_display:
            list_display.append('is_active')
        return list_display

    def get_list_filter(self, request):
        list_filter = list(super().get_list_filter(request))
        if 'is_active' not in list_filter:
            list_filter.insert(0, 'is_active')
        return list_filter

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop('delete_selected', None)
        return actions

    def get_queryset(self, request):
        queryset = self.model._default_manager.with_archived()
        ordering = self.get_ordering(request)
        if ordering:
            queryset = queryset.order_by(*ordering)
        return queryset

    def get_readonly_fields(self, request, obj=None):
        readonly_fields = list(super().get_readonly_fields(request, obj))
        for field in ('archived_at', 'archived_by'):
            if field not in readonly_fields:
                readonly_fields.append(field)
        return readonly_fields

    @admin.action(description='Archive selected items')
    def archive_selected(self, request, queryset):
        records = list(queryset.filter(is_active=True))
        if not records:
            self.message_user(request, "No active records selected.", level=messages.WARNING)
            return

        for record in records:
            record.archive(archived_by=request.user)
        self.message_user(
            request,
            f"Archived {len(records)} {queryset.model._meta.verbose_name_plural}.",
            level=messages.SUCCESS
        )

    @admin.action(description='Unarchive selected items')
    def unarchive_selected(self, request, queryset):
        records = list(queryset.filter(is_active=False))
        if not records:
            self.message_user(request, "No archived records selected.", level=messages.WARNING)
            return

        for record in records:
            record.unarchive()
        self.message_user(
            request,
            f"Restored {len(records)} {queryset.model._meta.verbose_name_plural}.",
            level=messages.SUCCESS
        )
