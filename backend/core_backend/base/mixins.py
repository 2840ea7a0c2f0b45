from rest_framework.viewsets import ViewSetMixin
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework import status
from django.db.models import Prefetch
from .permissions import CanArchiveRecords, CanUnarchiveRecords


class OptimizedQuerysetMixin(ViewSetMixin):
    """
    A ViewSet mixin that optimizes the queryset by inspecting the serializer
    used for the current action for `select_related_fields` and
    `prefetch_related_fields` attributes in its Meta class.
    """

    def _get_optimizations(self, serializer_class):
        select_related = set()
        prefetch_related = []

        meta = getattr(serializer_class, "Meta", None)
        if meta is None:
            return select_related, prefetch_related

        for field in getattr(meta, "select_related_fields", []):
            select_related.add(field)

        for field in getattr(meta, "prefetch_related_fields", []):
            # Prefetch objects are passed through untouched
            if isinstance(field, Prefetch) or field not in prefetch_related:
                prefetch_related.append(field)

        return select_related, prefetch_related

    def get_queryset(self):
        """
        Overrides the default get_queryset to apply optimizations based on
        the current action's serializer.
        """
        queryset = super().get_queryset()

        try:
            serializer_class = self.get_serializer_class()
        except (AttributeError, AssertionError):
            return queryset

        select_related, prefetch_related = self._get_optimizations(serializer_class)

        if select_related:
            queryset = queryset.select_related(*select_related)

        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset


class ArchivingViewSetMixin(ViewSetMixin):
    """
    A ViewSet mixin that provides archiving functionality for models using SoftDeleteMixin.

    Features:
    - Automatically filters out archived records by default
    - Supports ?include_archived=true query parameter to include archived records
    - Supports ?include_archived=only to list archived records alone
    - Provides archive/unarchive actions
    """

    def get_queryset(self):
        queryset = super().get_queryset()

        if not hasattr(queryset.model, 'is_active'):
            return queryset

        include_archived = self.request.query_params.get('include_archived', '').lower()
        manager = queryset.model._default_manager

        if include_archived in ['true', '1', 'yes']:
            if hasattr(manager, 'with_archived'):
                queryset = manager.with_archived()
        elif include_archived == 'only':
            # Start fresh so the manager's active-only filter is not applied
            if hasattr(manager, 'archived_only'):
                queryset = manager.archived_only()
            else:
                queryset = queryset.filter(is_active=False)
        # Default: show only active records (handled by SoftDeleteManager)

        return queryset

    @action(detail=True, methods=['post'], permission_classes=[CanArchiveRecords])
    def archive(self, request, pk=None):
        """
        Archive a single record.
        """
        obj = self.get_object()

        if not hasattr(obj, 'archive'):
            return Response(
                {'error': 'This model does not support archiving.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if not obj.is_active:
            return Response(
                {'error': 'Record is already archived.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        obj.archive(archived_by=request.user)

        return Response(
            {'message': f'{obj._meta.verbose_name} archived successfully.'},
            status=status.HTTP_200_OK
        )

    @action(detail=True, methods=['post'], permission_classes=[CanUnarchiveRecords])
    def unarchive(self, request, pk=None):
        """
        Unarchive a single record.
        """
        model = self.get_queryset().model
        manager = model._default_manager
        queryset = manager.with_archived() if hasattr(manager, 'with_archived') else manager.all()

        try:
            obj = queryset.get(pk=pk)
        except model.DoesNotExist:
            return Response(
                {'error': 'Record not found.'},
                status=status.HTTP_404_NOT_FOUND
            )

        if not hasattr(obj, 'unarchive'):
            return Response(
                {'error': 'This model does not support unarchiving.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if obj.is_active:
            return Response(
                {'error': 'Record is not archived.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        obj.unarchive()

        return Response(
            {'message': f'{obj._meta.verbose_name} unarchived successfully.'},
            status=status.HTTP_200_OK
        )


class FieldsetQueryParamsMixin:
    """
    Parses standard query params and injects into serializer context.

    Supported params:
    - ?view=list|detail (selects fieldset)
    - ?fields=id,name,stock_quantity (ad-hoc field filtering)

    Usage:
        class InsumoViewSet(FieldsetQueryParamsMixin, BaseViewSet):
            serializer_class = InsumoSerializer  # Uses FieldsetMixin
    """

    def get_serializer_context(self):
        context = super().get_serializer_context()

        view_mode = self.request.query_params.get('view', self._get_default_view_mode())
        fields_param = self.request.query_params.get('fields', '')
        requested_fields = [f.strip() for f in fields_param.split(',') if f.strip()]

        context.update({
            'view_mode': view_mode,
            'requested_fields': requested_fields or None,
        })
        return context

    def _get_default_view_mode(self):
        """Map the current action to a fieldset name."""
        if getattr(self, 'action', None) == 'list':
            return 'list'
        return 'detail'
