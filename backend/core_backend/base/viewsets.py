from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from .mixins import OptimizedQuerysetMixin, ArchivingViewSetMixin
from ..pagination import StandardPagination


class BaseViewSet(OptimizedQuerysetMixin, ArchivingViewSetMixin, viewsets.ModelViewSet):
    """
    Base ViewSet that provides standard configuration for all ModelViewSets.

    Features:
    - Automatic query optimization via OptimizedQuerysetMixin
    - Archiving support via ArchivingViewSetMixin
    - Standard pagination, filtering, and search

    Usage:
        class InsumoViewSet(BaseViewSet):
            serializer_class = InsumoSerializer
            # optimization is handled automatically via serializer Meta
    """

    pagination_class = StandardPagination

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]

    # Default ordering (can be overridden)
    ordering = ['-id']

    def get_queryset(self):
        """
        Re-evaluate the class-level queryset at request time so each request
        starts from a fresh manager queryset, then let the mixins process it.

        MRO: OptimizedQuerysetMixin → ArchivingViewSetMixin → ModelViewSet
        """
        if getattr(self, 'queryset', None) is not None:
            original_queryset = self.queryset
            self.queryset = original_queryset.model.objects.all()
            try:
                return super().get_queryset()
            finally:
                self.queryset = original_queryset
        return super().get_queryset()


class ReadOnlyBaseViewSet(OptimizedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    """
    Base ViewSet for read-only endpoints.

    Features:
    - Automatic query optimization
    - Standard pagination and filtering
    - No archiving (since read-only)
    """

    pagination_class = StandardPagination
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    ordering = ['-id']
