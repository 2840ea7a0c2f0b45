"""
Core backend base components.

This package provides foundational classes and utilities that should be used
throughout the Django application for consistency and maintainability.
"""

from .viewsets import BaseViewSet, ReadOnlyBaseViewSet
from .serializers import BaseModelSerializer, FieldsetMixin
from .mixins import OptimizedQuerysetMixin, ArchivingViewSetMixin, FieldsetQueryParamsMixin
from .filters import BaseFilterSet, ArchivingFilterSet, FlexibleDateTimeFilter
from .permissions import IsStaffUser

__all__ = [
    # ViewSets
    'BaseViewSet',
    'ReadOnlyBaseViewSet',

    # Serializers
    'BaseModelSerializer',
    'FieldsetMixin',

    # Mixins
    'OptimizedQuerysetMixin',
    'ArchivingViewSetMixin',
    'FieldsetQueryParamsMixin',

    # Filters
    'BaseFilterSet',
    'ArchivingFilterSet',
    'FlexibleDateTimeFilter',

    # Permissions
    'IsStaffUser',
]
