from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core_backend.base import BaseViewSet, FieldsetQueryParamsMixin
from .models import Plato
from .serializers import PlatoSerializer


class PlatoViewSet(FieldsetQueryParamsMixin, BaseViewSet):
    queryset = Plato.objects.all()
    serializer_class = PlatoSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['category']
    search_fields = ['name', 'category']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def destroy(self, request, *args, **kwargs):
        """Dishes already planned in a menu cannot be deleted."""
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return Response(
                {'error': 'This dish is used by one or more menus and cannot be deleted.'},
                status=status.HTTP_400_BAD_REQUEST
            )
