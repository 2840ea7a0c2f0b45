from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Features:
    - Optimization field declarations consumed by OptimizedQuerysetMixin
    - Common validation hook
    """

    class Meta:
        # Default optimization fields (can be overridden)
        select_related_fields = []
        prefetch_related_fields = []


class FieldsetMixin:
    """
    Mixin that enables dynamic field control via context:
    - Fieldsets (view modes: list, detail)
    - Dynamic field filtering (?fields=id,name)

    Usage:
        class InsumoSerializer(FieldsetMixin, BaseModelSerializer):
            class Meta:
                model = Insumo
                fields = '__all__'

                fieldsets = {
                    'list': ['id', 'nombre', 'stock_quantity'],
                    'detail': '__all__',
                }

                # Fields that must always be included
                required_fields = {'id'}  # Default
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._apply_fieldset_filtering()
        self._apply_dynamic_field_filtering()

    def _keep_only(self, allowed):
        required_fields = getattr(self.Meta, 'required_fields', {'id'})
        allowed = set(allowed) | set(required_fields)
        for field_name in set(self.fields.keys()) - allowed:
            self.fields.pop(field_name)

    def _apply_fieldset_filtering(self):
        """
        Apply fieldset based on view_mode from context.
        Required fields are always preserved even if missing from the fieldset.
        """
        view_mode = self.context.get('view_mode')
        fieldsets = getattr(self.Meta, 'fieldsets', {})

        if view_mode and view_mode in fieldsets:
            fieldset_value = fieldsets[view_mode]
            if fieldset_value == '__all__':
                return
            self._keep_only(fieldset_value)

    def _apply_dynamic_field_filtering(self):
        """Apply ?fields=id,name filtering."""
        requested = self.context.get('requested_fields')
        if requested:
            self._keep_only(requested)

