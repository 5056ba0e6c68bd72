"""Field helpers shared by the resource serializers."""
from __future__ import annotations

import bleach
from rest_framework import serializers


def clean_text(v):
    """Strip markup from user supplied text.

    The result is bleach output: ``&``, ``<`` and ``>`` that survive are
    stored escaped.
    """
    if v is None:
        return v
    return bleach.clean(str(v).strip(), tags=set(), strip=True)


def ref(model, source, *, required=True):
    """Writable ``<name>_id`` field that must name an existing row."""
    return serializers.PrimaryKeyRelatedField(
        source=source,
        queryset=model.objects.all(),
        pk_field=serializers.UUIDField(format='hex_verbose'),
        required=required,
        allow_null=not required,
        error_messages={'does_not_exist': f'{model.__name__} "{{pk_value}}" does not exist.'},
    )


class CleanTextMixin:
    """Run :func:`clean_text` over the fields named in ``clean_fields``."""
    clean_fields: tuple[str, ...] = ()

    def validate(self, attrs):
        for name in self.clean_fields:
            if attrs.get(name):
                attrs[name] = clean_text(attrs[name])
        return super().validate(attrs)
