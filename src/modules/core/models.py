"""Base abstract model for the catalog service.

Provides ``BaseModel``: UUIDv7 primary key + ``created_at`` / ``updated_at``
timestamps.

Timestamps are domain data, not ORM bookkeeping: aggregates stamp
``created_at`` in their factory and ``updated_at`` only when a state
transition actually changes something.  ``auto_now`` / ``auto_now_add``
are therefore not used.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp fields."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        abstract = True
