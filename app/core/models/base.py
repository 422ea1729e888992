"""Shared abstract models for the consent apps."""
import uuid
from django.db import models
from django.utils import timezone


class UUIDPrimaryKeyModel(models.Model):
    """Abstract model that sets a UUID primary key."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """Adds created/updated timestamps."""

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class RequestMetadataModel(models.Model):
    """Captures where a write came from (client ip, browser, session)."""

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True)
    session_key = models.CharField(max_length=64, blank=True, db_index=True)

    class Meta:
        abstract = True

    @staticmethod
    def clip_user_agent(value):
        return (value or "")[:500]


class CoreBaseModel(UUIDPrimaryKeyModel, TimestampedModel):
    """Default base model to inherit across apps."""

    class Meta:
        abstract = True
