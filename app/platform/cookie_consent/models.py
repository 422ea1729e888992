"""
Cookie Consent Models
Audit trail of every consent decision, for compliance reviews
"""

from django.db import models

from app.core.models import CoreBaseModel, RequestMetadataModel


class ConsentAction(models.TextChoices):
    """How a consent value was recorded"""
    ACCEPT = "accept", "Accept All"
    REJECT = "reject", "Reject"
    CUSTOMIZE = "customize", "Customize"
    SET = "set", "Set"


class ConsentLogEntry(CoreBaseModel, RequestMetadataModel):
    """
    One row per category decision.
    Anonymous visitors are identified by session key and ip only.
    """

    category = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Consent category key"
    )

    granted = models.BooleanField(
        default=False,
        help_text="Whether consent was granted"
    )

    action = models.CharField(
        max_length=20,
        choices=ConsentAction.choices,
        default=ConsentAction.SET,
        help_text="Endpoint or API call that recorded the decision"
    )

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional metadata"
    )

    class Meta:
        db_table = "cookie_consent_log"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["category", "granted"], name="consent_log_cat_granted_idx"),
        ]
        verbose_name = "consent log entry"
        verbose_name_plural = "consent log entries"

    def __str__(self):
        status = "granted" if self.granted else "denied"
        return f"[{self.created_at:%Y-%m-%d %H:%M:%S}] {self.category} {status} ({self.get_action_display()})"

    def as_log_dict(self):
        """Shape shared with the file driver"""
        return {
            "category": self.category,
            "value": self.granted,
            "timestamp": int(self.created_at.timestamp()),
            "ip": self.ip_address,
            "action": self.action,
            "user_agent": self.user_agent,
            "session_key": self.session_key,
        }
