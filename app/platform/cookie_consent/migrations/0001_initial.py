import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ConsentLogEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, max_length=500)),
                ("session_key", models.CharField(blank=True, db_index=True, max_length=64)),
                ("category", models.CharField(db_index=True, help_text="Consent category key", max_length=64)),
                ("granted", models.BooleanField(default=False, help_text="Whether consent was granted")),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("accept", "Accept All"),
                            ("reject", "Reject"),
                            ("customize", "Customize"),
                            ("set", "Set"),
                        ],
                        default="set",
                        help_text="Endpoint or API call that recorded the decision",
                        max_length=20,
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict, help_text="Additional metadata")),
            ],
            options={
                "verbose_name": "consent log entry",
                "verbose_name_plural": "consent log entries",
                "db_table": "cookie_consent_log",
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["category", "granted"], name="consent_log_cat_granted_idx")],
            },
        ),
    ]
