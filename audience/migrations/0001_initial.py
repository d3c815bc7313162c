"""
Initial migration for the audience app.

Defines Participant and Response, both scoped to a polling session.
"""
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("polling", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "unique_id",
                    models.CharField(help_text="Browser fingerprint or random device id.", max_length=128),
                ),
                ("name", models.CharField(blank=True, max_length=255, null=True)),
                ("joined_at", models.DateTimeField(auto_now_add=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="polling.session",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["session"], name="participant_session_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("session", "unique_id"), name="participant_unique_device"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Response",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("answer", models.TextField(help_text="Option text, word, free text or rating number.")),
                ("answered_at", models.DateTimeField()),
                ("question_started_at", models.DateTimeField(blank=True, null=True)),
                (
                    "participant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="responses",
                        to="audience.participant",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="responses",
                        to="polling.question",
                    ),
                ),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="responses",
                        to="polling.session",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["session"], name="response_session_idx"),
                    models.Index(fields=["question"], name="response_question_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("question", "participant"), name="response_one_per_participant"
                    ),
                ],
            },
        ),
    ]
