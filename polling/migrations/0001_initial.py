"""
Initial migration for the polling app.

Creates Session and Question.  The session's active question pointer is
added after Question exists because the two tables reference each other.
"""
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Session",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(help_text="Join code typed by the audience.", max_length=8, unique=True)),
                ("title", models.CharField(max_length=255)),
                ("presenter_id", models.CharField(db_index=True, max_length=128)),
                ("presenter_name", models.CharField(blank=True, max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("active", "Active"), ("ended", "Ended")],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                ("question_started_at", models.DateTimeField(blank=True, null=True)),
                ("active_question_index", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "max_participants",
                    models.PositiveIntegerField(blank=True, help_text="0 or empty means unlimited.", null=True),
                ),
                ("brand_bg_color", models.CharField(blank=True, max_length=32, null=True)),
                ("brand_accent_color", models.CharField(blank=True, max_length=32, null=True)),
                ("brand_text_color", models.CharField(blank=True, max_length=32, null=True)),
                ("brand_logo_id", models.CharField(blank=True, max_length=255, null=True)),
                ("brand_background_image_id", models.CharField(blank=True, max_length=255, null=True)),
                ("is_quiz_mode", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=500)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("multiple_choice", "Multiple choice"),
                            ("word_cloud", "Word cloud"),
                            ("open_ended", "Open ended"),
                            ("rating", "Rating"),
                        ],
                        max_length=32,
                    ),
                ),
                ("options", models.JSONField(blank=True, null=True)),
                ("option_images", models.JSONField(blank=True, null=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                (
                    "time_limit",
                    models.PositiveIntegerField(blank=True, help_text="Seconds; empty = untimed.", null=True),
                ),
                (
                    "chart_layout",
                    models.CharField(
                        blank=True,
                        choices=[("bars", "Bars"), ("donut", "Donut"), ("pie", "Pie")],
                        max_length=16,
                        null=True,
                    ),
                ),
                ("allow_multiple", models.BooleanField(blank=True, null=True)),
                ("correct_answer", models.CharField(blank=True, max_length=500, null=True)),
                (
                    "show_results",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("always", "Live during voting"),
                            ("after_submit", "After the participant submits"),
                            ("after_close", "When the presenter moves on"),
                        ],
                        max_length=16,
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="polling.session",
                    ),
                ),
            ],
            options={"ordering": ["sort_order", "id"]},
        ),
        migrations.AddField(
            model_name="session",
            name="active_question",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="polling.question",
            ),
        ),
        migrations.AddIndex(
            model_name="question",
            index=models.Index(fields=["session", "sort_order"], name="question_session_order_idx"),
        ),
        migrations.AddConstraint(
            model_name="session",
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(("active_question__isnull", True), ("question_started_at__isnull", True))
                    | models.Q(("active_question__isnull", False), ("question_started_at__isnull", False))
                ),
                name="session_active_question_has_start",
            ),
        ),
    ]
