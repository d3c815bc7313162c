"""
Models for the polling app.

A `Session` is one live polling event owned by a presenter.  It carries a
short join code, a status (`draft` -> `active` -> `ended`, with a reopen
path back to `active`) and a pointer to the question currently shown to
the audience.  A `Question` belongs to exactly one session and is ordered
by `sort_order`.

Participants and responses live in the `audience` app.
"""

from django.db import models
from django.db.models import Q


class Session(models.Model):
    """A polling session joined by the audience through `code`."""

    STATUS_DRAFT = "draft"
    STATUS_ACTIVE = "active"
    STATUS_ENDED = "ended"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_ENDED, "Ended"),
    ]

    code = models.CharField(max_length=8, unique=True, help_text="Join code typed by the audience.")
    title = models.CharField(max_length=255)
    presenter_id = models.CharField(max_length=128, db_index=True)
    presenter_name = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)

    active_question = models.ForeignKey(
        "polling.Question",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    question_started_at = models.DateTimeField(null=True, blank=True)
    # Deprecated positional pointer; some older audience clients still read it.
    active_question_index = models.PositiveIntegerField(null=True, blank=True)

    max_participants = models.PositiveIntegerField(
        null=True, blank=True, help_text="0 or empty means unlimited."
    )

    # Branding
    brand_bg_color = models.CharField(max_length=32, blank=True, null=True)
    brand_accent_color = models.CharField(max_length=32, blank=True, null=True)
    brand_text_color = models.CharField(max_length=32, blank=True, null=True)
    brand_logo_id = models.CharField(max_length=255, blank=True, null=True)
    brand_background_image_id = models.CharField(max_length=255, blank=True, null=True)
    is_quiz_mode = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(active_question__isnull=True, question_started_at__isnull=True)
                    | Q(active_question__isnull=False, question_started_at__isnull=False)
                ),
                name="session_active_question_has_start",
            ),
        ]

    BRANDING_FIELDS = (
        "brand_bg_color",
        "brand_accent_color",
        "brand_text_color",
        "brand_logo_id",
        "brand_background_image_id",
        "is_quiz_mode",
    )

    @property
    def is_draft(self) -> bool:
        return self.status == self.STATUS_DRAFT

    @property
    def is_ended(self) -> bool:
        return self.status == self.STATUS_ENDED

    def __str__(self) -> str:
        return f"{self.title} [{self.code}] ({self.status})"


class Question(models.Model):
    """One prompt within a session."""

    TYPE_MULTIPLE_CHOICE = "multiple_choice"
    TYPE_WORD_CLOUD = "word_cloud"
    TYPE_OPEN_ENDED = "open_ended"
    TYPE_RATING = "rating"
    TYPE_CHOICES = [
        (TYPE_MULTIPLE_CHOICE, "Multiple choice"),
        (TYPE_WORD_CLOUD, "Word cloud"),
        (TYPE_OPEN_ENDED, "Open ended"),
        (TYPE_RATING, "Rating"),
    ]

    LAYOUT_CHOICES = [
        ("bars", "Bars"),
        ("donut", "Donut"),
        ("pie", "Pie"),
    ]

    SHOW_ALWAYS = "always"
    SHOW_AFTER_SUBMIT = "after_submit"
    SHOW_AFTER_CLOSE = "after_close"
    SHOW_RESULTS_CHOICES = [
        (SHOW_ALWAYS, "Live during voting"),
        (SHOW_AFTER_SUBMIT, "After the participant submits"),
        (SHOW_AFTER_CLOSE, "When the presenter moves on"),
    ]

    # Fields that only make sense on a multiple-choice question.
    MC_FIELDS = ("options", "option_images", "chart_layout", "correct_answer", "allow_multiple")

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="questions")
    title = models.CharField(max_length=500)
    type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    options = models.JSONField(null=True, blank=True)
    option_images = models.JSONField(null=True, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    time_limit = models.PositiveIntegerField(null=True, blank=True, help_text="Seconds; empty = untimed.")
    chart_layout = models.CharField(max_length=16, choices=LAYOUT_CHOICES, null=True, blank=True)
    allow_multiple = models.BooleanField(null=True, blank=True)
    correct_answer = models.CharField(max_length=500, null=True, blank=True)
    show_results = models.CharField(max_length=16, choices=SHOW_RESULTS_CHOICES, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "id"]
        indexes = [
            models.Index(fields=["session", "sort_order"], name="question_session_order_idx"),
        ]

    @property
    def is_multiple_choice(self) -> bool:
        return self.type == self.TYPE_MULTIPLE_CHOICE

    def __str__(self) -> str:
        return f"[{self.session_id}#{self.sort_order}] {self.title[:50]}"
