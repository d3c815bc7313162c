"""
Models for the audience app.

We persist:
- Participant: one joined device per session (identified by `unique_id`).
- Response: a participant's answer to one question.

Both reference `polling.Session`; they are removed in bounded batches by
the session cascade rather than through a single ORM cascade.
"""

from django.db import models


class Participant(models.Model):
    session = models.ForeignKey(
        "polling.Session",
        on_delete=models.CASCADE,
        related_name="participants",
    )
    unique_id = models.CharField(max_length=128, help_text="Browser fingerprint or random device id.")
    name = models.CharField(max_length=255, blank=True, null=True)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["session", "unique_id"], name="participant_unique_device"),
        ]
        indexes = [
            models.Index(fields=["session"], name="participant_session_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.session_id}] {self.name or self.unique_id}"


class Response(models.Model):
    session = models.ForeignKey(
        "polling.Session",
        on_delete=models.CASCADE,
        related_name="responses",
    )
    question = models.ForeignKey(
        "polling.Question",
        on_delete=models.CASCADE,
        related_name="responses",
    )
    participant = models.ForeignKey(
        Participant,
        on_delete=models.CASCADE,
        related_name="responses",
    )
    answer = models.TextField(help_text="Option text, word, free text or rating number.")
    answered_at = models.DateTimeField()
    # Snapshot of the session stamp when the answer arrived.
    question_started_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["question", "participant"], name="response_one_per_participant"),
        ]
        indexes = [
            models.Index(fields=["session"], name="response_session_idx"),
            models.Index(fields=["question"], name="response_question_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.question_id}] {self.participant_id}: {self.answer[:50]}"
