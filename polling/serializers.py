"""
Serializers for the polling app.

Read serializers shape sessions and questions for presenters and audience
clients.  Write serializers only validate input shape; the lifecycle
rules live in `polling.services`, `polling.questions` and `polling.guards`.
"""
from django.utils import timezone
from rest_framework import serializers

from .models import Question, Session
from .timers import to_epoch_ms


class QuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Question
        fields = [
            "id",
            "session",
            "title",
            "type",
            "options",
            "option_images",
            "sort_order",
            "time_limit",
            "chart_layout",
            "allow_multiple",
            "correct_answer",
            "show_results",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SessionSerializer(serializers.ModelSerializer):
    """
    Session state as seen by clients.

    `question_started_at` and `server_time` are epoch milliseconds so
    every client can compute the countdown with the same formula.
    """
    active_question_id = serializers.IntegerField(read_only=True, allow_null=True)
    question_started_at = serializers.SerializerMethodField()
    server_time = serializers.SerializerMethodField()

    class Meta:
        model = Session
        fields = [
            "id",
            "code",
            "title",
            "presenter_id",
            "presenter_name",
            "status",
            "active_question_id",
            "question_started_at",
            "max_participants",
            "brand_bg_color",
            "brand_accent_color",
            "brand_text_color",
            "brand_logo_id",
            "brand_background_image_id",
            "is_quiz_mode",
            "created_at",
            "updated_at",
            "server_time",
        ]
        read_only_fields = fields

    def get_question_started_at(self, obj):
        return to_epoch_ms(obj.question_started_at)

    def get_server_time(self, obj):
        return to_epoch_ms(timezone.now())


class SessionCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    presenter_id = serializers.CharField(max_length=128)
    presenter_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title cannot be blank.")
        return value


class SessionUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    max_participants = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class StatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Session.STATUS_CHOICES])


class ActiveQuestionSerializer(serializers.Serializer):
    question_id = serializers.IntegerField(allow_null=True)


class BrandingSerializer(serializers.Serializer):
    brand_bg_color = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)
    brand_accent_color = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)
    brand_text_color = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)
    brand_logo_id = serializers.CharField(max_length=255, required=False, allow_null=True)
    brand_background_image_id = serializers.CharField(max_length=255, required=False, allow_null=True)
    is_quiz_mode = serializers.BooleanField(required=False)


class ClearImageSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=["logo", "background"])


class QuestionWriteSerializer(serializers.Serializer):
    """Input for creating (all fields) or patching (partial=True) a question."""

    title = serializers.CharField(max_length=500)
    type = serializers.ChoiceField(choices=[c[0] for c in Question.TYPE_CHOICES])
    options = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False, allow_null=True)
    option_images = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False, allow_null=True
    )
    time_limit = serializers.IntegerField(required=False, allow_null=True)
    chart_layout = serializers.ChoiceField(
        choices=[c[0] for c in Question.LAYOUT_CHOICES], required=False, allow_null=True
    )
    allow_multiple = serializers.BooleanField(required=False, allow_null=True)
    correct_answer = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)
    show_results = serializers.ChoiceField(
        choices=[c[0] for c in Question.SHOW_RESULTS_CHOICES], required=False, allow_null=True
    )


class ReorderSerializer(serializers.Serializer):
    question_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


class SessionStatsSerializer(serializers.Serializer):
    question_count = serializers.IntegerField()
    participant_count = serializers.IntegerField()
    response_count = serializers.IntegerField()


class UploadSerializer(serializers.Serializer):
    file = serializers.FileField()


class UploadUrlQuerySerializer(serializers.Serializer):
    storage_id = serializers.CharField(max_length=255)
