# audience/serializers.py
from rest_framework import serializers

from .models import Participant, Response


class JoinSerializer(serializers.Serializer):
    unique_id = serializers.CharField(max_length=128)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class ParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Participant
        fields = ["id", "session", "unique_id", "name", "joined_at"]
        read_only_fields = fields


class SubmitResponseSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    participant_id = serializers.IntegerField()
    answer = serializers.CharField(max_length=2000)


class ResponseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Response
        fields = ["id", "session", "question", "participant", "answer", "answered_at"]
        read_only_fields = fields


class HasRespondedQuerySerializer(serializers.Serializer):
    participant_id = serializers.IntegerField()
