"""
Audience endpoints.

- POST /api/sessions/<session_id>/join/                     join (or re-join) a session
- POST /api/sessions/<session_id>/responses/                answer the live question
- GET  /api/sessions/<session_id>/participants/             who joined, in join order
- GET  /api/sessions/<session_id>/participants/<unique_id>/ a device's participant
- GET  /api/sessions/<session_id>/response-counts/          responses per question id
- GET  /api/questions/<question_id>/responded/?participant_id=...
"""
from typing import Any

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .serializers import (
    HasRespondedQuerySerializer,
    JoinSerializer,
    ParticipantSerializer,
    ResponseSerializer,
    SubmitResponseSerializer,
)


class JoinSessionView(APIView):
    def post(self, request, session_id: int, *args: Any, **kwargs: Any):
        ser = JoinSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        participant = services.join_session(
            session_id,
            ser.validated_data["unique_id"],
            ser.validated_data.get("name"),
        )
        return Response(ParticipantSerializer(participant).data, status=status.HTTP_200_OK)


class SubmitResponseView(APIView):
    def post(self, request, session_id: int, *args: Any, **kwargs: Any):
        ser = SubmitResponseSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        response = services.submit_response(session_id, **ser.validated_data)
        return Response(ResponseSerializer(response).data, status=status.HTTP_201_CREATED)


class ParticipantListView(APIView):
    def get(self, request, session_id: int, *args: Any, **kwargs: Any):
        participants = services.list_participants(session_id)
        return Response(ParticipantSerializer(participants, many=True).data)


class ParticipantLookupView(APIView):
    def get(self, request, session_id: int, unique_id: str, *args: Any, **kwargs: Any):
        return Response(ParticipantSerializer(services.get_participant(session_id, unique_id)).data)


class ResponseCountsView(APIView):
    def get(self, request, session_id: int, *args: Any, **kwargs: Any):
        counts = services.response_counts(session_id)
        return Response({"session_id": session_id, "counts": {str(k): v for k, v in counts.items()}})


class HasRespondedView(APIView):
    def get(self, request, question_id: int, *args: Any, **kwargs: Any):
        ser = HasRespondedQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        responded = services.has_responded(question_id, ser.validated_data["participant_id"])
        return Response({"question_id": question_id, "responded": responded})
