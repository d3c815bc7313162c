"""
ViewSets for the polling app.

Presenters create sessions, manage questions, drive the live question
and trigger the reset/delete cascades.  Views only parse input and shape
output; every rule is enforced in the service modules, whose errors are
DRF exceptions rendered directly (404 not found, 409 invalid state).
"""
from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from audience import stores

from . import questions as question_ops
from . import services
from .serializers import (
    ActiveQuestionSerializer,
    BrandingSerializer,
    ClearImageSerializer,
    QuestionSerializer,
    QuestionWriteSerializer,
    ReorderSerializer,
    SessionCreateSerializer,
    SessionSerializer,
    SessionStatsSerializer,
    SessionUpdateSerializer,
    StatusSerializer,
    UploadSerializer,
    UploadUrlQuerySerializer,
)
from .timers import set_active_question


class SessionViewSet(viewsets.GenericViewSet):
    """
    - POST   /sessions/                          create (draft, new code)
    - GET    /sessions/?presenter_id=...         presenter's sessions, newest first
    - GET    /sessions/{id}/                     detail
    - GET    /sessions/by-code/{code}/           audience lookup
    - PATCH  /sessions/{id}/                     title / max_participants
    - DELETE /sessions/{id}/                     enqueue full delete (202)
    - POST   /sessions/{id}/status/              start / end / reopen
    - POST   /sessions/{id}/reopen/
    - POST   /sessions/{id}/active-question/
    - POST   /sessions/{id}/duplicate/
    - POST   /sessions/{id}/reset/               enqueue reset (202)
    - GET    /sessions/{id}/stats/
    - PATCH  /sessions/{id}/branding/
    - POST   /sessions/{id}/branding/clear-image/
    - GET/POST /sessions/{id}/questions/
    - POST   /sessions/{id}/questions/reorder/
    """
    serializer_class = SessionSerializer
    lookup_value_regex = r"\d+"

    def _session_response(self, session, code=status.HTTP_200_OK):
        return Response(SessionSerializer(session).data, status=code)

    def list(self, request):
        presenter_id = request.query_params.get("presenter_id", "").strip()
        if not presenter_id:
            return Response({"detail": "presenter_id is required."}, status=status.HTTP_400_BAD_REQUEST)
        qs = services.list_sessions_by_presenter(presenter_id)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(SessionSerializer(page, many=True).data)
        return Response(SessionSerializer(qs, many=True).data)

    def create(self, request):
        ser = SessionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        session = services.create_session(**ser.validated_data)
        return self._session_response(session, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return self._session_response(services.get_session(int(pk)))

    def partial_update(self, request, pk=None):
        ser = SessionUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        with transaction.atomic():
            session = services.get_session(int(pk))
            if "title" in data:
                session = services.update_title(session.id, data["title"])
            if "max_participants" in data:
                session = services.update_max_participants(session.id, data["max_participants"])
        return self._session_response(session)

    def destroy(self, request, pk=None):
        services.delete_session(int(pk))
        return Response({"ok": True, "session_id": int(pk)}, status=status.HTTP_202_ACCEPTED)

    @action(detail=False, methods=["get"], url_path=r"by-code/(?P<code>[A-Za-z0-9]+)")
    def by_code(self, request, code=None):
        return self._session_response(services.get_session_by_code(code))

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        ser = StatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return self._session_response(services.set_session_status(int(pk), ser.validated_data["status"]))

    @action(detail=True, methods=["post"])
    def reopen(self, request, pk=None):
        return self._session_response(services.reopen_session(int(pk)))

    @action(detail=True, methods=["post"], url_path="active-question")
    def active_question(self, request, pk=None):
        ser = ActiveQuestionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return self._session_response(set_active_question(int(pk), ser.validated_data["question_id"]))

    @action(detail=True, methods=["post"])
    def duplicate(self, request, pk=None):
        session = services.duplicate_session(int(pk))
        return Response({"session_id": session.id, "code": session.code}, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def reset(self, request, pk=None):
        services.reset_session(int(pk))
        return Response({"ok": True, "session_id": int(pk)}, status=status.HTTP_202_ACCEPTED)

    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):
        return Response(SessionStatsSerializer(services.get_session_stats(int(pk))).data)

    @action(detail=True, methods=["patch"])
    def branding(self, request, pk=None):
        ser = BrandingSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        return self._session_response(services.update_branding(int(pk), dict(ser.validated_data)))

    @action(detail=True, methods=["post"], url_path="branding/clear-image")
    def clear_image(self, request, pk=None):
        ser = ClearImageSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return self._session_response(services.clear_branding_image(int(pk), ser.validated_data["kind"]))

    @action(detail=True, methods=["get", "post"])
    def questions(self, request, pk=None):
        if request.method == "GET":
            return Response(QuestionSerializer(question_ops.list_questions(int(pk)), many=True).data)
        ser = QuestionWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        question = question_ops.create_question(int(pk), dict(ser.validated_data))
        return Response(QuestionSerializer(question).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="questions/reorder")
    def reorder(self, request, pk=None):
        ser = ReorderSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        ordered = question_ops.reorder_questions(int(pk), ser.validated_data["question_ids"])
        return Response(QuestionSerializer(ordered, many=True).data)


class QuestionViewSet(viewsets.ViewSet):
    """
    - GET    /questions/{id}/
    - PATCH  /questions/{id}/                guarded by session status
    - DELETE /questions/{id}/                draft only; removes its responses
    - GET    /questions/{id}/results/        aggregated answer counts
    - POST   /questions/{id}/reset-results/  remove this question's responses
    """
    lookup_value_regex = r"\d+"

    def retrieve(self, request, pk=None):
        return Response(QuestionSerializer(question_ops.get_question(int(pk))).data)

    def partial_update(self, request, pk=None):
        ser = QuestionWriteSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        question = question_ops.update_question(int(pk), dict(ser.validated_data))
        return Response(QuestionSerializer(question).data)

    def destroy(self, request, pk=None):
        question_ops.delete_question(int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"])
    def results(self, request, pk=None):
        question = question_ops.get_question(int(pk))
        return Response({"question_id": question.id, **stores.aggregate_results(question)})

    @action(detail=True, methods=["post"], url_path="reset-results")
    def reset_results(self, request, pk=None):
        removed = question_ops.reset_question_results(int(pk))
        return Response({"question_id": int(pk), "removed": removed})


class UploadViewSet(viewsets.ViewSet):
    """
    Branding and option images.

    - POST /uploads/                       multipart `file`; returns its storage id
    - GET  /uploads/url/?storage_id=...    public URL (null when missing)

    The returned `storage_id` is what `brand_logo_id`,
    `brand_background_image_id` and `option_images` hold.
    """
    parser_classes = [MultiPartParser, FormParser]

    def create(self, request):
        ser = UploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        name = services.save_upload(ser.validated_data["file"])
        return Response(
            {"storage_id": name, "url": services.get_upload_url(name)},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"])
    def url(self, request):
        ser = UploadUrlQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        storage_id = ser.validated_data["storage_id"]
        return Response({"storage_id": storage_id, "url": services.get_upload_url(storage_id)})
