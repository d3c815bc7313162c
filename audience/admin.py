"""
Admin registration for the audience app.
"""

from django.contrib import admin

from .models import Participant, Response


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ("id", "session", "name", "unique_id", "joined_at")
    search_fields = ("name", "unique_id", "session__code")
    readonly_fields = ("joined_at",)


@admin.register(Response)
class ResponseAdmin(admin.ModelAdmin):
    list_display = ("id", "session", "question", "participant", "short_answer", "answered_at")
    list_filter = ("session",)
    search_fields = ("answer",)
    date_hierarchy = "answered_at"

    @admin.display(description="answer")
    def short_answer(self, obj: Response) -> str:
        return (obj.answer or "")[:80]
