"""
Admin registration for the polling app.
"""

from django.contrib import admin

from .models import Question, Session


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0
    fields = ("sort_order", "title", "type", "time_limit")
    ordering = ("sort_order",)


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "title", "presenter_name", "status", "active_question", "created_at")
    list_filter = ("status",)
    search_fields = ("code", "title", "presenter_id", "presenter_name")
    readonly_fields = ("code", "question_started_at", "created_at", "updated_at")
    date_hierarchy = "created_at"
    inlines = [QuestionInline]


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("id", "session", "sort_order", "type", "short_title", "time_limit")
    list_filter = ("type",)
    search_fields = ("title", "session__code")

    @admin.display(description="title")
    def short_title(self, obj: Question) -> str:
        return (obj.title or "")[:80]
