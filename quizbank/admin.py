from django.contrib import admin
from .models import Theme, Difficulty, Tag, Question, Answer, Quiz, QuizQuestion


class AnswerInline(admin.TabularInline):
    model = Answer
    extra = 0
    fields = ("position", "content", "is_correct")


class QuestionAdmin(admin.ModelAdmin):
    list_display = ("content", "theme", "difficulty", "validated", "author_id", "created_at")
    list_filter = ("validated", "theme", "difficulty")
    search_fields = ("content",)
    inlines = [AnswerInline]


class QuizQuestionInline(admin.TabularInline):
    model = QuizQuestion
    extra = 0
    raw_id_fields = ("question",)


class QuizAdmin(admin.ModelAdmin):
    list_display = ("name", "theme", "difficulty", "is_published", "updated_at")
    list_filter = ("is_published", "theme", "difficulty")
    search_fields = ("name",)
    inlines = [QuizQuestionInline]


admin.site.register(Theme)
admin.site.register(Difficulty)
admin.site.register(Tag)
admin.site.register(Question, QuestionAdmin)
admin.site.register(Quiz, QuizAdmin)
