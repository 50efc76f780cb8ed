from django.contrib import admin
from .models import WorkerVerification, VerificationLog

class VerificationLogInline(admin.TabularInline):
    model = VerificationLog
    extra = 0
    readonly_fields = ('actor', 'action', 'details', 'timestamp')

@admin.register(WorkerVerification)
class WorkerVerificationAdmin(admin.ModelAdmin):
    list_display = ('worker', 'status', 'submitted_at', 'verified_at', 'verified_by')
    list_filter = ('status',)
    search_fields = ('worker__user__username', 'worker__user__phone_number', 'worker__user__city')
    inlines = [VerificationLogInline]
