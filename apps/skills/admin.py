from django.contrib import admin
from .models import Skill, Service, WorkerService, PortfolioImage

class ServiceInline(admin.TabularInline):
    model = Service
    extra = 0

@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ('name',)
    search_fields = ('name',)
    inlines = [ServiceInline]

class PortfolioImageInline(admin.TabularInline):
    model = PortfolioImage
    extra = 0

@admin.register(WorkerService)
class WorkerServiceAdmin(admin.ModelAdmin):
    list_display = ('worker', 'skill', 'service', 'pricing_type', 'price', 'estimated_duration', 'is_active')
    list_filter = ('pricing_type', 'is_active', 'skill')
    search_fields = ('worker__user__username', 'service__name', 'skill__name')
    inlines = [PortfolioImageInline]
