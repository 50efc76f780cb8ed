from django.contrib import admin
from .models import User, Customer, Worker, NonAvailability, ServiceAgent

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'phone_number', 'city', 'is_customer', 'is_worker', 'is_superuser')
    list_filter = ('is_superuser', 'city')
    search_fields = ('username', 'email', 'phone_number')

@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('user', 'profile_pic')
    search_fields = ('user__username', 'user__email')

class NonAvailabilityInline(admin.TabularInline):
    model = NonAvailability
    extra = 0

@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ('user', 'availability_status', 'is_suspended', 'is_verified', 'join_date')
    list_filter = ('availability_status', 'is_suspended')
    search_fields = ('user__username', 'user__email', 'user__phone_number')
    inlines = [NonAvailabilityInline]

@admin.register(ServiceAgent)
class ServiceAgentAdmin(admin.ModelAdmin):
    list_display = ('user', 'city', 'area')
    search_fields = ('user__username', 'city', 'area')
