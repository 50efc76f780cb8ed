from rest_framework import serializers
from .models import Skill, Service, WorkerService, PortfolioImage


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ['id', 'name', 'description']


class SkillSerializer(serializers.ModelSerializer):
    services = ServiceSerializer(many=True, read_only=True)

    class Meta:
        model = Skill
        fields = ['id', 'name', 'description', 'services']


class PortfolioImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = PortfolioImage
        fields = ['id', 'image', 'caption', 'uploaded_at']


class WorkerServiceSerializer(serializers.ModelSerializer):
    skill_name = serializers.CharField(source='skill.name', read_only=True)
    service_name = serializers.CharField(source='service.name', read_only=True)
    portfolio_images = PortfolioImageSerializer(many=True, read_only=True)

    class Meta:
        model = WorkerService
        fields = [
            'id', 'skill', 'skill_name', 'service', 'service_name', 'details',
            'pricing_type', 'price', 'estimated_duration', 'is_active', 'portfolio_images',
        ]
