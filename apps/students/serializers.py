# gym/Backend/apps/students/serializers.py
from rest_framework import serializers

from core.permissions import enforce_gym_access
from .models import Student


class MinimalStudentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ['id', 'name', 'phone']


class StudentSerializer(serializers.ModelSerializer):
    """Main serializer for Student model"""

    class Meta:
        model = Student
        fields = [
            'id',
            'name',
            'phone',
            'photo_url',
            'gym',
            'membership_type',
            'status',
            'enrollment_date',
            'last_payment_date',
            'next_payment_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = [
            'id', 'enrollment_date',
            'last_payment_date', 'next_payment_date',
            'created_at', 'updated_at',
        ]

    def validate_phone(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Phone is required.")
        qs = Student.objects.filter(phone=value)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Student with this phone number already exists.")
        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_gym(self, value):
        # Non-admins cannot enroll into, or move students to, another gym
        request = self.context.get('request')
        if request is not None:
            enforce_gym_access(request.user, value, action='assign students to')
        return value
