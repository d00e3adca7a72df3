# apps/students/filters.py

from django_filters import rest_framework as filters

from core.constants import StudentStatus, MembershipType
from .models import Student


class StudentFilter(filters.FilterSet):
    """Filter for students"""

    search = filters.CharFilter(field_name='name', lookup_expr='icontains')
    status = filters.ChoiceFilter(choices=StudentStatus.choices)
    membership_type = filters.ChoiceFilter(choices=MembershipType.choices)

    class Meta:
        model = Student
        fields = ['search', 'status', 'membership_type']
