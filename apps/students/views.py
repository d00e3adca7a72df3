# gym/Backend/apps/students/views.py
import logging

from rest_framework import viewsets
from django_filters.rest_framework import DjangoFilterBackend

from core.mixins.gym_scope import GymQuerysetMixin
from core.permissions import IsAuthenticatedAndActive, HasObjectGymAccess
from .filters import StudentFilter
from .models import Student
from .serializers import StudentSerializer

logger = logging.getLogger(__name__)


class StudentViewSet(GymQuerysetMixin, viewsets.ModelViewSet):
    """
    Student registry.
    Lists are narrowed to the caller's gym; targeted reads and writes on a
    foreign-gym student are rejected with 403.
    """
    queryset = Student.objects.all()
    serializer_class = StudentSerializer
    permission_classes = [IsAuthenticatedAndActive, HasObjectGymAccess]
    filter_backends = [DjangoFilterBackend]
    filterset_class = StudentFilter

    def perform_create(self, serializer):
        student = serializer.save()
        logger.info("Student enrolled: id=%s gym=%s by user=%s", student.pk, student.gym, self.request.user.pk)

    def perform_update(self, serializer):
        student = serializer.save()
        logger.info("Student updated: id=%s by user=%s", student.pk, self.request.user.pk)

    def perform_destroy(self, instance):
        student_id = instance.pk
        payment_count = instance.payments.count()
        instance.delete()
        logger.info(
            "Student deleted: id=%s with %s payments by user=%s",
            student_id, payment_count, self.request.user.pk,
        )
