from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r'', views.StudentViewSet, basename='student')

urlpatterns = [
    path('', include(router.urls)),
]
