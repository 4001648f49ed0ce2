from django.urls import path

from .views import course_detail, module_detail


urlpatterns = [
    path('courses/<int:pk>/', course_detail, name='course-detail'),
    path('courses/<int:course_id>/modules/<int:pk>/', module_detail, name='module-detail'),
]
