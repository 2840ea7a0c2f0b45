from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import EventTypeViewSet, MealServiceViewSet, MenuViewSet

router = DefaultRouter()
router.register(r'meal-services', MealServiceViewSet)
router.register(r'event-types', EventTypeViewSet)
router.register(r'menus', MenuViewSet)

app_name = "menus"

urlpatterns = [
    path('', include(router.urls)),
]
