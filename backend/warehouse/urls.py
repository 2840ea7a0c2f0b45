from django.urls import path

from . import views

app_name = "warehouse"

urlpatterns = [
    path('daily-prep/', views.DailyPrepOverviewView.as_view(), name='daily-prep'),
    path('daily-prep/deduct/', views.DailyPrepDeductView.as_view(), name='daily-prep-deduct'),
    path('daily-prep/urgent-request/', views.DailyPrepUrgentRequestView.as_view(), name='daily-prep-urgent-request'),
]
