from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register(r'purchase-records', views.PurchaseRecordViewSet)

app_name = "purchasing"

urlpatterns = [
    path('analysis/', views.PurchaseAnalysisView.as_view(), name='analysis'),
    path('analysis/export/', views.PurchaseAnalysisExportView.as_view(), name='analysis-export'),
    path('batch/', views.BatchPurchaseView.as_view(), name='batch'),
    path('', include(router.urls)),
]
