from django.urls import path
from .views import (
    OrderActionView,
    OrderDetailView,
    OrderGroupCreateView,
    OrderGroupDetailView,
    OrderGroupVoidView,
    PatientOrdersView,
)

urlpatterns = [
    path('orders/<int:order_id>/', OrderDetailView.as_view(), name='order-detail'),
    path('orders/<int:order_id>/<slug:action>/', OrderActionView.as_view(), name='order-action'),
    path('patients/<int:patient_id>/orders/', PatientOrdersView.as_view(), name='patient-orders'),
    path('order-groups/', OrderGroupCreateView.as_view(), name='order-group-create'),
    path('order-groups/<int:group_id>/', OrderGroupDetailView.as_view(), name='order-group-detail'),
    path('order-groups/<int:group_id>/void/', OrderGroupVoidView.as_view(), name='order-group-void'),
    path('order-groups/<int:group_id>/unvoid/', OrderGroupVoidView.as_view(unvoid=True), name='order-group-unvoid'),
]
