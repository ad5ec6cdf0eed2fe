# dashboard/urls.py

from django.urls import path

from dashboard.views import AverageCartView, CategorySalesView, DailySalesView

app_name = "dashboard"

urlpatterns = [
    path("dashboard/daily-sales/", DailySalesView.as_view(), name="daily-sales"),
    path("dashboard/category-sales/", CategorySalesView.as_view(), name="category-sales"),
    path("dashboard/average-cart/", AverageCartView.as_view(), name="average-cart"),
]
