# dashboard/views.py

"""
PATH: dashboard/views.py

BACK-OFFICE DASHBOARD (dashboard:view)

- GET /api/dashboard/daily-sales/?timeFrame=week|month|5weeks
- GET /api/dashboard/category-sales/?timeFrame=
- GET /api/dashboard/average-cart/?timeFrame=
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from dashboard.services import analytics
from permissions.roles import PERM_DASHBOARD_VIEW, HasPermission

TIME_FRAME_PARAMETER = OpenApiParameter(
    name="timeFrame",
    type=OpenApiTypes.STR,
    required=False,
    enum=list(analytics.TIME_FRAMES),
    description="week (default), month or 5weeks.",
)


class DashboardView(APIView):
    permission_classes = [IsAuthenticated, HasPermission]
    required_permission = PERM_DASHBOARD_VIEW

    compute = None

    @extend_schema(parameters=[TIME_FRAME_PARAMETER], responses={200: dict})
    def get(self, request):
        time_frame = request.query_params.get("timeFrame")
        try:
            data = self.compute(time_frame)
        except analytics.InvalidTimeFrame as exc:
            raise serializers.ValidationError({"timeFrame": [str(exc)]}) from exc
        return Response(data)


class DailySalesView(DashboardView):
    """Revenue per day (per week for 5weeks), ascending."""

    compute = staticmethod(analytics.daily_sales)


class CategorySalesView(DashboardView):
    """Revenue per category, highest first."""

    compute = staticmethod(analytics.category_sales)


class AverageCartView(DashboardView):
    compute = staticmethod(analytics.average_cart)
