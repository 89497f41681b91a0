from __future__ import annotations

import asyncio
import logging

from asgiref.sync import async_to_sync
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from salon_admin.accounts.permissions import HasDashboardPermission
from salon_admin.client.endpoints import ANALYTICS_SECTIONS
from salon_admin.store.entities import to_camel
from salon_admin.store.gateways import get_gateway

from .serializers import AnalyticsQuerySerializer
from .serializers import BookingSerializer
from .serializers import BookingStatusSerializer
from .serializers import OfferSerializer
from .serializers import SalonSerializer
from .serializers import ServiceSerializer
from .serializers import StaffMemberSerializer
from .serializers import StatusSerializer

logger = logging.getLogger(__name__)

LIST_FILTERS = [
    OpenApiParameter("status", str, description="Exact status"),
    OpenApiParameter("salon_id", str, description="Owning salon"),
    OpenApiParameter("search", str, description="Case-insensitive text search"),
]


class ResourceViewSet(viewsets.GenericViewSet):
    """CRUD plus a status switch over one store collection.

    Every request fetches fresh copies from the gateway; nothing is cached.
    """

    resource = ""
    status_serializer_class = StatusSerializer
    filter_params = ("status", "salon_id", "search")
    permission_classes = [IsAuthenticated, HasDashboardPermission]

    @property
    def permission_resource(self) -> str:
        return self.resource

    def get_gateway(self):
        return get_gateway(self.request)

    def get_filters(self) -> dict[str, str]:
        params = self.request.query_params
        return {name: params[name] for name in self.filter_params if params.get(name)}

    def list(self, request, *args, **kwargs):
        items = async_to_sync(self.get_gateway().list)(self.resource, self.get_filters())
        return Response(self.get_serializer(items, many=True).data)

    def retrieve(self, request, pk=None):
        entity = async_to_sync(self.get_gateway().get)(self.resource, pk)
        return Response(self.get_serializer(entity).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entity = async_to_sync(self.get_gateway().create)(
            self.resource,
            dict(serializer.validated_data),
        )
        logger.info("Created %s %s", self.resource, entity.id)
        return Response(self.get_serializer(entity).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entity = async_to_sync(self.get_gateway().update)(
            self.resource,
            pk,
            dict(serializer.validated_data),
        )
        return Response(self.get_serializer(entity).data)

    def destroy(self, request, pk=None):
        async_to_sync(self.get_gateway().delete)(self.resource, pk)
        logger.info("Deleted %s %s", self.resource, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = self.status_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        entity = async_to_sync(self.get_gateway().set_status)(
            self.resource,
            pk,
            serializer.validated_data["status"],
        )
        return Response(self.get_serializer(entity).data)


def _tagged(tag: str, *, extra_filters=()):
    return extend_schema_view(
        list=extend_schema(tags=[tag], parameters=[*LIST_FILTERS, *extra_filters]),
        retrieve=extend_schema(tags=[tag]),
        create=extend_schema(tags=[tag]),
        update=extend_schema(tags=[tag]),
        destroy=extend_schema(tags=[tag]),
        set_status=extend_schema(tags=[tag]),
    )


@_tagged("Salons")
class SalonViewSet(ResourceViewSet):
    resource = "salons"
    serializer_class = SalonSerializer
    filter_params = ("status", "search")


@_tagged("Services")
class ServiceViewSet(ResourceViewSet):
    resource = "services"
    serializer_class = ServiceSerializer


@_tagged("Staff")
class StaffViewSet(ResourceViewSet):
    resource = "staff"
    serializer_class = StaffMemberSerializer


@_tagged(
    "Bookings",
    extra_filters=[OpenApiParameter("date", str, description="YYYY-MM-DD")],
)
class BookingViewSet(ResourceViewSet):
    resource = "bookings"
    serializer_class = BookingSerializer
    status_serializer_class = BookingStatusSerializer
    filter_params = ("status", "salon_id", "search", "date")


@_tagged("Offers")
class OfferViewSet(ResourceViewSet):
    resource = "offers"
    serializer_class = OfferSerializer


OVERVIEW_COUNTERS = (
    "total_salons",
    "active_bookings",
    "total_staff",
    "monthly_revenue",
    "total_users",
    "pending_bookings",
    "completed_bookings",
    "cancelled_bookings",
)
RECENT_BOOKINGS = 5
TOP_SERVICES = 5
REVENUE_PERIOD = "6months"


async def load_overview(gateway) -> dict:
    """Fetch everything the overview shows in one concurrent round."""

    stats, recent, services, revenue = await asyncio.gather(
        gateway.analytics("overview"),
        gateway.recent("bookings", RECENT_BOOKINGS),
        gateway.analytics("services", {"limit": TOP_SERVICES}),
        gateway.analytics("revenue", {"period": REVENUE_PERIOD}),
    )
    stats = stats if isinstance(stats, dict) else {}
    return {
        "stats": {name: stats.get(to_camel(name)) or 0 for name in OVERVIEW_COUNTERS},
        "recent_bookings": BookingSerializer(recent, many=True).data,
        "top_services": services if isinstance(services, list) else [],
        "revenue": revenue if isinstance(revenue, list) else [],
    }


class DashboardOverviewView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Dashboard"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request, *args, **kwargs):
        return Response(async_to_sync(load_overview)(get_gateway(request)))


class AnalyticsView(APIView):
    permission_classes = [IsAuthenticated]
    sections = tuple(s for s in ANALYTICS_SECTIONS if s != "export")

    @extend_schema(
        tags=["Dashboard"],
        parameters=[AnalyticsQuerySerializer],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request, section: str, *args, **kwargs):
        if section not in self.sections:
            msg = f"Unknown analytics section: {section}"
            raise NotFound(msg)
        query = AnalyticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = dict(query.validated_data)
        data = async_to_sync(get_gateway(request).analytics)(section, params or None)
        return Response({"section": section, "data": data})
