"""
Malkhana app views.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Resolve the caller's ``UnitScope`` and delegate to a service class.
    3. Serialize the result and return a DRF ``Response``.

Domain exceptions raised by the services propagate untouched and are
rendered by ``core.domain.exception_handler``.

Views
-----
- ``MalkhanaStatsView``        — GET  stats/
- ``BlackInkRegisterView``     — GET  black-ink/
- ``RedInkRegisterView``       — GET  red-ink/
- ``MalkhanaSearchView``       — GET  search/?query=
- ``MotherNumberLookupView``   — GET  mother-number/{mother_number}/
- ``YearTransitionView``       — POST year-transition/
- ``MalkhanaItemViewSet``      — items/ (create, retrieve, partial update,
                                 dispose, assign-shelf, qr-code)
- ``ShelfViewSet``             — shelves/ (CRUD, items, qr-code)
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)

from core.domain.access import require_unit, resolve_unit_scope

from .serializers import (
    AssignShelfSerializer,
    DisposeItemSerializer,
    MalkhanaItemCreateSerializer,
    MalkhanaItemSerializer,
    MalkhanaItemUpdateSerializer,
    MalkhanaStatsSerializer,
    QRCodeResponseSerializer,
    ShelfCreateSerializer,
    ShelfSerializer,
    ShelfUpdateSerializer,
    YearTransitionRequestSerializer,
    YearTransitionResponseSerializer,
)
from .services import (
    MalkhanaItemService,
    MalkhanaQueryService,
    ShelfService,
    YearTransitionService,
)


# ═══════════════════════════════════════════════════════════════════
#  Registry-wide Views
# ═══════════════════════════════════════════════════════════════════


class MalkhanaStatsView(APIView):
    """GET /api/malkhana/stats/ — Dashboard counters for the caller's unit."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Registry statistics",
        responses={200: MalkhanaStatsSerializer},
        tags=["Malkhana"],
    )
    def get(self, request: Request) -> Response:
        stats = MalkhanaQueryService.get_stats(resolve_unit_scope(request.user))
        return Response(MalkhanaStatsSerializer(stats).data, status=status.HTTP_200_OK)


class BlackInkRegisterView(APIView):
    """GET /api/malkhana/black-ink/ — Current year's Black Ink register."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Black Ink register",
        responses={200: MalkhanaItemSerializer(many=True)},
        tags=["Malkhana"],
    )
    def get(self, request: Request) -> Response:
        items = MalkhanaQueryService.list_black_ink(resolve_unit_scope(request.user))
        return Response(MalkhanaItemSerializer(items, many=True).data, status=status.HTTP_200_OK)


class RedInkRegisterView(APIView):
    """GET /api/malkhana/red-ink/ — Red Ink register."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Red Ink register",
        responses={200: MalkhanaItemSerializer(many=True)},
        tags=["Malkhana"],
    )
    def get(self, request: Request) -> Response:
        items = MalkhanaQueryService.list_red_ink(resolve_unit_scope(request.user))
        return Response(MalkhanaItemSerializer(items, many=True).data, status=status.HTTP_200_OK)


class MalkhanaSearchView(APIView):
    """GET /api/malkhana/search/?query= — Free-text item search."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search items",
        parameters=[
            OpenApiParameter(
                name="query",
                type=str,
                required=True,
                description="Matched against mother number, case number, description, category and received-from.",
            ),
        ],
        responses={200: MalkhanaItemSerializer(many=True)},
        tags=["Malkhana"],
    )
    def get(self, request: Request) -> Response:
        items = MalkhanaQueryService.search_items(
            request.query_params.get("query", ""),
            resolve_unit_scope(request.user),
        )
        return Response(MalkhanaItemSerializer(items, many=True).data, status=status.HTTP_200_OK)


class MotherNumberLookupView(APIView):
    """GET /api/malkhana/mother-number/{mother_number}/ — Lookup by permanent number."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Find item by mother number",
        responses={
            200: MalkhanaItemSerializer,
            403: OpenApiResponse(description="Item belongs to another unit."),
            404: OpenApiResponse(description="No item with this mother number."),
        },
        tags=["Malkhana"],
    )
    def get(self, request: Request, mother_number: str) -> Response:
        item = MalkhanaQueryService.find_by_mother_number(
            mother_number, resolve_unit_scope(request.user)
        )
        return Response(MalkhanaItemSerializer(item).data, status=status.HTTP_200_OK)


class YearTransitionView(APIView):
    """
    POST /api/malkhana/year-transition/

    Moves the closed year's ACTIVE Black Ink items into the Red Ink
    register.  Administrators without a unit must pass ``unit_id``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Perform year transition",
        request=YearTransitionRequestSerializer,
        responses={
            200: YearTransitionResponseSerializer,
            400: OpenApiResponse(description="Year lies in the future or no unit supplied."),
        },
        tags=["Malkhana"],
    )
    def post(self, request: Request) -> Response:
        serializer = YearTransitionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        scope = resolve_unit_scope(request.user)
        unit_id = require_unit(scope, serializer.validated_data.get("unit_id"))
        result = YearTransitionService.perform(
            unit_id,
            serializer.validated_data["new_year"],
            request.user,
        )
        return Response(
            YearTransitionResponseSerializer(result.as_dict()).data,
            status=status.HTTP_200_OK,
        )


# ═══════════════════════════════════════════════════════════════════
#  Item ViewSet
# ═══════════════════════════════════════════════════════════════════


class MalkhanaItemViewSet(viewsets.ViewSet):
    """
    /api/malkhana/items/

    Creation, retrieval and lifecycle actions for single items.  The
    registers themselves are listed through the registry-wide views.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Create item",
        description=(
            "Create a Black Ink item (auto-numbered) or back-file a Red Ink item "
            "(requires `mother_number` and `registry_year`)."
        ),
        request=MalkhanaItemCreateSerializer,
        responses={
            201: OpenApiResponse(response=MalkhanaItemSerializer, description="Item created."),
            400: OpenApiResponse(description="Validation error."),
            409: OpenApiResponse(description="Mother number already exists."),
        },
        tags=["Malkhana Items"],
    )
    def create(self, request: Request) -> Response:
        """POST /api/malkhana/items/"""
        serializer = MalkhanaItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = MalkhanaItemService.create_item(
            serializer.validated_data,
            resolve_unit_scope(request.user),
            request.user,
        )
        return Response(MalkhanaItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve item",
        responses={200: MalkhanaItemSerializer},
        tags=["Malkhana Items"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        """GET /api/malkhana/items/{id}/"""
        item = MalkhanaQueryService.get_item(pk, resolve_unit_scope(request.user))
        return Response(MalkhanaItemSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update item",
        request=MalkhanaItemUpdateSerializer,
        responses={
            200: OpenApiResponse(response=MalkhanaItemSerializer, description="Item updated."),
            422: OpenApiResponse(description="Item is disposed, or status=DISPOSED was requested."),
        },
        tags=["Malkhana Items"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        """PATCH /api/malkhana/items/{id}/"""
        serializer = MalkhanaItemUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        item = MalkhanaItemService.update_item(
            pk,
            serializer.validated_data,
            resolve_unit_scope(request.user),
            request.user,
        )
        return Response(MalkhanaItemSerializer(item).data, status=status.HTTP_200_OK)

    # ── Lifecycle @actions ───────────────────────────────────────────

    @action(detail=True, methods=["post"], url_path="dispose")
    @extend_schema(
        summary="Dispose item",
        description="Dispose of an item. Disposing a Red Ink item renumbers the items filed after it.",
        request=DisposeItemSerializer,
        responses={
            200: OpenApiResponse(response=MalkhanaItemSerializer, description="Item disposed."),
            422: OpenApiResponse(description="Item already disposed."),
        },
        tags=["Malkhana Items"],
    )
    def dispose(self, request: Request, pk: str = None) -> Response:
        serializer = DisposeItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = MalkhanaItemService.dispose_item(
            pk,
            serializer.validated_data,
            resolve_unit_scope(request.user),
            request.user,
        )
        return Response(MalkhanaItemSerializer(item).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="assign-shelf")
    @extend_schema(
        summary="Assign item to shelf",
        request=AssignShelfSerializer,
        responses={
            200: OpenApiResponse(response=MalkhanaItemSerializer, description="Item filed on shelf."),
            403: OpenApiResponse(description="Shelf belongs to another unit."),
            422: OpenApiResponse(description="Item is disposed."),
        },
        tags=["Malkhana Items"],
    )
    def assign_shelf(self, request: Request, pk: str = None) -> Response:
        serializer = AssignShelfSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = MalkhanaItemService.assign_to_shelf(
            pk,
            serializer.validated_data["shelf_id"],
            resolve_unit_scope(request.user),
            request.user,
        )
        return Response(MalkhanaItemSerializer(item).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="qr-code")
    @extend_schema(
        summary="Generate item QR code URL",
        request=None,
        responses={200: QRCodeResponseSerializer},
        tags=["Malkhana Items"],
    )
    def qr_code(self, request: Request, pk: str = None) -> Response:
        url = MalkhanaItemService.generate_qr_code(pk, resolve_unit_scope(request.user))
        return Response({"qr_code_url": url}, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Shelf ViewSet
# ═══════════════════════════════════════════════════════════════════


class ShelfViewSet(viewsets.ViewSet):
    """/api/malkhana/shelves/ — Shelf management for the caller's unit."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List shelves",
        responses={200: ShelfSerializer(many=True)},
        tags=["Malkhana Shelves"],
    )
    def list(self, request: Request) -> Response:
        shelves = ShelfService.list_shelves(resolve_unit_scope(request.user))
        return Response(ShelfSerializer(shelves, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create shelf",
        request=ShelfCreateSerializer,
        responses={201: ShelfSerializer},
        tags=["Malkhana Shelves"],
    )
    def create(self, request: Request) -> Response:
        serializer = ShelfCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shelf = ShelfService.create_shelf(serializer.validated_data, resolve_unit_scope(request.user))
        return Response(ShelfSerializer(shelf).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve shelf",
        responses={200: ShelfSerializer},
        tags=["Malkhana Shelves"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        shelf = ShelfService.get_shelf(pk, resolve_unit_scope(request.user))
        return Response(ShelfSerializer(shelf).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update shelf",
        request=ShelfUpdateSerializer,
        responses={200: ShelfSerializer},
        tags=["Malkhana Shelves"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ShelfUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        shelf = ShelfService.update_shelf(pk, serializer.validated_data, resolve_unit_scope(request.user))
        return Response(ShelfSerializer(shelf).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete shelf",
        responses={
            204: OpenApiResponse(description="Deleted."),
            409: OpenApiResponse(description="Shelf still holds items."),
        },
        tags=["Malkhana Shelves"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ShelfService.delete_shelf(pk, resolve_unit_scope(request.user))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"], url_path="items")
    @extend_schema(
        summary="Items on shelf",
        responses={200: MalkhanaItemSerializer(many=True)},
        tags=["Malkhana Shelves"],
    )
    def items(self, request: Request, pk: str = None) -> Response:
        items = ShelfService.list_items(pk, resolve_unit_scope(request.user))
        return Response(MalkhanaItemSerializer(items, many=True).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="qr-code")
    @extend_schema(
        summary="Generate shelf QR code URL",
        request=None,
        responses={200: QRCodeResponseSerializer},
        tags=["Malkhana Shelves"],
    )
    def qr_code(self, request: Request, pk: str = None) -> Response:
        url = ShelfService.generate_qr_code(pk, resolve_unit_scope(request.user))
        return Response({"qr_code_url": url}, status=status.HTTP_200_OK)
