# users/views/addresses.py

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import PERM_USERS_VIEW
from users.models import Address
from users.ownership import resolve_owner
from users.serializers import AddressSerializer


class AddressListView(APIView):
    """
    GET  /users/<id>/addresses/   owner, or staff holding users:view
    POST /users/<id>/addresses/   owner only
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: AddressSerializer(many=True)})
    def get(self, request, user_id):
        owner = resolve_owner(request, user_id, staff_permission=PERM_USERS_VIEW)
        addresses = Address.objects.filter(user=owner)
        return Response(AddressSerializer(addresses, many=True).data)

    @extend_schema(request=AddressSerializer, responses={201: AddressSerializer})
    def post(self, request, user_id):
        owner = resolve_owner(request, user_id)
        serializer = AddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        address = serializer.save(user=owner)
        return Response(AddressSerializer(address).data, status=status.HTTP_201_CREATED)


class AddressDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def _get(self, owner, address_id):
        return get_object_or_404(Address, pk=address_id, user=owner)

    @extend_schema(responses={200: AddressSerializer})
    def get(self, request, user_id, address_id):
        owner = resolve_owner(request, user_id, staff_permission=PERM_USERS_VIEW)
        return Response(AddressSerializer(self._get(owner, address_id)).data)

    def _update(self, request, user_id, address_id, *, partial):
        owner = resolve_owner(request, user_id)
        address = self._get(owner, address_id)
        serializer = AddressSerializer(address, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    @extend_schema(request=AddressSerializer, responses={200: AddressSerializer})
    def put(self, request, user_id, address_id):
        return self._update(request, user_id, address_id, partial=False)

    @extend_schema(request=AddressSerializer, responses={200: AddressSerializer})
    def patch(self, request, user_id, address_id):
        return self._update(request, user_id, address_id, partial=True)

    @extend_schema(responses={204: None})
    def delete(self, request, user_id, address_id):
        owner = resolve_owner(request, user_id)
        self._get(owner, address_id).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
