# users/serializers.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from permissions.roles import ROLE_CHOICES, ROLE_CUSTOMER, ROLE_SUPER_ADMIN, STAFF_ROLES
from users.models import Address, Session
from users.validators import name_field, password_policy_validator

User = get_user_model()


def _check_email_available(value: str, *, exclude_pk=None) -> str:
    value = (value or "").strip().lower()
    qs = User.objects.filter(email__iexact=value)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise serializers.ValidationError("A user with this email already exists.")
    return value


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=255)
    first_name = name_field()
    last_name = name_field()
    password = serializers.CharField(
        write_only=True,
        validators=[password_policy_validator],
        style={"input_type": "password"},
    )
    confirm_password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate_email(self, value):
        return _check_email_available(value)

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        return attrs

    def create(self, validated_data):
        # Public registration always yields a customer
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data["first_name"],
            last_name=validated_data["last_name"],
            role=ROLE_CUSTOMER,
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """
    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "role",
            "email_verified",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


# ---------------- ME (SELF-SERVICE) ----------------
class MeUpdateSerializer(serializers.Serializer):
    first_name = name_field(required=False)
    last_name = name_field(required=False)
    email = serializers.EmailField(max_length=255, required=False)

    def validate_email(self, value):
        user = self.context["request"].user
        return _check_email_available(value, exclude_pk=user.pk)


# ---------------- ADMIN USER CRUD ----------------
class AdminUserSerializer(serializers.ModelSerializer):
    """
    Back-office user management.
    - password required on create, optional on update
    - is_staff / is_superuser follow the role
    """

    first_name = name_field()
    last_name = name_field()
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)
    password = serializers.CharField(
        write_only=True,
        required=False,
        validators=[password_policy_validator],
        style={"input_type": "password"},
    )

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "role",
            "is_active",
            "email_verified",
            "password",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"email": {"validators": []}}

    def validate_email(self, value):
        return _check_email_available(value, exclude_pk=getattr(self.instance, "pk", None))

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        role = validated_data.pop("role", ROLE_CUSTOMER)
        return User.objects.create_user(
            password=password,
            role=role,
            is_staff=role in STAFF_ROLES,
            is_superuser=role == ROLE_SUPER_ADMIN,
            **validated_data,
        )

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if "role" in validated_data:
            instance.is_staff = instance.role in STAFF_ROLES
            instance.is_superuser = instance.role == ROLE_SUPER_ADMIN

        if password:
            instance.set_password(password)

        instance.save()
        return instance


# ---------------- EMAIL VERIFICATION / PASSWORD RESET ----------------
class TokenSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)
    password = serializers.CharField(
        write_only=True,
        validators=[password_policy_validator],
        style={"input_type": "password"},
    )
    confirm_password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        return attrs


# ---------------- SESSIONS ----------------
class SessionSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Session
        fields = ["session_token", "user_id", "expires_at", "created_at"]
        read_only_fields = fields


# ---------------- ADDRESSES ----------------
class AddressSerializer(serializers.ModelSerializer):
    first_name = name_field()
    last_name = name_field()

    class Meta:
        model = Address
        fields = [
            "id",
            "first_name",
            "last_name",
            "address1",
            "address2",
            "postal_code",
            "city",
            "region",
            "country",
            "mobile_phone",
            "is_default_billing",
            "is_default_shipping",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
