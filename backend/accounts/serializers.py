from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Expose the public fields for the custom user model."""

    isHotelOwner = serializers.BooleanField(source="is_hotel_owner", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "isHotelOwner",
            "createdAt",
        ]
        read_only_fields = ["id", "username", "email"]


class RegisterSerializer(serializers.ModelSerializer):
    """Validate and create a user during registration."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    isHotelOwner = serializers.BooleanField(source="is_hotel_owner", required=False, default=False)

    class Meta:
        model = User
        fields = [
            "username",
            "email",
            "password",
            "isHotelOwner",
        ]

    def validate_username(self, value: str) -> str:
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already exists.")
        return value

    def validate_email(self, value: str) -> str:
        return value.lower()

    def create(self, validated_data):
        """Persist the user record with a hashed password."""
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
            is_hotel_owner=validated_data.get("is_hotel_owner", False),
        )


class UsernameTokenObtainPairSerializer(TokenObtainPairSerializer):
    """SimpleJWT pair serializer that also returns the signed-in user."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = UserSerializer(self.user).data
        return data
