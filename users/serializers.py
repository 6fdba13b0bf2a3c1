# ==================== USERS/SERIALIZERS.PY ====================
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import CustomUser, Vehicle
from .validators import (validate_person_name, normalize_phone_number, validate_age as age_in_range,
                         MIN_AGE, MAX_AGE)


def _run_django_validator(validator, value):
    try:
        return validator(value)
    except DjangoValidationError as e:
        raise serializers.ValidationError(e.messages)


class UserRegistrationSerializer(serializers.ModelSerializer):
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.EmailField()
    phone_number = serializers.CharField()
    age = serializers.IntegerField()
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = CustomUser
        fields = ['username', 'email', 'first_name', 'last_name', 'phone_number', 'age',
                  'password', 'password_confirm']

    def validate_first_name(self, value):
        _run_django_validator(validate_person_name, value)
        return value

    def validate_last_name(self, value):
        _run_django_validator(validate_person_name, value)
        return value

    def validate_phone_number(self, value):
        phone = _run_django_validator(normalize_phone_number, value)
        if CustomUser.objects.filter(phone_number=phone).exists():
            raise serializers.ValidationError("This phone number is already registered")
        return phone

    def validate_age(self, value):
        if not age_in_range(value):
            raise serializers.ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}")
        return value

    def validate(self, data):
        if data['password'] != data['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords do not match"})
        try:
            validate_password(data['password'])
        except DjangoValidationError as e:
            raise serializers.ValidationError({"password": e.messages})
        return data

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = CustomUser.objects.create_user(password=password, **validated_data)
        return user


class UserLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data['username'], password=data['password'])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data['user'] = user
        return data


class UserProfileSerializer(serializers.ModelSerializer):
    vehicles = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone_number', 'age',
                  'profile_picture', 'location_enabled', 'phone_verified', 'email_verified',
                  'is_staff', 'vehicles']
        read_only_fields = ['username', 'phone_number', 'phone_verified', 'email_verified', 'is_staff']

    def get_vehicles(self, obj):
        return VehicleSerializer(obj.vehicles.filter(is_active=True), many=True).data

    def validate_first_name(self, value):
        _run_django_validator(validate_person_name, value)
        return value

    def validate_last_name(self, value):
        _run_django_validator(validate_person_name, value)
        return value


class VehicleSerializer(serializers.ModelSerializer):
    wheel_class = serializers.ReadOnlyField()

    class Meta:
        model = Vehicle
        fields = ['id', 'vehicle_type', 'number', 'model', 'wheel_class', 'is_active', 'created_at']
        read_only_fields = ['created_at']

    def validate_number(self, value):
        value = value.upper().replace(' ', '')
        request = self.context.get('request')
        existing = Vehicle.objects.filter(owner=request.user, number=value)
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("You have already registered this vehicle")
        return value


class OTPRequestSerializer(serializers.Serializer):
    phone_number = serializers.CharField()

    def validate_phone_number(self, value):
        return _run_django_validator(normalize_phone_number, value)


class OTPVerifySerializer(OTPRequestSerializer):
    code = serializers.RegexField(r'^\d{6}$')
