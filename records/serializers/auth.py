from django.contrib.auth import password_validation
from rest_framework import serializers

from ..models import Doctor, Profile, User
from .common import CleanTextMixin, ref


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required.')
        return v


class RegisterSerializer(CleanTextMixin, serializers.Serializer):
    clean_fields = ('full_name', 'phone', 'department')
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    full_name = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=Profile.ROLE_CHOICES, required=False, default=Profile.DEFAULT_ROLE)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, allow_null=True)
    department = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)

    def validate_email(self, v):
        v = v.strip().lower()
        if User.objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return v

    def validate(self, attrs):
        attrs = super().validate(attrs)
        candidate = User(username=attrs['email'], email=attrs['email'], first_name=attrs.get('full_name') or '')
        password_validation.validate_password(attrs['password'], candidate)
        return attrs


class RefreshSerializer(serializers.Serializer):
    refresh_token = serializers.CharField()


class ProfileSerializer(CleanTextMixin, serializers.ModelSerializer):
    """Profile as seen by its owner.  ``role`` and ``email`` are not self-editable."""
    clean_fields = ('full_name', 'phone', 'department')
    id = serializers.UUIDField(source='user_id', read_only=True)
    doctor_id = ref(Doctor, 'doctor', required=False)

    class Meta:
        model = Profile
        fields = ['id', 'email', 'full_name', 'role', 'phone', 'department', 'doctor_id', 'created_at', 'updated_at']
        read_only_fields = ['email', 'role', 'created_at', 'updated_at']
