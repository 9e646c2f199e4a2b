from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import PROFILE_IMAGE_EXTENSIONS, PROFILE_IMAGE_MAX_BYTES
from . import services

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    profile_image = serializers.SerializerMethodField()
    profile_image_url = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            'id', 'name', 'email', 'username', 'position',
            'phone', 'gender', 'birth_date', 'nationality', 'civil_status', 'address',
            'employee_id', 'last_login_at', 'profile_completed',
            'profile_image', 'profile_image_url',
        )
        read_only_fields = fields

    def get_profile_image(self, obj):
        return obj.profile_image.name if obj.profile_image else None

    def get_profile_image_url(self, obj):
        if not obj.profile_image:
            return None
        url = obj.profile_image.url
        request = self.context.get('request')
        return request.build_absolute_uri(url) if request is not None else url


class RegisterSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=6)
    position = serializers.ChoiceField(choices=User.Position.choices)

    class Meta:
        model = User
        fields = ('name', 'email', 'username', 'password', 'position')
        extra_kwargs = {'email': {'required': True}}

    def create(self, validated_data):
        return services.register_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    # email or username
    email = serializers.CharField()
    password = serializers.CharField(write_only=True)


class ProfileSerializer(serializers.ModelSerializer):
    profile_image = serializers.FileField(required=False, allow_null=True)

    class Meta:
        model = User
        fields = (
            'name', 'phone', 'gender', 'birth_date', 'nationality',
            'civil_status', 'address', 'email', 'profile_image',
        )
        extra_kwargs = {
            'name': {'required': False, 'allow_blank': False},
            'phone': {'required': False},
            'gender': {'required': False},
            'birth_date': {'required': False},
            'nationality': {'required': False},
            'civil_status': {'required': False},
            'address': {'required': False},
            'email': {'required': False},
        }

    def validate(self, attrs):
        # blank form inputs mean "not provided"
        for name in services.PROFILE_REQUIRED_FIELDS:
            if name != 'name' and isinstance(attrs.get(name), str) and not attrs[name].strip():
                attrs[name] = None
        return attrs

    def validate_profile_image(self, value):
        if value is None:
            return value
        extension = value.name.rsplit('.', 1)[-1].lower() if '.' in value.name else ''
        if extension not in PROFILE_IMAGE_EXTENSIONS:
            raise serializers.ValidationError(
                'The profile image must be a file of type: %s.' % ', '.join(PROFILE_IMAGE_EXTENSIONS)
            )
        if value.size > PROFILE_IMAGE_MAX_BYTES:
            raise serializers.ValidationError('The profile image must not be greater than 2048 kilobytes.')
        return value

    def update(self, instance, validated_data):
        return services.update_profile(instance, validated_data)
