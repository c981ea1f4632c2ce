from rest_framework import serializers
from django.contrib.auth.models import Group
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from .models import User, Setting, AuditLog
from .permissions import APPLICATION_ROLES, SELF_ASSIGNABLE_ROLES


class UserSerializer(serializers.ModelSerializer):
    groups = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'full_name', 'first_name', 'last_name', 'phone',
                  'is_active', 'is_staff', 'is_superuser', 'groups', 'last_login', 'created_at', 'updated_at']
        read_only_fields = ['last_login', 'created_at', 'updated_at']

    def get_groups(self, obj):
        return list(obj.groups.values_list('name', flat=True))


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    password_confirm = serializers.CharField(write_only=True)
    roles = serializers.ListField(
        child=serializers.ChoiceField(choices=APPLICATION_ROLES), required=False, write_only=True
    )

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm', 'full_name', 'first_name',
                  'last_name', 'phone', 'roles']

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        candidate = User(username=attrs.get('username'), email=attrs.get('email', ''))
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({"password": list(e.messages)})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        roles = validated_data.pop('roles', [])
        password = validated_data.pop('password')
        user = User.objects.create(**validated_data, is_active=True)
        user.set_password(password)
        user.save()
        for role in roles:
            group, _ = Group.objects.get_or_create(name=role)
            user.groups.add(group)
        return user


class RegisterSerializer(UserCreateSerializer):
    """Self-service signup: exactly one non-privileged role is required"""
    role = serializers.CharField(write_only=True)
    roles = None

    class Meta(UserCreateSerializer.Meta):
        fields = ['username', 'email', 'password', 'password_confirm', 'full_name', 'phone', 'role']
        extra_kwargs = {'email': {'required': True}, 'full_name': {'required': True}}

    def validate_role(self, value):
        if value not in SELF_ASSIGNABLE_ROLES:
            raise serializers.ValidationError(f"Role '{value}' cannot be self-assigned")
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with this email already exists')
        return value

    def create(self, validated_data):
        validated_data['roles'] = [validated_data.pop('role')]
        return super().create(validated_data)


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    password = serializers.CharField(write_only=True)
    password_confirm = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords do not match"})
        return attrs


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = ['id', 'key', 'value', 'description', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']

    def get_user(self, obj):
        if not obj.user:
            return None
        return {'id': obj.user.id, 'username': obj.user.username, 'full_name': obj.user.full_name}
