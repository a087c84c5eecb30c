"""
Serializers for the gym scheduling API.
"""

from rest_framework import serializers

from .models import Booking, Category, GymSession, Member, Membership, Plan, Trainer
from .normalizer import DEFAULT_CAPACITY, SessionTimeInput
from .types import SubscriptionData


TIME_OF_DAY_REGEX = r'^([01]\d|2[0-3]):[0-5]\d$'


class CategoryReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Category (output)."""

    class Meta:
        model = Category
        fields = ['id', 'name']


class CategoryCreateSerializer(serializers.Serializer):
    """
    Serializer for creating a category.

    Accepts either 'name' or 'category_name'.
    """

    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    category_name = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate(self, data):
        name = data.get('name') or data.get('category_name') or ''
        return {'name': name}


class TrainerReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Trainer (output)."""

    specialties = serializers.ListField(source='specialty_list', child=serializers.CharField())
    sessions = serializers.SerializerMethodField()

    class Meta:
        model = Trainer
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'specialties',
            'rating',
            'sessions',
            'status',
            'avatar',
        ]

    def get_sessions(self, obj):
        return obj.sessions.count()


class TrainerWriteSerializer(serializers.Serializer):
    """Serializer for creating/updating a trainer (input)."""

    name = serializers.CharField(max_length=200, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    specialties = serializers.ListField(child=serializers.CharField(), required=False)
    status = serializers.ChoiceField(choices=['active', 'inactive'], required=False)
    avatar = serializers.URLField(required=False, allow_blank=True)


class MemberReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Member (output)."""

    class Meta:
        model = Member
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'plan',
            'status',
            'join_date',
            'avatar',
        ]


class MemberWriteSerializer(serializers.Serializer):
    """Serializer for creating/updating a member (input)."""

    name = serializers.CharField(max_length=200, required=False)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    plan = serializers.CharField(max_length=50, required=False)
    status = serializers.ChoiceField(choices=['active', 'expired', 'pending'], required=False)
    avatar = serializers.URLField(required=False, allow_blank=True)


class MemberQuerySerializer(serializers.Serializer):
    """Serializer for member list filter parameters."""

    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(
        choices=['active', 'expired', 'pending'],
        required=False,
        allow_null=True
    )


class GymSessionReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying GymSession (output)."""

    trainer_id = serializers.IntegerField(allow_null=True)
    trainer_name = serializers.SerializerMethodField()
    category_id = serializers.IntegerField(allow_null=True)
    category_name = serializers.SerializerMethodField()
    booked = serializers.IntegerField()
    spots_left = serializers.IntegerField()

    class Meta:
        model = GymSession
        fields = [
            'id',
            'name',
            'trainer_id',
            'trainer_name',
            'category_id',
            'category_name',
            'start_date',
            'end_date',
            'capacity',
            'booked',
            'spots_left',
            'status',
        ]

    def get_trainer_name(self, obj):
        return obj.trainer.name if obj.trainer else 'No trainer'

    def get_category_name(self, obj):
        return obj.category.name if obj.category else 'No category'


class GymSessionFormSerializer(serializers.Serializer):
    """
    Serializer for the session form (input).

    Times are 24-hour zero-padded HH:MM strings. Capacity is taken as
    entered; range is enforced by clamping, not here.
    """

    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    trainer_id = serializers.IntegerField(required=False, allow_null=True)
    category_id = serializers.IntegerField(required=False, allow_null=True)
    start_time = serializers.RegexField(TIME_OF_DAY_REGEX)
    end_time = serializers.RegexField(TIME_OF_DAY_REGEX)
    capacity = serializers.IntegerField(required=False, default=DEFAULT_CAPACITY)
    status = serializers.ChoiceField(
        choices=['upcoming', 'ongoing', 'completed'],
        required=False,
        allow_null=True
    )

    def to_form(self) -> SessionTimeInput:
        data = self.validated_data
        return SessionTimeInput(
            name=data['name'],
            start_time=data['start_time'],
            end_time=data['end_time'],
            capacity_raw=data['capacity'],
            trainer_id=data.get('trainer_id'),
            category_id=data.get('category_id'),
        )


class BookingReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Booking (output)."""

    session = GymSessionReadSerializer()
    member_id = serializers.IntegerField()
    member_name = serializers.CharField(source='member.name')
    member_avatar = serializers.CharField(source='member.avatar')
    attendance = serializers.CharField(source='attendance_label')

    class Meta:
        model = Booking
        fields = [
            'id',
            'session',
            'member_id',
            'member_name',
            'member_avatar',
            'is_attended',
            'attendance',
            'created_at',
        ]


class BookingCreateSerializer(serializers.Serializer):
    """Serializer for booking a member onto a session."""

    session_id = serializers.IntegerField()
    member_id = serializers.IntegerField()


class BookingQuerySerializer(serializers.Serializer):
    """Serializer for booking list filter parameters."""

    when = serializers.ChoiceField(
        choices=['all', 'today', 'upcoming', 'past'],
        required=False,
        default='all'
    )


class AttendanceSerializer(serializers.Serializer):
    """Serializer for recording attendance; null resets to pending."""

    is_attended = serializers.BooleanField(allow_null=True)


class RegistrationCheckSerializer(serializers.Serializer):
    """Serializer for registration form values to be checked."""

    name = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)
    email = serializers.CharField(required=False, allow_blank=True, default='')
    password = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)
    confirm_password = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)


class LoginCheckSerializer(serializers.Serializer):
    """Serializer for login form values to be checked."""

    email = serializers.CharField(required=False, allow_blank=True, default='')
    password = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)


class PlanReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Plan (output)."""

    price = serializers.DecimalField(max_digits=8, decimal_places=2, coerce_to_string=False)
    duration = serializers.IntegerField(source='duration_months')

    class Meta:
        model = Plan
        fields = ['id', 'name', 'price', 'duration']


class PlanCreateSerializer(serializers.Serializer):
    """Serializer for creating a plan."""

    name = serializers.CharField(max_length=50, allow_blank=True)
    price = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    duration = serializers.IntegerField(min_value=1, required=False, default=1)


class MembershipCreateSerializer(serializers.Serializer):
    """
    Serializer for subscribing a member to a plan.

    Keys may be snake_case or the camelCase the member app sends
    (startDate, fullName, dateOfBirth, ...). The end date always comes from
    the plan's duration, so an endDate key is ignored. Blank personal details
    pass through here and are reported by the subscription checks.
    """

    CAMEL_CASE_KEYS = {
        'startDate': 'start_date',
        'paymentMethod': 'payment_method',
        'fullName': 'full_name',
        'dateOfBirth': 'date_of_birth',
        'bloodType': 'blood_type',
    }

    plan_id = serializers.IntegerField()
    member_id = serializers.IntegerField()
    start_date = serializers.DateField(
        required=False,
        allow_null=True,
        default=None,
        input_formats=['iso-8601', '%Y-%m-%dT%H:%M:%S.%fZ']
    )
    payment_method = serializers.ChoiceField(
        choices=Membership.PAYMENT_METHOD_CHOICES,
        required=False,
        allow_blank=True,
        default=''
    )
    full_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default='')
    gender = serializers.ChoiceField(
        choices=Membership.GENDER_CHOICES,
        required=False,
        allow_blank=True,
        default=''
    )
    date_of_birth = serializers.DateField(required=False, allow_null=True, default=None)
    height = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    weight = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    blood_type = serializers.CharField(max_length=5, required=False, allow_blank=True, default='')

    def to_internal_value(self, data):
        data = {self.CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}
        return super().to_internal_value(data)

    def to_details(self):
        data = self.validated_data
        return SubscriptionData(
            full_name=data['full_name'],
            phone=data['phone'],
            gender=data['gender'],
            date_of_birth=data['date_of_birth'],
            payment_method=data['payment_method'],
            height=data['height'],
            weight=data['weight'],
            blood_type=data['blood_type'],
        )


class MembershipReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Membership (output), keyed the way the member dashboard reads it."""

    member_id = serializers.IntegerField()
    plan_id = serializers.IntegerField()
    planName = serializers.CharField(source='plan.name')
    price = serializers.DecimalField(
        source='plan.price',
        max_digits=8,
        decimal_places=2,
        coerce_to_string=False
    )
    startDate = serializers.DateField(source='start_date')
    endDate = serializers.DateField(source='end_date')
    paymentMethod = serializers.CharField(source='payment_method')
    fullName = serializers.CharField(source='full_name')
    dateOfBirth = serializers.DateField(source='date_of_birth')
    bloodType = serializers.CharField(source='blood_type')

    class Meta:
        model = Membership
        fields = [
            'id',
            'member_id',
            'plan_id',
            'planName',
            'price',
            'startDate',
            'endDate',
            'paymentMethod',
            'fullName',
            'phone',
            'gender',
            'dateOfBirth',
            'height',
            'weight',
            'bloodType',
        ]
