"""Views for the gym scheduling API."""

from datetime import date, datetime

from django.shortcuts import get_object_or_404

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import SessionValidationError, SubscriptionValidationError
from .models import Booking, Category, GymSession, Member, Plan, Trainer
from .serializers import (
    AttendanceSerializer,
    BookingCreateSerializer,
    BookingQuerySerializer,
    BookingReadSerializer,
    CategoryCreateSerializer,
    CategoryReadSerializer,
    GymSessionFormSerializer,
    GymSessionReadSerializer,
    LoginCheckSerializer,
    MemberQuerySerializer,
    MemberReadSerializer,
    MemberWriteSerializer,
    MembershipCreateSerializer,
    MembershipReadSerializer,
    PlanCreateSerializer,
    PlanReadSerializer,
    RegistrationCheckSerializer,
    TrainerReadSerializer,
    TrainerWriteSerializer,
)
from . import services
from .types import MemberData, TrainerData
from .validators import password_checks, validate_login, validate_registration


def _error(message, code='invalid'):
    return Response({'error': message, 'code': code}, status=status.HTTP_400_BAD_REQUEST)


def _form_payload(form):
    return {
        'name': form.name,
        'trainer_id': form.trainer_id,
        'category_id': form.category_id,
        'start_time': form.start_time,
        'end_time': form.end_time,
        'capacity': form.capacity_raw,
    }


class GymSessionListCreateView(APIView):
    """
    List all sessions or create a new one.

    GET /api/sessions/ - List sessions
    POST /api/sessions/ - Create a session from the session form
    """

    def get(self, request):
        """List all sessions with their booked counts."""
        sessions = GymSession.objects.with_booked_count().select_related('trainer', 'category')
        serializer = GymSessionReadSerializer(sessions, many=True)
        return Response({'data': serializer.data})

    def post(self, request):
        """Create a session anchored to today's date."""
        serializer = GymSessionFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = services.save_session(
                serializer.to_form(),
                status=serializer.validated_data.get('status')
            )
        except SessionValidationError as exc:
            return _error(exc.message, exc.code)
        except ValueError as exc:
            return _error(str(exc))

        response_serializer = GymSessionReadSerializer(session)
        return Response({'data': response_serializer.data}, status=status.HTTP_201_CREATED)


class GymSessionFormDefaultsView(APIView):
    """
    Values the new-session form opens with.

    GET /api/sessions/form/
    """

    def get(self, request):
        form = services.session_form_initial()
        return Response({'data': _form_payload(form)})


class GymSessionDetailView(APIView):
    """
    Retrieve, update, or delete a session.

    GET /api/sessions/{id}/ - Retrieve session
    PUT /api/sessions/{id}/ - Update session (its calendar date is kept)
    DELETE /api/sessions/{id}/ - Delete session
    """

    def get(self, request, pk):
        """Retrieve a session together with its form values."""
        session = get_object_or_404(GymSession, pk=pk)
        form = services.session_form_initial(session)
        return Response({
            'data': GymSessionReadSerializer(session).data,
            'form': _form_payload(form),
        })

    def put(self, request, pk):
        """Update a session from the session form."""
        session = get_object_or_404(GymSession, pk=pk)
        serializer = GymSessionFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            updated_session = services.save_session(
                serializer.to_form(),
                session=session,
                status=serializer.validated_data.get('status')
            )
        except SessionValidationError as exc:
            return _error(exc.message, exc.code)
        except ValueError as exc:
            return _error(str(exc))

        response_serializer = GymSessionReadSerializer(updated_session)
        return Response({'data': response_serializer.data})

    def delete(self, request, pk):
        """Delete a session."""
        session = get_object_or_404(GymSession, pk=pk)
        name = session.name
        services.delete_session(session)

        return Response({
            'message': f'Session "{name}" has been deleted.'
        }, status=status.HTTP_200_OK)


class CategoryListCreateView(APIView):
    """
    List all categories or create a new one.

    GET /api/categories/
    POST /api/categories/
    """

    def get(self, request):
        categories = Category.objects.all()
        serializer = CategoryReadSerializer(categories, many=True)
        return Response({'data': serializer.data})

    def post(self, request):
        serializer = CategoryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            category = services.create_category(serializer.validated_data['name'])
        except ValueError as exc:
            return _error(str(exc))

        return Response(
            {'data': CategoryReadSerializer(category).data},
            status=status.HTTP_201_CREATED
        )


class CategoryDetailView(APIView):
    """
    Delete a category.

    DELETE /api/categories/{id}/
    """

    def delete(self, request, pk):
        category = get_object_or_404(Category, pk=pk)
        name = category.name
        services.delete_category(category)

        return Response({
            'message': f'Category "{name}" has been deleted.'
        }, status=status.HTTP_200_OK)


class TrainerListCreateView(APIView):
    """
    List all trainers or create a new one.

    GET /api/trainers/
    POST /api/trainers/
    """

    def get(self, request):
        trainers = Trainer.objects.all()
        serializer = TrainerReadSerializer(trainers, many=True)
        return Response({'data': serializer.data})

    def post(self, request):
        serializer = TrainerWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            trainer = services.save_trainer(TrainerData(**serializer.validated_data))
        except ValueError as exc:
            return _error(str(exc))

        return Response(
            {'data': TrainerReadSerializer(trainer).data},
            status=status.HTTP_201_CREATED
        )


class TrainerDetailView(APIView):
    """
    Retrieve, update, or delete a trainer.

    GET /api/trainers/{id}/ - Trainer with their sessions
    PUT /api/trainers/{id}/
    DELETE /api/trainers/{id}/
    """

    def get(self, request, pk):
        trainer = get_object_or_404(Trainer, pk=pk)
        sessions = GymSession.objects.for_trainer(trainer).with_booked_count()
        return Response({
            'data': TrainerReadSerializer(trainer).data,
            'sessions': GymSessionReadSerializer(sessions, many=True).data,
        })

    def put(self, request, pk):
        trainer = get_object_or_404(Trainer, pk=pk)
        serializer = TrainerWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        updated_trainer = services.save_trainer(
            TrainerData(**serializer.validated_data),
            trainer=trainer
        )
        return Response({'data': TrainerReadSerializer(updated_trainer).data})

    def delete(self, request, pk):
        trainer = get_object_or_404(Trainer, pk=pk)
        name = trainer.name
        services.delete_trainer(trainer)

        return Response({
            'message': f'Trainer "{name}" has been deleted.'
        }, status=status.HTTP_200_OK)


class MemberListCreateView(APIView):
    """
    List members, optionally filtered, or create a new one.

    GET /api/members/?search=X&status=Y
    POST /api/members/
    """

    def get(self, request):
        query_serializer = MemberQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        members = Member.objects.search(query_serializer.validated_data.get('search'))
        status_filter = query_serializer.validated_data.get('status')
        if status_filter:
            members = members.with_status(status_filter)

        serializer = MemberReadSerializer(members, many=True)
        return Response({'data': serializer.data, 'total': Member.objects.count()})

    def post(self, request):
        serializer = MemberWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            member = services.save_member(MemberData(**serializer.validated_data))
        except ValueError as exc:
            return _error(str(exc))

        return Response(
            {'data': MemberReadSerializer(member).data},
            status=status.HTTP_201_CREATED
        )


class MemberDetailView(APIView):
    """
    Retrieve, update, or delete a member.

    GET /api/members/{id}/
    PUT /api/members/{id}/
    DELETE /api/members/{id}/
    """

    def get(self, request, pk):
        member = get_object_or_404(Member, pk=pk)
        return Response({'data': MemberReadSerializer(member).data})

    def put(self, request, pk):
        member = get_object_or_404(Member, pk=pk)
        serializer = MemberWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            updated_member = services.save_member(
                MemberData(**serializer.validated_data),
                member=member
            )
        except ValueError as exc:
            return _error(str(exc))

        return Response({'data': MemberReadSerializer(updated_member).data})

    def delete(self, request, pk):
        member = get_object_or_404(Member, pk=pk)
        name = member.name
        services.delete_member(member)

        return Response({
            'message': f'Member "{name}" has been deleted.'
        }, status=status.HTTP_200_OK)


class BookingListCreateView(APIView):
    """
    List bookings or book a member onto a session.

    GET /api/bookings/?when=all|today|upcoming|past
    POST /api/bookings/
    """

    def get(self, request):
        query_serializer = BookingQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        bookings = Booking.objects.select_related('session', 'member', 'session__trainer', 'session__category')
        when = query_serializer.validated_data['when']
        now = datetime.now()
        if when == 'today':
            bookings = bookings.on_date(date.today())
        elif when == 'upcoming':
            bookings = bookings.starting_after(now)
        elif when == 'past':
            bookings = bookings.starting_before(now)

        serializer = BookingReadSerializer(bookings, many=True)
        return Response({'data': serializer.data})

    def post(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = get_object_or_404(GymSession, pk=serializer.validated_data['session_id'])
        member = get_object_or_404(Member, pk=serializer.validated_data['member_id'])

        try:
            booking = services.book_session(session, member)
        except ValueError as exc:
            return _error(str(exc))

        return Response(
            {'data': BookingReadSerializer(booking).data},
            status=status.HTTP_201_CREATED
        )


class BookingAttendanceView(APIView):
    """
    Record attendance for a booking.

    POST /api/bookings/{id}/attendance/
    """

    def post(self, request, pk):
        booking = get_object_or_404(Booking, pk=pk)
        serializer = AttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        services.mark_attendance(booking, serializer.validated_data['is_attended'])

        return Response({'data': BookingReadSerializer(booking).data})


class BookingSummaryView(APIView):
    """
    Attendance counts for the bookings dashboard.

    GET /api/bookings/summary/ - Counts for today's sessions
    GET /api/bookings/summary/?scope=all - Counts across all bookings
    """

    def get(self, request):
        on_date = None if request.query_params.get('scope') == 'all' else date.today()
        summary = services.attendance_summary(on_date=on_date)
        return Response({
            'data': {
                'attended': summary.attended,
                'pending': summary.pending,
                'missed': summary.missed,
                'total': summary.total,
            }
        })


class RegistrationCheckView(APIView):
    """
    Check registration form values without creating an account.

    POST /api/auth/validate-registration/
    """

    def post(self, request):
        serializer = RegistrationCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = validate_registration(
            data['name'],
            data['email'],
            data['password'],
            data['confirm_password']
        )
        return Response({
            'valid': result.is_valid,
            'errors': result.errors,
            'password_checks': password_checks(data['password']),
        }, status=status.HTTP_200_OK if result.is_valid else status.HTTP_400_BAD_REQUEST)


class LoginCheckView(APIView):
    """
    Check login form values without signing in.

    POST /api/auth/validate-login/
    """

    def post(self, request):
        serializer = LoginCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = validate_login(data['email'], data['password'])
        return Response({
            'valid': result.is_valid,
            'errors': result.errors,
        }, status=status.HTTP_200_OK if result.is_valid else status.HTTP_400_BAD_REQUEST)


class PlanListCreateView(APIView):
    """
    List all plans or create a new one.

    GET /api/plans/ - List plans, cheapest first
    POST /api/plans/ - Create a plan
    """

    def get(self, request):
        serializer = PlanReadSerializer(Plan.objects.all(), many=True)
        return Response({'data': serializer.data})

    def post(self, request):
        serializer = PlanCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            plan = services.create_plan(data['name'], data['price'], data['duration'])
        except ValueError as exc:
            return _error(str(exc))

        return Response({'data': PlanReadSerializer(plan).data}, status=status.HTTP_201_CREATED)


class MembershipCreateView(APIView):
    """
    Subscribe a member to a plan.

    POST /api/memberships/
    """

    def post(self, request):
        serializer = MembershipCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        member = get_object_or_404(Member, pk=serializer.validated_data['member_id'])
        plan = get_object_or_404(Plan, pk=serializer.validated_data['plan_id'])

        try:
            membership = services.subscribe(
                member,
                plan,
                serializer.to_details(),
                start=serializer.validated_data['start_date']
            )
        except SubscriptionValidationError as exc:
            return Response({
                'error': exc.message,
                'code': exc.code,
                'errors': exc.errors,
            }, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {'data': MembershipReadSerializer(membership).data},
            status=status.HTTP_201_CREATED
        )


class MemberMembershipView(APIView):
    """
    Retrieve a member's current subscription.

    GET /api/memberships/{member_id}/
    """

    def get(self, request, member_id):
        member = get_object_or_404(Member, pk=member_id)
        membership = services.current_membership(member)
        if membership is None:
            return Response(
                {'error': 'Member has no subscription', 'code': 'not_subscribed'},
                status=status.HTTP_404_NOT_FOUND
            )

        data = MembershipReadSerializer(membership).data
        data['is_active'] = membership.is_active_on(date.today())
        return Response({'data': data})
