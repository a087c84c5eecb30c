"""
Tests for the gym scheduling app.

Tests cover:
- Session time-window normalization (pure functions)
- Models and custom managers
- Service layer (sessions, categories, members, bookings, memberships, status refresh)
- Registration/login/subscription form checks
- API endpoints
- Management commands
"""

import dataclasses
from datetime import date, datetime, timedelta
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from . import services
from .exceptions import EmptyName, InvalidTimeOrder, SubscriptionValidationError
from .models import Booking, Category, GymSession, Member, Membership, Plan, Trainer
from .normalizer import (
    SessionTimeInput,
    clamp_capacity,
    combine,
    extract_date_part,
    extract_time_of_day,
    initial_form,
    validate_and_build,
)
from .types import MemberData, SubscriptionData, TrainerData
from .validators import (
    password_checks,
    validate_login,
    validate_registration,
    validate_subscription,
)


SAMPLE_TIMES = ['00:00', '00:01', '06:30', '08:59', '09:00', '10:00', '12:30', '19:45', '23:59']


def _form(name='Yoga', start='09:00', end='10:00', capacity=10, **kwargs):
    return SessionTimeInput(
        name=name,
        start_time=start,
        end_time=end,
        capacity_raw=capacity,
        **kwargs
    )


def _session(name='Yoga', start=datetime(2024, 6, 1, 9, 0), minutes=60, capacity=10, **kwargs):
    return GymSession.objects.create(
        name=name,
        start_date=start,
        end_date=start + timedelta(minutes=minutes),
        capacity=capacity,
        **kwargs
    )


class ExtractHelperTests(SimpleTestCase):
    """Test timestamp helpers."""

    def test_time_of_day_defaults_when_absent(self):
        self.assertEqual(extract_time_of_day(None), '09:00')
        self.assertEqual(extract_time_of_day(''), '09:00')

    def test_time_of_day_from_timestamp(self):
        self.assertEqual(extract_time_of_day('2024-05-01 14:30:00'), '14:30')

    def test_time_of_day_accepts_iso_separator(self):
        self.assertEqual(extract_time_of_day('2024-05-01T07:05:00'), '07:05')

    def test_time_of_day_defaults_when_malformed(self):
        self.assertEqual(extract_time_of_day('not a timestamp'), '09:00')
        self.assertEqual(extract_time_of_day('2024-05-01'), '09:00')

    def test_date_part_from_timestamp(self):
        self.assertEqual(extract_date_part('2024-01-10 08:00:00'), '2024-01-10')

    def test_date_part_defaults_to_today(self):
        self.assertEqual(extract_date_part(None), date.today().isoformat())

    def test_date_part_uses_injected_today(self):
        self.assertEqual(extract_date_part(None, today=date(2024, 6, 1)), '2024-06-01')
        self.assertEqual(extract_date_part('garbage', today=date(2024, 6, 1)), '2024-06-01')

    def test_combine(self):
        self.assertEqual(combine('2024-06-01', '09:00'), '2024-06-01 09:00:00')


class ValidateAndBuildTests(SimpleTestCase):
    """Test session form validation and time-window building."""

    def test_new_session_scenario(self):
        """Capacity above the maximum is clamped; date is today."""
        window = validate_and_build(
            _form(start='09:00', end='10:00', capacity=30),
            today=date(2024, 6, 1)
        )

        self.assertEqual(window.as_payload(), {
            'start_date': '2024-06-01 09:00:00',
            'end_date': '2024-06-01 10:00:00',
            'capacity': 25,
        })
        self.assertEqual(window.reference_date, '2024-06-01')

    def test_equal_times_rejected(self):
        with self.assertRaises(InvalidTimeOrder) as ctx:
            validate_and_build(_form(start='10:00', end='10:00', capacity=10))
        self.assertEqual(ctx.exception.code, 'invalid_time_order')

    def test_editing_keeps_prior_date(self):
        window = validate_and_build(
            _form(start='09:00', end='11:00'),
            prior_start_timestamp='2024-01-10 08:00:00',
            today=date(2024, 6, 1)
        )

        self.assertEqual(window.reference_date, '2024-01-10')
        self.assertEqual(window.start_datetime, '2024-01-10 09:00:00')
        self.assertEqual(window.end_datetime, '2024-01-10 11:00:00')

    def test_blank_name_rejected(self):
        for name in ['', '   ', '\t']:
            with self.assertRaises(EmptyName):
                validate_and_build(_form(name=name))

    def test_name_checked_before_time_order(self):
        with self.assertRaises(EmptyName):
            validate_and_build(_form(name=' ', start='11:00', end='10:00'))

    def test_rejections_are_value_errors(self):
        with self.assertRaises(ValueError):
            validate_and_build(_form(start='12:00', end='08:00'))

    def test_ordered_pairs_succeed(self):
        for start in SAMPLE_TIMES:
            for end in SAMPLE_TIMES:
                if end <= start:
                    continue
                window = validate_and_build(_form(start=start, end=end), today=date(2024, 6, 1))
                self.assertGreater(window.end_datetime, window.start_datetime)
                self.assertTrue(window.start_datetime.endswith(f'{start}:00'))

    def test_unordered_pairs_rejected(self):
        for start in SAMPLE_TIMES:
            for end in SAMPLE_TIMES:
                if end > start:
                    continue
                with self.assertRaises(InvalidTimeOrder):
                    validate_and_build(_form(start=start, end=end))

    def test_capacity_always_in_range(self):
        for raw in range(-10, 50):
            window = validate_and_build(_form(capacity=raw), today=date(2024, 6, 1))
            self.assertGreaterEqual(window.capacity, 1)
            self.assertLessEqual(window.capacity, 25)
            if 1 <= raw <= 25:
                self.assertEqual(window.capacity, raw)

    def test_clamp_capacity_bounds(self):
        self.assertEqual(clamp_capacity(0), 1)
        self.assertEqual(clamp_capacity(-3), 1)
        self.assertEqual(clamp_capacity(26), 25)
        self.assertEqual(clamp_capacity(12), 12)

    def test_window_is_immutable(self):
        window = validate_and_build(_form(), today=date(2024, 6, 1))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            window.capacity = 3


class InitialFormTests(SimpleTestCase):
    """Test values the session form opens with."""

    def test_new_session_defaults(self):
        form = initial_form()

        self.assertEqual(form.name, '')
        self.assertEqual(form.start_time, '09:00')
        self.assertEqual(form.end_time, '10:00')
        self.assertEqual(form.capacity_raw, 10)

    def test_existing_session_times(self):
        form = initial_form(
            name='Spin',
            start_timestamp='2024-01-10 18:15:00',
            end_timestamp='2024-01-10 19:00:00',
            capacity=12,
            trainer_id=3
        )

        self.assertEqual(form.name, 'Spin')
        self.assertEqual(form.start_time, '18:15')
        self.assertEqual(form.end_time, '19:00')
        self.assertEqual(form.capacity_raw, 12)
        self.assertEqual(form.trainer_id, 3)


class GymSessionModelTests(TestCase):
    """Test GymSession model and validation."""

    def test_create_session(self):
        session = _session()

        self.assertEqual(session.status, 'upcoming')
        self.assertEqual(session.start_timestamp, '2024-06-01 09:00:00')
        self.assertEqual(session.end_timestamp, '2024-06-01 10:00:00')
        self.assertEqual(str(session), 'Yoga - 2024-06-01 09:00')

    def test_end_must_be_after_start(self):
        with self.assertRaises(ValidationError):
            _session(minutes=0)

    def test_capacity_bounds_enforced(self):
        with self.assertRaises(ValidationError):
            _session(capacity=26)
        with self.assertRaises(ValidationError):
            _session(capacity=0)

    def test_missing_capacity_is_a_validation_error(self):
        session = GymSession(
            name='Yoga',
            start_date=datetime(2024, 6, 1, 9, 0),
            end_date=datetime(2024, 6, 1, 10, 0),
            capacity=None
        )

        with self.assertRaises(ValidationError) as ctx:
            session.full_clean()
        self.assertIn('capacity', ctx.exception.message_dict)

    def test_booked_and_spots_left(self):
        session = _session(capacity=2)
        member = Member.objects.create(name='Ann Lee', email='ann@example.com')
        Booking.objects.create(session=session, member=member)

        self.assertEqual(session.booked, 1)
        self.assertEqual(session.spots_left, 1)


class OtherModelTests(TestCase):
    """Test Trainer and Booking helpers."""

    def test_trainer_specialty_list(self):
        trainer = Trainer.objects.create(name='Marcus', specialties='Yoga, HIIT,,Yoga')
        self.assertEqual(trainer.specialty_list, ['Yoga', 'HIIT'])

    def test_booking_attendance_label(self):
        session = _session()
        member = Member.objects.create(name='Ann Lee', email='ann@example.com')
        booking = Booking.objects.create(session=session, member=member)

        self.assertEqual(booking.attendance_label, 'Pending')
        booking.is_attended = True
        self.assertEqual(booking.attendance_label, 'Attended')
        booking.is_attended = False
        self.assertEqual(booking.attendance_label, 'Missed')


class ManagerTests(TestCase):
    """Test custom manager methods."""

    def setUp(self):
        self.trainer = Trainer.objects.create(name='Marcus')
        self.morning = _session('Morning Yoga', datetime(2024, 6, 1, 8, 0), trainer=self.trainer)
        self.evening = _session('Evening HIIT', datetime(2024, 6, 1, 18, 0))
        self.next_day = _session('Spin', datetime(2024, 6, 2, 9, 0), status='completed')

        self.ann = Member.objects.create(name='Ann Lee', email='ann@example.com', phone='555-0101')
        self.bob = Member.objects.create(name='Bob Stone', email='bob@gym.io', status='expired')

    def test_sessions_on_date(self):
        names = list(GymSession.objects.on_date(date(2024, 6, 1)).values_list('name', flat=True))
        self.assertEqual(names, ['Morning Yoga', 'Evening HIIT'])

    def test_upcoming_and_not_completed(self):
        self.assertEqual(GymSession.objects.upcoming().count(), 2)
        self.assertEqual(GymSession.objects.not_completed().count(), 2)

    def test_for_trainer(self):
        self.assertEqual(list(GymSession.objects.for_trainer(self.trainer)), [self.morning])

    def test_with_booked_count(self):
        Booking.objects.create(session=self.morning, member=self.ann)
        Booking.objects.create(session=self.morning, member=self.bob)

        counts = {s.name: s.booked for s in GymSession.objects.with_booked_count()}
        self.assertEqual(counts, {'Morning Yoga': 2, 'Evening HIIT': 0, 'Spin': 0})

    def test_member_search(self):
        self.assertEqual(list(Member.objects.search('ann')), [self.ann])
        self.assertEqual(list(Member.objects.search('GYM.IO')), [self.bob])
        self.assertEqual(list(Member.objects.search('0101')), [self.ann])
        self.assertEqual(Member.objects.search('  ').count(), 2)

    def test_member_status_filter_chains_with_search(self):
        self.assertEqual(list(Member.objects.search('o').with_status('expired')), [self.bob])

    def test_booking_attendance_filters(self):
        Booking.objects.create(session=self.morning, member=self.ann, is_attended=True)
        Booking.objects.create(session=self.evening, member=self.ann, is_attended=False)
        Booking.objects.create(session=self.next_day, member=self.bob)

        self.assertEqual(Booking.objects.attended().count(), 1)
        self.assertEqual(Booking.objects.missed().count(), 1)
        self.assertEqual(Booking.objects.pending().count(), 1)
        self.assertEqual(Booking.objects.on_date(date(2024, 6, 2)).count(), 1)


class SessionServiceTests(TestCase):
    """Test session save/delete services."""

    def setUp(self):
        self.trainer = Trainer.objects.create(name='Marcus')
        self.category = Category.objects.create(name='Yoga')

    def test_create_session(self):
        session = services.save_session(
            _form(capacity=30, trainer_id=self.trainer.pk, category_id=self.category.pk),
            today=date(2024, 6, 1)
        )

        self.assertEqual(session.start_date, datetime(2024, 6, 1, 9, 0))
        self.assertEqual(session.end_date, datetime(2024, 6, 1, 10, 0))
        self.assertEqual(session.capacity, 25)
        self.assertEqual(session.status, 'upcoming')
        self.assertEqual(session.trainer, self.trainer)
        self.assertEqual(session.category, self.category)

    def test_update_keeps_calendar_date(self):
        session = _session(start=datetime(2024, 1, 10, 8, 0), status='ongoing')

        updated = services.save_session(
            _form(name='Power Yoga', start='09:00', end='11:00'),
            session=session,
            today=date(2024, 6, 1)
        )

        self.assertEqual(updated.pk, session.pk)
        self.assertEqual(updated.name, 'Power Yoga')
        self.assertEqual(updated.start_date, datetime(2024, 1, 10, 9, 0))
        self.assertEqual(updated.end_date, datetime(2024, 1, 10, 11, 0))
        self.assertEqual(updated.status, 'ongoing')
        self.assertEqual(GymSession.objects.count(), 1)

    def test_invalid_form_saves_nothing(self):
        with self.assertRaises(InvalidTimeOrder):
            services.save_session(_form(start='10:00', end='10:00'))
        with self.assertRaises(EmptyName):
            services.save_session(_form(name=''))

        self.assertEqual(GymSession.objects.count(), 0)

    def test_rejected_update_leaves_session_unchanged(self):
        session = _session(start=datetime(2024, 1, 10, 8, 0))

        with self.assertRaises(InvalidTimeOrder):
            services.save_session(_form(start='12:00', end='11:00'), session=session)

        session.refresh_from_db()
        self.assertEqual(session.start_date, datetime(2024, 1, 10, 8, 0))

    def test_unknown_trainer(self):
        with self.assertRaises(ValueError):
            services.save_session(_form(trainer_id=9999))
        self.assertEqual(GymSession.objects.count(), 0)

    def test_zero_ids_mean_no_relation(self):
        session = services.save_session(_form(trainer_id=0, category_id=0))
        self.assertIsNone(session.trainer)
        self.assertIsNone(session.category)

    def test_form_initial_from_session(self):
        session = _session(start=datetime(2024, 1, 10, 18, 15), minutes=45, capacity=7)
        form = services.session_form_initial(session)

        self.assertEqual((form.start_time, form.end_time, form.capacity_raw), ('18:15', '19:00', 7))

    def test_new_form_preselects_first_trainer_and_category(self):
        first_trainer = Trainer.objects.create(name='Amy')
        first_category = Category.objects.create(name='Boxing')

        form = services.session_form_initial()

        self.assertEqual(form.trainer_id, first_trainer.pk)
        self.assertEqual(form.category_id, first_category.pk)
        self.assertEqual((form.name, form.start_time, form.end_time), ('', '09:00', '10:00'))

    def test_new_form_without_trainers_or_categories(self):
        Trainer.objects.all().delete()
        Category.objects.all().delete()

        form = services.session_form_initial()

        self.assertEqual((form.trainer_id, form.category_id), (0, 0))

    def test_delete_session(self):
        session = _session()
        services.delete_session(session)
        self.assertEqual(GymSession.objects.count(), 0)


class CatalogServiceTests(TestCase):
    """Test category, trainer and member services."""

    def test_create_category(self):
        category = services.create_category('  Pilates ')
        self.assertEqual(category.name, 'Pilates')

    def test_category_name_required(self):
        with self.assertRaisesMessage(ValueError, 'Category name is required'):
            services.create_category('   ')

    def test_duplicate_category(self):
        services.create_category('Yoga')
        with self.assertRaises(ValueError):
            services.create_category('yoga')

    def test_delete_category_keeps_sessions(self):
        category = services.create_category('Yoga')
        session = _session(category=category)

        services.delete_category(category)

        session.refresh_from_db()
        self.assertIsNone(session.category)

    def test_save_trainer(self):
        trainer = services.save_trainer(TrainerData(name='Marcus', specialties=['Yoga', ' HIIT', 'Yoga']))
        self.assertEqual(trainer.specialty_list, ['Yoga', 'HIIT'])

        services.save_trainer(TrainerData(status='inactive'), trainer=trainer)
        trainer.refresh_from_db()
        self.assertEqual(trainer.status, 'inactive')
        self.assertEqual(trainer.name, 'Marcus')

    def test_trainer_name_required(self):
        with self.assertRaises(ValueError):
            services.save_trainer(TrainerData(email='x@example.com'))

    def test_save_member(self):
        member = services.save_member(MemberData(name='Ann Lee', email='ann@example.com', plan='premium'))
        self.assertEqual(member.plan, 'Premium')
        self.assertEqual(member.status, 'active')
        self.assertEqual(member.join_date, date.today())

    def test_member_email_must_be_unique(self):
        services.save_member(MemberData(name='Ann Lee', email='ann@example.com'))
        with self.assertRaises(ValueError):
            services.save_member(MemberData(name='Ann Other', email='ANN@example.com'))

    def test_member_update_keeps_own_email(self):
        member = services.save_member(MemberData(name='Ann Lee', email='ann@example.com'))
        services.save_member(MemberData(email='ann@example.com', phone='555'), member=member)
        member.refresh_from_db()
        self.assertEqual(member.phone, '555')


class BookingServiceTests(TestCase):
    """Test booking, attendance and status services."""

    def setUp(self):
        self.session = _session(capacity=1)
        self.ann = Member.objects.create(name='Ann Lee', email='ann@example.com')
        self.bob = Member.objects.create(name='Bob Stone', email='bob@example.com')

    def test_book_session(self):
        booking = services.book_session(self.session, self.ann)
        self.assertIsNone(booking.is_attended)
        self.assertEqual(self.session.booked, 1)

    def test_session_full(self):
        services.book_session(self.session, self.ann)
        with self.assertRaisesMessage(ValueError, 'Session is full'):
            services.book_session(self.session, self.bob)

    def test_double_booking(self):
        session = _session('Spin', capacity=5)
        services.book_session(session, self.ann)
        with self.assertRaises(ValueError):
            services.book_session(session, self.ann)

    def test_completed_session_not_bookable(self):
        self.session.status = 'completed'
        self.session.save()
        with self.assertRaises(ValueError):
            services.book_session(self.session, self.ann)

    def test_attendance_summary(self):
        session = _session('Spin', start=datetime.combine(date.today(), datetime.min.time()), capacity=5)
        a = services.book_session(session, self.ann)
        b = services.book_session(session, self.bob)
        services.book_session(self.session, self.bob)

        services.mark_attendance(a, True)
        services.mark_attendance(b, False)

        today = services.attendance_summary(on_date=date.today())
        self.assertEqual((today.attended, today.pending, today.missed), (1, 0, 1))

        overall = services.attendance_summary()
        self.assertEqual((overall.attended, overall.pending, overall.missed), (1, 1, 1))
        self.assertEqual(overall.total, 3)

    def test_refresh_session_statuses(self):
        ongoing = _session('Ongoing', start=datetime(2024, 6, 1, 9, 0))
        finished = _session('Finished', start=datetime(2024, 6, 1, 7, 0))
        later = _session('Later', start=datetime(2024, 6, 1, 18, 0))

        changed = services.refresh_session_statuses(now=datetime(2024, 6, 1, 9, 30))

        self.assertEqual(changed, 3)
        ongoing.refresh_from_db()
        finished.refresh_from_db()
        later.refresh_from_db()
        self.session.refresh_from_db()
        self.assertEqual(ongoing.status, 'ongoing')
        self.assertEqual(self.session.status, 'ongoing')
        self.assertEqual(finished.status, 'completed')
        self.assertEqual(later.status, 'upcoming')


class ValidatorTests(SimpleTestCase):
    """Test member-facing form checks."""

    def test_password_checks(self):
        self.assertEqual(password_checks('abc'), {
            'length': False, 'uppercase': False, 'lowercase': True, 'number': False,
        })
        self.assertTrue(all(password_checks('Str0ngPass').values()))

    def test_valid_registration(self):
        result = validate_registration('Ann', 'ann@example.com', 'Str0ngPass', 'Str0ngPass')
        self.assertTrue(result.is_valid)

    def test_registration_errors(self):
        result = validate_registration(' A ', 'not-an-email', 'short', 'other')

        self.assertFalse(result.is_valid)
        self.assertEqual(result.errors, {
            'name': 'Name must be at least 2 characters',
            'email': 'Please enter a valid email',
            'password': 'Password must be at least 8 characters',
            'confirm_password': 'Passwords do not match',
        })

    def test_registration_required_fields(self):
        result = validate_registration('', '', '', '')
        self.assertEqual(set(result.errors), {'name', 'email', 'password', 'confirm_password'})

    def test_login_password_length(self):
        self.assertTrue(validate_login('ann@example.com', 'secret').is_valid)
        self.assertIn('password', validate_login('ann@example.com', 'abc').errors)

    def test_subscription(self):
        ok = validate_subscription('Ann Lee', '+1 (555) 010-1010', 'female', '1990-01-01', 'card')
        self.assertTrue(ok.is_valid)

        bad = validate_subscription('', '555-CALL', '', '', '')
        self.assertEqual(bad.errors['phone'], 'Enter a valid phone number')
        self.assertEqual(set(bad.errors), {'full_name', 'phone', 'gender', 'date_of_birth', 'payment_method'})


class SessionAPITests(APITestCase):
    """Test session endpoints."""

    def setUp(self):
        self.trainer = Trainer.objects.create(name='Marcus')
        self.category = Category.objects.create(name='Yoga')

    def _payload(self, **overrides):
        payload = {
            'name': 'Yoga',
            'trainer_id': self.trainer.pk,
            'category_id': self.category.pk,
            'start_time': '09:00',
            'end_time': '10:00',
            'capacity': 30,
        }
        payload.update(overrides)
        return payload

    def test_create_session(self):
        response = self.client.post(reverse('session-list-create'), self._payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        today = date.today().isoformat()
        self.assertEqual(data['start_date'], f'{today} 09:00:00')
        self.assertEqual(data['end_date'], f'{today} 10:00:00')
        self.assertEqual(data['capacity'], 25)
        self.assertEqual(data['status'], 'upcoming')
        self.assertEqual(data['trainer_name'], 'Marcus')
        self.assertEqual(data['category_name'], 'Yoga')

    def test_equal_times_rejected(self):
        response = self.client.post(
            reverse('session-list-create'),
            self._payload(start_time='10:00', end_time='10:00', capacity=10),
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_time_order')
        self.assertEqual(GymSession.objects.count(), 0)

    def test_blank_name_rejected(self):
        response = self.client.post(reverse('session-list-create'), self._payload(name='  '), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'empty_name')

    def test_malformed_time_rejected(self):
        response = self.client.post(reverse('session-list-create'), self._payload(start_time='9:00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_keeps_date(self):
        session = _session(start=datetime(2024, 1, 10, 8, 0))

        response = self.client.put(
            reverse('session-detail', args=[session.pk]),
            self._payload(start_time='09:00', end_time='11:00', capacity=0),
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['start_date'], '2024-01-10 09:00:00')
        self.assertEqual(data['end_date'], '2024-01-10 11:00:00')
        self.assertEqual(data['capacity'], 1)

    def test_retrieve_with_form_values(self):
        session = _session(start=datetime(2024, 1, 10, 18, 15), minutes=45)

        response = self.client.get(reverse('session-detail', args=[session.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['form']['start_time'], '18:15')
        self.assertEqual(response.data['form']['end_time'], '19:00')
        self.assertEqual(response.data['data']['trainer_name'], 'No trainer')

    def test_new_session_form_defaults(self):
        response = self.client.get(reverse('session-form-defaults'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['trainer_id'], self.trainer.pk)
        self.assertEqual(response.data['data']['category_id'], self.category.pk)
        self.assertEqual(response.data['data']['start_time'], '09:00')
        self.assertEqual(response.data['data']['capacity'], 10)

    def test_list_sessions_with_booked(self):
        session = _session()
        member = Member.objects.create(name='Ann Lee', email='ann@example.com')
        Booking.objects.create(session=session, member=member)

        response = self.client.get(reverse('session-list-create'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['booked'], 1)
        self.assertEqual(response.data['data'][0]['spots_left'], 9)

    def test_delete_session(self):
        session = _session()
        response = self.client.delete(reverse('session-detail', args=[session.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(GymSession.objects.exists())

    def test_missing_session(self):
        response = self.client.get(reverse('session-detail', args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class CatalogAPITests(APITestCase):
    """Test category, trainer and member endpoints."""

    def test_create_category_with_category_name(self):
        response = self.client.post(reverse('category-list-create'), {'category_name': 'HIIT'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['name'], 'HIIT')

    def test_blank_category_rejected(self):
        response = self.client.post(reverse('category-list-create'), {'name': ' '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_category(self):
        category = Category.objects.create(name='HIIT')
        response = self.client.delete(reverse('category-detail', args=[category.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Category.objects.exists())

    def test_trainer_crud(self):
        response = self.client.post(
            reverse('trainer-list-create'),
            {'name': 'Marcus', 'specialties': ['Yoga', 'HIIT']},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        trainer_id = response.data['data']['id']
        self.assertEqual(response.data['data']['specialties'], ['Yoga', 'HIIT'])

        response = self.client.put(
            reverse('trainer-detail', args=[trainer_id]),
            {'status': 'inactive'},
            format='json'
        )
        self.assertEqual(response.data['data']['status'], 'inactive')

        response = self.client.get(reverse('trainer-detail', args=[trainer_id]))
        self.assertEqual(response.data['sessions'], [])

        response = self.client.delete(reverse('trainer-detail', args=[trainer_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Trainer.objects.exists())

    def test_member_list_filters(self):
        Member.objects.create(name='Ann Lee', email='ann@example.com')
        Member.objects.create(name='Bob Stone', email='bob@example.com', status='expired')

        response = self.client.get(reverse('member-list-create'), {'search': 'bob'})
        self.assertEqual([m['name'] for m in response.data['data']], ['Bob Stone'])
        self.assertEqual(response.data['total'], 2)

        response = self.client.get(reverse('member-list-create'), {'status': 'active'})
        self.assertEqual([m['name'] for m in response.data['data']], ['Ann Lee'])

    def test_member_create_and_duplicate(self):
        payload = {'name': 'Ann Lee', 'email': 'ann@example.com', 'plan': 'basic'}
        response = self.client.post(reverse('member-list-create'), payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['plan'], 'Basic')

        response = self.client.post(reverse('member-list-create'), payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_member_update_and_delete(self):
        member = Member.objects.create(name='Ann Lee', email='ann@example.com')

        response = self.client.put(reverse('member-detail', args=[member.pk]), {'status': 'pending'}, format='json')
        self.assertEqual(response.data['data']['status'], 'pending')

        response = self.client.delete(reverse('member-detail', args=[member.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Member.objects.exists())


class BookingAPITests(APITestCase):
    """Test booking endpoints."""

    def setUp(self):
        self.session = _session(start=datetime.combine(date.today(), datetime.min.time()) + timedelta(hours=6), capacity=1)
        self.ann = Member.objects.create(name='Ann Lee', email='ann@example.com')
        self.bob = Member.objects.create(name='Bob Stone', email='bob@example.com')

    def test_book_and_mark_attendance(self):
        response = self.client.post(
            reverse('booking-list-create'),
            {'session_id': self.session.pk, 'member_id': self.ann.pk},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        booking_id = response.data['data']['id']
        self.assertEqual(response.data['data']['attendance'], 'Pending')

        response = self.client.post(
            reverse('booking-attendance', args=[booking_id]),
            {'is_attended': True},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['attendance'], 'Attended')

        response = self.client.get(reverse('booking-summary'))
        self.assertEqual(response.data['data'], {'attended': 1, 'pending': 0, 'missed': 0, 'total': 1})

    def test_full_session(self):
        Booking.objects.create(session=self.session, member=self.ann)

        response = self.client.post(
            reverse('booking-list-create'),
            {'session_id': self.session.pk, 'member_id': self.bob.pk},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Session is full')

    def test_list_bookings_by_period(self):
        past = _session('Old', start=datetime(2020, 1, 1, 9, 0))
        Booking.objects.create(session=self.session, member=self.ann)
        Booking.objects.create(session=past, member=self.bob)

        response = self.client.get(reverse('booking-list-create'), {'when': 'today'})
        self.assertEqual([b['member_name'] for b in response.data['data']], ['Ann Lee'])

        response = self.client.get(reverse('booking-list-create'), {'when': 'past'})
        self.assertIn('Bob Stone', [b['member_name'] for b in response.data['data']])

        response = self.client.get(reverse('booking-list-create'))
        self.assertEqual(len(response.data['data']), 2)


class RegistrationCheckAPITests(APITestCase):
    """Test registration form check endpoint."""

    def test_valid(self):
        response = self.client.post(
            reverse('validate-registration'),
            {'name': 'Ann', 'email': 'ann@example.com', 'password': 'Str0ngPass', 'confirm_password': 'Str0ngPass'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['valid'])
        self.assertTrue(response.data['password_checks']['uppercase'])

    def test_invalid(self):
        response = self.client.post(
            reverse('validate-registration'),
            {'name': 'Ann', 'email': 'ann@example.com', 'password': 'weak'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data['errors'])
        self.assertIn('confirm_password', response.data['errors'])


class LoginCheckAPITests(APITestCase):
    """Test login form check endpoint."""

    def test_valid(self):
        response = self.client.post(
            reverse('validate-login'),
            {'email': 'ann@example.com', 'password': 'secret1'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['valid'])
        self.assertEqual(response.data['errors'], {})

    def test_invalid(self):
        response = self.client.post(
            reverse('validate-login'),
            {'email': 'ann', 'password': '12345'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['valid'])
        self.assertEqual(response.data['errors']['email'], 'Please enter a valid email')
        self.assertEqual(response.data['errors']['password'], 'Password must be at least 6 characters')


def _details(**overrides):
    values = {
        'full_name': 'Ann Lee',
        'phone': '+20 100 555 0101',
        'gender': 'female',
        'date_of_birth': date(1990, 5, 4),
        'payment_method': 'visa',
    }
    values.update(overrides)
    return SubscriptionData(**values)


class MembershipServiceTests(TestCase):
    """Test plan and membership services."""

    def setUp(self):
        self.member = Member.objects.create(name='Ann Lee', email='ann@example.com', status='pending')
        self.plan = services.create_plan('Premium', Decimal('49.99'), 3)

    def test_add_months_clamps_day(self):
        self.assertEqual(services.add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(services.add_months(date(2023, 1, 31), 1), date(2023, 2, 28))
        self.assertEqual(services.add_months(date(2024, 11, 15), 3), date(2025, 2, 15))
        self.assertEqual(services.add_months(date(2024, 3, 10), 12), date(2025, 3, 10))

    def test_create_plan_rejects_blank_and_duplicate(self):
        with self.assertRaises(ValueError):
            services.create_plan('  ', Decimal('10'))
        with self.assertRaises(ValueError):
            services.create_plan('premium', Decimal('10'))

    def test_plan_lasts_at_least_a_month(self):
        with self.assertRaises(ValidationError):
            Plan.objects.create(name='Trial', price=Decimal('0'), duration_months=0)

    def test_subscribe(self):
        membership = services.subscribe(self.member, self.plan, _details(), start=date(2024, 1, 31))

        self.assertEqual(membership.start_date, date(2024, 1, 31))
        self.assertEqual(membership.end_date, date(2024, 4, 30))
        self.assertEqual(membership.payment_method, 'visa')
        self.assertEqual(membership.full_name, 'Ann Lee')

        self.member.refresh_from_db()
        self.assertEqual(self.member.plan, 'Premium')
        self.assertEqual(self.member.status, 'active')

    def test_subscribe_starts_today_by_default(self):
        membership = services.subscribe(self.member, self.plan, _details())

        self.assertEqual(membership.start_date, date.today())
        self.assertEqual(membership.end_date, services.add_months(date.today(), 3))

    def test_invalid_details_save_nothing(self):
        with self.assertRaises(SubscriptionValidationError) as ctx:
            services.subscribe(
                self.member,
                self.plan,
                _details(full_name='  ', phone='call me', gender='', date_of_birth=None, payment_method='')
            )

        self.assertEqual(
            set(ctx.exception.errors),
            {'full_name', 'phone', 'gender', 'date_of_birth', 'payment_method'}
        )
        self.assertEqual(ctx.exception.errors['phone'], 'Enter a valid phone number')
        self.assertIsInstance(ctx.exception, ValueError)
        self.assertEqual(Membership.objects.count(), 0)
        self.member.refresh_from_db()
        self.assertEqual(self.member.status, 'pending')

    def test_current_membership_is_latest(self):
        self.assertIsNone(services.current_membership(self.member))

        services.subscribe(self.member, self.plan, _details(), start=date(2023, 1, 1))
        latest = services.subscribe(self.member, self.plan, _details(), start=date(2024, 1, 1))

        self.assertEqual(services.current_membership(self.member), latest)

    def test_membership_active_on(self):
        membership = services.subscribe(self.member, self.plan, _details(), start=date(2024, 1, 1))

        self.assertTrue(membership.is_active_on(date(2024, 3, 31)))
        self.assertFalse(membership.is_active_on(date(2024, 4, 1)))
        self.assertEqual(list(Membership.objects.active_on(date(2024, 2, 1))), [membership])
        self.assertFalse(Membership.objects.active_on(date(2024, 4, 1)).exists())


class MembershipAPITests(APITestCase):
    """Test plan and membership endpoints."""

    def setUp(self):
        self.member = Member.objects.create(name='Ann Lee', email='ann@example.com', status='pending')
        self.plan = Plan.objects.create(name='Basic', price=Decimal('29.99'), duration_months=1)

    def _payload(self, **overrides):
        payload = {
            'plan_id': self.plan.pk,
            'member_id': self.member.pk,
            'startDate': '2024-06-01T10:22:33.000Z',
            'endDate': '2030-01-01T00:00:00.000Z',
            'paymentMethod': 'gym',
            'fullName': 'Ann Lee',
            'phone': '(555) 010-1010',
            'gender': 'female',
            'dateOfBirth': '1990-05-04',
        }
        payload.update(overrides)
        return payload

    def test_list_and_create_plans(self):
        response = self.client.post(
            reverse('plan-list-create'),
            {'name': 'Premium', 'price': '49.99', 'duration': 3},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['duration'], 3)

        response = self.client.get(reverse('plan-list-create'))
        self.assertEqual([plan['name'] for plan in response.data['data']], ['Basic', 'Premium'])
        self.assertEqual(response.data['data'][0]['price'], Decimal('29.99'))

    def test_duplicate_plan_rejected(self):
        response = self.client.post(
            reverse('plan-list-create'),
            {'name': 'basic', 'price': '10.00'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_subscribe(self):
        response = self.client.post(reverse('membership-create'), self._payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['planName'], 'Basic')
        self.assertEqual(data['startDate'], '2024-06-01')
        self.assertEqual(data['endDate'], '2024-07-01')
        self.assertEqual(data['paymentMethod'], 'gym')
        self.assertEqual(data['dateOfBirth'], '1990-05-04')
        self.member.refresh_from_db()
        self.assertEqual(self.member.status, 'active')

    def test_subscribe_with_invalid_details(self):
        response = self.client.post(
            reverse('membership-create'),
            self._payload(fullName='', phone='n/a', gender=''),
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_subscription')
        self.assertEqual(set(response.data['errors']), {'full_name', 'phone', 'gender'})
        self.assertEqual(Membership.objects.count(), 0)

    def test_unknown_payment_method(self):
        response = self.client.post(
            reverse('membership-create'),
            self._payload(paymentMethod='bitcoin'),
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Membership.objects.count(), 0)

    def test_unknown_plan(self):
        response = self.client.post(
            reverse('membership-create'),
            self._payload(plan_id=9999),
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_member_membership(self):
        self.client.post(reverse('membership-create'), self._payload(), format='json')

        response = self.client.get(reverse('member-membership', args=[self.member.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['planName'], 'Basic')
        self.assertEqual(data['price'], Decimal('29.99'))
        self.assertEqual(data['fullName'], 'Ann Lee')
        self.assertEqual(data['gender'], 'female')
        self.assertFalse(data['is_active'])

    def test_member_without_membership(self):
        response = self.client.get(reverse('member-membership', args=[self.member.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.get(reverse('member-membership', args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class RefreshSessionStatusCommandTests(TestCase):
    """Test refresh_session_status management command."""

    def test_command_updates_statuses(self):
        session = _session(start=datetime(2024, 6, 1, 9, 0))
        out = StringIO()

        call_command('refresh_session_status', at='2024-06-01 12:00:00', stdout=out)

        session.refresh_from_db()
        self.assertEqual(session.status, 'completed')
        self.assertIn('Successfully updated 1 session(s)', out.getvalue())

    def test_invalid_time(self):
        with self.assertRaises(CommandError):
            call_command('refresh_session_status', at='noon', stdout=StringIO())
