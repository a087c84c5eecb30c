"""
Service layer for gym scheduling business logic.
Services are framework-agnostic and handle all business operations.
"""

import calendar
import logging
from datetime import date, datetime
from typing import Optional

from django.db import transaction

from .models import Booking, Category, GymSession, Member, Membership, Plan, Trainer
from .normalizer import (
    TIMESTAMP_FORMAT,
    SessionTimeInput,
    initial_form,
    validate_and_build,
)
from .exceptions import SessionValidationError, SubscriptionValidationError
from .types import (
    DEFAULT_MEMBER_PLAN,
    DEFAULT_SESSION_STATUS,
    AttendanceSummary,
    MemberData,
    SubscriptionData,
    TrainerData,
)
from .validators import validate_subscription

logger = logging.getLogger(__name__)


def session_form_initial(session: Optional[GymSession] = None) -> SessionTimeInput:
    """
    Values the session form opens with.

    Args:
        session: GymSession being edited, or None for a new session
    """
    if session is None:
        first_trainer = Trainer.objects.first()
        first_category = Category.objects.first()
        return initial_form(
            trainer_id=first_trainer.pk if first_trainer else 0,
            category_id=first_category.pk if first_category else 0,
        )

    return initial_form(
        name=session.name,
        start_timestamp=session.start_timestamp,
        end_timestamp=session.end_timestamp,
        capacity=session.capacity,
        trainer_id=session.trainer_id,
        category_id=session.category_id,
    )


@transaction.atomic
def save_session(
    form: SessionTimeInput,
    session: Optional[GymSession] = None,
    status: Optional[str] = None,
    today: Optional[date] = None
) -> GymSession:
    """
    Validate a session form and create or update the session.

    Args:
        form: Values entered on the session form
        session: Existing GymSession to update; None creates a new one
        status: Status to store; defaults to the existing status or 'upcoming'
        today: Date new sessions are anchored to (defaults to now)

    Returns:
        Saved GymSession instance

    Raises:
        EmptyName: If the session name is blank
        InvalidTimeOrder: If end time is not after start time
        ValueError: If the trainer or category does not exist
    """
    prior_start = session.start_timestamp if session is not None else None

    try:
        window = validate_and_build(form, prior_start_timestamp=prior_start, today=today)
    except SessionValidationError as exc:
        logger.warning("Rejected session form %r: %s", form.name, exc.message)
        raise

    trainer = _resolve_optional(Trainer, form.trainer_id, 'Trainer')
    category = _resolve_optional(Category, form.category_id, 'Category')

    if session is None:
        session = GymSession(status=status or DEFAULT_SESSION_STATUS)
        action = 'Created'
    else:
        if status:
            session.status = status
        action = 'Updated'

    session.name = form.name
    session.trainer = trainer
    session.category = category
    session.start_date = datetime.strptime(window.start_datetime, TIMESTAMP_FORMAT)
    session.end_date = datetime.strptime(window.end_datetime, TIMESTAMP_FORMAT)
    session.capacity = window.capacity
    session.save()

    logger.info(
        "%s session %s %r (%s - %s, capacity %d)",
        action, session.pk, session.name,
        window.start_datetime, window.end_datetime, window.capacity
    )
    return session


@transaction.atomic
def delete_session(session: GymSession) -> None:
    """Delete a session and its bookings."""
    logger.info("Deleting session %s %r", session.pk, session.name)
    session.delete()


def _resolve_optional(model, pk, label):
    """Fetch a related object by id; None or 0 means no relation."""
    if not pk:
        return None
    try:
        return model.objects.get(pk=pk)
    except model.DoesNotExist:
        raise ValueError(f"{label} {pk} does not exist")


def create_category(name: str) -> Category:
    """
    Create a category.

    Raises:
        ValueError: If the name is blank or already taken
    """
    name = name.strip()
    if not name:
        raise ValueError("Category name is required")

    if Category.objects.filter(name__iexact=name).exists():
        raise ValueError(f"Category {name!r} already exists")

    category = Category.objects.create(name=name)
    logger.info("Created category %s %r", category.pk, category.name)
    return category


def delete_category(category: Category) -> None:
    """Delete a category; its sessions keep existing without one."""
    logger.info("Deleting category %s %r", category.pk, category.name)
    category.delete()


@transaction.atomic
def save_trainer(data: TrainerData, trainer: Optional[Trainer] = None) -> Trainer:
    """
    Create or update a trainer.

    Raises:
        ValueError: If a new trainer has no name
    """
    if trainer is None:
        if not (data.name or '').strip():
            raise ValueError("Trainer name is required")
        trainer = Trainer()

    fields = {
        'name': data.name.strip() if data.name else None,
        'email': data.email,
        'phone': data.phone,
        'status': data.status,
        'avatar': data.avatar,
    }
    if data.specialties is not None:
        fields['specialties'] = ','.join(_unique(data.specialties))
    _apply_field_updates(trainer, fields)

    trainer.save()
    return trainer


@transaction.atomic
def save_member(data: MemberData, member: Optional[Member] = None) -> Member:
    """
    Create or update a member.

    Raises:
        ValueError: If a new member has no name or email, or the email is taken
    """
    if member is None:
        if not (data.name or '').strip():
            raise ValueError("Member name is required")
        if not (data.email or '').strip():
            raise ValueError("Member email is required")
        member = Member(plan=DEFAULT_MEMBER_PLAN)

    if data.email and Member.objects.filter(email__iexact=data.email).exclude(pk=member.pk).exists():
        raise ValueError(f"A member with email {data.email} already exists")

    fields = {
        'name': data.name.strip() if data.name else None,
        'email': data.email,
        'phone': data.phone,
        'plan': data.plan.capitalize() if data.plan else None,
        'status': data.status,
        'avatar': data.avatar,
    }
    _apply_field_updates(member, fields)

    member.save()
    return member


def delete_trainer(trainer: Trainer) -> None:
    """Delete a trainer; their sessions keep existing without one."""
    logger.info("Deleting trainer %s %r", trainer.pk, trainer.name)
    trainer.delete()


def delete_member(member: Member) -> None:
    """Delete a member and their bookings."""
    logger.info("Deleting member %s %r", member.pk, member.name)
    member.delete()


@transaction.atomic
def book_session(session: GymSession, member: Member) -> Booking:
    """
    Book a member onto a session.

    Raises:
        ValueError: If the session is completed, full, or already booked by the member
    """
    session = GymSession.objects.select_for_update().get(pk=session.pk)

    if session.status == 'completed':
        raise ValueError("Cannot book a completed session")

    if Booking.objects.for_session(session).filter(member=member).exists():
        raise ValueError("Member is already booked on this session")

    if session.bookings.count() >= session.capacity:
        raise ValueError("Session is full")

    booking = Booking.objects.create(session=session, member=member)
    logger.info("Booked member %s onto session %s", member.pk, session.pk)
    return booking


def mark_attendance(booking: Booking, attended: Optional[bool]) -> Booking:
    """
    Record whether a member came to a booked session.

    Args:
        attended: True for attended, False for missed, None to reset to pending
    """
    booking.is_attended = attended
    booking.save(update_fields=['is_attended'])
    return booking


def attendance_summary(on_date: Optional[date] = None) -> AttendanceSummary:
    """
    Count bookings by attendance state.

    Args:
        on_date: Only count bookings for sessions starting that day
    """
    bookings = Booking.objects.all()
    if on_date is not None:
        bookings = bookings.on_date(on_date)

    return AttendanceSummary(
        attended=bookings.attended().count(),
        pending=bookings.pending().count(),
        missed=bookings.missed().count(),
    )


def refresh_session_statuses(now: Optional[datetime] = None) -> int:
    """
    Move sessions to 'ongoing' or 'completed' based on the current time.

    Returns:
        Number of sessions whose status changed
    """
    now = now or datetime.now()
    active = GymSession.objects.not_completed()

    completed = active.filter(end_date__lte=now).update(status='completed')
    ongoing = active.filter(
        status='upcoming',
        start_date__lte=now,
        end_date__gt=now
    ).update(status='ongoing')

    if completed or ongoing:
        logger.info("Session status refresh: %d completed, %d ongoing", completed, ongoing)
    return completed + ongoing



def add_months(day: date, months: int) -> date:
    """
    Shift a date by whole months.

    The day is clamped to the last day of the target month (Jan 31 + 1 -> Feb 28/29).
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def create_plan(name: str, price, duration_months: int = 1) -> Plan:
    """
    Create a membership plan.

    Raises:
        ValueError: If the name is blank or already used
    """
    name = (name or '').strip()
    if not name:
        raise ValueError("Plan name is required")
    if Plan.objects.filter(name__iexact=name).exists():
        raise ValueError(f"Plan '{name}' already exists")

    plan = Plan.objects.create(name=name, price=price, duration_months=duration_months)
    logger.info("Created plan %s %r", plan.pk, plan.name)
    return plan


@transaction.atomic
def subscribe(
    member: Member,
    plan: Plan,
    details: SubscriptionData,
    start: Optional[date] = None
) -> Membership:
    """
    Subscribe a member to a plan.

    The membership runs from start (default: today) for the plan's number of
    months. The member is marked active on the plan.

    Args:
        member: Member subscribing
        plan: Plan being bought
        details: Personal and payment details from the subscription form
        start: First day of the membership

    Returns:
        Created Membership

    Raises:
        SubscriptionValidationError: If the details fail the form checks
    """
    result = validate_subscription(
        details.full_name,
        details.phone,
        details.gender,
        details.date_of_birth,
        details.payment_method
    )
    if not result.is_valid:
        logger.warning(
            "Rejected subscription for member %s: %s",
            member.pk, ", ".join(sorted(result.errors))
        )
        raise SubscriptionValidationError(result.errors)

    start = start or date.today()
    membership = Membership.objects.create(
        member=member,
        plan=plan,
        start_date=start,
        end_date=add_months(start, plan.duration_months),
        payment_method=details.payment_method,
        full_name=details.full_name.strip(),
        phone=details.phone.strip(),
        gender=details.gender,
        date_of_birth=details.date_of_birth,
        height=details.height,
        weight=details.weight,
        blood_type=details.blood_type,
    )

    member.plan = plan.name
    member.status = 'active'
    member.save(update_fields=['plan', 'status'])

    logger.info(
        "Subscribed member %s to plan %r until %s",
        member.pk, plan.name, membership.end_date
    )
    return membership


def current_membership(member: Member) -> Optional[Membership]:
    """Most recent membership of a member, or None if they never subscribed."""
    return (
        Membership.objects.for_member(member)
        .select_related('plan')
        .latest_first()
        .first()
    )

def _unique(values):
    result = []
    for value in values:
        value = value.strip()
        if value and value not in result:
            result.append(value)
    return result


def _apply_field_updates(obj, fields: dict) -> None:
    """Apply field updates to object if values are not None (DRY helper)."""
    for field_name, value in fields.items():
        if value is not None:
            setattr(obj, field_name, value)
