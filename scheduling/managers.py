"""
Custom managers and querysets for scheduling models.

QuerySets define chainable query methods.
Managers use QuerySets to enable method chaining.
No business logic should be here - only query operations.
"""

from datetime import datetime, time, timedelta

from django.db import models


def _day_bounds(day):
    """Start of the given day and start of the next one."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class GymSessionQuerySet(models.QuerySet):
    """Custom queryset for GymSession model with chainable methods."""

    def upcoming(self):
        """Get sessions not yet started or finished."""
        return self.filter(status='upcoming')

    def not_completed(self):
        return self.exclude(status='completed')

    def on_date(self, day):
        """
        Get sessions starting on a calendar day.

        Args:
            day: date object
        """
        start, end = _day_bounds(day)
        return self.filter(start_date__gte=start, start_date__lt=end)

    def for_trainer(self, trainer):
        """
        Get sessions run by a trainer.

        Args:
            trainer: Trainer instance
        """
        return self.filter(trainer=trainer)

    def with_booked_count(self):
        """Annotate each session with the number of bookings as booked_count."""
        return self.annotate(booked_count=models.Count('bookings'))


class GymSessionManager(models.Manager):
    """Custom manager for GymSession model."""

    def get_queryset(self):
        """Return custom queryset for method chaining."""
        return GymSessionQuerySet(self.model, using=self._db)

    def upcoming(self):
        return self.get_queryset().upcoming()

    def not_completed(self):
        return self.get_queryset().not_completed()

    def on_date(self, day):
        return self.get_queryset().on_date(day)

    def for_trainer(self, trainer):
        return self.get_queryset().for_trainer(trainer)

    def with_booked_count(self):
        return self.get_queryset().with_booked_count()


class MemberQuerySet(models.QuerySet):
    """Custom queryset for Member model with chainable methods."""

    def with_status(self, status):
        """
        Get members with a given membership status.

        Args:
            status: 'active', 'expired' or 'pending'
        """
        return self.filter(status=status)

    def search(self, query):
        """
        Get members whose name, email or phone contains the query.

        A blank query returns everything.
        """
        query = (query or '').strip()
        if not query:
            return self
        return self.filter(
            models.Q(name__icontains=query)
            | models.Q(email__icontains=query)
            | models.Q(phone__icontains=query)
        )


class MemberManager(models.Manager):
    """Custom manager for Member model."""

    def get_queryset(self):
        """Return custom queryset for method chaining."""
        return MemberQuerySet(self.model, using=self._db)

    def with_status(self, status):
        return self.get_queryset().with_status(status)

    def search(self, query):
        return self.get_queryset().search(query)


class BookingQuerySet(models.QuerySet):
    """Custom queryset for Booking model with chainable methods."""

    def attended(self):
        return self.filter(is_attended=True)

    def missed(self):
        return self.filter(is_attended=False)

    def pending(self):
        """Get bookings whose attendance has not been recorded."""
        return self.filter(is_attended__isnull=True)

    def for_session(self, session):
        return self.filter(session=session)

    def on_date(self, day):
        """
        Get bookings for sessions starting on a calendar day.

        Args:
            day: date object
        """
        start, end = _day_bounds(day)
        return self.filter(session__start_date__gte=start, session__start_date__lt=end)

    def starting_after(self, moment):
        return self.filter(session__start_date__gte=moment)

    def starting_before(self, moment):
        return self.filter(session__start_date__lt=moment)


class BookingManager(models.Manager):
    """Custom manager for Booking model."""

    def get_queryset(self):
        """Return custom queryset for method chaining."""
        return BookingQuerySet(self.model, using=self._db)

    def attended(self):
        return self.get_queryset().attended()

    def missed(self):
        return self.get_queryset().missed()

    def pending(self):
        return self.get_queryset().pending()

    def for_session(self, session):
        return self.get_queryset().for_session(session)

    def on_date(self, day):
        return self.get_queryset().on_date(day)


class MembershipQuerySet(models.QuerySet):
    """Custom queryset for Membership model with chainable methods."""

    def for_member(self, member):
        return self.filter(member=member)

    def active_on(self, day):
        """Get memberships whose period covers the given date."""
        return self.filter(start_date__lte=day, end_date__gt=day)

    def latest_first(self):
        return self.order_by('-start_date', '-created_at')


class MembershipManager(models.Manager):
    """Custom manager for Membership model."""

    def get_queryset(self):
        """Return custom queryset for method chaining."""
        return MembershipQuerySet(self.model, using=self._db)

    def for_member(self, member):
        return self.get_queryset().for_member(member)

    def active_on(self, day):
        return self.get_queryset().active_on(day)
