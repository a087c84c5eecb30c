"""
Models for the gym scheduling app.

- Category and Trainer describe what a session is and who runs it
- GymSession is a scheduled class occurrence with a time window and capacity
- Member and Booking record who signed up for a session and whether they came
- Plan and Membership record which paid plan a member subscribed to and for how long
"""

from datetime import date

from django.db import models
from django.core.exceptions import ValidationError

from .managers import BookingManager, GymSessionManager, MemberManager, MembershipManager
from .normalizer import MAX_CAPACITY, MIN_CAPACITY, TIMESTAMP_FORMAT


class Category(models.Model):
    """Kind of class offered (Yoga, HIIT, ...)."""

    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'categories'

    def __str__(self):
        return self.name


class Trainer(models.Model):
    """Staff member who runs sessions."""

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=40, blank=True, default='')
    specialties = models.CharField(
        max_length=500,
        blank=True,
        default='',
        help_text="Comma-separated list of specialties"
    )
    rating = models.FloatField(default=4.5)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    avatar = models.URLField(blank=True, default='')

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def specialty_list(self):
        """Get specialties as a list, without duplicates or blanks."""
        seen = []
        for specialty in self.specialties.split(','):
            specialty = specialty.strip()
            if specialty and specialty not in seen:
                seen.append(specialty)
        return seen


class Member(models.Model):
    """Gym member who can book sessions."""

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('expired', 'Expired'),
        ('pending', 'Pending'),
    ]

    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=40, blank=True, default='')
    plan = models.CharField(max_length=50, default='Basic')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    join_date = models.DateField(default=date.today)
    avatar = models.URLField(blank=True, default='')

    objects = MemberManager()

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['status'], name='scheduling__status_m_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"


class GymSession(models.Model):
    """
    A scheduled class with a trainer, category, capacity and time window.

    start_date/end_date hold naive wall-clock datetimes on the same day.
    """

    STATUS_CHOICES = [
        ('upcoming', 'Upcoming'),
        ('ongoing', 'Ongoing'),
        ('completed', 'Completed'),
    ]

    name = models.CharField(max_length=200)
    trainer = models.ForeignKey(
        Trainer,
        on_delete=models.SET_NULL,
        related_name='sessions',
        null=True,
        blank=True
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        related_name='sessions',
        null=True,
        blank=True
    )

    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    capacity = models.PositiveIntegerField(default=10)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='upcoming'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = GymSessionManager()

    class Meta:
        ordering = ['start_date']
        indexes = [
            models.Index(fields=['start_date', 'status'], name='scheduling__start_d_s_idx'),
            models.Index(fields=['status'], name='scheduling__status_s_idx'),
        ]

    def __str__(self):
        return f"{self.name} - {self.start_date.strftime('%Y-%m-%d %H:%M')}"

    @property
    def booked(self):
        """Number of members booked on this session."""
        annotated = getattr(self, 'booked_count', None)
        if annotated is not None:
            return annotated
        return self.bookings.count()

    @property
    def spots_left(self):
        return max(self.capacity - self.booked, 0)

    @property
    def start_timestamp(self):
        """Stored start as a ``YYYY-MM-DD HH:MM:SS`` string."""
        return self.start_date.strftime(TIMESTAMP_FORMAT)

    @property
    def end_timestamp(self):
        return self.end_date.strftime(TIMESTAMP_FORMAT)

    def clean(self):
        """Validate time window and capacity."""
        super().clean()

        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({
                'end_date': 'End time must be after start time.'
            })

        if self.capacity is not None and not MIN_CAPACITY <= self.capacity <= MAX_CAPACITY:
            raise ValidationError({
                'capacity': f'Capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}.'
            })

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)


class Booking(models.Model):
    """
    A member's place on a session.

    is_attended: True = attended, False = missed, None = not yet recorded.
    """

    session = models.ForeignKey(
        GymSession,
        on_delete=models.CASCADE,
        related_name='bookings'
    )
    member = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name='bookings'
    )
    is_attended = models.BooleanField(null=True, blank=True, default=None)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = BookingManager()

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['session', 'member'], name='unique_member_per_session'),
        ]

    def __str__(self):
        return f"{self.member.name} @ {self.session.name} [{self.attendance_label}]"

    @property
    def attendance_label(self):
        if self.is_attended is True:
            return 'Attended'
        if self.is_attended is False:
            return 'Missed'
        return 'Pending'


class Plan(models.Model):
    """Paid membership plan offered to members."""

    name = models.CharField(max_length=50, unique=True)
    price = models.DecimalField(max_digits=8, decimal_places=2)
    duration_months = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ['price', 'name']

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()

        if self.duration_months is not None and self.duration_months < 1:
            raise ValidationError({
                'duration_months': 'A plan lasts at least one month.'
            })

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class Membership(models.Model):
    """
    A member's subscription to a plan, with the details given when subscribing.

    The period runs from start_date up to (not including) end_date.
    """

    PAYMENT_METHOD_CHOICES = [
        ('visa', 'Visa / Credit Card'),
        ('vodafone', 'Vodafone Cash'),
        ('gym', 'Pay at Gym'),
    ]

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
    ]

    member = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name='memberships'
    )
    plan = models.ForeignKey(
        Plan,
        on_delete=models.PROTECT,
        related_name='memberships'
    )

    start_date = models.DateField()
    end_date = models.DateField()

    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=40)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    date_of_birth = models.DateField()
    height = models.CharField(max_length=20, blank=True, default='')
    weight = models.CharField(max_length=20, blank=True, default='')
    blood_type = models.CharField(max_length=5, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)

    objects = MembershipManager()

    class Meta:
        ordering = ['-start_date', '-created_at']
        indexes = [
            models.Index(fields=['member', 'start_date'], name='scheduling__member_ms_idx'),
        ]

    def __str__(self):
        return f"{self.member.name} - {self.plan.name} ({self.start_date} to {self.end_date})"

    def is_active_on(self, day):
        return self.start_date <= day < self.end_date

    def clean(self):
        """Validate the membership period."""
        super().clean()

        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({
                'end_date': 'Membership must end after it starts.'
            })

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)
