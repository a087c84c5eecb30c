"""
Data types and constants for the gym scheduling app.

This module contains:
- DTOs (Data Transfer Objects) for service layer operations
- Constants used across the application
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


DEFAULT_SESSION_STATUS = 'upcoming'
DEFAULT_MEMBER_PLAN = 'Basic'


@dataclass
class TrainerData:
    """DTO for trainer create/update operations."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    specialties: Optional[List[str]] = None
    status: Optional[str] = None
    avatar: Optional[str] = None


@dataclass
class MemberData:
    """DTO for member create/update operations."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    plan: Optional[str] = None
    status: Optional[str] = None
    avatar: Optional[str] = None


@dataclass
class SubscriptionData:
    """DTO for the personal details entered when subscribing to a plan."""
    full_name: str = ''
    phone: str = ''
    gender: str = ''
    date_of_birth: Optional[date] = None
    payment_method: str = ''
    height: str = ''
    weight: str = ''
    blood_type: str = ''


@dataclass
class AttendanceSummary:
    """Booking counts by attendance state."""
    attended: int = 0
    pending: int = 0
    missed: int = 0

    @property
    def total(self) -> int:
        return self.attended + self.pending + self.missed


@dataclass
class ValidationResult:
    """Field-keyed error messages from a form check; empty means valid."""
    errors: dict = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors
