"""
URL routing for the scheduling API.
"""

from django.urls import path
from .views import (
    BookingAttendanceView,
    BookingListCreateView,
    BookingSummaryView,
    CategoryDetailView,
    CategoryListCreateView,
    GymSessionDetailView,
    GymSessionFormDefaultsView,
    GymSessionListCreateView,
    LoginCheckView,
    MemberDetailView,
    MemberListCreateView,
    MemberMembershipView,
    MembershipCreateView,
    PlanListCreateView,
    RegistrationCheckView,
    TrainerDetailView,
    TrainerListCreateView,
)

urlpatterns = [
    path('sessions/', GymSessionListCreateView.as_view(), name='session-list-create'),
    path('sessions/form/', GymSessionFormDefaultsView.as_view(), name='session-form-defaults'),
    path('sessions/<int:pk>/', GymSessionDetailView.as_view(), name='session-detail'),
    path('categories/', CategoryListCreateView.as_view(), name='category-list-create'),
    path('categories/<int:pk>/', CategoryDetailView.as_view(), name='category-detail'),
    path('trainers/', TrainerListCreateView.as_view(), name='trainer-list-create'),
    path('trainers/<int:pk>/', TrainerDetailView.as_view(), name='trainer-detail'),
    path('members/', MemberListCreateView.as_view(), name='member-list-create'),
    path('members/<int:pk>/', MemberDetailView.as_view(), name='member-detail'),
    path('bookings/', BookingListCreateView.as_view(), name='booking-list-create'),
    path('bookings/summary/', BookingSummaryView.as_view(), name='booking-summary'),
    path('bookings/<int:pk>/attendance/', BookingAttendanceView.as_view(), name='booking-attendance'),
    path('auth/validate-registration/', RegistrationCheckView.as_view(), name='validate-registration'),
    path('auth/validate-login/', LoginCheckView.as_view(), name='validate-login'),
    path('plans/', PlanListCreateView.as_view(), name='plan-list-create'),
    path('memberships/', MembershipCreateView.as_view(), name='membership-create'),
    path('memberships/<int:member_id>/', MemberMembershipView.as_view(), name='member-membership'),
]
