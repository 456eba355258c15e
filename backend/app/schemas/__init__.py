from .common import MessageResponse, ErrorResponse
from .user import UserPublic, ProfileUpdate, PasswordChange, UserStats
from .auth import RegisterRequest, LoginRequest, ForgotPasswordRequest, AuthResponse
from .transaction import Transaction, TransactionCreate
from .category import Category, CategoryCreate
from .goal import Goal, GoalCreate, GoalUpdate
from .stats import DashboardStats, MonthlyReport, CategoryShare, EcoMetrics

__all__ = [
    "MessageResponse", "ErrorResponse",
    "UserPublic", "ProfileUpdate", "PasswordChange", "UserStats",
    "RegisterRequest", "LoginRequest", "ForgotPasswordRequest", "AuthResponse",
    "Transaction", "TransactionCreate",
    "Category", "CategoryCreate",
    "Goal", "GoalCreate", "GoalUpdate",
    "DashboardStats", "MonthlyReport", "CategoryShare", "EcoMetrics",
]
