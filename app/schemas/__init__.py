# app/schemas/__init__.py
from .base import CamelModel, Message
from .user import (
    User,
    UserRegister,
    UserLogin,
    UserUpdate,
    UserResponse,
    CurrencyUpdate,
    AuthResponse,
)
from .category import Category, CategoryCreate, CategoryUpdate, CategorySummary
from .transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    TransactionListResponse,
    Pagination,
)
from .budget import (
    Budget,
    BudgetCreate,
    BudgetUpdate,
    BudgetResponse,
    BudgetWithSpending,
    CategoryBudget,
    CategoryBudgetIn,
    CategoryBudgetWithSpending,
)
from .dashboard import (
    NoBudget,
    BudgetOverview,
    CategoryBudgetStatus,
    DailyBudget,
    CategoryDailyBudget,
    DailyBudgetHistory,
    HistoryDay,
    DayCategoryBreakdown,
    DashboardSummary,
    MonthlyStat,
    CategoryBreakdownItem,
    TrendPoint,
)
