"""
Relational storage for users, transactions, categories and goals.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import delete, select, update, or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.errors import ConflictError
from app.models.category import Category
from app.models.goal import Goal
from app.models.transaction import EntryType, Transaction
from app.models.user import User
from app.schemas.common import MAX_AMOUNT
from app.services import statistics

logger = logging.getLogger(__name__)

_MISSING_RELATION_MARKERS = ("does not exist", "no such table")


def _is_missing_relation(error: DBAPIError) -> bool:
    text = str(error.orig if error.orig is not None else error).lower()
    return any(marker in text for marker in _MISSING_RELATION_MARKERS)


class DatabaseStorage:
    """Data access for one request, bound to that request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------ users

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_user(self, email: str, password_hash: str, first_name: str, last_name: str) -> User:
        user = User(email=email, password=password_hash, first_name=first_name, last_name=last_name)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.session.rollback()
            raise ConflictError("A user with this email already exists")
        await self.session.refresh(user)
        return user

    async def update_user(self, user: User, **changes: Any) -> User:
        for name, value in changes.items():
            setattr(user, name, value)
        user.updated_at = datetime.utcnow()
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("A user with this email already exists")
        await self.session.refresh(user)
        return user

    async def delete_user(self, user_id: int) -> None:
        """Remove the user and everything they own in one database transaction."""
        try:
            await self.session.execute(delete(Transaction).where(Transaction.user_id == user_id))
            await self.session.execute(delete(Category).where(Category.user_id == user_id))
            await self.session.execute(delete(Goal).where(Goal.user_id == user_id))
            await self.session.execute(delete(User).where(User.id == user_id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def get_user_stats(self, user: User) -> Dict[str, Any]:
        transactions = await self.get_user_transactions(user.id)
        return statistics.user_stats(user.created_at, transactions, datetime.utcnow())

    # ----------------------------------------------------------- transactions

    async def get_user_transactions(self, user_id: int) -> List[Transaction]:
        try:
            result = await self.session.execute(
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            )
        except DBAPIError as e:
            if _is_missing_relation(e):
                logger.warning(f"Transactions table missing, returning no transactions: {e}")
                await self.session.rollback()
                return []
            raise
        return list(result.scalars().all())

    async def get_transactions_between(self, user_id: int, start: datetime, end: datetime) -> List[Transaction]:
        result = await self.session.execute(
            select(Transaction).where(
                Transaction.user_id == user_id,
                Transaction.date >= start,
                Transaction.date < end,
            )
        )
        return list(result.scalars().all())

    async def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return await self.session.get(Transaction, transaction_id)

    async def create_transaction(
        self,
        user_id: int,
        type: EntryType,
        amount: Decimal,
        category: str,
        description: str,
        date: datetime,
        eco_impact: Decimal,
    ) -> Transaction:
        transaction = Transaction(
            user_id=user_id,
            type=type,
            amount=amount,
            category=category,
            description=description,
            date=date,
            eco_impact=eco_impact,
        )
        self.session.add(transaction)
        await self.session.commit()
        await self.session.refresh(transaction)
        return transaction

    async def delete_transaction(self, transaction_id: int) -> None:
        await self.session.execute(delete(Transaction).where(Transaction.id == transaction_id))
        await self.session.commit()

    # ------------------------------------------------------------- categories

    async def get_user_categories(self, user_id: int, type: Optional[EntryType] = None) -> List[Category]:
        query = select(Category).where(Category.user_id == user_id)
        if type is not None:
            query = query.where(Category.type == type)
        result = await self.session.execute(query.order_by(Category.id))
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Optional[Category]:
        return await self.session.get(Category, category_id)

    async def create_category(self, user_id: int, name: str, type: EntryType) -> Category:
        category = Category(user_id=user_id, name=name, type=type)
        self.session.add(category)
        await self.session.commit()
        await self.session.refresh(category)
        return category

    async def delete_category(self, category_id: int) -> None:
        await self.session.execute(delete(Category).where(Category.id == category_id))
        await self.session.commit()

    # ------------------------------------------------------ dashboard/reports

    async def get_dashboard_stats(self, user_id: int) -> Dict[str, Any]:
        now = datetime.utcnow()
        start, end = statistics.month_bounds(now.month, now.year)
        transactions = await self.get_transactions_between(user_id, start, end)
        return statistics.dashboard_stats(transactions)

    async def get_monthly_report(self, user_id: int, month: int, year: int) -> Dict[str, Any]:
        start, end = statistics.month_bounds(month, year)
        transactions = await self.get_transactions_between(user_id, start, end)
        return statistics.monthly_report(transactions, month, year)

    # ------------------------------------------------------------------ goals

    async def get_user_goals(self, user_id: int) -> List[Goal]:
        try:
            result = await self.session.execute(
                select(Goal)
                .where(Goal.user_id == user_id)
                .order_by(Goal.created_at.desc(), Goal.id.desc())
            )
        except DBAPIError as e:
            if _is_missing_relation(e):
                logger.warning(f"Goals table missing, returning no goals: {e}")
                await self.session.rollback()
                return []
            raise
        return list(result.scalars().all())

    async def get_active_goals(self, user_id: int, today: Optional[date] = None) -> List[Goal]:
        today = today or datetime.utcnow().date()
        result = await self.session.execute(
            select(Goal)
            .where(
                Goal.user_id == user_id,
                Goal.target_amount > Goal.current_saved,
                or_(Goal.target_date.is_(None), Goal.target_date >= today),
            )
            .order_by(Goal.created_at.desc(), Goal.id.desc())
        )
        return list(result.scalars().all())

    async def get_goal(self, goal_id: int) -> Optional[Goal]:
        return await self.session.get(Goal, goal_id)

    async def create_goal(
        self,
        user_id: int,
        name: str,
        target_amount: Decimal,
        description: Optional[str] = None,
        target_date: Optional[date] = None,
    ) -> Goal:
        goal = Goal(
            user_id=user_id,
            name=name,
            description=description,
            target_amount=target_amount,
            current_saved=Decimal(0),
            target_date=target_date,
            completed=False,
        )
        self.session.add(goal)
        await self.session.commit()
        await self.session.refresh(goal)
        return goal

    async def update_goal(self, goal: Goal, **changes: Any) -> Goal:
        for name, value in changes.items():
            setattr(goal, name, value)
        goal.updated_at = datetime.utcnow()
        await self.session.commit()
        await self.session.refresh(goal)
        return goal

    async def delete_goal(self, goal_id: int) -> None:
        await self.session.execute(delete(Goal).where(Goal.id == goal_id))
        await self.session.commit()

    async def update_goal_progress(self, goal_id: int, amount: Decimal) -> Optional[Goal]:
        """Add ``amount`` to the goal's savings with a single UPDATE (no read-modify-write)."""
        try:
            result = await self.session.execute(
                update(Goal)
                .where(Goal.id == goal_id, Goal.current_saved + amount < MAX_AMOUNT)
                .values(current_saved=Goal.current_saved + amount, updated_at=datetime.utcnow())
                .execution_options(synchronize_session=False)
            )
            credited = result.rowcount > 0
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        if not credited:
            logger.warning(f"Goal {goal_id} not credited: missing, or savings would reach {MAX_AMOUNT}")
        goal = await self.session.get(Goal, goal_id, populate_existing=True)
        return goal


def get_storage(session: AsyncSession = Depends(get_async_session)) -> DatabaseStorage:
    """FastAPI dependency giving each request its own storage instance."""
    return DatabaseStorage(session)
