import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import load_owned
from app.models.transaction import EntryType
from app.schemas.transaction import Transaction as TransactionSchema, TransactionCreate
from app.services.auth import CurrentUser, get_current_user
from app.services.eco import eco_impact
from app.services.storage import DatabaseStorage, get_storage

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[TransactionSchema])
@router.get("", response_model=List[TransactionSchema])  # Allow path without trailing slash
async def list_transactions(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """List the caller's transactions, newest first."""
    return await storage.get_user_transactions(current_user.user_id)


@router.post("/", response_model=TransactionSchema)
@router.post("", response_model=TransactionSchema)  # Allow without trailing slash
async def create_transaction(
    payload: TransactionCreate,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """
    Record a transaction and derive its eco impact.

    Income linked to a goal also adds to that goal's savings. The insert and
    the goal update are separate statements; a failed goal update is logged
    and the transaction is kept.
    """
    credit_goal = payload.goal_id is not None and payload.type == EntryType.income
    if credit_goal:
        # Ownership is checked up front so a foreign goal never gets credited
        await load_owned(storage.get_goal, payload.goal_id, current_user, name="Goal")

    transaction = await storage.create_transaction(
        user_id=current_user.user_id,
        type=payload.type,
        amount=payload.amount,
        category=payload.category,
        description=payload.description,
        date=payload.date,
        eco_impact=eco_impact(payload.amount, payload.category),
    )

    if credit_goal:
        try:
            await storage.update_goal_progress(payload.goal_id, payload.amount)
        except Exception:
            logger.exception(
                f"Transaction {transaction.id} saved but goal {payload.goal_id} progress was not updated"
            )

    return transaction


@router.get("/{transaction_id}", response_model=TransactionSchema)
async def get_transaction(
    transaction_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await load_owned(storage.get_transaction, transaction_id, current_user, name="Transaction")


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_transaction(
    transaction_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    await load_owned(storage.get_transaction, transaction_id, current_user, name="Transaction")
    await storage.delete_transaction(transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
