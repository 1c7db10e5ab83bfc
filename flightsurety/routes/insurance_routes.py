"""Routes for insurance purchases, entitlements and withdrawals."""

import logging
from typing import List
from fastapi import APIRouter, Depends

from ..schemas.common import TransactionRequest
from ..schemas.insurance_schemas import BuyPolicyRequest, EntitlementResponse, PolicyResponse, WithdrawResponse
from ..services.contract_service import ContractService
from ..services.singleton import get_contract_service
from ..utils import format_ether

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insurance", tags=["insurance"])


@router.post("", response_model=PolicyResponse)
def buy_insurance_policy(request: BuyPolicyRequest, service: ContractService = Depends(get_contract_service)):
    """
    Buy insurance for the sending passenger.

    Returns:
        The new policy
    """
    policy = service.app.buy_insurance_policy(
        request.airline, request.flight, request.timestamp, request.sender, request.value
    )
    return PolicyResponse(**policy.model_dump())


@router.get("/{passenger}/policies", response_model=List[PolicyResponse])
def list_policies(passenger: str, service: ContractService = Depends(get_contract_service)):
    return [PolicyResponse(**p.model_dump()) for p in service.app.list_policies(passenger)]


@router.get("/{passenger}/entitlement", response_model=EntitlementResponse)
def get_passenger_entitlement(passenger: str, service: ContractService = Depends(get_contract_service)):
    amount = service.app.get_passenger_entitlement(passenger)
    return EntitlementResponse(passenger=passenger.lower(), amount=amount, amount_formatted=format_ether(amount))


@router.post("/{passenger}/withdraw", response_model=WithdrawResponse)
def withdraw_insurance_claim(
    passenger: str,
    request: TransactionRequest,
    service: ContractService = Depends(get_contract_service),
):
    """
    Pay out the passenger's credited claims.

    Returns:
        Amount transferred to the passenger
    """
    amount = service.app.withdraw_insurance_claim(passenger, request.sender)
    return WithdrawResponse(passenger=passenger.lower(), amount=amount, amount_formatted=format_ether(amount))
