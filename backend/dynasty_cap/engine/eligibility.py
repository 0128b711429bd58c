"""Eligibility rules shared by turnover, extension, tag and option operations.

A contract is in its final year once turnover has consumed its last
contracted season, i.e. ``years_remaining == 0``. Every call site goes
through :func:`is_final_year` so the threshold cannot drift.
"""

from __future__ import annotations

from typing import Optional

from dynasty_cap.engine.errors import EligibilityError
from dynasty_cap.engine.records import ContractRecord, ContractStatus

FINAL_YEAR_REMAINING = 0


def is_final_year(contract: ContractRecord) -> bool:
    return contract.years_remaining == FINAL_YEAR_REMAINING


def extension_block_reason(contract: ContractRecord) -> Optional[str]:
    if contract.has_been_extended:
        return "already_extended"
    if contract.has_been_tagged:
        return "tagged_contract"
    if contract.status is not ContractStatus.ACTIVE:
        return "status"
    if not is_final_year(contract):
        return "not_final_year"
    return None


def tag_block_reason(contract: ContractRecord) -> Optional[str]:
    if contract.has_been_tagged:
        return "already_tagged"
    if contract.status not in (ContractStatus.ACTIVE, ContractStatus.EXTENDED):
        return "status"
    if not is_final_year(contract):
        return "not_final_year"
    return None


def can_extend(contract: ContractRecord) -> bool:
    return extension_block_reason(contract) is None


def can_tag(contract: ContractRecord) -> bool:
    return tag_block_reason(contract) is None


_MESSAGES = {
    "status": "Contract status {status} does not allow this operation",
    "already_extended": "Contract has already been extended once",
    "tagged_contract": "A tagged contract cannot be extended",
    "already_tagged": "Contract has already been franchise tagged",
    "not_final_year": "Only contracts in their final year qualify (years remaining: {years})",
}


def raise_if_blocked(contract: ContractRecord, reason: Optional[str]) -> None:
    if reason is None:
        return
    message = _MESSAGES[reason].format(
        status=contract.status.value, years=contract.years_remaining
    )
    raise EligibilityError(message, contract_id=contract.id, rule=reason)
