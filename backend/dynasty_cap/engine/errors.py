"""Error kinds raised by the contract and cap engine."""

from __future__ import annotations

from typing import Any, Dict, Optional


class CapEngineError(Exception):
    """Base class for every rule violation reported by the engine."""

    kind = "engine"

    def __init__(
        self,
        message: str,
        *,
        contract_id: Optional[int] = None,
        rule: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.contract_id = contract_id
        self.rule = rule

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "message": self.message,
            "contract_id": self.contract_id,
            "rule": self.rule,
        }


class ValidationError(CapEngineError):
    """Malformed or out-of-range input (salary, years, acquisition type, config)."""

    kind = "validation"


class EligibilityError(CapEngineError):
    """The contract's current state does not allow the requested operation."""

    kind = "eligibility"


class LimitError(CapEngineError):
    """A league-level quota would be exceeded."""

    kind = "limit"
