"""Data models for YNAB budgets and transactions."""
from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from finance_wizard.utils.exceptions import ValidationError


class ClearedStatus(str, Enum):
    CLEARED = "cleared"
    UNCLEARED = "uncleared"
    RECONCILED = "reconciled"


@dataclass(frozen=True)
class Transaction:
    """Transaction data, amount in major currency units (negative = outflow)."""
    id: str
    date: date
    amount: float
    account_id: str
    account_name: str
    cleared: ClearedStatus = ClearedStatus.UNCLEARED
    approved: bool = False
    memo: Optional[str] = None
    flag_color: Optional[str] = None
    payee_id: Optional[str] = None
    payee_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    transfer_account_id: Optional[str] = None
    transfer_transaction_id: Optional[str] = None
    matched_transaction_id: Optional[str] = None
    import_id: Optional[str] = None
    deleted: bool = False

    @property
    def month(self) -> str:
        """Calendar month bucket, YYYY-MM."""
        return self.date.strftime("%Y-%m")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        data["cleared"] = self.cleared.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Rebuild a transaction from ``to_dict`` output (cache format)."""
        return TransactionSchema.model_validate(data).to_transaction(milliunits=False)


class TransactionSchema(BaseModel):
    """Pydantic schema for a YNAB API transaction payload."""
    id: str
    date: date
    amount: float
    memo: Optional[str] = None
    cleared: ClearedStatus = ClearedStatus.UNCLEARED
    approved: bool = False
    flag_color: Optional[str] = None
    account_id: str
    account_name: str = ""
    payee_id: Optional[str] = None
    payee_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    transfer_account_id: Optional[str] = None
    transfer_transaction_id: Optional[str] = None
    matched_transaction_id: Optional[str] = None
    import_id: Optional[str] = None
    deleted: bool = False

    def to_transaction(self, milliunits: bool = True) -> Transaction:
        """Convert to a Transaction, scaling API milliunits to major units."""
        fields = self.model_dump()
        if milliunits:
            fields["amount"] = self.amount / 1000
        return Transaction(**fields)


@dataclass
class Budget:
    """Budget summary as listed by the YNAB API."""
    id: str
    name: str
    last_modified_on: Optional[str] = None
    currency_symbol: str = "$"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Budget":
        currency = data.get("currency_format") or {}
        return cls(
            id=data["id"],
            name=data["name"],
            last_modified_on=data.get("last_modified_on"),
            currency_symbol=currency.get("currency_symbol", "$")
        )


def parse_transactions(payload: List[Dict[str, Any]]) -> List[Transaction]:
    """Validate API payloads, drop deleted records and convert milliunits."""
    transactions = []
    for raw in payload:
        try:
            txn = TransactionSchema.model_validate(raw)
        except PydanticValidationError as e:
            raise ValidationError(f"Malformed transaction {raw.get('id', '?')} from YNAB: {e}")
        if txn.deleted:
            continue
        transactions.append(txn.to_transaction())
    return transactions
