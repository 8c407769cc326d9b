"""
Request Models
==============
Pydantic models for outbound product requests.

``to_api_payload`` renders the SNAP body: amounts as
``{"value": "10000.00", "currency": "IDR"}``, timestamps in UTC+7 and a
``callbackUrl`` under the configured callback base URL.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..config import PakaiLinkConfig
from ..signature import JAKARTA_TZ
from .enums import BankCode

REFERENCE_ALPHABET = string.ascii_letters + string.digits
REFERENCE_LENGTH = 40


def generate_reference_no(length: int = REFERENCE_LENGTH) -> str:
    """Random alphanumeric partner reference number."""
    return "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(length))


def format_amount(amount: float, currency: str = "IDR") -> Dict[str, str]:
    return {"value": f"{amount:.2f}", "currency": currency}


def format_datetime(value: datetime) -> str:
    """``YYYY-MM-DDThh:mm:ss+07:00``. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(JAKARTA_TZ).isoformat(timespec="seconds")


def expires_in(hours: float = 0, minutes: float = 0) -> str:
    return format_datetime(datetime.now(timezone.utc) + timedelta(hours=hours, minutes=minutes))


class PaymentRequest(BaseModel):
    """Fields shared by every product request."""
    amount: float = Field(..., gt=0)
    partner_reference_no: Optional[str] = None
    additional_info: Dict[str, Any] = Field(default_factory=dict)

    def reference_no(self) -> str:
        # Generated once so repeated payload renders agree.
        if not self.partner_reference_no:
            self.partner_reference_no = generate_reference_no()
        return self.partner_reference_no

    def _additional_info(self, defaults: Dict[str, Any]) -> Dict[str, Any]:
        return {**defaults, **self.additional_info}


class CreateVirtualAccount(PaymentRequest):
    customer_name: str
    bank_code: str
    customer_no: Optional[str] = None
    virtual_account_phone: Optional[str] = None
    virtual_account_email: Optional[str] = None
    expired_date: Optional[datetime] = None

    @field_validator("bank_code", mode="before")
    @classmethod
    def _bank_code_value(cls, value: Union[BankCode, str]) -> str:
        return value.value if isinstance(value, BankCode) else value

    def to_api_payload(self, config: PakaiLinkConfig) -> Dict[str, Any]:
        reference_no = self.reference_no()
        return {
            "partnerReferenceNo": reference_no,
            "customerNo": self.customer_no or reference_no[-15:],
            "virtualAccountName": self.customer_name,
            "virtualAccountPhone": self.virtual_account_phone,
            "virtualAccountEmail": self.virtual_account_email,
            "expiredDate": format_datetime(self.expired_date) if self.expired_date else expires_in(hours=24),
            "totalAmount": format_amount(self.amount),
            "additionalInfo": self._additional_info({
                "callbackUrl": config.callback_url("virtual-account"),
                "bankCode": self.bank_code,
            }),
        }


class GenerateQris(PaymentRequest):
    merchant_id: str
    store_id: Optional[str] = None
    terminal_id: Optional[str] = None
    validity_period: Optional[datetime] = None

    def to_api_payload(self, config: PakaiLinkConfig) -> Dict[str, Any]:
        return {
            "merchantId": self.merchant_id,
            "storeId": self.store_id or "PAKAILINK",
            "terminalId": self.terminal_id or f"ID{int(datetime.now(timezone.utc).timestamp())}",
            "partnerReferenceNo": self.reference_no(),
            "amount": format_amount(self.amount),
            "validityPeriod": format_datetime(self.validity_period) if self.validity_period else expires_in(hours=1),
            "additionalInfo": self._additional_info({
                "callbackUrl": config.callback_url("qris"),
            }),
        }


class CreateEmoneyPayment(PaymentRequest):
    customer_id: str
    customer_name: str
    customer_phone: str
    product_code: str
    emoney_phone: str
    customer_email: Optional[str] = None
    expired_date: Optional[datetime] = None
    bill_title: Optional[str] = None

    def to_api_payload(self, config: PakaiLinkConfig) -> Dict[str, Any]:
        return {
            "partnerReferenceNo": self.reference_no(),
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "customerEmail": self.customer_email,
            "expiredDate": format_datetime(self.expired_date) if self.expired_date else expires_in(hours=24),
            "totalAmount": format_amount(self.amount),
            "additionalInfo": self._additional_info({
                "productCode": self.product_code,
                "emoneyPhone": self.emoney_phone,
                "billTitle": self.bill_title or "Payment Order",
                "callbackUrl": config.callback_url("emoney"),
            }),
        }


class CreateRetailPayment(PaymentRequest):
    customer_id: str
    customer_name: str
    product_code: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    expired_date: Optional[datetime] = None
    remark: Optional[str] = None

    def to_api_payload(self, config: PakaiLinkConfig) -> Dict[str, Any]:
        return {
            "partnerReferenceNo": self.reference_no(),
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "customerEmail": self.customer_email,
            "expiredDate": format_datetime(self.expired_date) if self.expired_date else expires_in(hours=24),
            "totalAmount": format_amount(self.amount),
            "additionalInfo": self._additional_info({
                "productCode": self.product_code,
                "remark": self.remark or "",
                "callbackUrl": config.callback_url("retail"),
            }),
        }


class TransferToBank(PaymentRequest):
    beneficiary_bank_code: str
    beneficiary_account_number: str
    session_id: Optional[str] = None
    remark: Optional[str] = None

    @field_validator("beneficiary_bank_code", mode="before")
    @classmethod
    def _bank_code_value(cls, value: Union[BankCode, str]) -> str:
        return value.value if isinstance(value, BankCode) else value

    def to_api_payload(self, config: PakaiLinkConfig) -> Dict[str, Any]:
        session_id = self.session_id or f"INQ{secrets.randbelow(9999999) + 1:07d}"
        return {
            "partnerReferenceNo": self.reference_no(),
            "beneficiaryAccountNumber": self.beneficiary_account_number,
            "beneficiaryBankCode": self.beneficiary_bank_code,
            "sessionId": session_id,
            "amount": format_amount(self.amount),
            "additionalInfo": self._additional_info({
                "callbackUrl": config.callback_url("transfer"),
                "remark": self.remark or "",
            }),
        }

    def to_inquiry_payload(self) -> Dict[str, Any]:
        return {
            "partnerReferenceNo": self.reference_no(),
            "beneficiaryAccountNumber": self.beneficiary_account_number,
            "amount": format_amount(self.amount),
            "additionalInfo": {"beneficiaryBankCode": self.beneficiary_bank_code},
        }


class TopupPayment(PaymentRequest):
    customer_number: str
    product_code: str
    session_id: str

    def to_api_payload(self, config: PakaiLinkConfig) -> Dict[str, Any]:
        return {
            "partnerReferenceNo": self.reference_no(),
            "customerNumber": self.customer_number,
            "productCode": self.product_code,
            "sessionId": self.session_id,
            "amount": format_amount(self.amount),
            "additionalInfo": self._additional_info({
                "callbackUrl": config.callback_url("topup"),
            }),
        }
