"""
Product Enums
=============
Bank codes, transaction types and merchant-side transaction states.
"""

from enum import Enum
from typing import Dict, List


class BankCode(str, Enum):
    """Indonesian bank codes accepted for VA creation and transfers."""
    # Major banks
    BRI = "002"
    MANDIRI = "008"
    BNI = "009"
    DANAMON = "011"
    PERMATA = "013"
    BCA = "014"
    MAYBANK = "016"
    PANIN = "019"
    CIMB = "022"
    OCBC = "028"
    BTN = "200"

    # Syariah banks
    MUAMALAT = "147"
    BSI = "451"
    BCA_SYARIAH = "536"

    # Digital banks
    NEO = "490"
    JAGO = "542"
    SEABANK = "535"

    @property
    def label(self) -> str:
        return BANK_LABELS[self]

    @property
    def is_syariah(self) -> bool:
        return self in (BankCode.MUAMALAT, BankCode.BSI, BankCode.BCA_SYARIAH)

    @property
    def is_digital(self) -> bool:
        return self in (BankCode.NEO, BankCode.JAGO, BankCode.SEABANK)

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return any(bank.value == value for bank in cls)

    @classmethod
    def popular(cls) -> List["BankCode"]:
        return [cls.BRI, cls.MANDIRI, cls.BNI, cls.BCA, cls.CIMB, cls.PERMATA]

    @classmethod
    def select_options(cls) -> Dict[str, str]:
        return {bank.value: bank.label for bank in cls}


BANK_LABELS = {
    BankCode.BRI: "Bank BRI",
    BankCode.MANDIRI: "Bank Mandiri",
    BankCode.BNI: "Bank BNI",
    BankCode.DANAMON: "Bank Danamon",
    BankCode.PERMATA: "Bank Permata",
    BankCode.BCA: "Bank BCA",
    BankCode.MAYBANK: "Maybank",
    BankCode.PANIN: "Bank Panin",
    BankCode.CIMB: "Bank CIMB Niaga",
    BankCode.OCBC: "Bank OCBC NISP",
    BankCode.BTN: "Bank BTN",
    BankCode.MUAMALAT: "Bank Muamalat",
    BankCode.BSI: "Bank Syariah Indonesia",
    BankCode.BCA_SYARIAH: "Bank BCA Syariah",
    BankCode.NEO: "Bank Neo",
    BankCode.JAGO: "Bank Jago",
    BankCode.SEABANK: "SeaBank Indonesia",
}


class TransactionType(str, Enum):
    VIRTUAL_ACCOUNT = "virtual_account"
    QRIS = "qris"
    EWALLET = "ewallet"
    RETAIL = "retail"
    TRANSFER_BANK = "transfer_bank"
    TRANSFER_VA = "transfer_va"
    TOP_UP = "top_up"
    BALANCE_INQUIRY = "balance_inquiry"

    @property
    def is_deposit(self) -> bool:
        return self in (
            TransactionType.VIRTUAL_ACCOUNT,
            TransactionType.QRIS,
            TransactionType.EWALLET,
            TransactionType.RETAIL,
            TransactionType.TOP_UP,
        )

    @property
    def is_withdrawal(self) -> bool:
        return self in (TransactionType.TRANSFER_BANK, TransactionType.TRANSFER_VA)


class MerchantTransactionStatus(str, Enum):
    """
    Lifecycle of a transaction as tracked by the merchant.

    Callback records classify the provider's status codes into the narrower
    success/pending/failed set (``callbacks.TransactionStatus``).
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

    @property
    def is_final(self) -> bool:
        return self in (
            MerchantTransactionStatus.SUCCESS,
            MerchantTransactionStatus.FAILED,
            MerchantTransactionStatus.EXPIRED,
            MerchantTransactionStatus.CANCELLED,
        )

    @property
    def is_pending(self) -> bool:
        return self in (MerchantTransactionStatus.PENDING, MerchantTransactionStatus.PROCESSING)
