"""
Product Services
================
Async wrappers over ApiClient for each PakaiLink product.
"""

from .balance import BalanceService
from .emoney import EmoneyService
from .enums import BankCode, MerchantTransactionStatus, TransactionType
from .merchant import MerchantService
from .models import (
    CreateEmoneyPayment,
    CreateRetailPayment,
    CreateVirtualAccount,
    GenerateQris,
    TopupPayment,
    TransferToBank,
    format_amount,
    format_datetime,
    generate_reference_no,
)
from .qris import QrisService
from .retail import RetailService
from .topup import TopupService
from .transfer import TransferService
from .virtual_account import VirtualAccountService

__all__ = [
    # Services
    "VirtualAccountService",
    "QrisService",
    "EmoneyService",
    "TransferService",
    "RetailService",
    "TopupService",
    "BalanceService",
    "MerchantService",
    # Request models
    "CreateVirtualAccount",
    "GenerateQris",
    "CreateEmoneyPayment",
    "CreateRetailPayment",
    "TransferToBank",
    "TopupPayment",
    "format_amount",
    "format_datetime",
    "generate_reference_no",
    # Enums
    "BankCode",
    "TransactionType",
    "MerchantTransactionStatus",
]
