"""
Unit Tests for Product Services and Request Models
==================================================
"""

import re
from datetime import datetime, timezone

import pytest

from pakailink_core.exceptions import ApiError, TransactionError
from pakailink_core.services import (
    BalanceService,
    BankCode,
    CreateEmoneyPayment,
    CreateRetailPayment,
    CreateVirtualAccount,
    EmoneyService,
    GenerateQris,
    MerchantService,
    MerchantTransactionStatus,
    QrisService,
    RetailService,
    TopupPayment,
    TopupService,
    TransactionType,
    TransferService,
    TransferToBank,
    VirtualAccountService,
    format_datetime,
    generate_reference_no,
)

SNAP_TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\+07:00")


class TestRequestModels:
    """Tests for SNAP payload rendering."""

    def test_virtual_account_payload(self, config):
        data = CreateVirtualAccount(amount=10000, customer_name="Budi", bank_code=BankCode.BRI)

        payload = data.to_api_payload(config)

        assert payload["totalAmount"] == {"value": "10000.00", "currency": "IDR"}
        assert payload["virtualAccountName"] == "Budi"
        assert payload["additionalInfo"] == {
            "callbackUrl": "https://merchant.test/api/pakailink/callbacks/virtual-account",
            "bankCode": "002",
        }
        assert SNAP_TIMESTAMP.fullmatch(payload["expiredDate"])
        assert len(payload["partnerReferenceNo"]) == 40
        assert payload["customerNo"] == payload["partnerReferenceNo"][-15:]

    def test_reference_is_stable_across_renders(self, config):
        data = GenerateQris(amount=5000, merchant_id="merchant-1")

        assert data.to_api_payload(config)["partnerReferenceNo"] == data.to_api_payload(config)["partnerReferenceNo"]

    def test_explicit_values_are_kept(self, config):
        data = CreateVirtualAccount(
            amount=12345.5,
            customer_name="Budi",
            bank_code="014",
            customer_no="0001",
            partner_reference_no="REF-1",
            expired_date=datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc),
            additional_info={"bankCode": "008", "note": "x"},
        )

        payload = data.to_api_payload(config)

        assert payload["partnerReferenceNo"] == "REF-1"
        assert payload["customerNo"] == "0001"
        assert payload["expiredDate"] == "2026-10-19T10:00:00+07:00"
        assert payload["totalAmount"]["value"] == "12345.50"
        assert payload["additionalInfo"]["bankCode"] == "008"
        assert payload["additionalInfo"]["note"] == "x"

    def test_qris_defaults(self, config):
        payload = GenerateQris(amount=5000, merchant_id="merchant-1").to_api_payload(config)

        assert payload["storeId"] == "PAKAILINK"
        assert payload["terminalId"].startswith("ID")
        assert payload["amount"] == {"value": "5000.00", "currency": "IDR"}
        assert payload["additionalInfo"]["callbackUrl"].endswith("/qris")

    def test_emoney_payload(self, config):
        data = CreateEmoneyPayment(
            amount=15000,
            customer_id="C-1",
            customer_name="Budi",
            customer_phone="0812",
            product_code="GOPAY",
            emoney_phone="0812",
        )

        info = data.to_api_payload(config)["additionalInfo"]

        assert info["productCode"] == "GOPAY"
        assert info["billTitle"] == "Payment Order"
        assert info["callbackUrl"].endswith("/emoney")

    def test_transfer_payloads(self, config):
        data = TransferToBank(amount=100000, beneficiary_bank_code=BankCode.BCA, beneficiary_account_number="888801")

        inquiry = data.to_inquiry_payload()
        transfer = data.to_api_payload(config)

        assert inquiry["additionalInfo"] == {"beneficiaryBankCode": "014"}
        assert inquiry["partnerReferenceNo"] == transfer["partnerReferenceNo"]
        assert re.fullmatch(r"INQ\d{7}", transfer["sessionId"])
        assert transfer["additionalInfo"]["callbackUrl"].endswith("/transfer")

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError):
            GenerateQris(amount=0, merchant_id="merchant-1")

    def test_naive_datetime_taken_as_utc(self):
        assert format_datetime(datetime(2026, 10, 19, 17, 0, 0)) == "2026-10-20T00:00:00+07:00"

    def test_generated_reference_is_alphanumeric(self):
        assert re.fullmatch(r"[A-Za-z0-9]{40}", generate_reference_no())


class TestEnums:

    def test_bank_code_helpers(self):
        assert BankCode.BRI.label == "Bank BRI"
        assert BankCode.BSI.is_syariah
        assert BankCode.JAGO.is_digital
        assert BankCode.is_valid("014")
        assert not BankCode.is_valid("999")
        assert BankCode.select_options()["008"] == "Bank Mandiri"

    def test_transaction_type_direction(self):
        assert TransactionType.QRIS.is_deposit
        assert TransactionType.TRANSFER_BANK.is_withdrawal
        assert not TransactionType.BALANCE_INQUIRY.is_deposit

    def test_merchant_status_finality(self):
        assert MerchantTransactionStatus.EXPIRED.is_final
        assert MerchantTransactionStatus.PROCESSING.is_pending


class TestServices:
    """Tests for the product service calls."""

    @pytest.mark.asyncio
    async def test_create_virtual_account(self, api_client, provider, config):
        provider.api_responses = [(200, {
            "responseCode": "2002700",
            "virtualAccountData": {"virtualAccountNo": "   123450001", "partnerReferenceNo": "REF-1"},
        })]
        service = VirtualAccountService(api_client)

        result = await service.create(
            CreateVirtualAccount(amount=10000, customer_name="Budi", bank_code="002", partner_reference_no="REF-1")
        )

        assert result["virtualAccountNo"] == "   123450001"
        assert result["responseCode"] == "2002700"
        assert provider.api_requests[0].url.path == config.endpoints.va_create
        assert provider.last_json["partnerReferenceNo"] == "REF-1"

    @pytest.mark.asyncio
    async def test_create_failure_wraps_in_transaction_error(self, api_client, provider):
        provider.api_responses = [(400, {"responseCode": "4002701", "responseMessage": "Invalid Field Format"})]
        service = QrisService(api_client)

        with pytest.raises(TransactionError) as exc_info:
            await service.generate(GenerateQris(amount=5000, merchant_id="merchant-1"))

        assert "Failed to generate QRIS" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ApiError)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_inquiry_failure_propagates_api_error(self, api_client, provider):
        provider.api_responses = [(404, {"responseCode": "4042701", "responseMessage": "Transaction Not Found"})]
        service = EmoneyService(api_client)

        with pytest.raises(ApiError) as exc_info:
            await service.inquiry_status("REF-1")

        assert not isinstance(exc_info.value, TransactionError)
        assert exc_info.value.provider_code == "4042701"

    @pytest.mark.asyncio
    async def test_inquiry_status_body(self, api_client, provider, config):
        provider.api_responses = [(200, {"latestTransactionStatus": "00", "transactionStatusDesc": "Success"})]
        service = RetailService(api_client)

        result = await service.inquiry_status("REF-RT-1")

        assert result["latestTransactionStatus"] == "00"
        assert provider.api_requests[0].url.path == config.endpoints.retail_inquiry
        assert provider.last_json == {"originalPartnerReferenceNo": "REF-RT-1"}

    @pytest.mark.asyncio
    async def test_retail_create(self, api_client, provider):
        service = RetailService(api_client)

        await service.create_payment(CreateRetailPayment(
            amount=50000, customer_id="C-1", customer_name="Siti", product_code="ALFAMART",
        ))

        assert provider.last_json["additionalInfo"]["productCode"] == "ALFAMART"
        assert provider.last_json["additionalInfo"]["remark"] == ""

    @pytest.mark.asyncio
    async def test_transfer_inquiry_then_transfer(self, api_client, provider, config):
        service = TransferService(api_client)
        data = TransferToBank(amount=100000, beneficiary_bank_code="014", beneficiary_account_number="888801")

        await service.inquiry(data)
        await service.transfer_to_bank(data)

        inquiry_request, transfer_request = provider.api_requests
        assert inquiry_request.url.path == config.endpoints.transfer_inquiry
        assert transfer_request.url.path == config.endpoints.transfer_bank

    @pytest.mark.asyncio
    async def test_topup_flow(self, api_client, provider, config):
        service = TopupService(api_client)

        await service.inquiry_customer("081234567890", "GOPAY", 20000)
        inquiry_body = provider.last_json
        await service.create_topup(TopupPayment(
            amount=20000, customer_number="081234567890", product_code="GOPAY", session_id="S-1",
        ))

        assert inquiry_body["additionalInfo"] == {"productCode": "GOPAY"}
        assert inquiry_body["amount"] == {"value": "20000.00", "currency": "IDR"}
        assert provider.last_json["sessionId"] == "S-1"
        assert provider.api_requests[1].url.path == config.endpoints.topup_payment

    @pytest.mark.asyncio
    async def test_balance_inquiry_uses_configured_account(self, api_client, provider):
        await BalanceService(api_client).inquiry()

        assert provider.last_json["balanceTypes"] == ["Balance"]
        assert provider.last_json["accountNo"] == "1234567890"

    @pytest.mark.asyncio
    async def test_balance_history_pages_as_strings(self, api_client, provider):
        provider.api_responses = [(200, {"detailData": [{"amount": {"value": "1.00"}}]})]

        result = await BalanceService(api_client).history(
            "2026-10-01T00:00:00+07:00", "2026-10-19T00:00:00+07:00", page_size=50, page_number=2
        )

        assert len(result["detailData"]) == 1
        assert provider.last_json["pageSize"] == "50"
        assert provider.last_json["pageNumber"] == "2"

    @pytest.mark.asyncio
    async def test_register_qris_merchant(self, api_client, provider, config):
        """Should post merchant and owner data with a generated 40-char reference."""
        provider.api_responses = [(200, {"responseCode": "2000000", "detailData": {"merchantName": "Toko"}})]

        result = await MerchantService(api_client).register_qris_merchant(
            {"merchantName": "Toko"}, {"ownerName": "Budi"}
        )

        assert result["detailData"]["merchantName"] == "Toko"
        assert provider.api_requests[0].url.path == config.endpoints.registration_qris
        body = provider.last_json
        assert re.fullmatch(r"[A-Za-z0-9]{40}", body["partnerReferenceNo"])
        assert body["merchantData"] == {"merchantName": "Toko"}
        assert body["ownerData"] == {"ownerName": "Budi"}

    @pytest.mark.asyncio
    async def test_register_dana_merchant_keeps_reference(self, api_client, provider, config):
        await MerchantService(api_client).register_dana_merchant(
            {"merchantName": "Warung"}, {"ownerName": "Siti"}, partner_reference_no="REF-DANA-1"
        )

        assert provider.api_requests[0].url.path == config.endpoints.registration_dana
        assert provider.last_json["partnerReferenceNo"] == "REF-DANA-1"

    @pytest.mark.asyncio
    async def test_registration_failure_propagates(self, api_client, provider):
        provider.api_responses = [(400, {"responseCode": "4000000", "responseMessage": "Bad Request"})]

        with pytest.raises(ApiError) as exc_info:
            await MerchantService(api_client).register_qris_merchant({"merchantName": "Toko"}, {})

        assert exc_info.value.provider_code == "4000000"
