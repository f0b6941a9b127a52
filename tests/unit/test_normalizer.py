"""
Tests for ShipStation -> CarrierService rate normalization.
"""
from datetime import datetime, timezone

from rates_bridge.modules.shipping.models import ProviderRate
from rates_bridge.modules.shipping.normalizer import format_timestamp, normalize

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class TestNormalize:
    """Field mapping and defaults."""

    def test_full_record(self):
        rate = ProviderRate.from_dict({
            "carrierCode": "stamps_com",
            "carrierFriendlyName": "Stamps.com",
            "serviceCode": "usps_priority_mail",
            "serviceName": "USPS Priority Mail",
            "shipmentCost": 8.42,
            "deliveryDays": 2,
        })

        result = normalize(rate, now=NOW)

        assert result.service_name == "Stamps.com USPS Priority Mail"
        assert result.service_code == "stamps_com:usps_priority_mail"
        assert result.total_price == 842
        assert result.currency == "USD"
        assert result.delivery_date == "2026-10-21T12:00:00.000Z"

    def test_missing_every_field(self):
        result = normalize(ProviderRate(), now=NOW).to_dict()

        assert result == {
            "service_name": "Carrier Service",
            "service_code": "UNKNOWN:Service",
            "total_price": 0,
            "currency": "USD",
        }
        assert "delivery_date" not in result

    def test_amount_falls_back_to_shipping_amount(self):
        rate = ProviderRate(carrier_code="ups", service_code="ground", shipping_amount="12.10")
        assert normalize(rate).total_price == 1210

    def test_zero_shipment_cost_falls_back_to_shipping_amount(self):
        rate = ProviderRate(carrier_code="ups", shipment_cost=0, shipping_amount=3.25)
        assert normalize(rate).total_price == 325

    def test_service_name_falls_back_to_service_code(self):
        rate = ProviderRate(carrier_code="fedex", service_code="fedex_ground")
        result = normalize(rate)
        assert result.service_name == "fedex fedex_ground"
        assert result.service_code == "fedex:fedex_ground"

    def test_service_code_falls_back_to_service_name(self):
        rate = ProviderRate(carrier_code="fedex", service_name="  Home Delivery ")
        assert normalize(rate).service_code == "fedex:Home Delivery"

    def test_display_name_collapses_whitespace(self):
        rate = ProviderRate(
            carrier_code="ups",
            carrier_name="  UPS\t ",
            service_name="Next   Day\nAir",
        )
        assert normalize(rate).service_name == "UPS Next Day Air"

    def test_negative_amount_clamps_to_zero(self):
        rate = ProviderRate(carrier_code="ups", shipment_cost=-4.00)
        assert normalize(rate).total_price == 0

    def test_non_numeric_amount_is_zero(self):
        rate = ProviderRate(carrier_code="ups", shipment_cost="call us")
        assert normalize(rate).total_price == 0


class TestDeliveryDate:
    """delivery_date only for non-negative numeric deliveryDays."""

    def test_zero_days_is_today(self):
        rate = ProviderRate(carrier_code="ups", delivery_days=0)
        assert normalize(rate, now=NOW).delivery_date == "2026-10-19T12:00:00.000Z"

    def test_negative_days_omitted(self):
        rate = ProviderRate(carrier_code="ups", delivery_days=-1)
        assert "delivery_date" not in normalize(rate, now=NOW).to_dict()

    def test_string_days_omitted(self):
        rate = ProviderRate(carrier_code="ups", delivery_days="3")
        assert normalize(rate, now=NOW).delivery_date is None

    def test_bool_days_omitted(self):
        rate = ProviderRate(carrier_code="ups", delivery_days=True)
        assert normalize(rate, now=NOW).delivery_date is None

    def test_more_days_never_earlier(self):
        dates = [
            normalize(ProviderRate(carrier_code="ups", delivery_days=d)).delivery_date
            for d in (1, 2, 5)
        ]
        assert dates == sorted(dates)

    def test_format_timestamp_converts_to_utc(self):
        from datetime import timedelta
        eastern = timezone(timedelta(hours=-5))
        moment = datetime(2026, 10, 19, 7, 30, 0, 123456, tzinfo=eastern)
        assert format_timestamp(moment) == "2026-10-19T12:30:00.123Z"


def test_normalize_is_idempotent():
    rate = ProviderRate.from_dict({
        "carrierCode": "stamps_com",
        "serviceCode": "usps_ground_advantage",
        "serviceName": "USPS Ground Advantage",
        "shipmentCost": 4.89,
        "otherCost": 0.0,
    })
    assert normalize(rate).to_dict() == normalize(rate).to_dict()


def test_from_dict_fills_carrier_code_from_request():
    rate = ProviderRate.from_dict({"serviceCode": "ups_ground", "shipmentCost": 9.1}, carrier_code="ups")
    assert normalize(rate).service_code == "ups:ups_ground"


def test_absurd_cost_still_normalizes():
    result = normalize(ProviderRate(carrier_code="ups", service_code="ground", shipment_cost=1e30))
    assert result.total_price == 10 ** 32
    assert result.service_code == "ups:ground"
