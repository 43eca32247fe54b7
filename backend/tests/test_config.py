"""
Tests per la configurazione (validatori di Settings).
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from sales_manager.core.config import Settings


def make_settings(**kwargs):
    return Settings(_env_file=None, **kwargs)


class TestSettings:
    def test_defaults(self):
        settings = make_settings()

        assert settings.tax_rate == Decimal("0.19")
        assert settings.default_currency == "DZD"
        assert settings.reminder_days_before_due == [7, 3, 1]
        assert settings.reminder_days_after_due == [30, 14, 7, 1]
        assert settings.aging_bucket_bounds == [30, 60, 90]
        assert settings.reminders_auto_send is False

    def test_tax_rate_with_comma(self):
        assert make_settings(tax_rate="0,17").tax_rate == Decimal("0.17")

    def test_tax_rate_out_of_range(self):
        with pytest.raises(ValidationError):
            make_settings(tax_rate="1.5")

    def test_currency_is_uppercased(self):
        assert make_settings(default_currency="eur").default_currency == "EUR"

    def test_currency_must_be_alphabetic(self):
        with pytest.raises(ValidationError):
            make_settings(default_currency="E1R")

    @pytest.mark.parametrize("offsets", [[0, 3], [3, 3], [-1]])
    def test_invalid_reminder_offsets(self, offsets):
        with pytest.raises(ValidationError):
            make_settings(reminder_days_before_due=offsets)

    @pytest.mark.parametrize("bounds", [[], [0, 30], [30, 30], [60, 30]])
    def test_invalid_aging_bounds(self, bounds):
        with pytest.raises(ValidationError):
            make_settings(aging_bucket_bounds=bounds)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REMINDERS_AUTO_SEND", "true")
        monkeypatch.setenv("PAYMENT_TERMS_DAYS", "45")

        settings = make_settings()

        assert settings.reminders_auto_send is True
        assert settings.payment_terms_days == 45

    def test_settings_are_frozen(self):
        settings = make_settings()

        with pytest.raises(ValidationError):
            settings.tax_rate = Decimal("0.2")

    def test_production_rejects_memory_storage(self):
        with pytest.raises(ValidationError):
            make_settings(
                app_env="production",
                storage_backend="memory",
                cors_origins=["https://erp.zeralda.dz"],
            )
