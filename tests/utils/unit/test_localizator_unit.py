"""
Unit tests for Localizator.

Tests cover:
- Section/key lookup in tr and en
- Fallback to config.MENU_LANGUAGE
- Currency symbol / text with unknown-code pass-through
"""

import pytest
from unittest.mock import patch

from enums.l10n_section import L10nSection
from utils.localizator import Localizator


class TestGetText:

    def test_explicit_language(self):
        assert Localizator.get_text(L10nSection.CART, "empty", lang="en") == "Your cart is empty"
        assert Localizator.get_text(L10nSection.CART, "empty", lang="tr") == "Sepetiniz boş"

    @patch('config.MENU_LANGUAGE', 'en')
    def test_falls_back_to_menu_language(self):
        assert Localizator.get_text(L10nSection.CHECKOUT, "order_failed") == "The order could not be created, please try again"

    def test_placeholders_left_for_caller(self):
        text = Localizator.get_text(L10nSection.CART, "modifier_max_selections", lang="tr")
        assert text.format(modifier_name="Sos", max_selections=2) == "Sos için en fazla 2 seçim yapabilirsiniz"

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            Localizator.get_text(L10nSection.CART, "does_not_exist", lang="en")

    def test_all_languages_have_same_keys(self):
        import json
        tr = json.loads((Localizator.l10n_dir / "tr.json").read_text(encoding="utf-8"))
        en = json.loads((Localizator.l10n_dir / "en.json").read_text(encoding="utf-8"))
        assert {s: set(keys) for s, keys in tr.items()} == {s: set(keys) for s, keys in en.items()}


class TestCurrency:

    @pytest.mark.parametrize("currency, expected", [
        ("TRY", "₺"),
        ("try", "₺"),
        ("EUR", "€"),
        ("GBP", "GBP"),
    ])
    def test_symbol(self, currency, expected):
        assert Localizator.get_currency_symbol(currency, lang="tr") == expected

    def test_text(self):
        assert Localizator.get_currency_text("TRY", lang="tr") == "TL"
        assert Localizator.get_currency_text("chf", lang="en") == "CHF"
