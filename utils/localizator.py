import json
from pathlib import Path
from typing import Optional

import config
from enums.l10n_section import L10nSection


class Localizator:
    l10n_dir = Path(__file__).resolve().parent.parent / "l10n"

    @staticmethod
    def get_text(section: L10nSection, key: str, lang: Optional[str] = None) -> str:
        """
        Get localized text for given section and key.

        Args:
            section: Text section (CART, CHECKOUT, COMMON)
            key: Localization key
            lang: Optional language code (e.g., "tr", "en").
                  If None, uses config.MENU_LANGUAGE (default).
                  Pass it explicitly when one process serves menus
                  in several languages.

        Returns:
            Localized text string (placeholders are left for the caller to format)

        Example:
            text = Localizator.get_text(L10nSection.CART, "modifier_required", lang="en")
            text.format(modifier_name="Size")
        """
        # Use provided lang or fall back to global config
        language = lang if lang is not None else config.MENU_LANGUAGE
        localization_file = Localizator.l10n_dir / f"{language}.json"

        with open(localization_file, "r", encoding="UTF-8") as f:
            data = json.loads(f.read())
            return data[section.value][key]

    @staticmethod
    def get_currency_symbol(currency: str, lang: Optional[str] = None) -> str:
        """Currency symbol for an ISO code; unknown codes are returned as-is."""
        try:
            return Localizator.get_text(L10nSection.COMMON, f"{currency.lower()}_symbol", lang=lang)
        except KeyError:
            return currency.upper()

    @staticmethod
    def get_currency_text(currency: str, lang: Optional[str] = None) -> str:
        try:
            return Localizator.get_text(L10nSection.COMMON, f"{currency.lower()}_text", lang=lang)
        except KeyError:
            return currency.upper()
