"""
currency.py — Local currency for salary figures.

The salary analyzer asks Gemini to answer in the currency of the country the
user picked. Countries not listed here are priced in US dollars.
"""

DEFAULT_CURRENCY = "USD"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "SGD": "S$",
    "AED": "د.إ",
    "BRL": "R$",
    "MXN": "Mex$",
    "ZAR": "R",
    "KRW": "₩",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "PLN": "zł",
    "ILS": "₪",
    "NZD": "NZ$",
    "ARS": "ARS$",
}

COUNTRY_CURRENCY: dict[str, str] = {
    "United States": "USD",
    "United Kingdom": "GBP",
    "Canada": "CAD",
    "Australia": "AUD",
    "Germany": "EUR",
    "France": "EUR",
    "Netherlands": "EUR",
    "Switzerland": "CHF",
    "Singapore": "SGD",
    "United Arab Emirates": "AED",
    "India": "INR",
    "China": "CNY",
    "Japan": "JPY",
    "South Korea": "KRW",
    "Brazil": "BRL",
    "Mexico": "MXN",
    "Spain": "EUR",
    "Italy": "EUR",
    "Poland": "PLN",
    "Ireland": "EUR",
    "Sweden": "SEK",
    "Norway": "NOK",
    "Denmark": "DKK",
    "Finland": "EUR",
    "Belgium": "EUR",
    "Austria": "EUR",
    "New Zealand": "NZD",
    "Israel": "ILS",
    "South Africa": "ZAR",
    "Argentina": "ARS",
}


def currency_for(country: str) -> tuple[str, str]:
    """(code, symbol) for *country*, exact name match."""
    code = COUNTRY_CURRENCY.get(country, DEFAULT_CURRENCY)
    return code, CURRENCY_SYMBOLS.get(code, "$")
