"""
Currency utilities for payment processing.

Static currency metadata and exchange rates, plus conversion, formatting and
amount validation on top of them. Rates are expressed against the base
currency (USD) and are not fetched live.

Example::

    >>> convert_currency(Decimal('100.00'), 'USD', 'EUR')
    Decimal('85.00')
    >>> format_currency_amount(Decimal('1234.56'), 'JPY')
    '¥1,235'
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from types import MappingProxyType

from .exceptions import UnsupportedCurrencyError


BASE_CURRENCY = 'USD'


def _currency(code, name, symbol, decimal_places=2):
    return MappingProxyType({
        'code': code,
        'name': name,
        'symbol': symbol,
        'decimal_places': decimal_places,
    })


SUPPORTED_CURRENCIES = MappingProxyType({
    'USD': _currency('USD', 'US Dollar', '$'),
    'EUR': _currency('EUR', 'Euro', '€'),
    'GBP': _currency('GBP', 'British Pound', '£'),
    'INR': _currency('INR', 'Indian Rupee', '₹'),
    'JPY': _currency('JPY', 'Japanese Yen', '¥', decimal_places=0),
    'CAD': _currency('CAD', 'Canadian Dollar', 'C$'),
    'AUD': _currency('AUD', 'Australian Dollar', 'A$'),
    'CNY': _currency('CNY', 'Chinese Yuan', '¥'),
    'CHF': _currency('CHF', 'Swiss Franc', 'Fr'),
    'SGD': _currency('SGD', 'Singapore Dollar', 'S$'),
    'NZD': _currency('NZD', 'New Zealand Dollar', 'NZ$'),
    'MXN': _currency('MXN', 'Mexican Peso', 'Mex$'),
    'BRL': _currency('BRL', 'Brazilian Real', 'R$'),
    'ZAR': _currency('ZAR', 'South African Rand', 'R'),
    'HKD': _currency('HKD', 'Hong Kong Dollar', 'HK$'),
    'SEK': _currency('SEK', 'Swedish Krona', 'kr'),
    'NOK': _currency('NOK', 'Norwegian Krone', 'kr'),
    'DKK': _currency('DKK', 'Danish Krone', 'kr'),
    'AED': _currency('AED', 'United Arab Emirates Dirham', 'د.إ'),
    'SAR': _currency('SAR', 'Saudi Riyal', '﷼'),
})

# Units of each currency per 1 USD
EXCHANGE_RATES = MappingProxyType({
    'USD': Decimal('1.0'),
    'EUR': Decimal('0.85'),
    'GBP': Decimal('0.73'),
    'INR': Decimal('74.5'),
    'JPY': Decimal('110.2'),
    'CAD': Decimal('1.25'),
    'AUD': Decimal('1.35'),
    'CNY': Decimal('6.45'),
    'CHF': Decimal('0.92'),
    'SGD': Decimal('1.35'),
    'NZD': Decimal('1.42'),
    'MXN': Decimal('20.1'),
    'BRL': Decimal('5.25'),
    'ZAR': Decimal('14.8'),
    'HKD': Decimal('7.78'),
    'SEK': Decimal('8.65'),
    'NOK': Decimal('8.75'),
    'DKK': Decimal('6.32'),
    'AED': Decimal('3.67'),
    'SAR': Decimal('3.75'),
})

CURRENCY_CHOICES = [(code, info['name']) for code, info in SUPPORTED_CURRENCIES.items()]


def get_all_currencies():
    """Return the full currency table."""
    return SUPPORTED_CURRENCIES


def get_currency_codes():
    """Return the supported currency codes in table order."""
    return list(SUPPORTED_CURRENCIES.keys())


def is_currency_supported(currency_code):
    try:
        return currency_code in SUPPORTED_CURRENCIES
    except TypeError:
        # Unhashable input (list, dict) is never a currency code
        return False


def get_currency_details(currency_code):
    """Return the currency's metadata, or None if the code is unknown."""
    if not is_currency_supported(currency_code):
        return None
    return SUPPORTED_CURRENCIES[currency_code]


def _quantum(decimal_places):
    return Decimal(1).scaleb(-decimal_places)


def _to_decimal(amount):
    if isinstance(amount, Decimal):
        return amount
    # str() keeps floats at their shortest repr (0.1 -> '0.1')
    return Decimal(str(amount))


def round_to_currency(amount, currency_code):
    """Round half-up to the currency's fractional digits."""
    details = get_currency_details(currency_code)
    if details is None:
        raise UnsupportedCurrencyError(
            f"Currency {currency_code} is not supported",
            currency=currency_code
        )
    return _to_decimal(amount).quantize(
        _quantum(details['decimal_places']), rounding=ROUND_HALF_UP
    )


def convert_currency(amount, from_currency=BASE_CURRENCY, to_currency=BASE_CURRENCY):
    """
    Convert an amount between two supported currencies.

    The amount goes through the base currency: ``amount / rate[from]`` then
    ``* rate[to]``, skipping the step whose side is the base currency. The
    result is rounded half-up to the target currency's fractional digits.

    Raises:
        UnsupportedCurrencyError: If either code is not in the table
    """
    if not is_currency_supported(from_currency) or not is_currency_supported(to_currency):
        raise UnsupportedCurrencyError(
            'One or both currencies are not supported',
            from_currency=from_currency,
            to_currency=to_currency,
        )

    value = _to_decimal(amount)

    if from_currency == to_currency:
        return round_to_currency(value, to_currency)

    if from_currency != BASE_CURRENCY:
        value = value / EXCHANGE_RATES[from_currency]
    if to_currency != BASE_CURRENCY:
        value = value * EXCHANGE_RATES[to_currency]

    return round_to_currency(value, to_currency)


def format_currency_amount(amount, currency_code=BASE_CURRENCY):
    """
    Render an amount with the currency's symbol and thousands separators.

    ``format_currency_amount(Decimal('1234.5'), 'USD')`` gives ``'$1,234.50'``.

    Raises:
        UnsupportedCurrencyError: If the code is not in the table
    """
    details = get_currency_details(currency_code)
    if details is None:
        raise UnsupportedCurrencyError(
            f"Currency {currency_code} is not supported",
            currency=currency_code
        )

    rounded = round_to_currency(amount, currency_code)
    sign = '-' if rounded < 0 else ''
    number = f"{abs(rounded):,.{details['decimal_places']}f}"
    return f"{sign}{details['symbol']}{number}"


def fractional_digits(amount):
    """Count significant fractional digits, ignoring trailing zeros."""
    exponent = _to_decimal(amount).normalize().as_tuple().exponent
    return max(0, -exponent)


def is_valid_amount_for_currency(amount, currency_code=BASE_CURRENCY):
    """
    Check that an amount is positive and fits the currency's precision.

    False for unknown currencies, non-numeric or non-finite input, amounts
    ``<= 0`` and amounts with more fractional digits than the currency uses.
    """
    details = get_currency_details(currency_code)
    if details is None:
        return False

    if isinstance(amount, bool) or amount is None:
        return False

    try:
        value = _to_decimal(amount)
    except (InvalidOperation, ValueError, TypeError):
        return False

    if not value.is_finite() or value <= 0:
        return False

    return fractional_digits(value) <= details['decimal_places']
