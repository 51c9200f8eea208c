import re

DEFAULT_ICON_COLOR = '007AFF'
FALLBACK_RGBA = (1, 1, 0, 1)

_NON_ALNUM = re.compile(r'[^0-9A-Za-z]+')


def _clean_hex(value):
    return _NON_ALNUM.sub('', str(value or ''))


def parse_hex_color(value):
    """Parse 'RGB', 'RRGGBB' or 'AARRGGBB' (with or without '#') into an (r, g, b, a) tuple of 0-255 ints."""
    digits = _clean_hex(value)
    try:
        num = int(digits, 16) if digits else 0
    except ValueError:
        num = 0
        digits = ''

    if len(digits) == 3:
        return ((num >> 8) * 17, (num >> 4 & 0xF) * 17, (num & 0xF) * 17, 255)
    if len(digits) == 6:
        return (num >> 16, num >> 8 & 0xFF, num & 0xFF, 255)
    if len(digits) == 8:
        return (num >> 16 & 0xFF, num >> 8 & 0xFF, num & 0xFF, num >> 24)
    return FALLBACK_RGBA


def to_hex(r, g, b):
    return f"{int(r) & 0xFF:02X}{int(g) & 0xFF:02X}{int(b) & 0xFF:02X}"


def normalize_hex(value, default=DEFAULT_ICON_COLOR):
    """Return a canonical 'RRGGBB' string, or `default` when value isn't a usable hex color."""
    digits = _clean_hex(value)
    if len(digits) not in (3, 6, 8) or not re.fullmatch(r'[0-9A-Fa-f]+', digits):
        return default
    r, g, b, _ = parse_hex_color(digits)
    return to_hex(r, g, b)
