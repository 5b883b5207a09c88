"""
"address:value" string helpers.

Event wiring in hosts often only carries a single string, e.g.
"/cue/set:5". These helpers split such a string and pick the value type:
int if it parses as one, else float, else the raw string.
"""


def parse_value(text: str):
    """Return text as int, float or str, in that order of preference."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def parse_address_value(text: str, prefix: str = ""):
    """
    Split "address:value" on the last colon.

    A string with no colon, or whose only colon is the first character,
    is treated as a bare address.

    Args:
        text: e.g. "/cue/set:5"
        prefix: Prepended to the address, e.g. "/VRnotrame"

    Returns:
        (address, value) where value is None, int, float or str

    Example:
        >>> parse_address_value("/cue/set:5")
        ('/cue/set', 5)
        >>> parse_address_value("/fade:0.5", prefix="/show")
        ('/show/fade', 0.5)
    """
    idx = text.rfind(':')
    if idx <= 0:
        return prefix + text, None
    return prefix + text[:idx], parse_value(text[idx + 1:])


def send_address_value(sender, text: str, prefix: str = "") -> bool:
    """Parse an "address:value" string and send it with sender."""
    address, value = parse_address_value(text, prefix)
    return sender.send(address, value)
