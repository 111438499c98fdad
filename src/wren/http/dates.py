"""HTTP date formatting.

HTTP dates are RFC 1123 timestamps rendered in GMT. The zone token is
always the literal ``GMT``, never ``UTC``, since HTTP requires the former.
"""

from email.utils import formatdate

# Largest signed 32-bit epoch; used as "never expires".
FAR_FUTURE_EPOCH = 2147483647


def http_date(epoch: float) -> str:
    """Format a Unix timestamp for use in HTTP headers.

    ::

        >>> http_date(0)
        'Thu, 01 Jan 1970 00:00:00 GMT'
    """
    return formatdate(int(epoch), usegmt=True)
