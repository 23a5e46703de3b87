from .formatting import format_amount, settlement_status, status_color, to_money
from .rut import validate_and_format_rut

__all__ = ['format_amount', 'settlement_status', 'status_color', 'to_money', 'validate_and_format_rut']
