"""Data validation utilities."""
from typing import Tuple

NAME_MAX_LENGTH = 50
EMPLOYEE_ID_MAX_LENGTH = 32


def validate_name(name: str) -> Tuple[bool, str]:
    """
    Validate registrant name.

    Args:
        name: Name to validate

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, "姓名不能为空") if empty
        - (False, "姓名长度不能超过 50 个字符") if too long
    """
    if not name or not name.strip():
        return False, "姓名不能为空"
    if len(name) > NAME_MAX_LENGTH:
        return False, f"姓名长度不能超过 {NAME_MAX_LENGTH} 个字符"
    return True, ""


def validate_employee_identifier(employee_identifier: str) -> Tuple[bool, str]:
    """
    Validate the employee number used as the registration business key.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
    """
    if not employee_identifier or not employee_identifier.strip():
        return False, "工号不能为空"
    if len(employee_identifier.strip()) > EMPLOYEE_ID_MAX_LENGTH:
        return False, f"工号长度不能超过 {EMPLOYEE_ID_MAX_LENGTH} 个字符"
    if any(ch.isspace() for ch in employee_identifier.strip()):
        return False, "工号不能包含空格"
    return True, ""


def validate_contact_info(contact_info: str) -> Tuple[bool, str]:
    """Validate the free-text contact string."""
    if not contact_info or not contact_info.strip():
        return False, "联系方式不能为空"
    return True, ""


def normalize_employee_identifier(employee_identifier: str) -> str:
    """
    Normalize an employee number for business-key comparison.

    Behavior:
        - Trims leading/trailing whitespace
        - Converts to uppercase
        - Example: " emp-001 " → "EMP-001"
    """
    return employee_identifier.strip().upper()
