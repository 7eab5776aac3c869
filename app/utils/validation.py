"""입력 검증 및 정제 유틸리티 모듈.

Input validation and sanitisation utility module.
The ``check_*`` helpers raise ``ValueError`` with a Portuguese message so they
can be called from Pydantic ``field_validator`` methods; the application error
handler turns them into ``{"field", "message"}`` entries of a 400
VALIDATION_FAILED response.
"""

import re

# 이메일/색상 정규식 — Email and hex colour formats
EMAIL_REGEX: re.Pattern[str] = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")
HEX_COLOR_REGEX: re.Pattern[str] = re.compile(r"^#[0-9A-Fa-f]{6}$")

# 스크립트 주입 패턴 — Script injection markers
SCRIPT_REGEX: re.Pattern[str] = re.compile(r"<script|javascript:|onerror=|onload=|onclick=", re.IGNORECASE)

# SQL 주입 패턴 — Common SQL injection patterns
SQL_INJECTION_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE)\b", re.IGNORECASE),
    re.compile(r"\b(UNION|OR|AND)\b.*=.*", re.IGNORECASE),
    re.compile(r"--"),
    re.compile(r"/\*|\*/"),
    re.compile(r";.*\b(SELECT|INSERT|UPDATE|DELETE)\b", re.IGNORECASE),
    re.compile(r"\bxp_\w+"),
    re.compile(r"\bsp_\w+"),
]

# 문서 DB 연산자 패턴 — Document database operator pattern ($gt, $where, ...)
OPERATOR_REGEX: re.Pattern[str] = re.compile(r"\$\w+")

_TAG_REGEX: re.Pattern[str] = re.compile(r"<[^>]*>")
_WHITESPACE_REGEX: re.Pattern[str] = re.compile(r"\s+")

# 포르투갈어 월 이름 — Portuguese month names, index 0 = January
MONTH_NAMES: list[str] = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]
# "Acumulado" — 휴가/13월급 등 누적 항목 (Accumulated entries such as vacation pay)
VALID_MONTHS: frozenset[str] = frozenset(MONTH_NAMES) | {"Acumulado"}

VALID_TRANSACTION_STATUSES: tuple[str, ...] = ("PAGO", "ABERTO")
VALID_CATEGORY_TYPES: tuple[str, ...] = ("EXPENSE", "INCOME")
VALID_QUOTE_STATUSES: tuple[str, ...] = ("DRAFT", "SENT", "APPROVED", "REJECTED", "EXECUTED")
VALID_DISCOUNT_TYPES: tuple[str, ...] = ("PERCENT", "VALUE")

# 금액/수량 한도 — Monetary and quantity limits
MAX_AMOUNT: float = 999_999_999.99
MAX_QUANTITY: float = 999_999.9999
MONEY_DECIMALS: int = 2
QUANTITY_DECIMALS: int = 4

MIN_YEAR: int = 2000
MAX_YEAR: int = 2100

PASSWORD_MIN_LENGTH: int = 6
PASSWORD_MAX_LENGTH: int = 72


def sanitize_text(value: str) -> str:
    """HTML 태그를 제거하고 공백을 정규화합니다.

    Strip every HTML tag, trim, and collapse runs of whitespace into a
    single space. Used for plain-text fields (names, descriptions).
    """
    if not value:
        return value
    stripped: str = _TAG_REGEX.sub("", value).strip()
    return _WHITESPACE_REGEX.sub(" ", stripped)


def check_no_script(value: str) -> str:
    """스크립트 태그/이벤트 핸들러가 포함되면 거부합니다.

    Reject values containing script tags or inline event handlers.

    Raises:
        ValueError: 허용되지 않는 코드 포함 (Disallowed code found)
    """
    if value and SCRIPT_REGEX.search(value):
        raise ValueError("Conteúdo contém código não permitido")
    return value


def check_no_sql_injection(value: str) -> str:
    """SQL 주입 패턴이 포함되면 거부합니다.

    Reject values matching a common SQL injection pattern.

    Raises:
        ValueError: 허용되지 않는 문자 포함 (Disallowed content found)
    """
    if value and any(pattern.search(value) for pattern in SQL_INJECTION_PATTERNS):
        raise ValueError("Conteúdo contém caracteres não permitidos")
    return value


def check_no_operators(value: str) -> str:
    """문서 DB 연산자($gt 등)가 포함되면 거부합니다.

    Reject values containing document-database operators such as ``$where``.
    """
    if value and OPERATOR_REGEX.search(value):
        raise ValueError("Operadores não permitidos detectados")
    return value


def check_safe_text(value: str, sql: bool = True) -> str:
    """스크립트/연산자/SQL 주입 검사를 모두 수행합니다.

    Run the script, operator and (optionally) SQL injection checks.
    """
    check_no_script(value)
    check_no_operators(value)
    if sql:
        check_no_sql_injection(value)
    return value


def check_required(value: str, label: str, max_length: int | None = None) -> str:
    """필수 문자열 필드를 검사합니다 (공백만 있는 값 거부).

    Validate a required string: blank values are rejected and, when
    ``max_length`` is given, longer values as well.
    """
    if not value or not value.strip():
        raise ValueError(f"{label} não pode ser vazio")
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"{label} deve ter no máximo {max_length} caracteres")
    return value


def check_email(value: str) -> str:
    """이메일을 정규화하고 형식을 검사합니다.

    Trim and lower-case an email, then validate its format.
    """
    normalised: str = value.strip().lower()
    if not normalised:
        raise ValueError("Email não pode ser vazio")
    if not EMAIL_REGEX.match(normalised):
        raise ValueError("Formato de email inválido")
    return normalised


def check_password(value: str) -> str:
    """비밀번호 길이(6-72자)를 검사합니다.

    Validate password length (6 to 72 characters, the bcrypt input limit).
    """
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Senha deve ter no mínimo {PASSWORD_MIN_LENGTH} caracteres")
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"Senha deve ter no máximo {PASSWORD_MAX_LENGTH} caracteres")
    return value


def check_hex_color(value: str) -> str:
    if not HEX_COLOR_REGEX.match(value):
        raise ValueError("Cor deve estar no formato hexadecimal #RRGGBB (ex: #FF5733)")
    return value


def check_month(value: str) -> str:
    if not value:
        raise ValueError("Mês não pode ser vazio")
    if value not in VALID_MONTHS:
        raise ValueError("Mês inválido. Use mês em português (ex: Janeiro, Fevereiro, etc.)")
    return value


def check_year(value: int) -> int:
    if value < MIN_YEAR or value > MAX_YEAR:
        raise ValueError(f"Ano deve estar entre {MIN_YEAR} e {MAX_YEAR}")
    return value


def check_day_of_month(value: int) -> int:
    if value < 1 or value > 31:
        raise ValueError("Dia do mês deve estar entre 1 e 31")
    return value


def _has_more_decimals(value: float, places: int) -> bool:
    # 부동소수점 오차 허용 — Tolerate binary floating point noise
    return abs(round(value, places) - value) > 10 ** -(places + 3)


def check_amount(value: float, label: str = "Valor") -> float:
    """양수 금액을 검사합니다 (최대 999.999.999,99, 소수 2자리).

    Validate a strictly positive monetary amount with at most two decimals.

    Raises:
        ValueError: 0 이하, 최대값 초과, 소수 자릿수 초과
                    (Not positive, above the maximum, or too many decimals)
    """
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"{label} contem um valor numerico invalido")
    if value <= 0:
        raise ValueError(f"{label} deve ser maior que zero")
    if value > MAX_AMOUNT:
        raise ValueError(f"{label} excede o valor maximo permitido de R$ 999.999.999,99")
    if _has_more_decimals(value, MONEY_DECIMALS):
        raise ValueError(f"{label} deve ter no maximo 2 casas decimais")
    return value


def check_non_negative_amount(value: float, label: str = "Valor") -> float:
    """0 이상 금액을 검사합니다 (예산, 단가 등).

    Validate a monetary amount that may be zero (budgets, unit prices).
    """
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"{label} contem um valor numerico invalido")
    if value < 0:
        raise ValueError(f"{label} deve ser maior ou igual a zero")
    if value > MAX_AMOUNT:
        raise ValueError(f"{label} excede o valor maximo permitido de R$ 999.999.999,99")
    if _has_more_decimals(value, MONEY_DECIMALS):
        raise ValueError(f"{label} deve ter no maximo 2 casas decimais")
    return value


def check_quantity(value: float, label: str = "Quantidade") -> float:
    """수량을 검사합니다 (0 초과, 최대 999.999,9999, 소수 4자리).

    Validate an item quantity: positive, bounded, at most four decimals.
    """
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"{label} contem um valor numerico invalido")
    if value <= 0:
        raise ValueError(f"{label} deve ser maior que zero")
    if value > MAX_QUANTITY:
        raise ValueError(f"{label} excede o valor maximo permitido")
    if _has_more_decimals(value, QUANTITY_DECIMALS):
        raise ValueError(f"{label} deve ter no maximo {QUANTITY_DECIMALS} casas decimais")
    return value


def check_discount(value: float, discount_type: str, label: str = "Desconto") -> float:
    """할인 값을 유형에 맞게 검사합니다.

    Validate a discount: PERCENT must lie in 0-100, VALUE follows the
    non-negative amount rules.
    """
    check_non_negative_amount(value, label)
    if discount_type == "PERCENT" and value > 100:
        raise ValueError(f"{label} percentual deve estar entre 0 e 100")
    return value


def month_name(month: int) -> str:
    """월 번호(1-12)를 포르투갈어 월 이름으로 변환합니다.

    Return the Portuguese month name for a 1-based month number, or an
    empty string when out of range.
    """
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ""
