"""
Normalização da entrada do formulário de etiquetas: OP, quantidades e
escolhas de carimbadeira/componente.
"""
import re
from typing import Optional, Sequence

OP_FORMAT_SEPARADO = "separado"
OP_FORMAT_DIGITOS = "digitos"

_NON_DIGITS = re.compile(r"[^0-9]")
_INTEGER = re.compile(r"^[+-]?[0-9]+$")

# Limite da coluna Integer (int4 no PostgreSQL)
MAX_QUANTITY = 2_147_483_647


class InputValidationError(ValueError):
    """Entrada inválida em um campo do formulário"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def only_digits(raw) -> str:
    """Remove tudo que não for dígito."""
    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def format_order_code(raw: Optional[str]) -> str:
    """
    Formata a OP conforme a quantidade de dígitos digitados.

    - até 3 dígitos: sem separador (123)
    - 4 a 6 dígitos: 123.456
    - 7 e 8 dígitos: 123.456/78
    - 9 ou mais: 123.456/78.90 (dígitos além do décimo ficam colados no final)

    Pode ser aplicada a cada tecla: reformatar a própria saída mantém a
    mesma sequência de dígitos.
    """
    digits = only_digits(raw)
    size = len(digits)

    if size <= 3:
        return digits
    if size <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if size <= 8:
        return f"{digits[:3]}.{digits[3:6]}/{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}/{digits[6:8]}.{digits[8:]}"


def format_order_code_digits(raw: Optional[str], max_digits: int = 10) -> str:
    """OP somente com dígitos, limitada a max_digits."""
    return only_digits(raw)[:max_digits]


def normalize_order_code(raw: Optional[str], mode: str = OP_FORMAT_SEPARADO, max_digits: int = 10) -> str:
    """
    Normaliza a OP para gravação de acordo com o formato configurado.
    Levanta InputValidationError se não houver nenhum dígito.
    """
    if mode == OP_FORMAT_DIGITOS:
        op = format_order_code_digits(raw, max_digits)
    elif mode == OP_FORMAT_SEPARADO:
        op = format_order_code(raw)
    else:
        raise ValueError(f"Formato de OP desconhecido: {mode}")

    if not op:
        raise InputValidationError("op", "Informe a ordem de produção")
    return op


def to_quantity(raw, field: str = "quantidade") -> int:
    """
    Converte o texto digitado em inteiro.
    Vazio, não numérico ou fora do limite da coluna levanta
    InputValidationError.
    """
    if raw is None or isinstance(raw, bool):
        raise InputValidationError(field, "Informe um número inteiro")

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise InputValidationError(field, "Informe um número inteiro")
        value = int(raw)
    else:
        text = str(raw).strip()
        if not _INTEGER.match(text):
            raise InputValidationError(field, "Informe um número inteiro")
        # Evita converter textos enormes antes de conferir o limite
        if len(text.lstrip("+-").lstrip("0")) > len(str(MAX_QUANTITY)):
            raise InputValidationError(field, f"O valor máximo é {MAX_QUANTITY}")
        value = int(text)

    if abs(value) > MAX_QUANTITY:
        raise InputValidationError(field, f"O valor máximo é {MAX_QUANTITY}")
    return value


def normalize_choice(raw: Optional[str], known_values: Sequence[str], field: str, required: bool = True) -> Optional[str]:
    """Confere se o valor escolhido está entre os valores configurados."""
    value = "" if raw is None else str(raw).strip()
    if not value:
        if required:
            raise InputValidationError(field, "Campo obrigatório")
        return None
    if value not in known_values:
        raise InputValidationError(field, f"Valor não reconhecido: {value}")
    return value
