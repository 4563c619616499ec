from app.services.normalizer import InputValidationError


def check_expected(expected: int) -> int:
    """Quantidade de etiquetas esperada: precisa ser maior que zero."""
    if expected <= 0:
        raise InputValidationError("quantidade_etiqueta", "A quantidade de etiquetas deve ser maior que zero")
    return expected


def check_actual(actual: int) -> int:
    """Quantidade contada pela máquina: zero é aceito, negativo não."""
    if actual < 0:
        raise InputValidationError("quantidade_maquina", "A quantidade na máquina não pode ser negativa")
    return actual


def error_percent(expected: int, actual: int) -> float:
    """
    Percentual de erro da máquina em relação às etiquetas esperadas.

    Negativo quando a máquina conta menos que o esperado, positivo quando
    conta mais. Não arredonda: duas casas decimais é só exibição.
    """
    check_expected(expected)
    check_actual(actual)
    return (actual / expected - 1) * 100
