"""
Módulo utilitário para máscara e validação de documentos (CPF/CNPJ).
Funções puras, sem dependência de framework: reutilizadas pela API e pelo frontend.
"""
import re
from typing import Optional

CPF_LENGTH = 11
CNPJ_LENGTH = 14

_NON_DIGIT = re.compile(r"\D", re.ASCII)

# Máscara progressiva: cada substituição atua só na primeira ocorrência,
# assim entradas parciais (digitação em andamento) também ficam pontuadas.
_CPF_MASK_STEPS = (
    (re.compile(r"(\d{3})(\d)", re.ASCII), r"\1.\2"),
    (re.compile(r"(\d{3})(\d)", re.ASCII), r"\1.\2"),
    (re.compile(r"(\d{3})(\d{1,2})$", re.ASCII), r"\1-\2"),
)
_CNPJ_MASK_STEPS = (
    (re.compile(r"^(\d{2})(\d)", re.ASCII), r"\1.\2"),
    (re.compile(r"^(\d{2})\.(\d{3})(\d)", re.ASCII), r"\1.\2.\3"),
    (re.compile(r"\.(\d{3})(\d)", re.ASCII), r".\1/\2"),
    (re.compile(r"(\d{4})(\d)", re.ASCII), r"\1-\2"),
)


def _only_digits(value: str, length: int) -> bool:
    return len(value) == length and _NON_DIGIT.search(value) is None


def _check_digit(total: int) -> int:
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _cnpj_check_digit(base: str) -> int:
    # Pesos cíclicos: começam em len(base) - 7 e voltam para 9 abaixo de 2
    pos = len(base) - 7
    total = 0
    for ch in base:
        total += int(ch) * pos
        pos -= 1
        if pos < 2:
            pos = 9
    return _check_digit(total)


class DocumentoUtils:
    @staticmethod
    def normalize_documento(value: Optional[str]) -> str:
        """
        Remove caracteres não numéricos do documento.
        Parâmetros:
            value (str): CPF/CNPJ em qualquer formato
        Retorno:
            str: apenas os dígitos, na ordem original
        Exemplo: '11.222.333/0001-81' -> '11222333000181'
        """
        return _NON_DIGIT.sub("", value or "")

    @staticmethod
    def mask_documento(value: Optional[str]) -> str:
        """
        Aplica a máscara dinâmica de CPF (até 11 dígitos) ou CNPJ (12 a 14 dígitos).
        Não valida o documento; dígitos além do 14º são descartados.
        Parâmetros:
            value (str): valor digitado, com ou sem pontuação
        Retorno:
            str: valor mascarado, ex. '123.456.789-01' ou '12.345.678/9012-34'
        """
        digits = DocumentoUtils.normalize_documento(value)
        if len(digits) <= CPF_LENGTH:
            masked, steps = digits, _CPF_MASK_STEPS
        else:
            masked, steps = digits[:CNPJ_LENGTH], _CNPJ_MASK_STEPS
        for pattern, replacement in steps:
            masked = pattern.sub(replacement, masked, count=1)
        return masked

    @staticmethod
    def is_valid_cpf(cpf: str) -> bool:
        """
        Valida CPF pelo algoritmo dos dígitos verificadores.
        Parâmetros:
            cpf (str): CPF apenas com dígitos (11 caracteres)
        Retorno:
            bool: True se válido, False caso contrário
        """
        if not isinstance(cpf, str) or not _only_digits(cpf, CPF_LENGTH):
            return False
        if cpf == cpf[0] * CPF_LENGTH:
            return False

        dv1 = _check_digit(sum(int(cpf[i]) * (10 - i) for i in range(9)))
        if dv1 != int(cpf[9]):
            return False
        dv2 = _check_digit(sum(int(cpf[i]) * (11 - i) for i in range(10)))
        return dv2 == int(cpf[10])

    @staticmethod
    def is_valid_cnpj(cnpj: str) -> bool:
        """
        Valida CNPJ pelo algoritmo dos dígitos verificadores.
        Parâmetros:
            cnpj (str): CNPJ apenas com dígitos (14 caracteres)
        Retorno:
            bool: True se válido, False caso contrário
        """
        if not isinstance(cnpj, str) or not _only_digits(cnpj, CNPJ_LENGTH):
            return False
        if cnpj == cnpj[0] * CNPJ_LENGTH:
            return False

        if _cnpj_check_digit(cnpj[:12]) != int(cnpj[12]):
            return False
        return _cnpj_check_digit(cnpj[:13]) == int(cnpj[13])

    @staticmethod
    def is_documento_valido(doc: Optional[str]) -> bool:
        """
        Validação principal de CPF ou CNPJ, aceita valor com ou sem máscara.
        Qualquer quantidade de dígitos diferente de 11 ou 14 é inválida.
        """
        clean = DocumentoUtils.normalize_documento(doc)
        if len(clean) == CPF_LENGTH:
            return DocumentoUtils.is_valid_cpf(clean)
        if len(clean) == CNPJ_LENGTH:
            return DocumentoUtils.is_valid_cnpj(clean)
        return False

    @staticmethod
    def tipo_documento(value: Optional[str]) -> Optional[str]:
        """Retorna 'CPF', 'CNPJ' ou None conforme a quantidade de dígitos."""
        clean = DocumentoUtils.normalize_documento(value)
        if len(clean) == CPF_LENGTH:
            return "CPF"
        if len(clean) == CNPJ_LENGTH:
            return "CNPJ"
        return None
