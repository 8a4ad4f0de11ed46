import pytest

from backend.utils.documento_utils import DocumentoUtils

VALID_CPFS = ["11144477735", "52998224725", "09702414458"]
VALID_CNPJS = ["11222333000181", "04252011000110"]


@pytest.mark.parametrize("value, expected", [
    ("", ""),
    ("1", "1"),
    ("12", "12"),
    ("123", "123"),
    ("1234", "123.4"),
    ("123456", "123.456"),
    ("1234567", "123.456.7"),
    ("1234567890", "123.456.789-0"),
    ("12345678901", "123.456.789-01"),
    ("123456789012", "12.345.678/9012"),
    ("1234567890123", "12.345.678/9012-3"),
    ("12345678901234", "12.345.678/9012-34"),
    ("123456789012345678", "12.345.678/9012-34"),
])
def test_mask_documento_progressive(value, expected):
    assert DocumentoUtils.mask_documento(value) == expected


def test_mask_documento_ignores_existing_punctuation():
    assert DocumentoUtils.mask_documento("111.444.777-35") == "111.444.777-35"
    assert DocumentoUtils.mask_documento("11.222.333/0001-81") == "11.222.333/0001-81"
    assert DocumentoUtils.mask_documento("abc") == ""
    assert DocumentoUtils.mask_documento(None) == ""


@pytest.mark.parametrize("value", ["", "12", "1234", "12345678", "12345678901", "1234567890123", "123456789012345678"])
def test_mask_documento_is_stable_on_its_own_output(value):
    once = DocumentoUtils.mask_documento(value)
    twice = DocumentoUtils.mask_documento(once)
    assert DocumentoUtils.normalize_documento(twice) == DocumentoUtils.normalize_documento(once)
    assert twice == once


def test_normalize_keeps_only_ascii_digits():
    assert DocumentoUtils.normalize_documento("529.982.247-25") == "52998224725"
    assert DocumentoUtils.normalize_documento("١٢٣") == ""


@pytest.mark.parametrize("cpf", VALID_CPFS)
def test_valid_cpfs(cpf):
    assert DocumentoUtils.is_valid_cpf(cpf) is True
    assert DocumentoUtils.is_documento_valido(DocumentoUtils.mask_documento(cpf)) is True


@pytest.mark.parametrize("cpf", VALID_CPFS)
def test_cpf_tampered_check_digit_is_invalid(cpf):
    tampered = cpf[:-1] + str((int(cpf[-1]) + 1) % 10)
    assert DocumentoUtils.is_documento_valido(tampered) is False
    tampered_first = cpf[:9] + str((int(cpf[9]) + 1) % 10) + cpf[10]
    assert DocumentoUtils.is_valid_cpf(tampered_first) is False


@pytest.mark.parametrize("digit", "0123456789")
def test_repeated_digits_are_invalid(digit):
    assert DocumentoUtils.is_documento_valido(digit * 11) is False
    assert DocumentoUtils.is_documento_valido(digit * 14) is False


def test_cpf_precondition_violations_return_false():
    assert DocumentoUtils.is_valid_cpf("111.444.777-35") is False
    assert DocumentoUtils.is_valid_cpf("1114447773") is False
    assert DocumentoUtils.is_valid_cpf("") is False
    assert DocumentoUtils.is_valid_cpf(None) is False


@pytest.mark.parametrize("cnpj", VALID_CNPJS)
def test_valid_cnpjs(cnpj):
    assert DocumentoUtils.is_valid_cnpj(cnpj) is True
    assert DocumentoUtils.is_documento_valido(DocumentoUtils.mask_documento(cnpj)) is True


def test_cnpj_tampered_check_digits_are_invalid():
    assert DocumentoUtils.is_documento_valido("11222333000182") is False
    assert DocumentoUtils.is_documento_valido("11222333000191") is False
    assert DocumentoUtils.is_valid_cnpj("11.222.333/0001-81") is False
    assert DocumentoUtils.is_valid_cnpj("1122233300018") is False


@pytest.mark.parametrize("length", [0, 1, 5, 10, 12, 13, 15, 18])
def test_unrecognized_lengths_are_invalid(length):
    assert DocumentoUtils.is_documento_valido("1" * length) is False
    assert DocumentoUtils.is_documento_valido(("11144477735" * 2)[:length]) is False


def test_tipo_documento():
    assert DocumentoUtils.tipo_documento("111.444.777-35") == "CPF"
    assert DocumentoUtils.tipo_documento("11.222.333/0001-81") == "CNPJ"
    assert DocumentoUtils.tipo_documento("1234") is None
