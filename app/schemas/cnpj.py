"""CNPJ 조회 응답 스키마.

CNPJ registry lookup response schema. Field names mirror the Portuguese
names the frontend already uses.
"""

from pydantic import BaseModel


class CnpjResponse(BaseModel):
    """정규화된 CNPJ 조회 결과.

    Normalised registry data. ``logradouro`` holds the full street address
    (street, number, complement and district).
    """

    cnpj: str  # XX.XXX.XXX/XXXX-XX 형식 (Formatted registry number)
    razaoSocial: str = ""
    nomeFantasia: str = ""
    logradouro: str = ""
    numero: str = ""
    complemento: str = ""
    bairro: str = ""
    municipio: str = ""
    uf: str = ""
    cep: str = ""
    telefone: str = ""
    situacao: str = ""
    atividade: str = ""
