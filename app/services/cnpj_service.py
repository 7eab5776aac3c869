"""CNPJ 조회 서비스 — BrasilAPI로 회사 등록 정보를 가져옵니다.

CNPJ Lookup Service — Fetches Brazilian company registry data from
BrasilAPI and normalises it for the company form.
"""

import logging
import re
from typing import Any

import httpx

from app.schemas.cnpj import CnpjResponse
from app.utils.exceptions import NotFoundError, UpstreamError, ValidationFailedError

logger = logging.getLogger(__name__)

LOOKUP_TIMEOUT_SECONDS: float = 10.0
_NON_DIGITS = re.compile(r"\D")


def clean_cnpj(value: str) -> str:
    """숫자 이외의 문자를 제거합니다 — ``12.345.678/0001-90`` → ``12345678000190``."""
    return _NON_DIGITS.sub("", value)


def format_cnpj(value: str) -> str:
    """14자리 CNPJ를 ``XX.XXX.XXX/XXXX-XX`` 형식으로 변환합니다.

    Format a 14-digit CNPJ; anything else is returned unchanged.
    """
    digits: str = clean_cnpj(value)
    if len(digits) != 14:
        return value
    return f"{digits[0:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:14]}"


def _text(data: dict[str, Any], key: str) -> str:
    value: Any = data.get(key)
    return str(value).strip() if value is not None else ""


def normalize_cnpj_data(data: dict[str, Any], fallback_cnpj: str) -> CnpjResponse:
    """BrasilAPI 응답을 프론트엔드 형식으로 변환합니다.

    Map a BrasilAPI payload to ``CnpjResponse``. ``logradouro`` becomes the
    full street address: ``street, number - complement, district``.
    """
    street: str = _text(data, "logradouro")
    number: str = _text(data, "numero")
    complement: str = _text(data, "complemento")
    district: str = _text(data, "bairro")

    address: str = street
    if number:
        address += ", " + number
    if complement:
        address += " - " + complement
    if district:
        address += ", " + district

    return CnpjResponse(
        cnpj=format_cnpj(_text(data, "cnpj") or fallback_cnpj),
        razaoSocial=_text(data, "razao_social"),
        nomeFantasia=_text(data, "nome_fantasia"),
        logradouro=address,
        numero=number,
        complemento=complement,
        bairro=district,
        municipio=_text(data, "municipio"),
        uf=_text(data, "uf"),
        cep=_text(data, "cep"),
        telefone=_text(data, "ddd_telefone_1"),
        situacao=_text(data, "descricao_situacao_cadastral"),
        atividade=_text(data, "cnae_fiscal_descricao"),
    )


class CnpjService:
    """CNPJ 조회 서비스.

    Attributes:
        http_client: 공유 httpx 클라이언트 (Shared httpx client)
        base_url: BrasilAPI CNPJ 엔드포인트 (Lookup endpoint base URL)
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str) -> None:
        self.http_client: httpx.AsyncClient = http_client
        self.base_url: str = base_url.rstrip("/")

    async def lookup(self, cnpj: str) -> CnpjResponse:
        """CNPJ로 회사 정보를 조회합니다.

        Look up a company by CNPJ.

        Args:
            cnpj: 형식 포함/미포함 CNPJ (CNPJ with or without punctuation)

        Returns:
            CnpjResponse: 정규화된 등록 정보 (Normalised registry data)

        Raises:
            ValidationFailedError: 14자리가 아닐 때 (400)
            NotFoundError: 등록되지 않은 CNPJ (404 CNPJ_NOT_FOUND)
            UpstreamError: 외부 API 실패 (502)
        """
        digits: str = clean_cnpj(cnpj)
        if len(digits) != 14:
            raise ValidationFailedError.single("cnpj", "CNPJ invalido: deve conter 14 digitos")

        try:
            response = await self.http_client.get(
                f"{self.base_url}/{digits}",
                headers={"Accept": "application/json", "User-Agent": "MyPila/1.0"},
                timeout=LOOKUP_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as exc:
            logger.error("CNPJ lookup request failed for %s: %s", digits, exc)
            raise UpstreamError("Erro ao consultar CNPJ", "CNPJ_LOOKUP_FAILED") from exc

        if response.status_code == 404:
            raise NotFoundError("CNPJ nao encontrado", "CNPJ_NOT_FOUND")
        if response.status_code != 200:
            logger.error("CNPJ API returned HTTP %d for %s", response.status_code, digits)
            raise UpstreamError(f"Erro na API: status {response.status_code}", "CNPJ_LOOKUP_FAILED")

        try:
            data: Any = response.json()
        except ValueError as exc:
            logger.error("CNPJ API returned invalid JSON for %s", digits)
            raise UpstreamError("Erro ao processar resposta", "CNPJ_LOOKUP_FAILED") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Erro ao processar resposta", "CNPJ_LOOKUP_FAILED")
        return normalize_cnpj_data(data, digits)
