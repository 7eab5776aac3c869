"""견적서 PDF 생성 서비스 (fpdf2).

Quote PDF rendering service built on fpdf2. Produces an A4 portrait
document: coloured header band with optional logo, title, client box,
description, items table (header repeated on page breaks, zebra rows),
totals block, notes, template terms and a footer line.

The core PDF fonts only cover Latin-1, so every text is folded to plain
ASCII letters before it is drawn.
"""

import base64
import binascii
import io
import logging
import unicodedata
from datetime import date, datetime
from typing import Sequence

import httpx
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from app.models.company import Company
from app.models.quote import Quote, QuoteItem, QuoteTemplate
from app.utils.dates import as_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_COLOR: str = "#374151"  # gray-700
HEADER_HEIGHT: float = 32.0
ITEM_COLUMNS: tuple[float, float, float, float] = (95, 20, 35, 40)  # 설명, 수량, 단가, 합계
LOGO_TIMEOUT_SECONDS: float = 5.0
FONT: str = "Helvetica"


def fold_text(value: str | None) -> str:
    """악센트를 제거하여 Latin-1 코어 폰트로 출력 가능한 문자열로 만듭니다.

    Strip accents (``ção`` → ``cao``) and replace anything else outside
    Latin-1 with ``?``.
    """
    if not value:
        return ""
    decomposed: str = unicodedata.normalize("NFKD", value)
    stripped: str = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.encode("latin-1", "replace").decode("latin-1")


def format_currency(value: float) -> str:
    return f"R$ {value:.2f}"


def format_date(value: date | datetime) -> str:
    if isinstance(value, datetime):
        value = as_utc(value)
    return value.strftime("%d/%m/%Y")


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """``#RRGGBB``를 RGB 튜플로 변환 — 잘못된 값은 기본 회색."""
    color = color.lstrip("#")
    if len(color) != 6:
        return 55, 65, 81
    try:
        return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)
    except ValueError:
        return 55, 65, 81


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def decode_data_url(url: str) -> bytes | None:
    """``data:image/...;base64,`` URL의 이미지 바이트를 반환합니다.

    Decode a PNG/JPEG/GIF data URL; anything else yields None.
    """
    header, _, payload = url.partition(",")
    if not payload or not any(kind in header for kind in ("png", "jpeg", "jpg", "gif")):
        return None
    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError):
        return None


class QuotePdfService:
    """견적서 PDF 렌더러.

    Renders quotes to PDF. Remote logos are downloaded with the shared
    httpx client and a 5 second timeout; a logo that cannot be loaded is
    skipped.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self.http_client: httpx.AsyncClient = http_client

    async def load_logo(self, url: str | None) -> bytes | None:
        """로고 이미지 바이트를 가져옵니다 — data URL 또는 HTTP 다운로드.

        Load logo bytes from a data URL or by downloading it.
        """
        if not url:
            return None
        if url.startswith("data:image/"):
            return decode_data_url(url)
        try:
            response = await self.http_client.get(url, timeout=LOGO_TIMEOUT_SECONDS)
        except httpx.HTTPError as exc:
            logger.warning("Failed to download quote logo %s: %s", url, exc)
            return None
        if response.status_code != 200:
            logger.warning("Quote logo %s returned HTTP %d", url, response.status_code)
            return None
        return response.content

    async def render(
        self,
        quote: Quote,
        items: Sequence[QuoteItem],
        company: Company,
        template: QuoteTemplate | None,
    ) -> bytes:
        """견적서를 PDF 바이트로 렌더링합니다.

        Render a quote to PDF bytes.

        Args:
            quote: 견적 (Quote)
            items: 견적 항목, 정렬 순서대로 (Items in display order)
            company: 소속 회사 (Issuing company)
            template: 견적 양식, 없으면 기본 스타일 (Template, or None for defaults)

        Returns:
            bytes: PDF 문서 (PDF document, starts with ``%PDF``)
        """
        logo_url: str | None = company.logo_url or (template.logo_url if template else None)
        logo: bytes | None = await self.load_logo(logo_url)
        return self.build(quote, items, company, template, logo)

    def build(
        self,
        quote: Quote,
        items: Sequence[QuoteItem],
        company: Company,
        template: QuoteTemplate | None,
        logo: bytes | None = None,
    ) -> bytes:
        primary: tuple[int, int, int] = hex_to_rgb(
            template.primary_color if template and template.primary_color else DEFAULT_COLOR
        )

        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.set_margins(10, 10, 10)
        pdf.set_auto_page_break(True, 15)
        pdf.add_page()

        self._header(pdf, quote, company, template, primary, logo)

        # 제목 — Title
        pdf.set_y(HEADER_HEIGHT + 4)
        pdf.set_text_color(*primary)
        pdf.set_font(FONT, "B", 13)
        pdf.set_x(10)
        pdf.cell(190, 6, fold_text(quote.title))
        pdf.set_y(pdf.get_y() + 8)

        self._client_box(pdf, quote)

        # 설명 — Description
        if quote.description:
            self._section_title(pdf, "DESCRICAO", primary, 6)
            pdf.set_font(FONT, "", 9)
            pdf.set_text_color(60, 60, 60)
            pdf.set_x(10)
            pdf.multi_cell(190, 4, fold_text(quote.description), align="L",
                           new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(3)

        self._items_table(pdf, items, primary)
        self._totals(pdf, quote, primary)

        # 비고 — Notes
        if quote.notes:
            if pdf.get_y() > 250:
                pdf.add_page()
            self._section_title(pdf, "OBSERVACOES", primary, 5)
            pdf.set_font(FONT, "", 8)
            pdf.set_text_color(60, 60, 60)
            pdf.set_x(10)
            pdf.multi_cell(190, 4, fold_text(quote.notes), align="L",
                           new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(3)

        # 약관 — Terms and conditions
        if template is not None and template.terms_text:
            if pdf.get_y() > 245:
                pdf.add_page()
            self._section_title(pdf, "TERMOS E CONDICOES", primary, 5)
            pdf.set_font(FONT, "", 7)
            pdf.set_text_color(100, 100, 100)
            pdf.set_x(10)
            pdf.multi_cell(190, 3, fold_text(template.terms_text), align="L",
                           new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        self._footer(pdf, quote, template)
        return bytes(pdf.output())

    def _header(
        self,
        pdf: FPDF,
        quote: Quote,
        company: Company,
        template: QuoteTemplate | None,
        primary: tuple[int, int, int],
        logo: bytes | None,
    ) -> None:
        pdf.set_fill_color(*primary)
        pdf.rect(0, 0, 210, HEADER_HEIGHT, style="F")

        name_x: float = 12.0
        if logo:
            try:
                pdf.image(io.BytesIO(logo), x=10, y=4, w=24, h=24)
                name_x = 38.0
            except Exception as exc:  # 잘못된 이미지는 건너뜀 — unreadable images are skipped
                logger.warning("Skipping unreadable logo for company %s: %s", company.id, exc)

        # 회사명 / 머리글 — Company name and header text
        pdf.set_text_color(255, 255, 255)
        pdf.set_font(FONT, "B", 16)
        pdf.set_xy(name_x, 8)
        pdf.cell(90, 6, fold_text(company.name))
        if template is not None and template.header_text:
            pdf.set_font(FONT, "", 8)
            pdf.set_xy(name_x, 16)
            pdf.cell(90, 5, fold_text(template.header_text))

        # 번호와 날짜 (오른쪽) — Number and dates on the right
        pdf.set_font(FONT, "B", 12)
        pdf.set_xy(145, 6)
        pdf.cell(55, 6, fold_text(quote.number))
        pdf.set_font(FONT, "", 8)
        pdf.set_xy(145, 14)
        pdf.cell(55, 4, f"Data: {format_date(quote.created_at or utc_now())}")
        pdf.set_xy(145, 19)
        pdf.cell(55, 4, f"Valido ate: {format_date(quote.valid_until)}")

    def _client_box(self, pdf: FPDF, quote: Quote) -> None:
        pdf.set_fill_color(245, 245, 245)
        pdf.set_draw_color(220, 220, 220)
        height: float = 24.0 if quote.client_address else 18.0
        top: float = pdf.get_y()
        pdf.rect(10, top, 190, height, style="FD")

        pdf.set_text_color(0, 0, 0)
        pdf.set_font(FONT, "B", 10)
        pdf.set_xy(14, top + 3)
        pdf.cell(100, 5, fold_text(quote.client_name))
        if quote.client_document:
            pdf.set_font(FONT, "", 9)
            pdf.set_xy(130, top + 3)
            pdf.cell(66, 5, fold_text(quote.client_document))

        pdf.set_font(FONT, "", 9)
        pdf.set_xy(14, top + 9)
        contact: str = " | ".join(part for part in (quote.client_phone, quote.client_email) if part)
        pdf.cell(180, 5, fold_text(contact))

        if quote.client_address:
            address: str = quote.client_address
            if quote.client_city:
                address += " - " + quote.client_city
            if quote.client_state:
                address += "/" + quote.client_state
            if quote.client_zip_code:
                address += " - " + quote.client_zip_code
            pdf.set_xy(14, top + 15)
            pdf.cell(180, 5, fold_text(address))

        pdf.set_y(top + height + 4)

    def _section_title(self, pdf: FPDF, title: str, primary: tuple[int, int, int], gap: float) -> None:
        pdf.set_font(FONT, "B", 9)
        pdf.set_text_color(*primary)
        pdf.set_x(10)
        pdf.cell(0, 5, title)
        pdf.ln(gap)

    def _table_header(self, pdf: FPDF, primary: tuple[int, int, int]) -> None:
        pdf.set_fill_color(*primary)
        pdf.set_text_color(255, 255, 255)
        pdf.set_font(FONT, "B", 8)
        pdf.set_x(10)
        labels = (("Descricao", "L"), ("Qtd", "C"), ("Unitario", "R"), ("Total", "R"))
        for index, (label, align) in enumerate(labels):
            last: bool = index == len(labels) - 1
            pdf.cell(
                ITEM_COLUMNS[index], 7, label, border=1, align=align, fill=True,
                new_x=XPos.LMARGIN if last else XPos.RIGHT,
                new_y=YPos.NEXT if last else YPos.TOP,
            )
        pdf.set_text_color(0, 0, 0)
        pdf.set_font(FONT, "", 8)

    def _items_table(self, pdf: FPDF, items: Sequence[QuoteItem], primary: tuple[int, int, int]) -> None:
        self._section_title(pdf, "ITENS", primary, 6)
        self._table_header(pdf, primary)

        for index, item in enumerate(items):
            if pdf.get_y() > 265:
                pdf.add_page()
                self._table_header(pdf, primary)
            # 지브라 행 — Zebra rows
            shade: int = 250 if index % 2 else 255
            pdf.set_fill_color(shade, shade, shade)
            pdf.set_x(10)
            pdf.cell(ITEM_COLUMNS[0], 6, truncate(fold_text(item.description), 50), border=1, align="L", fill=True)
            pdf.cell(ITEM_COLUMNS[1], 6, f"{item.quantity:.0f}", border=1, align="C", fill=True)
            pdf.cell(ITEM_COLUMNS[2], 6, format_currency(item.unit_price), border=1, align="R", fill=True)
            pdf.cell(ITEM_COLUMNS[3], 6, format_currency(item.total), border=1, align="R", fill=True,
                     new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def _totals(self, pdf: FPDF, quote: Quote, primary: tuple[int, int, int]) -> None:
        pdf.ln(3)
        left: float = 120.0

        pdf.set_font(FONT, "", 9)
        pdf.set_text_color(80, 80, 80)
        pdf.set_x(left)
        pdf.cell(40, 6, "Subtotal:")
        pdf.cell(40, 6, format_currency(quote.subtotal), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        if quote.discount > 0:
            label: str = "Desconto:"
            amount: float = quote.discount
            if quote.discount_type == "PERCENT":
                label = f"Desconto ({quote.discount:.0f}%):"
                amount = quote.subtotal * quote.discount / 100
            pdf.set_text_color(200, 50, 50)
            pdf.set_x(left)
            pdf.cell(40, 6, label)
            pdf.cell(40, 6, "-" + format_currency(amount), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.ln(1)
        pdf.set_x(left)
        pdf.set_fill_color(*primary)
        pdf.set_text_color(255, 255, 255)
        pdf.set_font(FONT, "B", 11)
        pdf.cell(40, 9, "TOTAL", border=1, fill=True)
        pdf.cell(40, 9, format_currency(quote.total), border=1, align="R", fill=True,
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(0, 0, 0)
        pdf.ln(5)

    def _footer(self, pdf: FPDF, quote: Quote, template: QuoteTemplate | None) -> None:
        pdf.set_y(-12)
        pdf.set_draw_color(200, 200, 200)
        pdf.line(10, pdf.get_y() - 2, 200, pdf.get_y() - 2)
        pdf.set_text_color(140, 140, 140)
        pdf.set_font(FONT, "", 7)
        text: str = f"Gerado em {format_date(utc_now())} | {quote.number}"
        if template is not None and template.footer_text:
            text = fold_text(template.footer_text) + " | " + text
        pdf.set_x(10)
        pdf.cell(190, 4, text)
